"""Adapter around a backend-specific PDF document holding an interactive form."""

from __future__ import annotations

from types import TracebackType
from typing import Any, Dict, Iterable, Optional, Sequence, Type

from pypdf.generic import DictionaryObject

from .backends import BackendDocument, PypdfBackend, SerializeOptions
from .backends.base import FormBackend
from .exceptions import NoFormError
from .fields import PDFForm
from .objects import resolve


class PDFFormDocument:
    """High level helper around a loaded, mutable PDF document."""

    def __init__(self, document: BackendDocument, *, backend: Optional[FormBackend] = None) -> None:
        self.backend: FormBackend = backend or PypdfBackend()
        self._document = document

    @classmethod
    def load(cls, data: bytes, *, backend: Optional[FormBackend] = None) -> "PDFFormDocument":
        """Parse ``data``; raises :class:`MalformedDocumentError` on bad input."""
        backend = backend or PypdfBackend()
        return cls(backend.load(data), backend=backend)

    # ------------------------------------------------------------------
    # Basic document information helpers
    # ------------------------------------------------------------------
    @property
    def document(self) -> BackendDocument:
        return self._document

    @property
    def num_pages(self) -> int:
        return sum(1 for _ in self.iter_pages())

    @property
    def file_size(self) -> int:
        return self._document.file_size

    @property
    def root(self) -> DictionaryObject:
        return self._document.root

    def iter_pages(self) -> Iterable[Any]:
        return self._document.iter_pages()

    def register(self, obj: Any) -> Any:
        return self._document.register(obj)

    def update_field_values(
        self, page: Any, values: Dict[str, str], *, annots: Optional[Sequence[Any]] = None
    ) -> None:
        self._document.update_field_values(page, values, annots)

    # ------------------------------------------------------------------
    # Form access
    # ------------------------------------------------------------------
    def get_form(self, *, strict: bool = False) -> PDFForm:
        """Return the interactive form; an absent form is empty unless ``strict``."""
        acroform = resolve(self.root.raw_get("/AcroForm")) if "/AcroForm" in self.root else None
        if not isinstance(acroform, DictionaryObject):
            if strict:
                raise NoFormError()
            return PDFForm(None)
        return PDFForm(acroform)

    # ------------------------------------------------------------------
    # Output helpers
    # ------------------------------------------------------------------
    def serialize(
        self,
        *,
        add_default_page: bool = False,
        use_object_streams: bool = True,
    ) -> bytes:
        options = SerializeOptions(
            add_default_page=add_default_page,
            use_object_streams=use_object_streams,
        )
        return self.backend.write(self._document, options)

    def close(self) -> None:
        self._document.close()

    def __enter__(self) -> "PDFFormDocument":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()


__all__ = ["PDFFormDocument"]
