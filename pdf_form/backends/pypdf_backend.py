"""pypdf backend implementation for PDF Form."""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from pypdf.generic import ArrayObject, DictionaryObject, IndirectObject, NameObject, PdfObject

from ..exceptions import MalformedDocumentError
from ..utils import get_logger
from .base import BackendDocument, FormBackend, SerializeOptions

LOGGER = get_logger(__name__)

# A4 in points, the size used when a default page is requested.
DEFAULT_PAGE_SIZE = (595.28, 841.89)


@dataclass
class PypdfDocument(BackendDocument):
    writer: Optional[PdfWriter] = None

    def _require_writer(self) -> PdfWriter:
        if self.writer is None:
            raise MalformedDocumentError("PDF document has already been closed.")
        return self.writer

    @property
    def root(self) -> DictionaryObject:
        return self._require_writer()._root_object  # type: ignore[attr-defined]

    def iter_pages(self) -> Iterable[Any]:
        return iter(self._require_writer().pages)

    def register(self, obj: PdfObject) -> IndirectObject:
        if isinstance(obj, IndirectObject):
            return obj
        return self._require_writer()._add_object(obj)  # type: ignore[attr-defined]

    def update_field_values(
        self, page: Any, values: Dict[str, str], annots: Optional[Sequence[Any]] = None
    ) -> None:
        writer = self._require_writer()
        if annots is None:
            writer.update_page_form_field_values(page, values, auto_regenerate=False)
            return

        # pypdf also matches widgets by partial name, so expose only the requested ones.
        original = page.raw_get("/Annots") if "/Annots" in page else None
        page[NameObject("/Annots")] = ArrayObject(annots)
        try:
            writer.update_page_form_field_values(page, values, auto_regenerate=False)
        finally:
            if original is None:
                del page["/Annots"]
            else:
                page[NameObject("/Annots")] = original

    def close(self) -> None:
        self.writer = None


class PypdfBackend(FormBackend):
    """Backend implementation that uses `pypdf` under the hood."""

    def load(self, data: bytes) -> PypdfDocument:
        if not data:
            raise MalformedDocumentError("PDF data is empty.")

        try:
            reader = PdfReader(io.BytesIO(data))
        except PdfReadError as exc:
            raise MalformedDocumentError(f"Corrupted or invalid PDF data. Error: {exc}") from exc
        except Exception as exc:
            raise MalformedDocumentError(f"Unexpected error reading PDF data. Error: {exc}") from exc

        try:
            encrypted = reader.is_encrypted
        except Exception as exc:
            raise MalformedDocumentError(f"Corrupted or invalid PDF trailer. Error: {exc}") from exc
        if encrypted:
            raise MalformedDocumentError("PDF is encrypted and cannot be processed without a password.")

        try:
            num_pages = len(reader.pages)
            writer = PdfWriter(clone_from=reader)
        except Exception as exc:
            raise MalformedDocumentError(f"Unable to read PDF object graph. Error: {exc}") from exc

        LOGGER.debug("Loaded PDF with %d pages (%d bytes)", num_pages, len(data))
        return PypdfDocument(
            num_pages=num_pages,
            file_size=len(data),
            writer=writer,
        )

    def write(self, document: BackendDocument, options: SerializeOptions) -> bytes:
        if not isinstance(document, PypdfDocument):
            raise TypeError(f"Unsupported document type: {type(document).__name__}")
        writer = document._require_writer()

        if options.add_default_page and len(writer.pages) == 0:
            writer.add_blank_page(width=DEFAULT_PAGE_SIZE[0], height=DEFAULT_PAGE_SIZE[1])

        # pypdf writes classic xref tables; stream compression is the
        # closest size reduction it offers.
        if options.use_object_streams:
            for page in writer.pages:
                page.compress_content_streams()

        buffer = io.BytesIO()
        writer.write(buffer)
        return buffer.getvalue()
