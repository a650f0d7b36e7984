"""Backend protocol for PDF operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Protocol, Sequence


@dataclass(frozen=True)
class SerializeOptions:
    """
    Options applied when a document is written back to bytes.

    Attributes:
        add_default_page: Insert a blank page when the document has none
        use_object_streams: Favour compact output over the plain layout
    """

    add_default_page: bool = False
    use_object_streams: bool = True


@dataclass
class BackendDocument:
    """Represents a loaded PDF document with backend-specific helpers."""

    num_pages: int
    file_size: int

    @property
    def root(self) -> Any:
        raise NotImplementedError

    def iter_pages(self) -> Iterable[Any]:
        raise NotImplementedError

    def register(self, obj: Any) -> Any:
        """Add ``obj`` to the document and return an indirect reference."""
        raise NotImplementedError

    def update_field_values(
        self, page: Any, values: Dict[str, str], annots: Optional[Sequence[Any]] = None
    ) -> None:
        """
        Write text values and regenerate widget appearances on ``page``.

        When ``annots`` is given only those annotation entries are considered,
        so same-named widgets of other fields stay untouched.
        """
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


class FormBackend(Protocol):
    """Protocol defining backend operations for PDF form documents."""

    def load(self, data: bytes) -> BackendDocument:
        """Parse ``data`` and return a mutable backend document."""

    def write(self, document: BackendDocument, options: SerializeOptions) -> bytes:
        """Serialize ``document`` to PDF bytes."""
