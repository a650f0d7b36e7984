"""Backend abstractions for PDF Form."""

from .base import BackendDocument, FormBackend, SerializeOptions
from .pypdf_backend import PypdfBackend

__all__ = [
    "BackendDocument",
    "FormBackend",
    "PypdfBackend",
    "SerializeOptions",
]
