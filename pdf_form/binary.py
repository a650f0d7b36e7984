"""Binary attachment handling for pipeline items."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .exceptions import MalformedDocumentError, MissingBinaryCollectionError, MissingBinaryPropertyError

BINARY_ENCODING = "base64"
PDF_MIME_TYPE = "application/pdf"
PDF_EXTENSION = "pdf"
DEFAULT_FILENAME = "document.pdf"

SUPPORTED_ENCODINGS = {"base64"}


@dataclass(frozen=True)
class BinaryCodec:
    """Encodes and decodes the ``data`` entry of binary attachments."""

    encoding: str = BINARY_ENCODING

    def __post_init__(self) -> None:
        if self.encoding not in SUPPORTED_ENCODINGS:
            raise ValueError(f"Unsupported binary encoding: {self.encoding}")

    def decode(self, data: str) -> bytes:
        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError, TypeError) as exc:
            raise MalformedDocumentError(f"Binary data is not valid {self.encoding}: {exc}") from exc

    def encode(self, data: bytes) -> str:
        return base64.b64encode(data).decode("ascii")


def resolve_binary(
    binary: Optional[Mapping[str, Mapping[str, Any]]],
    property_name: str,
) -> Mapping[str, Any]:
    """Return the named attachment or raise one of the named binary errors."""

    if not binary:
        raise MissingBinaryCollectionError()
    entry = binary.get(property_name)
    if not entry:
        raise MissingBinaryPropertyError(property_name)
    return entry


def read_binary(entry: Mapping[str, Any], codec: BinaryCodec) -> bytes:
    data = entry.get("data")
    if not isinstance(data, str):
        raise MalformedDocumentError("Binary data property does not hold encoded data.")
    return codec.decode(data)


def output_filename(requested: str, entry: Mapping[str, Any]) -> str:
    """Use ``requested`` when given, else the input file name."""
    if requested:
        return requested
    return str(entry.get("fileName") or DEFAULT_FILENAME)


def prepare_binary(data: bytes, file_name: str, codec: BinaryCodec) -> Dict[str, Any]:
    """Build the attachment entry for a generated PDF."""
    return {
        "data": codec.encode(data),
        "mimeType": PDF_MIME_TYPE,
        "fileName": file_name,
        "fileExtension": PDF_EXTENSION,
        "fileSize": str(len(data)),
    }
