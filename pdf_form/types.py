"""
Type definitions and dataclasses for PDF Form.

This module defines data structures used throughout the library.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

FieldValue = Union[str, bool, None]


class FieldKind(str, Enum):
    """Closed set of field variants; the value is the reported type tag."""

    TEXT = "TextField"
    CHECKBOX = "CheckBox"
    RADIO_GROUP = "RadioGroup"
    DROPDOWN = "Dropdown"
    OTHER = "OtherField"


class Operation(str, Enum):
    """Operations supported by the pipeline."""

    EXTRACT_FIELDS = "extractFields"
    MAP_FIELDS = "mapFields"


@dataclass(frozen=True)
class FieldAssignment:
    """A caller supplied ``name -> value`` pair for a text write."""

    field_name: str
    field_value: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FieldAssignment":
        return cls(
            field_name=str(data.get("fieldName", "") or ""),
            field_value=str(data.get("fieldValue", "") or ""),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.field_name, "value": self.field_value}


@dataclass(frozen=True)
class ReadResult:
    """
    Outcome of reading a single field value.

    Attributes:
        value: Value read from the field, ``None`` when unset
        error: Exception raised while reading, if any
    """

    value: FieldValue = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def value_or_none(self) -> FieldValue:
        return self.value if self.error is None else None


@dataclass
class FieldInfo:
    """Flat descriptor for one field as reported by extraction."""

    index: int
    name: str
    type: str
    value: FieldValue = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "name": self.name,
            "type": self.type,
            "value": self.value,
        }


@dataclass
class ExtractionResult:
    """
    Result of a field extraction.

    Attributes:
        total_fields: Number of fields found in the form
        fields: Descriptor for every field, in document order
        field_names: Fully qualified names, in document order
    """

    total_fields: int
    fields: List[FieldInfo] = field(default_factory=list)
    field_names: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalFields": self.total_fields,
            "fields": [info.to_dict() for info in self.fields],
            "fieldNames": list(self.field_names),
        }


@dataclass
class MappingResult:
    """
    Result of a field mapping.

    Attributes:
        success: Whether the document was filled and flattened
        total_fields: Number of assignments submitted
        mapped_fields: Submitted assignments, in order
        applied_fields: Names that were actually written
    """

    success: bool
    total_fields: int
    mapped_fields: List[FieldAssignment] = field(default_factory=list)
    applied_fields: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "totalFields": self.total_fields,
            "mappedFields": [assignment.to_dict() for assignment in self.mapped_fields],
        }

    def __str__(self) -> str:
        return f"MappingResult(success={self.success}, fields={self.total_fields})"


@dataclass
class PipelineItem:
    """One input or output record: a JSON payload plus named binaries."""

    json: Dict[str, Any] = field(default_factory=dict)
    binary: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def from_dict(cls, data: Union["PipelineItem", Mapping[str, Any]]) -> "PipelineItem":
        if isinstance(data, PipelineItem):
            return data
        binary = data.get("binary")
        return cls(json=dict(data.get("json") or {}), binary=binary)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"json": self.json}
        if self.binary is not None:
            payload["binary"] = self.binary
        return payload
