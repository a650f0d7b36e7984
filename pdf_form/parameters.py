"""Parameter access for pipeline items."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from .exceptions import UnsupportedOperationError
from .types import FieldAssignment, Operation

_MISSING = object()

DEFAULT_PARAMETERS: Dict[str, Any] = {
    "operation": Operation.EXTRACT_FIELDS.value,
    "binaryPropertyName": "data",
    "outputFilename": "",
    "fields": {"fieldValues": []},
}


class ParameterReader(Protocol):
    """Reads a named parameter for the item at ``item_index``."""

    def get_parameter(self, name: str, item_index: int, default: Any = None) -> Any:
        ...


def _lookup(values: Mapping[str, Any], name: str) -> Any:
    current: Any = values
    for part in name.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


@dataclass
class StaticParameters:
    """
    Parameter values shared by every item, with optional per-item overrides.

    Dotted names such as ``fields.fieldValues`` address nested mappings.
    """

    values: Dict[str, Any] = field(default_factory=dict)
    overrides: Sequence[Mapping[str, Any]] = field(default_factory=list)

    def get_parameter(self, name: str, item_index: int, default: Any = None) -> Any:
        if 0 <= item_index < len(self.overrides):
            value = _lookup(self.overrides[item_index], name)
            if value is not _MISSING:
                return value
        for source in (self.values, DEFAULT_PARAMETERS):
            value = _lookup(source, name)
            if value is not _MISSING:
                return value
        return default


@dataclass(frozen=True)
class FormParameters:
    """Parameters resolved for a single item."""

    operation: Operation
    binary_property_name: str = "data"
    output_filename: str = ""
    assignments: List[FieldAssignment] = field(default_factory=list)

    @classmethod
    def read(cls, reader: ParameterReader, item_index: int) -> "FormParameters":
        raw_operation = reader.get_parameter("operation", item_index, Operation.EXTRACT_FIELDS.value)
        operation = parse_operation(raw_operation)
        binary_property_name = reader.get_parameter("binaryPropertyName", item_index, "data")

        if operation is not Operation.MAP_FIELDS:
            return cls(operation=operation, binary_property_name=binary_property_name)

        rows = reader.get_parameter("fields.fieldValues", item_index, []) or []
        return cls(
            operation=operation,
            binary_property_name=binary_property_name,
            output_filename=reader.get_parameter("outputFilename", item_index, "") or "",
            assignments=[FieldAssignment.from_dict(row) for row in rows],
        )


def parse_operation(value: Optional[Any]) -> Operation:
    if isinstance(value, Operation):
        return value
    try:
        return Operation(value or Operation.EXTRACT_FIELDS.value)
    except ValueError as exc:
        raise UnsupportedOperationError(f"The operation \"{value}\" is not supported!") from exc
