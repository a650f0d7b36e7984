"""
Field type classification and value reading.

Every terminal field is mapped once onto :class:`~pdf_form.types.FieldKind`
using its inheritable ``/FT`` entry and ``/Ff`` flags. All value reading
switches on that enum. A failed read is captured in a
:class:`~pdf_form.types.ReadResult` and reported as ``None`` by
:func:`describe_fields`, so one exotic field never aborts an extraction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from pypdf.generic import ArrayObject, ByteStringObject, DictionaryObject, NameObject, NullObject

from .exceptions import FieldReadError
from .objects import inherited, name_text, raw_entry, resolve
from .types import ExtractionResult, FieldInfo, FieldKind, FieldValue, ReadResult
from .utils import get_logger

if TYPE_CHECKING:  # pragma: no cover
    from .fields import FormField, PDFForm

LOGGER = get_logger(__name__)

FF_RADIO = 1 << 15
FF_PUSHBUTTON = 1 << 16
FF_COMBO = 1 << 17

OFF_STATE = "/Off"


def _flags(node: DictionaryObject) -> int:
    try:
        return int(inherited(node, "/Ff", 0))
    except (TypeError, ValueError):
        return 0


def classify(node: DictionaryObject) -> FieldKind:
    """Map a field dictionary's native type tag onto :class:`FieldKind`."""

    field_type = inherited(node, "/FT")
    flags = _flags(node)

    if field_type == "/Tx":
        return FieldKind.TEXT
    if field_type == "/Btn":
        if flags & FF_PUSHBUTTON:
            return FieldKind.OTHER
        if flags & FF_RADIO:
            return FieldKind.RADIO_GROUP
        return FieldKind.CHECKBOX
    if field_type == "/Ch":
        if flags & FF_COMBO:
            return FieldKind.DROPDOWN
        return FieldKind.OTHER
    return FieldKind.OTHER


def _is_unset(value: Any) -> bool:
    return value is None or isinstance(value, NullObject)


def _text(value: Any) -> Optional[str]:
    if isinstance(value, NameObject):
        return None
    if isinstance(value, str):
        return str(value)
    if isinstance(value, ByteStringObject):
        return bytes(value).decode("latin-1")
    return None


def _read_text(form_field: "FormField") -> FieldValue:
    value = form_field.get("/V")
    if _is_unset(value):
        return None
    text = _text(value)
    if text is None:
        raise FieldReadError(
            form_field.name,
            f"Unexpected text value of type {type(value).__name__} in field {form_field.name!r}",
        )
    return text


def _read_checkbox(form_field: "FormField") -> FieldValue:
    value = form_field.get("/V")
    if isinstance(value, NameObject):
        return value != OFF_STATE
    if not _is_unset(value):
        raise FieldReadError(
            form_field.name,
            f"Unexpected checkbox state of type {type(value).__name__} in field {form_field.name!r}",
        )
    if not form_field.widgets:
        return False
    state = resolve(raw_entry(form_field.widgets[0], "/AS"))
    return isinstance(state, NameObject) and state != OFF_STATE


def _read_radio(form_field: "FormField") -> FieldValue:
    value = form_field.get("/V")
    if _is_unset(value) or value == OFF_STATE:
        return None
    if isinstance(value, NameObject):
        state = name_text(value) or ""
        options = form_field.get("/Opt")
        if isinstance(options, ArrayObject) and state.isdigit() and int(state) < len(options):
            return _text(resolve(options[int(state)])) or state
        return state
    text = _text(value)
    if text is None:
        raise FieldReadError(
            form_field.name,
            f"Unexpected radio state of type {type(value).__name__} in field {form_field.name!r}",
        )
    return text


def _read_dropdown(form_field: "FormField") -> FieldValue:
    value = form_field.get("/V")
    if _is_unset(value):
        return None
    # Only single selection is modelled; a multi-select array reports its first entry.
    if isinstance(value, ArrayObject):
        if not value:
            return None
        value = resolve(value[0])
    if isinstance(value, NameObject):
        return name_text(value)
    text = _text(value)
    if text is None:
        raise FieldReadError(
            form_field.name,
            f"Unexpected selection of type {type(value).__name__} in field {form_field.name!r}",
        )
    return text


_READERS: Dict[FieldKind, Callable[["FormField"], FieldValue]] = {
    FieldKind.TEXT: _read_text,
    FieldKind.CHECKBOX: _read_checkbox,
    FieldKind.RADIO_GROUP: _read_radio,
    FieldKind.DROPDOWN: _read_dropdown,
}


def read_value(form_field: "FormField") -> ReadResult:
    """Read the current value of ``form_field`` without raising."""

    reader = _READERS.get(form_field.kind)
    if reader is None:
        return ReadResult(value=None)
    try:
        return ReadResult(value=reader(form_field))
    except Exception as exc:
        return ReadResult(error=exc)


def describe_field(form_field: "FormField") -> FieldInfo:
    result = read_value(form_field)
    if not result.ok:
        LOGGER.debug("Could not read value of field %s: %s", form_field.name, result.error)
    return FieldInfo(
        index=form_field.index,
        name=form_field.name,
        type=form_field.kind.value,
        value=result.value_or_none(),
    )


def describe_fields(form: "PDFForm") -> ExtractionResult:
    """Describe every field of ``form`` in document order."""

    fields = form.fields
    infos = [describe_field(form_field) for form_field in fields]
    return ExtractionResult(
        total_fields=len(fields),
        fields=infos,
        field_names=[form_field.name for form_field in fields],
    )


__all__ = ["classify", "describe_field", "describe_fields", "read_value"]
