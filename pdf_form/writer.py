"""
Field value writing and form flattening.

Assignments are always written as text, whatever the field variant. Fields
that cannot take text raise inside :func:`set_text` and the failure is
logged and skipped by :func:`apply_assignments`. :func:`flatten` must run
after all assignments: it stamps every widget's appearance onto its page,
drops the widgets and removes the ``/AcroForm`` entry from the catalog.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence, Tuple

from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    NameObject,
    StreamObject,
    TextStringObject,
)

from .classifier import read_value
from .document import PDFFormDocument
from .exceptions import FieldTypeError, FieldValueError
from .fields import FormField, PDFForm
from .objects import inherited, raw_entry, resolve
from .types import FieldAssignment, FieldKind
from .utils import get_logger

LOGGER = get_logger(__name__)

ANNOT_FLAG_HIDDEN = 1 << 1
XOBJECT_PREFIX = "/FlatWidget"

Matrix = Tuple[float, float, float, float, float, float]
IDENTITY: Matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


# ----------------------------------------------------------------------
# Writing
# ----------------------------------------------------------------------
def _max_length(form_field: FormField) -> Optional[int]:
    raw = form_field.get("/MaxLen")
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _widget_annotations(
    document: PDFFormDocument, widgets: Sequence[DictionaryObject]
) -> List[Tuple[Any, List[Any]]]:
    """Pair each page holding one of ``widgets`` with its matching annotation entries."""

    widget_ids = {id(widget) for widget in widgets}
    found = []
    for page in document.iter_pages():
        if "/Annots" not in page:
            continue
        annots = resolve(page.raw_get("/Annots")) or []
        matching = [annot for annot in annots if id(resolve(annot)) in widget_ids]
        if matching:
            found.append((page, matching))
    return found


def _regenerate_text_appearance(document: PDFFormDocument, form_field: FormField, value: str) -> None:
    for page, annots in _widget_annotations(document, form_field.widgets):
        document.update_field_values(page, {form_field.name: value}, annots=annots)


def set_text(document: PDFFormDocument, form_field: FormField, value: str) -> None:
    """Write ``value`` into a text field and refresh its appearance.

    On failure the field's previous value and appearances are restored.
    """

    if form_field.kind is not FieldKind.TEXT:
        raise FieldTypeError(
            form_field.name,
            f"Field {form_field.name!r} of type {form_field.kind.value} does not accept text",
        )
    limit = _max_length(form_field)
    if limit is not None and len(value) > limit:
        raise FieldValueError(
            form_field.name,
            f"Value for field {form_field.name!r} exceeds its maximum length of {limit}",
        )

    previous_value = raw_entry(form_field.obj, "/V")
    previous_appearances = [(widget, raw_entry(widget, "/AP")) for widget in form_field.widgets]
    form_field.obj[NameObject("/V")] = TextStringObject(value)
    try:
        _regenerate_text_appearance(document, form_field, value)
    except Exception:
        _restore(form_field.obj, "/V", previous_value)
        for widget, appearance in previous_appearances:
            _restore(widget, "/AP", appearance)
        raise


def _restore(obj: DictionaryObject, key: str, previous: Any) -> None:
    if previous is None:
        obj.pop(key, None)
    else:
        obj[NameObject(key)] = previous


def apply_assignments(
    document: PDFFormDocument,
    form: PDFForm,
    assignments: Iterable[FieldAssignment],
) -> List[str]:
    """Apply ``assignments`` in order and return the names actually written."""

    fields = form.fields_by_name()
    applied: List[str] = []
    for assignment in assignments:
        form_field = fields.get(assignment.field_name)
        if form_field is None:
            continue
        try:
            set_text(document, form_field, assignment.field_value)
        except Exception as exc:
            LOGGER.warning("Error setting field %s: %s", assignment.field_name, exc)
            continue
        applied.append(assignment.field_name)
    return applied


# ----------------------------------------------------------------------
# Flattening
# ----------------------------------------------------------------------
def _refresh_missing_appearances(document: PDFFormDocument, fields: Sequence[FormField]) -> None:
    for form_field in fields:
        if form_field.kind is not FieldKind.TEXT:
            continue
        if all("/AP" in widget for widget in form_field.widgets):
            continue
        value = read_value(form_field).value_or_none()
        if not isinstance(value, str):
            continue
        try:
            _regenerate_text_appearance(document, form_field, value)
        except Exception as exc:
            LOGGER.debug("Could not build appearance for field %s: %s", form_field.name, exc)


def _normal_appearance(widget: DictionaryObject) -> Optional[Tuple[Any, StreamObject]]:
    """Return ``(reference, stream)`` of the widget's current normal appearance."""

    appearance = resolve(raw_entry(widget, "/AP"))
    if not isinstance(appearance, DictionaryObject) or "/N" not in appearance:
        return None
    normal_ref = appearance.raw_get("/N")
    normal = resolve(normal_ref)
    if isinstance(normal, StreamObject):
        return normal_ref, normal
    if isinstance(normal, DictionaryObject):
        state = resolve(raw_entry(widget, "/AS"))
        if state is None or state not in normal:
            return None
        state_ref = normal.raw_get(state)
        stream = resolve(state_ref)
        if isinstance(stream, StreamObject):
            return state_ref, stream
    return None


def _numbers(raw: Any, default: Sequence[float]) -> List[float]:
    values = resolve(raw)
    if not isinstance(values, ArrayObject):
        return list(default)
    try:
        return [float(resolve(value)) for value in values]
    except (TypeError, ValueError):
        return list(default)


def _placement(rect: Sequence[float], bbox: Sequence[float], matrix: Sequence[float]) -> Matrix:
    """Matrix mapping the transformed appearance box onto the widget rectangle."""

    a, b, c, d, e, f = matrix
    corners = [
        (a * x + c * y + e, b * x + d * y + f)
        for x, y in ((bbox[0], bbox[1]), (bbox[0], bbox[3]), (bbox[2], bbox[1]), (bbox[2], bbox[3]))
    ]
    min_x = min(x for x, _ in corners)
    max_x = max(x for x, _ in corners)
    min_y = min(y for _, y in corners)
    max_y = max(y for _, y in corners)

    left, right = sorted((rect[0], rect[2]))
    bottom, top = sorted((rect[1], rect[3]))
    scale_x = (right - left) / (max_x - min_x) if max_x > min_x else 1.0
    scale_y = (top - bottom) / (max_y - min_y) if max_y > min_y else 1.0
    return (scale_x, 0.0, 0.0, scale_y, left - min_x * scale_x, bottom - min_y * scale_y)


def _number(value: float) -> str:
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in {"", "-0"} else text


def _stream(data: bytes) -> DecodedStreamObject:
    stream = DecodedStreamObject()
    stream.set_data(data)
    return stream


def _page_xobjects(page: DictionaryObject) -> DictionaryObject:
    resources = inherited(page, "/Resources")
    if not isinstance(resources, DictionaryObject):
        resources = DictionaryObject()
    if "/Resources" not in page:
        page[NameObject("/Resources")] = resources
    xobjects = resolve(raw_entry(resources, "/XObject"))
    if not isinstance(xobjects, DictionaryObject):
        xobjects = DictionaryObject()
        resources[NameObject("/XObject")] = xobjects
    return xobjects


def _annotation_flags(widget: DictionaryObject) -> int:
    try:
        return int(resolve(widget.raw_get("/F"))) if "/F" in widget else 0
    except (TypeError, ValueError):
        return 0


def _stamp(document: PDFFormDocument, page: DictionaryObject, widget: DictionaryObject) -> Optional[bytes]:
    """Register the widget's appearance on ``page`` and return the drawing operators."""

    if _annotation_flags(widget) & ANNOT_FLAG_HIDDEN:
        return None

    found = _normal_appearance(widget)
    if found is None or "/Rect" not in widget:
        return None
    reference, stream = found
    if "/Subtype" not in stream:
        stream[NameObject("/Subtype")] = NameObject("/Form")
    if "/Type" not in stream:
        stream[NameObject("/Type")] = NameObject("/XObject")

    rect = _numbers(widget.raw_get("/Rect"), (0.0, 0.0, 0.0, 0.0))
    if len(rect) != 4:
        return None
    bbox = _numbers(
        raw_entry(stream, "/BBox"),
        (0.0, 0.0, abs(rect[2] - rect[0]), abs(rect[3] - rect[1])),
    )
    matrix = _numbers(
        raw_entry(stream, "/Matrix"),
        IDENTITY,
    )
    if len(bbox) != 4 or len(matrix) != 6:
        return None

    xobjects = _page_xobjects(page)
    counter = len(xobjects)
    while f"{XOBJECT_PREFIX}{counter}" in xobjects:
        counter += 1
    name = NameObject(f"{XOBJECT_PREFIX}{counter}")
    xobjects[name] = document.register(reference)

    operands = " ".join(_number(value) for value in _placement(rect, bbox, matrix))
    return f"q {operands} cm {name} Do Q\n".encode("latin-1")


def _append_content(document: PDFFormDocument, page: DictionaryObject, drawing: bytes) -> None:
    if "/Contents" not in page:
        page[NameObject("/Contents")] = ArrayObject([document.register(_stream(drawing))])
        return
    current = page.raw_get("/Contents")
    resolved = resolve(current)
    if isinstance(resolved, ArrayObject):
        existing = list(resolved)
    else:
        existing = [document.register(current)]
    opening = document.register(_stream(b"q\n"))
    closing = document.register(_stream(b"\nQ\n" + drawing))
    page[NameObject("/Contents")] = ArrayObject([opening, *existing, closing])


def flatten(document: PDFFormDocument, form: PDFForm) -> int:
    """Bake every widget into page content and drop the interactive form.

    Returns the number of widget appearances stamped onto pages.
    """

    fields = form.fields
    _refresh_missing_appearances(document, fields)
    widget_ids = {id(widget) for form_field in fields for widget in form_field.widgets}

    stamped = 0
    for page in document.iter_pages():
        if "/Annots" not in page:
            continue
        annots = resolve(page.raw_get("/Annots")) or []
        kept = ArrayObject()
        drawing = b""
        for ref in annots:
            annot = resolve(ref)
            if not isinstance(annot, DictionaryObject):
                kept.append(ref)
                continue
            is_widget = resolve(raw_entry(annot, "/Subtype")) == "/Widget"
            if not is_widget and id(annot) not in widget_ids:
                kept.append(ref)
                continue
            operators = _stamp(document, page, annot)
            if operators:
                drawing += operators
                stamped += 1

        if drawing:
            _append_content(document, page, drawing)
        if kept:
            page[NameObject("/Annots")] = kept
        else:
            del page["/Annots"]

    root = document.root
    if "/AcroForm" in root:
        del root["/AcroForm"]
    LOGGER.debug("Flattened %d widget appearances from %d fields", stamped, len(fields))
    return stamped


__all__ = ["apply_assignments", "flatten", "set_text"]
