"""Form field registry over a document's ``/AcroForm`` dictionary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

from pypdf.generic import DictionaryObject, IndirectObject

from .classifier import classify
from .objects import inherited, resolve
from .types import FieldKind
from .utils import get_logger

LOGGER = get_logger(__name__)

WalkEntry = Tuple[str, DictionaryObject, List[DictionaryObject]]


def _object_key(ref: Any, obj: Any) -> Any:
    if isinstance(ref, IndirectObject):
        return (ref.idnum, ref.generation)
    return id(obj)


@dataclass
class FormField:
    """
    A terminal field of the interactive form.

    Attributes:
        name: Fully qualified name, partial names joined with ``.``
        index: 1-based position in the form's field enumeration
        kind: Classified field variant
        obj: The field dictionary
        widgets: Widget annotations belonging to the field
    """

    name: str
    index: int
    kind: FieldKind
    obj: DictionaryObject = field(repr=False)
    widgets: List[DictionaryObject] = field(default_factory=list, repr=False)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up an inheritable field attribute."""
        return inherited(self.obj, key, default)


class PDFForm:
    """View over the ``/AcroForm`` dictionary of a loaded document."""

    def __init__(self, acroform: Optional[DictionaryObject]) -> None:
        self.acroform = acroform

    @property
    def exists(self) -> bool:
        return self.acroform is not None

    @property
    def fields(self) -> List[FormField]:
        fields: List[FormField] = []
        for name, obj, widgets in self._walk():
            fields.append(
                FormField(
                    name=name,
                    index=len(fields) + 1,
                    kind=classify(obj),
                    obj=obj,
                    widgets=widgets,
                )
            )
        return fields

    @property
    def field_names(self) -> List[str]:
        return [form_field.name for form_field in self.fields]

    def get_field(self, name: str) -> Optional[FormField]:
        """Return the first field named ``name`` or ``None``."""
        for form_field in self.fields:
            if form_field.name == name:
                return form_field
        return None

    def fields_by_name(self) -> Dict[str, FormField]:
        mapping: Dict[str, FormField] = {}
        for form_field in self.fields:
            mapping.setdefault(form_field.name, form_field)
        return mapping

    def _walk(self) -> Iterator[WalkEntry]:
        if self.acroform is None or "/Fields" not in self.acroform:
            return
        roots = resolve(self.acroform.raw_get("/Fields"))
        if not roots:
            return
        yield from self._walk_nodes(roots, None, set())

    def _walk_nodes(self, refs: Any, parent_name: Optional[str], seen: Set[Any]) -> Iterator[WalkEntry]:
        for ref in refs:
            obj = resolve(ref)
            if not isinstance(obj, DictionaryObject):
                continue
            key = _object_key(ref, obj)
            if key in seen:
                LOGGER.debug("Skipping repeated field node %s", key)
                continue
            seen.add(key)

            partial = resolve(obj.raw_get("/T")) if "/T" in obj else None
            if partial is None:
                name = parent_name or ""
            elif parent_name:
                name = f"{parent_name}.{partial}"
            else:
                name = str(partial)

            kid_refs = resolve(obj.raw_get("/Kids")) if "/Kids" in obj else None
            kids = [(kid_ref, resolve(kid_ref)) for kid_ref in (kid_refs or [])]
            child_refs = [
                kid_ref for kid_ref, kid in kids if isinstance(kid, DictionaryObject) and "/T" in kid
            ]
            if child_refs:
                yield from self._walk_nodes(child_refs, name, seen)
                continue

            widgets = [kid for _, kid in kids if isinstance(kid, DictionaryObject)]
            yield name, obj, widgets or [obj]


__all__ = ["FormField", "PDFForm"]
