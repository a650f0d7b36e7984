"""Helpers for navigating pypdf object graphs."""

from __future__ import annotations

from typing import Any, Optional

from pypdf.generic import DictionaryObject, IndirectObject, NameObject

# Guards against /Parent loops in malformed files.
MAX_INHERITANCE_DEPTH = 64


def resolve(obj: Any) -> Any:
    return obj.get_object() if isinstance(obj, IndirectObject) else obj


def inherited(node: Any, key: str, default: Any = None) -> Any:
    """Return ``key`` from ``node`` or the nearest ``/Parent`` defining it."""

    current = resolve(node)
    for _ in range(MAX_INHERITANCE_DEPTH):
        if not isinstance(current, DictionaryObject):
            break
        if key in current:
            return resolve(current.raw_get(key))
        current = resolve(current.raw_get("/Parent")) if "/Parent" in current else None
    return default


def raw_entry(node: DictionaryObject, key: str) -> Any:
    """Return the unresolved entry for ``key``, keeping indirect references."""
    return node.raw_get(key) if key in node else None


def name_text(value: Any) -> Optional[str]:
    """Return a PDF name without its leading slash."""
    if isinstance(value, NameObject):
        return str(value)[1:]
    return None
