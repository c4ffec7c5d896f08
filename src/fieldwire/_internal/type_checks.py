from __future__ import annotations

import types
from typing import Any, TypeGuard


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def is_assignable(field_type: Any, capability: Any) -> bool:
    """Return true when a value registered under ``capability`` fits ``field_type``.

    A field accepts a capability when its declared type is the capability or
    one of its subclasses. Non-class annotations never match by subclassing.

    Args:
        field_type: Declared type of the annotated field.
        capability: Registry key being tested.

    """
    if not is_runtime_class(field_type) or not is_runtime_class(capability):
        return False
    try:
        return issubclass(field_type, capability)
    except TypeError:
        return False


__all__ = ["is_assignable", "is_runtime_class"]
