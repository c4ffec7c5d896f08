from __future__ import annotations

from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class SupportsDecoration(Protocol):
    """Structural contract of a wrapper exposing its immediate delegate."""

    def get_decorated_object(self) -> Any: ...


class ObjectDecorator(Generic[T]):
    """Base class for wrappers delegating to another object of the same role.

    The injector follows ``get_decorated_object`` so fields of every layer,
    down to the innermost wrapped instance, are populated by a single
    ``inject`` call.
    """

    def __init__(self, decorated: T) -> None:
        self._decorated = decorated

    def get_decorated_object(self) -> T:
        """Return the immediate delegate."""
        return self._decorated

    def get_original_decorated_object(self) -> Any:
        """Return the innermost object that is not itself a decorator."""
        current: Any = self._decorated
        seen = {id(self)}
        while isinstance(current, SupportsDecoration) and id(current) not in seen:
            seen.add(id(current))
            delegate = current.get_decorated_object()
            if delegate is None:
                break
            current = delegate
        return current


def next_delegate(obj: object) -> Any | None:
    """Return the object wrapped by ``obj``, or ``None`` when it wraps nothing."""
    if not isinstance(obj, SupportsDecoration):
        return None
    return obj.get_decorated_object()


__all__ = ["ObjectDecorator", "SupportsDecoration", "next_delegate"]
