from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from fieldwire._internal.type_checks import is_assignable
from fieldwire.exceptions import FieldWireInvalidArgumentError

if TYPE_CHECKING:
    from fieldwire.context import ContextHolder


class InjectableProvider(ABC):
    """Supply the value injected for one capability type."""

    @abstractmethod
    def provide(self) -> Any:
        """Return the value to assign to a matching field."""


class InstanceProvider(InjectableProvider):
    """Provide the same instance on every injection."""

    __slots__ = ("_instance",)

    def __init__(self, instance: Any) -> None:
        self._instance = instance

    def provide(self) -> Any:
        return self._instance

    def __repr__(self) -> str:
        return f"InstanceProvider({self._instance!r})"


class ContextProvider(InjectableProvider):
    """Provide the context that is ambient at injection time.

    Nothing is captured when the provider is built, so each ``inject`` call
    observes the current binding of the holder and fails with
    ``FieldWireContextNotSetError`` when there is none.
    """

    __slots__ = ("_holder",)

    def __init__(self, holder: ContextHolder) -> None:
        self._holder = holder

    def provide(self) -> Any:
        return self._holder.get()


class LazyProvider(InjectableProvider):
    """Provide the result of calling ``factory`` at injection time."""

    __slots__ = ("_factory",)

    def __init__(self, factory: Callable[[], Any]) -> None:
        self._factory = factory

    def provide(self) -> Any:
        return self._factory()


class InjectableRegistry(Mapping[Any, InjectableProvider]):
    """Immutable mapping from capability type to the provider of its value.

    Raw values in the source mapping are wrapped in ``InstanceProvider``.
    Insertion order is preserved and decides which capability wins when a
    field type is a subclass of several registered keys.
    """

    __slots__ = ("_providers",)

    def __init__(self, providers: Mapping[Any, Any]) -> None:
        if providers is None:
            msg = "InjectableRegistry requires a mapping of capability types to providers."
            raise FieldWireInvalidArgumentError(msg)
        self._providers: Mapping[Any, InjectableProvider] = MappingProxyType(
            {
                capability: _as_provider(provider)
                for capability, provider in providers.items()
            },
        )

    def lookup(self, field_type: Any) -> InjectableProvider | None:
        """Return the provider for ``field_type`` or ``None`` when none matches.

        An exact key match wins. Otherwise the first registered capability the
        field type derives from is used.
        """
        try:
            return self._providers[field_type]
        except (KeyError, TypeError):
            pass
        for capability, provider in self._providers.items():
            if is_assignable(field_type, capability):
                return provider
        return None

    def __getitem__(self, capability: Any) -> InjectableProvider:
        return self._providers[capability]

    def __iter__(self) -> Iterator[Any]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    def __repr__(self) -> str:
        keys = ", ".join(getattr(key, "__qualname__", repr(key)) for key in self._providers)
        return f"InjectableRegistry({keys})"


def _as_provider(value: Any) -> InjectableProvider:
    if isinstance(value, InjectableProvider):
        return value
    return InstanceProvider(value)


__all__ = [
    "ContextProvider",
    "InjectableProvider",
    "InjectableRegistry",
    "InstanceProvider",
    "LazyProvider",
]
