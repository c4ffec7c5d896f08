from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Literal, Protocol, cast

from fieldwire.callbacks import LifecycleCallbackRegistry
from fieldwire.config import FieldWireConfig
from fieldwire.context import Context, ContextHolder, ReadOnlyContext, context_holder
from fieldwire.exceptions import FieldWireInvalidArgumentError
from fieldwire.injector import Injector
from fieldwire.registry import (
    ContextProvider,
    InjectableProvider,
    InjectableRegistry,
    InstanceProvider,
    LazyProvider,
)

logger = logging.getLogger(__name__)

_BUILTIN_CAPABILITIES: tuple[type[Any], ...] = (
    Injector,
    Context,
    ReadOnlyContext,
    FieldWireConfig,
    LifecycleCallbackRegistry,
)


class ManagerFactory(Protocol):
    """Collaborator owning the configuration and the callback registry."""

    @property
    def config(self) -> FieldWireConfig | None: ...

    @property
    def callback_registry(self) -> LifecycleCallbackRegistry | None: ...


class BaseManagerFactory:
    """Default manager factory creating fresh collaborators when none are given."""

    def __init__(
        self,
        config: FieldWireConfig | None = None,
        callback_registry: LifecycleCallbackRegistry | None = None,
    ) -> None:
        self.config = config if config is not None else FieldWireConfig()
        self.callback_registry = (
            callback_registry if callback_registry is not None else LifecycleCallbackRegistry()
        )


class _InjectorReference:
    """Late-bound reference to the injector being built."""

    __slots__ = ("_injector",)

    def __init__(self) -> None:
        self._injector: Injector | None = None

    def bind(self, injector: Injector) -> None:
        self._injector = injector

    def get(self) -> Injector:
        if self._injector is None:
            msg = "Injector reference used before the injector was built."
            raise RuntimeError(msg)
        return self._injector


class InjectorBuilder:
    """Assemble the injectable registry of a manager and build an ``Injector``.

    The built registry recognizes the injector itself, ``Context`` and
    ``ReadOnlyContext`` (both read from the context holder at injection time),
    the manager's configuration and its callback registry, plus any extra
    capabilities added with ``add_instance`` or ``add_factory``.
    """

    def __init__(
        self,
        manager_factory: ManagerFactory,
        *,
        context_holder: ContextHolder = context_holder,
    ) -> None:
        if manager_factory is None:
            msg = "InjectorBuilder requires a manager factory, got None."
            raise FieldWireInvalidArgumentError(msg)
        self._manager_factory = manager_factory
        self._context_holder = context_holder
        self._extra_providers: dict[Any, InjectableProvider] = {}

    @classmethod
    def create(
        cls,
        manager_factory: ManagerFactory,
        *,
        context_holder: ContextHolder = context_holder,
    ) -> InjectorBuilder:
        """Create a builder for ``manager_factory``.

        Args:
            manager_factory: Collaborator exposing ``config`` and
                ``callback_registry``.
            context_holder: Holder consulted for context fields. Defaults to
                the process-wide ``context_holder``.

        Raises:
            FieldWireInvalidArgumentError: If ``manager_factory`` is ``None``.

        """
        return cls(manager_factory, context_holder=context_holder)

    def add_instance(
        self,
        instance: Any,
        *,
        provides: Any | Literal["infer"] = "infer",
    ) -> InjectorBuilder:
        """Register ``instance`` as the value of an extra capability.

        Args:
            instance: Value injected into matching fields.
            provides: Capability key. ``"infer"`` uses ``type(instance)``.

        """
        provides_value = cast("Any", provides)
        capability = type(instance) if provides_value == "infer" else provides_value
        self._register_extra(capability, InstanceProvider(instance))
        return self

    def add_factory(self, factory: Callable[[], Any], *, provides: Any) -> InjectorBuilder:
        """Register a zero-argument factory called on every injection of ``provides``."""
        if not callable(factory):
            msg = f"add_factory() parameter 'factory' must be callable, got {factory!r}."
            raise FieldWireInvalidArgumentError(msg)
        self._register_extra(provides, LazyProvider(factory))
        return self

    def build(self) -> Injector:
        """Freeze the registry and return the injector using it.

        Raises:
            FieldWireInvalidArgumentError: If the manager factory exposes no
                configuration or no callback registry.

        """
        config = getattr(self._manager_factory, "config", None)
        if config is None:
            msg = "Manager factory must provide a configuration object."
            raise FieldWireInvalidArgumentError(msg)
        callback_registry = getattr(self._manager_factory, "callback_registry", None)
        if callback_registry is None:
            msg = "Manager factory must provide a lifecycle callback registry."
            raise FieldWireInvalidArgumentError(msg)

        injector_reference = _InjectorReference()
        context_provider = ContextProvider(self._context_holder)
        providers: dict[Any, InjectableProvider] = {
            Injector: LazyProvider(injector_reference.get),
            Context: context_provider,
            ReadOnlyContext: context_provider,
            FieldWireConfig: InstanceProvider(config),
            LifecycleCallbackRegistry: InstanceProvider(callback_registry),
        }
        providers.update(self._extra_providers)

        injector = Injector(InjectableRegistry(providers))
        injector_reference.bind(injector)
        logger.debug("Built injector with %s", injector.registry)
        return injector

    def _register_extra(self, capability: Any, provider: InjectableProvider) -> None:
        if capability is None:
            msg = "Capability key must not be None."
            raise FieldWireInvalidArgumentError(msg)
        if capability in _BUILTIN_CAPABILITIES:
            msg = f"Built-in capability {capability!r} cannot be overridden."
            raise FieldWireInvalidArgumentError(msg)
        self._extra_providers[capability] = provider


__all__ = ["BaseManagerFactory", "InjectorBuilder", "ManagerFactory"]
