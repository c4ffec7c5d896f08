from __future__ import annotations

import pytest

from fieldwire.builder import BaseManagerFactory, InjectorBuilder
from fieldwire.callbacks import LifecycleCallbackRegistry
from fieldwire.config import FieldWireConfig
from fieldwire.context import Context, ContextHolder, ReadOnlyContext
from fieldwire.exceptions import FieldWireContextNotSetError, FieldWireInvalidArgumentError
from fieldwire.injector import Injector
from fieldwire.markers import Inject
from fieldwire.registry import ContextProvider, InstanceProvider, LazyProvider


class _UriLocator:
    pass


class _Clock:
    def __init__(self) -> None:
        self.ticks = 0


class _Consumer:
    locator: Inject[_UriLocator]
    clock: Inject[_Clock]


class _ManagerWithoutConfig:
    config = None
    callback_registry = LifecycleCallbackRegistry()


class _ManagerWithoutCallbacks:
    config = FieldWireConfig()
    callback_registry = None


def test_create_rejects_none_manager_factory() -> None:
    with pytest.raises(FieldWireInvalidArgumentError, match="manager factory"):
        InjectorBuilder.create(None)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    ("manager_factory", "match"),
    [
        (_ManagerWithoutConfig(), "configuration"),
        (_ManagerWithoutCallbacks(), "callback registry"),
    ],
)
def test_build_rejects_incomplete_manager_factory(manager_factory: object, match: str) -> None:
    builder = InjectorBuilder.create(manager_factory)  # type: ignore[arg-type]

    with pytest.raises(FieldWireInvalidArgumentError, match=match):
        builder.build()


def test_build_registers_builtin_capabilities_in_order(
    manager_factory: BaseManagerFactory,
) -> None:
    injector = InjectorBuilder.create(manager_factory).build()

    assert list(injector.registry) == [
        Injector,
        Context,
        ReadOnlyContext,
        FieldWireConfig,
        LifecycleCallbackRegistry,
    ]
    assert isinstance(injector.registry[Injector], LazyProvider)
    assert isinstance(injector.registry[Context], ContextProvider)
    assert isinstance(injector.registry[ReadOnlyContext], ContextProvider)
    assert isinstance(injector.registry[FieldWireConfig], InstanceProvider)


def test_registry_shares_manager_collaborators_by_reference(
    manager_factory: BaseManagerFactory,
) -> None:
    injector = InjectorBuilder.create(manager_factory).build()

    config = injector.registry[FieldWireConfig].provide()
    callbacks = injector.registry[LifecycleCallbackRegistry].provide()
    config.debug = False

    assert config is manager_factory.config
    assert callbacks is manager_factory.callback_registry
    assert manager_factory.config.debug is False


def test_injector_self_provider_resolves_to_built_injector(
    manager_factory: BaseManagerFactory,
) -> None:
    injector = InjectorBuilder.create(manager_factory).build()

    assert injector.registry[Injector].provide() is injector


def test_each_build_creates_a_distinct_injector(manager_factory: BaseManagerFactory) -> None:
    builder = InjectorBuilder.create(manager_factory)

    first = builder.build()
    second = builder.build()

    assert first is not second
    assert first.registry[Injector].provide() is first
    assert second.registry[Injector].provide() is second


def test_context_provider_reads_the_configured_holder(
    manager_factory: BaseManagerFactory,
    holder: ContextHolder,
) -> None:
    injector = InjectorBuilder.create(manager_factory, context_holder=holder).build()
    provider = injector.registry[ReadOnlyContext]

    with pytest.raises(FieldWireContextNotSetError):
        provider.provide()
    with holder.scoped() as context:
        assert provider.provide() is context


def test_add_instance_and_factory_register_extra_capabilities(
    manager_factory: BaseManagerFactory,
) -> None:
    locator = _UriLocator()
    injector = (
        InjectorBuilder.create(manager_factory)
        .add_instance(locator)
        .add_factory(_Clock, provides=_Clock)
        .build()
    )

    first = injector.inject(_Consumer())
    second = injector.inject(_Consumer())

    assert first.locator is locator
    assert second.locator is locator
    assert isinstance(first.clock, _Clock)
    assert first.clock is not second.clock


@pytest.mark.parametrize(
    "capability",
    [Injector, Context, ReadOnlyContext, FieldWireConfig, LifecycleCallbackRegistry],
)
def test_builtin_capabilities_cannot_be_overridden(
    manager_factory: BaseManagerFactory,
    capability: type,
) -> None:
    builder = InjectorBuilder.create(manager_factory)

    with pytest.raises(FieldWireInvalidArgumentError, match="cannot be overridden"):
        builder.add_instance(object(), provides=capability)


def test_add_factory_requires_callable(manager_factory: BaseManagerFactory) -> None:
    builder = InjectorBuilder.create(manager_factory)

    with pytest.raises(FieldWireInvalidArgumentError, match="callable"):
        builder.add_factory("not callable", provides=_Clock)  # type: ignore[arg-type]


def test_base_manager_factory_creates_defaults() -> None:
    manager_factory = BaseManagerFactory()

    assert isinstance(manager_factory.config, FieldWireConfig)
    assert isinstance(manager_factory.callback_registry, LifecycleCallbackRegistry)


def test_base_manager_factory_keeps_given_collaborators() -> None:
    config = FieldWireConfig(gzip_enabled=False)
    callbacks = LifecycleCallbackRegistry()

    manager_factory = BaseManagerFactory(config, callbacks)

    assert manager_factory.config is config
    assert manager_factory.callback_registry is callbacks
