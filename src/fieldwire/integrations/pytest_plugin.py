from __future__ import annotations

from collections.abc import Iterator

import pytest

from fieldwire.builder import BaseManagerFactory, InjectorBuilder
from fieldwire.context import Context, ContextHolder, context_holder
from fieldwire.injector import Injector


@pytest.fixture()
def fieldwire_context_holder() -> ContextHolder:
    """Return the holder used by the other fieldwire fixtures.

    Defaults to the process-wide ``context_holder``. Override it to isolate a
    test suite on its own holder.

    """
    return context_holder


@pytest.fixture()
def fieldwire_manager_factory() -> BaseManagerFactory:
    """Create a per-test manager factory with fresh configuration and callbacks.

    Override this fixture to inject a customized configuration or
    pre-registered lifecycle callbacks.

    """
    return BaseManagerFactory()


@pytest.fixture()
def fieldwire_context(
    fieldwire_context_holder: ContextHolder,
    fieldwire_manager_factory: BaseManagerFactory,
) -> Iterator[Context]:
    """Install a standalone context for the duration of the test.

    The context shares the manager factory configuration. On teardown the
    binding that was active before the test is restored, even when the test
    fails.

    Yields:
        The installed context.

    """
    context = fieldwire_context_holder.standalone(fieldwire_manager_factory.config)
    with fieldwire_context_holder.scoped(context):
        yield context


@pytest.fixture()
def fieldwire_injector(
    fieldwire_context_holder: ContextHolder,
    fieldwire_manager_factory: BaseManagerFactory,
) -> Injector:
    """Build an injector from the per-test manager factory."""
    return InjectorBuilder.create(
        fieldwire_manager_factory,
        context_holder=fieldwire_context_holder,
    ).build()
