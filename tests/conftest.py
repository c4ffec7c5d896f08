"""Shared pytest fixtures for fieldwire tests."""

from collections.abc import Iterator

import pytest

from fieldwire.builder import BaseManagerFactory, InjectorBuilder
from fieldwire.context import Context, ContextHolder
from fieldwire.injector import Injector

pytest_plugins = ["fieldwire.integrations.pytest_plugin"]


@pytest.fixture()
def holder() -> ContextHolder:
    """Context holder isolated from the process-wide one."""
    return ContextHolder("fieldwire_test_context")


@pytest.fixture()
def manager_factory() -> BaseManagerFactory:
    """Manager factory with default configuration and an empty callback registry."""
    return BaseManagerFactory()


@pytest.fixture()
def injector(manager_factory: BaseManagerFactory, holder: ContextHolder) -> Injector:
    """Injector reading context fields from the isolated holder."""
    return InjectorBuilder.create(manager_factory, context_holder=holder).build()


@pytest.fixture()
def standalone_context(holder: ContextHolder) -> Iterator[Context]:
    """Standalone context installed on the isolated holder for the test duration."""
    with holder.scoped() as context:
        yield context
