from __future__ import annotations

import functools
import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, TypeVar

from typing_extensions import Self

from fieldwire.config import FieldWireConfig
from fieldwire.exceptions import FieldWireContextNotSetError, FieldWireInvalidArgumentError

logger = logging.getLogger(__name__)

R = TypeVar("R")


class ReadOnlyContext(ABC):
    """Accessor-only view of the ambient operation context.

    Inject this type into objects that must observe the current request or
    configuration without being able to replace them.

    The narrowing is type-level only: a ``ReadOnlyContext`` field receives the
    same mutable ``Context`` instance a ``Context`` field does, so code that
    downcasts it can still mutate it.
    """

    @property
    @abstractmethod
    def config(self) -> FieldWireConfig:
        """Configuration in effect for the current operation."""

    @property
    @abstractmethod
    def request(self) -> Any | None:
        """Request being served, or ``None`` outside a request."""

    @property
    @abstractmethod
    def response(self) -> Any | None:
        """Response being produced, or ``None`` outside a request."""

    @property
    @abstractmethod
    def aggregated_folder_path(self) -> str | None:
        """Folder of the aggregated resource currently processed, when known."""

    @property
    @abstractmethod
    def correlation_id(self) -> str:
        """Identifier shared by all work done on behalf of this context."""

    @abstractmethod
    def get_attribute(self, name: str, default: Any = None) -> Any:
        """Return request-scoped state stored under ``name``."""


class Context(ReadOnlyContext):
    """Mutable, scope-bound state of a single operation (one request or one build).

    A context is created by whoever starts the operation, installed through
    ``ContextHolder.set`` or ``ContextHolder.scoped`` and read by injected
    objects for the rest of the operation.
    """

    def __init__(
        self,
        config: FieldWireConfig | None = None,
        *,
        request: Any | None = None,
        response: Any | None = None,
        aggregated_folder_path: str | None = None,
        attributes: Mapping[str, Any] | None = None,
    ) -> None:
        self._config = config if config is not None else FieldWireConfig()
        self._request = request
        self._response = response
        self._aggregated_folder_path = aggregated_folder_path
        self._attributes: dict[str, Any] = dict(attributes or {})
        self._correlation_id = uuid.uuid4().hex

    @classmethod
    def standalone(cls, config: FieldWireConfig | None = None) -> Self:
        """Create a context usable outside of any request, for tools and tests."""
        return cls(config)

    @classmethod
    def for_request(
        cls,
        request: Any,
        response: Any | None = None,
        *,
        config: FieldWireConfig | None = None,
    ) -> Self:
        """Create a context bound to a single request/response pair."""
        return cls(config, request=request, response=response)

    @property
    def config(self) -> FieldWireConfig:
        return self._config

    @config.setter
    def config(self, value: FieldWireConfig) -> None:
        self._config = value

    @property
    def request(self) -> Any | None:
        return self._request

    @property
    def response(self) -> Any | None:
        return self._response

    @property
    def aggregated_folder_path(self) -> str | None:
        return self._aggregated_folder_path

    @aggregated_folder_path.setter
    def aggregated_folder_path(self, value: str | None) -> None:
        self._aggregated_folder_path = value

    @property
    def correlation_id(self) -> str:
        return self._correlation_id

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def set_attribute(self, name: str, value: Any) -> None:
        """Store request-scoped state under ``name``."""
        self._attributes[name] = value

    def __repr__(self) -> str:
        return f"{type(self).__name__}(correlation_id={self._correlation_id!r})"


class ContextHolder:
    """Task/thread-local slot holding the ambient ``Context``.

    The binding lives in a ``ContextVar``: every thread and every asyncio task
    observes its own value, so concurrent operations never see each other's
    context. Pair ``set`` with ``unset`` at the operation boundary, or use
    ``scoped`` to have the binding removed on every exit path.

    Examples:
        .. code-block:: python

            with context_holder.scoped(Context.for_request(request)):
                injector.inject(processor)

    """

    __slots__ = ("_current_context_var",)

    def __init__(self, name: str = "fieldwire_context") -> None:
        self._current_context_var: ContextVar[Context | None] = ContextVar(name, default=None)

    def set(self, context: Context) -> Token[Context | None]:
        """Install ``context`` as the ambient context of the current scope.

        Returns:
            A token accepted by ``reset`` to restore the previous binding.

        Raises:
            FieldWireInvalidArgumentError: If ``context`` is ``None``.

        """
        if context is None:
            msg = "ContextHolder.set() requires a Context; use unset() to remove the binding."
            raise FieldWireInvalidArgumentError(msg)
        logger.debug("Installing ambient context %r", context)
        return self._current_context_var.set(context)

    def reset(self, token: Token[Context | None]) -> None:
        """Restore the binding that was active before the ``set`` call producing ``token``."""
        self._current_context_var.reset(token)

    def unset(self) -> None:
        """Remove the ambient context of the current scope."""
        logger.debug("Removing ambient context")
        self._current_context_var.set(None)

    def get(self) -> Context:
        """Return the ambient context.

        Raises:
            FieldWireContextNotSetError: If no context is installed for the
                current thread or task.

        """
        context = self._current_context_var.get()
        if context is None:
            msg = (
                "No context is set for the current scope. "
                "Call context_holder.set(context) or enter context_holder.scoped(...) first."
            )
            raise FieldWireContextNotSetError(msg)
        return context

    def is_set(self) -> bool:
        """Return whether a context is installed for the current scope."""
        return self._current_context_var.get() is not None

    def standalone(self, config: FieldWireConfig | None = None) -> Context:
        """Build a default context usable outside of any real operation.

        The context is returned, not installed.
        """
        return Context.standalone(config)

    @contextmanager
    def scoped(self, context: Context | None = None) -> Iterator[Context]:
        """Install a context for the duration of a ``with`` block.

        A standalone context is created when ``context`` is omitted. The
        previous binding (possibly none) is restored on exit, including when
        the block raises.
        """
        scoped_context = context if context is not None else self.standalone()
        token = self.set(scoped_context)
        try:
            yield scoped_context
        finally:
            self.reset(token)
            logger.debug("Left scope of context %r", scoped_context)

    def propagate(self, func: Callable[..., R]) -> Callable[..., R]:
        """Bind the current ambient context to ``func`` for execution elsewhere.

        The returned callable installs the captured context around each call,
        which lets work submitted to a thread pool observe the context of the
        operation that submitted it.

        Raises:
            FieldWireContextNotSetError: If no context is installed when
                ``propagate`` is called.

        """
        captured = self.get()

        @functools.wraps(func)
        def _run_in_context(*args: Any, **kwargs: Any) -> R:
            with self.scoped(captured):
                return func(*args, **kwargs)

        return _run_in_context


context_holder = ContextHolder()
"""Process-wide holder consulted by default-built injectors."""


__all__ = ["Context", "ContextHolder", "ReadOnlyContext", "context_holder"]
