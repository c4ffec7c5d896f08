from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fieldwire.builder import BaseManagerFactory, InjectorBuilder, ManagerFactory
from fieldwire.context import Context, ContextHolder, context_holder

try:
    from fastapi import FastAPI, Request
except ModuleNotFoundError as exc:  # pragma: no cover - exercised in optional import scenarios
    message = "FastAPI integration requires fastapi. Install with 'fieldwire[fastapi]'."
    raise ModuleNotFoundError(message) from exc

if TYPE_CHECKING:
    from starlette.types import ASGIApp, Receive, Scope, Send

    from fieldwire.config import FieldWireConfig
    from fieldwire.injector import Injector

logger = logging.getLogger(__name__)

_SCOPED_CONNECTION_TYPES = frozenset({"http", "websocket"})


class FieldWireContextMiddleware:
    """ASGI middleware installing a per-request ``Context`` around each call.

    The context is created with ``Context.for_request`` and removed when the
    downstream application returns or raises. Lifespan and other connection
    types pass through untouched.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        config: FieldWireConfig | None = None,
        context_holder: ContextHolder = context_holder,
    ) -> None:
        self.app = app
        self._config = config
        self._context_holder = context_holder

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in _SCOPED_CONNECTION_TYPES:
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive=receive) if scope["type"] == "http" else None
        context = Context.for_request(request, config=self._config)
        context.set_attribute("path", scope.get("path"))
        with self._context_holder.scoped(context):
            logger.debug("Serving %s within context %r", scope.get("path"), context)
            await self.app(scope, receive, send)


def setup_fieldwire(
    app: FastAPI,
    *,
    manager_factory: ManagerFactory | None = None,
    context_holder: ContextHolder = context_holder,
) -> Injector:
    """Give every request of ``app`` its own ambient context and build its injector.

    The injector is also stored on ``app.state.fieldwire_injector``.

    Args:
        app: FastAPI application to configure.
        manager_factory: Source of configuration and callbacks. A
            ``BaseManagerFactory`` is used when omitted.
        context_holder: Holder receiving the per-request contexts.

    Returns:
        The injector built for the application.

    """
    factory: Any = manager_factory if manager_factory is not None else BaseManagerFactory()
    injector = InjectorBuilder.create(factory, context_holder=context_holder).build()
    app.add_middleware(
        FieldWireContextMiddleware,
        config=factory.config,
        context_holder=context_holder,
    )
    app.state.fieldwire_injector = injector
    return injector


__all__ = ["FieldWireContextMiddleware", "setup_fieldwire"]
