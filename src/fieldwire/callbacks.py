from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class LifecycleCallback:
    """Hooks invoked at the stages of a processing run.

    Subclass and override only the hooks you need; every hook defaults to a
    no-op.
    """

    def on_before_model_created(self) -> None: ...

    def on_after_model_created(self) -> None: ...

    def on_before_pre_process(self) -> None: ...

    def on_after_pre_process(self) -> None: ...

    def on_before_post_process(self) -> None: ...

    def on_after_post_process(self) -> None: ...

    def on_before_merge(self) -> None: ...

    def on_after_merge(self) -> None: ...

    def on_processing_complete(self) -> None: ...


CallbackFactory = Callable[[], LifecycleCallback]


class LifecycleCallbackRegistry:
    """Collection of lifecycle callbacks owned by the manager and shared by reference.

    Callbacks are registered as zero-argument factories (a ``LifecycleCallback``
    subclass qualifies) and instantiated on every dispatch, so stateful
    callbacks start fresh for each stage. A callback that raises is logged and
    does not stop the remaining callbacks from running.

    Examples:
        .. code-block:: python

            class Timing(LifecycleCallback):
                def on_processing_complete(self) -> None:
                    print("done")


            registry = LifecycleCallbackRegistry()
            registry.register_callback(Timing)
            registry.on_processing_complete()

    """

    def __init__(self) -> None:
        self._factories: list[CallbackFactory] = []

    def register_callback(self, factory: CallbackFactory) -> None:
        """Register a factory producing the callback to notify."""
        if not callable(factory):
            msg = f"Callback factory must be callable, got {factory!r}."
            raise TypeError(msg)
        self._factories.append(factory)

    @property
    def registered_callbacks(self) -> tuple[CallbackFactory, ...]:
        return tuple(self._factories)

    def on_before_model_created(self) -> None:
        self._dispatch("on_before_model_created")

    def on_after_model_created(self) -> None:
        self._dispatch("on_after_model_created")

    def on_before_pre_process(self) -> None:
        self._dispatch("on_before_pre_process")

    def on_after_pre_process(self) -> None:
        self._dispatch("on_after_pre_process")

    def on_before_post_process(self) -> None:
        self._dispatch("on_before_post_process")

    def on_after_post_process(self) -> None:
        self._dispatch("on_after_post_process")

    def on_before_merge(self) -> None:
        self._dispatch("on_before_merge")

    def on_after_merge(self) -> None:
        self._dispatch("on_after_merge")

    def on_processing_complete(self) -> None:
        self._dispatch("on_processing_complete")

    def _dispatch(self, hook_name: str) -> None:
        for factory in tuple(self._factories):
            try:
                getattr(factory(), hook_name)()
            except Exception:
                logger.exception("Lifecycle callback %r failed in %s", factory, hook_name)

    def __len__(self) -> int:
        return len(self._factories)


__all__ = ["CallbackFactory", "LifecycleCallback", "LifecycleCallbackRegistry"]
