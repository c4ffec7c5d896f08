from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from fieldwire._internal.type_checks import is_runtime_class
from fieldwire.decorators import next_delegate
from fieldwire.exceptions import FieldWireInvalidArgumentError, FieldWireUnsupportedTypeError
from fieldwire.fields import InjectableField, InjectableFieldInspector, is_uninitialized
from fieldwire.registry import InjectableRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Injector:
    """Populate ``Inject[...]`` fields of an object graph from an injectable registry.

    ``inject`` walks every annotated field of the target's class hierarchy and
    assigns the value provided by the registry for the field's declared type.
    Fields whose type the registry does not know are tolerated only when they
    already hold a value. Decorators are followed so the innermost wrapped
    object is injected by the same call.

    Injection is fail-fast: the first failing field aborts the call and fields
    assigned before it keep their new values. Discard a target whose injection
    failed instead of retrying it partially.

    Examples:
        .. code-block:: python

            injector = InjectorBuilder.create(BaseManagerFactory()).build()

            with context_holder.scoped():
                injector.inject(CopyrightKeeper(CssMinifier()))

    """

    def __init__(
        self,
        registry: InjectableRegistry | Mapping[Any, Any],
        *,
        field_inspector: InjectableFieldInspector | None = None,
    ) -> None:
        """Initialize the injector with the registry it resolves fields against.

        Args:
            registry: Capability-to-provider registry. Plain mappings are
                wrapped in an ``InjectableRegistry``.
            field_inspector: Field discovery strategy; a fresh inspector is
                used when omitted.

        Raises:
            FieldWireInvalidArgumentError: If ``registry`` is ``None``.

        """
        if registry is None:
            msg = "Injector requires an injectable registry, got None."
            raise FieldWireInvalidArgumentError(msg)
        if not isinstance(registry, InjectableRegistry):
            registry = InjectableRegistry(registry)
        self._registry = registry
        self._field_inspector = field_inspector or InjectableFieldInspector()

    @property
    def registry(self) -> InjectableRegistry:
        return self._registry

    def inject(self, target: T) -> T:
        """Inject every ``Inject[...]`` field of ``target`` and of its delegates.

        Args:
            target: Object to populate in place.

        Returns:
            The same ``target``, for chaining.

        Raises:
            FieldWireInvalidArgumentError: If ``target`` is ``None``.
            FieldWireUnsupportedTypeError: If an annotated field has an
                unregistered type and no value, or a capability matched through
                a base class provides a value of the wrong type.
            FieldWireUnresolvedAnnotationError: If an ``Inject[...]`` annotation
                cannot be evaluated.
            FieldWireContextNotSetError: If a context field is resolved while
                no context is installed.

        """
        if target is None:
            msg = "Cannot inject into None."
            raise FieldWireInvalidArgumentError(msg)
        self._inject(target, visited=set())
        return target

    def _inject(self, target: object, *, visited: set[int]) -> None:
        current: Any = target
        while current is not None and id(current) not in visited:
            visited.add(id(current))
            for injectable_field in self._field_inspector.inspect_instance(current):
                self._inject_field(current, injectable_field)
            current = next_delegate(current)

    def _inject_field(self, target: object, injectable_field: InjectableField) -> None:
        declared_type = injectable_field.declared_type
        provider = self._registry.lookup(declared_type)
        if provider is not None:
            value = provider.provide()
            if self._is_narrower_than_provided(declared_type, value):
                raise FieldWireUnsupportedTypeError(
                    owner=injectable_field.owner,
                    field_name=injectable_field.name,
                    field_type=declared_type,
                    provided_type=type(value),
                )
            logger.debug(
                "Injecting %s.%s with %r",
                type(target).__qualname__,
                injectable_field.name,
                value,
            )
            setattr(target, injectable_field.name, value)
            return

        if is_uninitialized(target, injectable_field.name):
            raise FieldWireUnsupportedTypeError(
                owner=injectable_field.owner,
                field_name=injectable_field.name,
                field_type=declared_type,
            )
        logger.debug(
            "Keeping initialized value of %s.%s with unsupported type %r",
            type(target).__qualname__,
            injectable_field.name,
            declared_type,
        )

    def _is_narrower_than_provided(self, declared_type: Any, value: Any) -> bool:
        """Return whether a value matched through a base capability misses ``declared_type``."""
        if not is_runtime_class(declared_type) or declared_type in self._registry:
            return False
        return not isinstance(value, declared_type)


__all__ = ["Injector"]
