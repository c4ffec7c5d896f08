from __future__ import annotations

from typing import Any

from fieldwire._internal.type_checks import is_runtime_class


class FieldWireError(Exception):
    """Represent a base class for all fieldwire-specific failures.

    Catch this type when you want to handle any fieldwire error path without
    matching each concrete exception class individually.
    """


class FieldWireInvalidArgumentError(FieldWireError):
    """Signal a violated precondition on a construction or injection argument.

    Raised immediately, never deferred to injection time, by ``Injector(None)``,
    ``InjectableRegistry(None)``, ``InjectorBuilder.create(None)``,
    ``InjectorBuilder.build()`` when the manager factory exposes no
    configuration or callback registry, ``ContextHolder.set(None)`` and
    ``Injector.inject(None)``.

    Typical fix is passing the missing collaborator explicitly.
    """


class FieldWireUnsupportedTypeError(FieldWireError):
    """Signal an ``Inject[...]`` field that cannot be populated.

    Raised by ``Injector.inject`` when an annotated field declares a type the
    registry does not recognize and the field is still uninitialized (missing
    or ``None``) on the target. Also raised when a capability matched through
    one of the field's base classes provides a value that is not an instance
    of the narrower declared type; ``provided_type`` is set in that case.

    Typical fixes include pre-populating the field before injection or
    registering the type with ``InjectorBuilder.add_instance`` or
    ``InjectorBuilder.add_factory``.
    """

    def __init__(
        self,
        *,
        owner: type[Any],
        field_name: str,
        field_type: Any,
        provided_type: type[Any] | None = None,
    ) -> None:
        self.owner = owner
        self.field_name = field_name
        self.field_type = field_type
        self.provided_type = provided_type
        if provided_type is None:
            msg = (
                f"Cannot inject field '{owner.__qualname__}.{field_name}': "
                f"unsupported injectable type {_type_name(field_type)} and the field is not "
                "initialized."
            )
        else:
            msg = (
                f"Cannot inject field '{owner.__qualname__}.{field_name}': "
                f"the registry provided {_type_name(provided_type)}, which is not an instance "
                f"of {_type_name(field_type)}."
            )
        super().__init__(msg)


class FieldWireUnresolvedAnnotationError(FieldWireError):
    """Signal an ``Inject[...]`` annotation that cannot be evaluated.

    Raised during field discovery when a string annotation spelling
    ``Inject[...]`` references a name that is not available at runtime, for
    example a type imported only under ``TYPE_CHECKING``.

    Typical fix is importing the injected type at runtime in the module that
    declares the field.
    """

    def __init__(self, *, owner: type[Any], field_name: str, annotation: str) -> None:
        self.owner = owner
        self.field_name = field_name
        self.annotation = annotation
        super().__init__(
            f"Cannot resolve annotation {annotation!r} of field "
            f"'{owner.__qualname__}.{field_name}'.",
        )


class FieldWireContextNotSetError(FieldWireError):
    """Signal use of the ambient ``Context`` outside of a context scope.

    Raised by ``ContextHolder.get`` and, through it, by ``Injector.inject``
    when a ``Context`` or ``ReadOnlyContext`` field is resolved while no
    context is installed for the current thread or task.

    Typical fix is wrapping the operation in
    ``with context_holder.scoped(context): ...`` or calling
    ``context_holder.set(context)`` at the operation boundary.
    """


class FieldWireInjectMarkerInstantiationError(FieldWireError):
    """Signal an attempt to instantiate the ``Inject`` marker.

    ``Inject`` is only meant to be subscripted in annotations, for example
    ``context: Inject[ReadOnlyContext]``.
    """

    def __init__(self) -> None:
        super().__init__("Inject is an annotation marker; use Inject[T] instead of Inject().")


def _type_name(field_type: Any) -> str:
    if is_runtime_class(field_type):
        return field_type.__qualname__
    return repr(field_type)
