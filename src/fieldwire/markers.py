from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, TypeVar, Union, get_args, get_origin

from typing_extensions import Self

from fieldwire.exceptions import FieldWireInjectMarkerInstantiationError

T = TypeVar("T")
_ANNOTATED_MARKER_MIN_ARGS = 2


class InjectMarker:
    """A marker used to indicate an attribute should be populated by the Injector.

    The marker has no runtime behavior of its own. ``InjectableFieldInspector``
    looks for it in ``typing.Annotated`` metadata of class annotations.
    """

    def __repr__(self) -> str:
        return "InjectMarker()"


if TYPE_CHECKING:
    Inject = Union[T, T]  # noqa: UP007,PYI016
    """Mark an attribute for field injection.

    At runtime ``Inject[T]`` becomes ``Annotated[T, InjectMarker()]``.
    """

else:

    class Inject:
        """Mark an attribute for field injection.

        At runtime ``Inject[T]`` resolves to ``Annotated[T, InjectMarker()]``.

        Examples:
            .. code-block:: python

                class CssProcessor:
                    context: Inject[ReadOnlyContext]
                    callbacks: Inject[LifecycleCallbackRegistry]


                injector.inject(CssProcessor())

        """

        def __new__(cls, *_args: object, **_kwargs: object) -> Self:
            """Prevent instantiation; use Inject[T] instead."""
            raise FieldWireInjectMarkerInstantiationError

        def __class_getitem__(cls, item: T) -> Annotated[T, InjectMarker]:
            if get_origin(item) is Annotated:
                args = get_args(item)
                inner = args[0]
                metadata = args[1:]
                return build_annotated_key((inner, *metadata, InjectMarker()))
            return build_annotated_key((item, InjectMarker()))


def is_inject_annotation(annotation: Any) -> bool:
    """Return True when annotation is Annotated[..., InjectMarker()]."""
    if get_origin(annotation) is not Annotated:
        return False
    annotation_args = get_args(annotation)
    if len(annotation_args) < _ANNOTATED_MARKER_MIN_ARGS:
        return False
    metadata = annotation_args[1:]
    return any(isinstance(item, InjectMarker) for item in metadata)


def strip_inject_annotation(annotation: Any) -> Any:
    """Return the declared field type of an ``Inject[...]`` annotation.

    Extra ``Annotated`` metadata is dropped; registry lookups are keyed by the
    plain type.
    """
    if not is_inject_annotation(annotation):
        return annotation
    return get_args(annotation)[0]


def build_annotated_key(params: tuple[object, ...]) -> Any:
    """Return Annotated[...] with a pre-built params tuple (Py 3.10+ compatible)."""
    try:
        return Annotated.__class_getitem__(params)  # type: ignore[attr-defined]
    except AttributeError:
        return Annotated.__getitem__(params)  # type: ignore[attr-defined]
