from __future__ import annotations

import inspect
import logging
import re
import sys
import types
import weakref
from dataclasses import dataclass, field
from typing import Any, Union, get_args, get_origin, get_type_hints

from fieldwire.exceptions import FieldWireUnresolvedAnnotationError
from fieldwire.markers import is_inject_annotation, strip_inject_annotation

logger = logging.getLogger(__name__)
_MISSING = object()
_INJECT_SOURCE = re.compile(r"\bInject\[")


@dataclass(frozen=True, slots=True)
class InjectableField:
    """An ``Inject[...]`` attribute discovered on a class hierarchy."""

    owner: type[Any]
    name: str
    declared_type: Any


@dataclass(slots=True)
class InjectableFieldInspector:
    """Discover ``Inject[...]`` attributes across the full class hierarchy.

    Classes are walked base-first along the MRO (``object`` excluded), each
    contributing its own annotations in declaration order. When a subclass
    redeclares an attribute, the field keeps its base-class position but the
    subclass declaration (owner and type) wins; redeclaring it without the
    marker opts the attribute out. Results are cached per class.
    """

    _cache: weakref.WeakKeyDictionary[type[Any], tuple[InjectableField, ...]] = field(
        default_factory=weakref.WeakKeyDictionary,
    )

    def inspect_instance(self, target: object) -> tuple[InjectableField, ...]:
        """Return the injectable fields of ``type(target)``."""
        return self.inspect_class(type(target))

    def inspect_class(self, cls: type[Any]) -> tuple[InjectableField, ...]:
        """Return the injectable fields declared on ``cls`` and its bases."""
        try:
            return self._cache[cls]
        except KeyError:
            pass

        fields = self._collect_fields(cls)
        self._cache[cls] = fields
        return fields

    def _collect_fields(self, cls: type[Any]) -> tuple[InjectableField, ...]:
        discovered: dict[str, InjectableField] = {}
        for klass in reversed(cls.__mro__):
            if klass is object:
                continue
            for name, annotation in self._resolved_own_annotations(klass).items():
                if not is_inject_annotation(annotation):
                    discovered.pop(name, None)
                    continue
                discovered[name] = InjectableField(
                    owner=klass,
                    name=name,
                    declared_type=_strip_optional(strip_inject_annotation(annotation)),
                )
        if discovered:
            logger.debug(
                "Discovered injectable fields on %s: %s",
                cls.__qualname__,
                ", ".join(discovered),
            )
        return tuple(discovered.values())

    def _resolved_own_annotations(self, klass: type[Any]) -> dict[str, Any]:
        """Resolve annotations declared directly on ``klass`` with extras preserved.

        All annotations are evaluated together first. When one of them cannot be
        evaluated (typically a name imported only under ``TYPE_CHECKING``), each
        annotation is resolved on its own so the rest of the class still counts.
        """
        own_annotations = inspect.get_annotations(klass)
        if not own_annotations:
            return {}
        try:
            hints = get_type_hints(klass, include_extras=True)
        except (AttributeError, NameError, TypeError):
            logger.debug(
                "Could not evaluate all annotations of %s; resolving them one by one",
                klass.__qualname__,
            )
            return {
                name: _resolve_annotation(klass, name, annotation)
                for name, annotation in own_annotations.items()
            }
        return {name: hints.get(name, annotation) for name, annotation in own_annotations.items()}


def _resolve_annotation(klass: type[Any], name: str, annotation: Any) -> Any:
    """Evaluate a single string annotation in the namespace of its class.

    Unresolvable annotations are returned unchanged unless they spell an
    ``Inject[...]`` marker, which must never be skipped silently.
    """
    if not isinstance(annotation, str):
        return annotation
    module = sys.modules.get(klass.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    try:
        return eval(annotation, globalns, dict(vars(klass)))  # noqa: S307
    except (AttributeError, NameError, SyntaxError, TypeError) as error:
        if _INJECT_SOURCE.search(annotation) is None:
            return annotation
        raise FieldWireUnresolvedAnnotationError(
            owner=klass,
            field_name=name,
            annotation=annotation,
        ) from error


def _strip_optional(declared_type: Any) -> Any:
    """Return ``T`` for ``T | None`` so optional fields resolve like ``T``."""
    if get_origin(declared_type) not in (Union, types.UnionType):
        return declared_type
    members = tuple(arg for arg in get_args(declared_type) if arg is not type(None))
    if len(members) == 1:
        return members[0]
    return declared_type


def is_uninitialized(target: object, name: str) -> bool:
    """Return whether the attribute ``name`` of ``target`` still holds no value.

    Only a missing attribute (including an unset ``__slots__`` entry) and
    ``None`` count as uninitialized. Falsy values such as ``""``, ``0``,
    ``False`` or empty containers are values a caller set on purpose.
    """
    value = getattr(target, name, _MISSING)
    return value is _MISSING or value is None


__all__ = ["InjectableField", "InjectableFieldInspector", "is_uninitialized"]
