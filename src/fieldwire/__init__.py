from fieldwire.builder import BaseManagerFactory, InjectorBuilder, ManagerFactory
from fieldwire.callbacks import LifecycleCallback, LifecycleCallbackRegistry
from fieldwire.config import FieldWireConfig
from fieldwire.context import Context, ContextHolder, ReadOnlyContext, context_holder
from fieldwire.decorators import ObjectDecorator, SupportsDecoration
from fieldwire.exceptions import (
    FieldWireContextNotSetError,
    FieldWireError,
    FieldWireInjectMarkerInstantiationError,
    FieldWireInvalidArgumentError,
    FieldWireUnresolvedAnnotationError,
    FieldWireUnsupportedTypeError,
)
from fieldwire.injector import Injector
from fieldwire.markers import Inject
from fieldwire.registry import InjectableRegistry

__all__ = [
    "BaseManagerFactory",
    "Context",
    "ContextHolder",
    "FieldWireConfig",
    "FieldWireContextNotSetError",
    "FieldWireError",
    "FieldWireInjectMarkerInstantiationError",
    "FieldWireInvalidArgumentError",
    "FieldWireUnresolvedAnnotationError",
    "FieldWireUnsupportedTypeError",
    "Inject",
    "InjectableRegistry",
    "Injector",
    "InjectorBuilder",
    "LifecycleCallback",
    "LifecycleCallbackRegistry",
    "ManagerFactory",
    "ObjectDecorator",
    "ReadOnlyContext",
    "SupportsDecoration",
    "context_holder",
]
