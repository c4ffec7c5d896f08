from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Optional, get_args, get_origin

import pytest

from fieldwire.callbacks import LifecycleCallbackRegistry
from fieldwire.config import FieldWireConfig
from fieldwire.context import ReadOnlyContext
from fieldwire.exceptions import (
    FieldWireInjectMarkerInstantiationError,
    FieldWireUnresolvedAnnotationError,
)
from fieldwire.fields import InjectableField, InjectableFieldInspector, is_uninitialized
from fieldwire.markers import (
    Inject,
    InjectMarker,
    is_inject_annotation,
    strip_inject_annotation,
)

if TYPE_CHECKING:
    from decimal import Decimal


class _Base:
    context: Inject[ReadOnlyContext]
    label: str = "base"


class _Middle(_Base):
    config: Inject[FieldWireConfig]


class _Leaf(_Middle):
    callbacks: Inject[LifecycleCallbackRegistry]
    context: Inject[ReadOnlyContext]


class _OptOut(_Middle):
    config: FieldWireConfig


class _Optional:
    config: Inject[Optional[FieldWireConfig]] = None  # noqa: UP007
    callbacks: Inject[LifecycleCallbackRegistry | None] = None


@dataclass
class _DataclassTarget:
    name: str
    config: Inject[FieldWireConfig | None] = None


class _PricedBase:
    price: Decimal
    config: Inject[FieldWireConfig]


class _PricedLeaf(_PricedBase):
    callbacks: Inject[LifecycleCallbackRegistry]
    price: Decimal


class _UnresolvableMarker:
    rounding: Inject[Decimal]


class _Slotted:
    __slots__ = ("value",)
    value: Inject[str]


def test_inject_wraps_type_with_marker() -> None:
    annotation = Inject[FieldWireConfig]

    assert get_origin(annotation) is Annotated
    annotation_args = get_args(annotation)
    assert annotation_args[0] is FieldWireConfig
    assert isinstance(annotation_args[1], InjectMarker)


def test_inject_preserves_existing_annotated_metadata() -> None:
    annotation = Inject[Annotated[FieldWireConfig, "primary"]]

    annotation_args = get_args(annotation)
    assert annotation_args[0] is FieldWireConfig
    assert annotation_args[1] == "primary"
    assert isinstance(annotation_args[2], InjectMarker)
    assert strip_inject_annotation(annotation) is FieldWireConfig


def test_inject_cannot_be_instantiated() -> None:
    with pytest.raises(FieldWireInjectMarkerInstantiationError):
        Inject()


def test_is_inject_annotation() -> None:
    assert is_inject_annotation(Inject[int])
    assert not is_inject_annotation(int)
    assert not is_inject_annotation(Annotated[int, "other"])


def test_strip_inject_annotation_leaves_other_annotations_untouched() -> None:
    annotation = Annotated[int, "other"]

    assert strip_inject_annotation(annotation) is annotation


def test_discovers_fields_across_hierarchy_base_first() -> None:
    fields = InjectableFieldInspector().inspect_class(_Middle)

    assert fields == (
        InjectableField(owner=_Base, name="context", declared_type=ReadOnlyContext),
        InjectableField(owner=_Middle, name="config", declared_type=FieldWireConfig),
    )


def test_redeclared_field_keeps_position_with_subclass_owner() -> None:
    fields = InjectableFieldInspector().inspect_class(_Leaf)

    assert [field.name for field in fields] == ["context", "config", "callbacks"]
    assert fields[0].owner is _Leaf


def test_redeclaring_without_marker_opts_out() -> None:
    fields = InjectableFieldInspector().inspect_class(_OptOut)

    assert [field.name for field in fields] == ["context"]


def test_plain_annotations_are_not_discovered() -> None:
    fields = InjectableFieldInspector().inspect_class(_Base)

    assert [field.name for field in fields] == ["context"]


def test_optional_fields_resolve_to_inner_type() -> None:
    fields = InjectableFieldInspector().inspect_class(_Optional)

    assert [field.declared_type for field in fields] == [
        FieldWireConfig,
        LifecycleCallbackRegistry,
    ]


def test_discovers_dataclass_fields() -> None:
    fields = InjectableFieldInspector().inspect_instance(_DataclassTarget(name="css"))

    assert [(field.name, field.declared_type) for field in fields] == [
        ("config", FieldWireConfig),
    ]


def test_type_checking_only_annotation_does_not_hide_marked_fields() -> None:
    fields = InjectableFieldInspector().inspect_class(_PricedBase)

    assert fields == (
        InjectableField(owner=_PricedBase, name="config", declared_type=FieldWireConfig),
    )


def test_type_checking_only_annotation_across_hierarchy() -> None:
    fields = InjectableFieldInspector().inspect_class(_PricedLeaf)

    assert [(field.name, field.declared_type) for field in fields] == [
        ("config", FieldWireConfig),
        ("callbacks", LifecycleCallbackRegistry),
    ]


def test_unresolvable_marked_annotation_names_the_field() -> None:
    with pytest.raises(FieldWireUnresolvedAnnotationError, match="_UnresolvableMarker.rounding"):
        InjectableFieldInspector().inspect_class(_UnresolvableMarker)


def test_class_without_annotations_has_no_fields() -> None:
    assert InjectableFieldInspector().inspect_class(object) == ()
    assert InjectableFieldInspector().inspect_class(int) == ()


def test_results_are_cached_per_class() -> None:
    inspector = InjectableFieldInspector()

    assert inspector.inspect_class(_Leaf) is inspector.inspect_class(_Leaf)


def test_missing_attribute_is_uninitialized() -> None:
    assert is_uninitialized(_Base(), "context")


def test_unset_slot_is_uninitialized() -> None:
    assert is_uninitialized(_Slotted(), "value")


def test_none_is_uninitialized() -> None:
    assert is_uninitialized(_Optional(), "config")


@pytest.mark.parametrize("value", ["", 0, False, [], {}, "value"])
def test_any_other_value_is_initialized(value: object) -> None:
    target = _Slotted()
    target.value = value  # type: ignore[assignment]

    assert not is_uninitialized(target, "value")


def test_class_level_default_counts_as_initialized() -> None:
    assert not is_uninitialized(_Base(), "label")
