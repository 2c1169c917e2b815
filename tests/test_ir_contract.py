"""Tests for the contract IR and the closed kind sets."""
import pytest

from xrpcgen.ir.contract import (
    ContractDefinition,
    Endpoint,
    Property,
    TypeDefinition,
    ValidationRules,
    array_of,
    literal_of,
    named_objects,
    nullable_of,
    object_type,
    optional_of,
    primitive,
    rules,
    union_of,
)
from xrpcgen.ir.kinds import (
    TYPE_KINDS,
    VALIDATION_KINDS,
    TypeKind,
    ValidationKind,
    get_validations_for_type,
    is_type_kind,
    is_validation_kind,
)


def test_kind_sets_are_closed():
    """There are exactly eleven type kinds and thirteen validation kinds."""
    assert len(TYPE_KINDS) == 11
    assert len(VALIDATION_KINDS) == 13
    assert is_type_kind("tuple")
    assert not is_type_kind("intersection")
    assert is_validation_kind("minLength")
    assert not is_validation_kind("min_length")


def test_validations_for_base_type():
    """Applicable rules depend on the base type only."""
    assert ValidationKind.EMAIL in get_validations_for_type("string")
    assert ValidationKind.INT in get_validations_for_type("integer")
    assert get_validations_for_type("array") == (ValidationKind.MIN_ITEMS, ValidationKind.MAX_ITEMS)
    assert get_validations_for_type("boolean") == ()


def test_validation_rules_items_follow_canonical_order():
    """Active rules come back in kind order regardless of how they were set."""
    active = ValidationRules(regex="^a", max_length=10, min_length=2)
    assert active.kinds() == [ValidationKind.MIN_LENGTH, ValidationKind.MAX_LENGTH, ValidationKind.REGEX]
    assert active.to_dict() == {"minLength": 2, "maxLength": 10, "regex": "^a"}
    assert ValidationRules.from_dict({"min": 1, "int": True}) == ValidationRules(minimum=1, integer=True)


def test_false_flags_are_inactive():
    assert ValidationRules(email=False).is_empty()
    assert not ValidationRules(minimum=0).is_empty(), "a zero bound is still a rule"


def test_rules_rejects_unknown_names():
    with pytest.raises(TypeError):
        rules(minLength=3)


def test_unwrap_and_nullable_detection():
    inner = primitive("string")
    wrapped = optional_of(nullable_of(inner))
    assert wrapped.unwrap() is inner
    assert wrapped.is_nullable()
    assert not optional_of(inner).is_nullable()


def test_null_acceptance_sees_null_literals():
    text = primitive("string")
    assert nullable_of(text).accepts_null()
    assert literal_of(None).accepts_null()
    assert optional_of(union_of([text, literal_of(None)])).accepts_null()
    assert not union_of([text, literal_of("none")]).accepts_null()
    assert not optional_of(text).accepts_null()


def test_primitive_rejects_unknown_base_types():
    with pytest.raises(ValueError, match="Unknown primitive base type"):
        primitive("bigint")


def test_effective_validation_prefers_property_rules():
    """Property-level rules win over rules attached to the type."""
    typed = Property("name", primitive("string", rules(min_length=1)))
    assert typed.effective_validation() == rules(min_length=1)

    overridden = Property("name", primitive("string", rules(min_length=1)), validation=rules(max_length=5))
    assert overridden.effective_validation() == rules(max_length=5)

    wrapped = Property("name", optional_of(primitive("string", rules(email=True))), required=False)
    assert wrapped.effective_validation() == rules(email=True)


def test_named_objects_visits_each_reference_once():
    """A self-referencing object terminates and is reported once."""
    node = object_type([], name="Node")
    node.properties.append(Property("children", array_of(node)))
    contract = ContractDefinition(
        types=[TypeDefinition("Node", node)],
        endpoints=[Endpoint("get", "tree.get", "query", node, node)],
    )
    assert [name for name, _ in named_objects(contract)] == ["Node"]


def test_type_reference_kind_is_normalized():
    ref = object_type([])
    assert ref.kind is TypeKind.OBJECT
    assert primitive("number").primitive_name == "number"
    assert array_of(primitive("number")).primitive_name == "unknown"
