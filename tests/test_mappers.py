"""Tests for the exhaustive type and validation mapping framework."""
import pytest

from xrpcgen.core.errors import MapperIncompleteError
from xrpcgen.framework.type_mapper import TypeMapperBase, create_unsupported_type_handler
from xrpcgen.framework.types import TypeContext, TypeResult
from xrpcgen.framework.validation_mapper import (
    ValidationMapperBase,
    create_no_op_validation_handler,
    create_unsupported_validation_handler,
)
from xrpcgen.ir.contract import (
    Property,
    TypeReference,
    ValidationRules,
    array_of,
    date_type,
    enum_of,
    literal_of,
    nullable_of,
    object_type,
    optional_of,
    primitive,
    record_of,
    rules,
    tuple_of,
    union_of,
)
from xrpcgen.ir.kinds import TYPE_KINDS, TypeKind, ValidationKind
from xrpcgen.registry import TargetRegistry

SAMPLES = {
    TypeKind.OBJECT: object_type([Property("id", primitive("string"))], name="Sample"),
    TypeKind.ARRAY: array_of(primitive("number")),
    TypeKind.PRIMITIVE: primitive("boolean"),
    TypeKind.OPTIONAL: optional_of(primitive("string")),
    TypeKind.NULLABLE: nullable_of(primitive("integer")),
    TypeKind.UNION: union_of([primitive("string"), primitive("number")]),
    TypeKind.ENUM: enum_of(["a", "b"]),
    TypeKind.LITERAL: literal_of("fixed"),
    TypeKind.RECORD: record_of(primitive("number")),
    TypeKind.TUPLE: tuple_of([primitive("string"), primitive("number")]),
    TypeKind.DATE: date_type(),
}

EXPECTED = {
    "python-server": {
        TypeKind.ARRAY: "List[float]",
        TypeKind.NULLABLE: "Optional[int]",
        TypeKind.UNION: "Union[str, float]",
        TypeKind.ENUM: "Literal['a', 'b']",
        TypeKind.RECORD: "Dict[str, float]",
    },
    "go-server": {
        TypeKind.ARRAY: "[]float64",
        TypeKind.NULLABLE: "*int",
        TypeKind.UNION: "interface{}",
        TypeKind.ENUM: "string",
        TypeKind.RECORD: "map[string]float64",
    },
    "ts-client": {
        TypeKind.ARRAY: "number[]",
        TypeKind.NULLABLE: "number | null",
        TypeKind.UNION: "string | number",
        TypeKind.ENUM: '"a" | "b"',
        TypeKind.RECORD: "Record<string, number>",
    },
}


def test_samples_cover_every_kind():
    assert set(SAMPLES) == set(TYPE_KINDS)


@pytest.mark.parametrize("target", TargetRegistry.default().names())
@pytest.mark.parametrize("kind", TYPE_KINDS)
def test_every_kind_maps_on_every_target(target, kind):
    """Each registered target maps a sample of every kind to a non-empty type."""
    mapper = TargetRegistry.default().get(target).type_mapper
    result = mapper.map_type(SAMPLES[kind])

    assert isinstance(result, TypeResult)
    assert isinstance(result.type, str) and result.type, f"{target} returned an empty type for {kind.value}"
    expected = EXPECTED[target].get(kind)
    if expected is not None:
        assert result.type == expected


def test_unknown_kind_is_rejected():
    mapper = TargetRegistry.default().get("python-server").type_mapper
    bogus = TypeReference(kind=TypeKind.OBJECT)
    bogus.kind = "intersection"

    with pytest.raises(ValueError, match="Unknown type kind"):
        mapper.map_type(bogus)


class _PartialTypeMapper(TypeMapperBase):
    def build_type_mapping(self):
        return {TypeKind.PRIMITIVE: lambda ctx: TypeResult(type="x")}


class _PartialValidationMapper(ValidationMapperBase):
    def build_validation_mapping(self):
        handler = create_no_op_validation_handler()
        return {kind: handler for kind in ValidationKind if kind != ValidationKind.REGEX}


def test_incomplete_type_mapper_fails_at_construction():
    """A handler table missing kinds is rejected before any contract is seen."""
    with pytest.raises(MapperIncompleteError) as exc_info:
        _PartialTypeMapper()

    assert "object" in exc_info.value.missing
    assert "primitive" not in exc_info.value.missing
    assert len(exc_info.value.missing) == 10


def test_incomplete_validation_mapper_fails_at_construction():
    with pytest.raises(MapperIncompleteError) as exc_info:
        _PartialValidationMapper()

    assert exc_info.value.missing == ["regex"]
    assert "_PartialValidationMapper" in str(exc_info.value)


def test_unsupported_handlers_warn_and_fall_back():
    warnings = []

    def warn(message, path=None, hint=None):
        warnings.append((message, path, hint))

    type_handler = create_unsupported_type_handler(TypeKind.TUPLE, "list", warn)
    result = type_handler(TypeContext(type_ref=tuple_of([]), parent_name="Point", field_name="xy"))
    assert result.type == "list"
    assert warnings[0][1] == "Point.xy"

    validation_handler = create_unsupported_validation_handler(ValidationKind.REGEX, None, warn)
    ctx_rules = rules(regex="^x")
    outcome = validation_handler(_validation_context(ctx_rules))
    assert outcome.validation is None
    assert len(warnings) == 2


def _validation_context(all_rules: ValidationRules):
    from xrpcgen.framework.types import ValidationContext
    return ValidationContext(
        rule=ValidationKind.REGEX,
        value="^x",
        field_name="name",
        field_path="value",
        base_type="string",
        is_required=False,
        all_rules=all_rules,
    )


def test_rules_on_the_wrong_base_type_are_rejected():
    """A string rule attached to a number is a malformed contract."""
    mapper = TargetRegistry.default().get("python-server").validation_mapper

    with pytest.raises(ValueError, match="does not apply"):
        mapper.map_all_validations(rules(min_length=1), "age", "value", "number", True)


def test_simplify_union_collapses_null_variant():
    """string | null maps to the nullable form of string on every target."""
    nullable_string = union_of([primitive("string"), literal_of(None)])
    registry = TargetRegistry.default()

    assert registry.get("python-server").type_mapper.map_type(nullable_string).type == "Optional[str]"
    assert registry.get("go-server").type_mapper.map_type(nullable_string).type == "*string"


def test_simplify_union_collapses_identical_variants():
    same = union_of([literal_of("a"), literal_of("b")])
    go = TargetRegistry.default().get("go-server").type_mapper

    assert go.map_type(same).type == "string"
    assert go.diagnostics == []


def test_go_unnamed_union_warns():
    go = TargetRegistry.default().get("go-server").type_mapper
    go.map_type(union_of([primitive("string"), primitive("number")]), parent_name="Event", field_name="payload")

    assert len(go.diagnostics) == 1
    assert go.diagnostics[0].path == "Event.payload"


def test_named_wrappers_become_utilities():
    """Named enums, unions and tuples are emitted once as helper code."""
    ts = TargetRegistry.default().get("ts-client").type_mapper
    ts.map_type(enum_of(["low", "high"], name="Priority"))
    ts.map_type(enum_of(["low", "high"], name="Priority"))
    ts.map_type(tuple_of([primitive("number"), primitive("number")], name="Point"))

    ids = [u.id for u in ts.get_collected_utilities()]
    assert ids == ["enum_Priority", "tuple_Point"]

    ts.reset()
    assert ts.get_collected_utilities() == []
