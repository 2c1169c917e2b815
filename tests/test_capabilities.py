"""Tests for capability gating in the generation pipeline."""
from xrpcgen.framework.capabilities import collect_contract_usage, create_capabilities, validate_support
from xrpcgen.framework.target import TargetGeneratorBase
from xrpcgen.framework.types import GeneratedFile, UnsupportedType, UnsupportedValidation
from xrpcgen.generators.python_server.type_mapper import PyTypeMapper
from xrpcgen.generators.python_server.validation_mapper import PyValidationMapper
from xrpcgen.ir.contract import (
    ContractDefinition,
    Endpoint,
    Property,
    TypeDefinition,
    array_of,
    object_type,
    optional_of,
    primitive,
    rules,
    tuple_of,
)
from xrpcgen.ir.kinds import TypeKind, ValidationKind


class _TupleTestTarget(TargetGeneratorBase):
    """Minimal target that writes one file and maps nothing."""

    def create_type_mapper(self):
        return PyTypeMapper()

    def create_validation_mapper(self):
        return PyValidationMapper()

    def emit(self, contract, collected, options):
        return [GeneratedFile(path="out.txt", content="ok\n")]


class TupleFallbackTarget(_TupleTestTarget):
    name = "tuple-fallback"
    capabilities = create_capabilities(
        "tuple-fallback",
        unsupported_types=[UnsupportedType(TypeKind.TUPLE, "no tuples", fallback="array")],
    )


class NoTupleTarget(_TupleTestTarget):
    name = "no-tuple"
    capabilities = create_capabilities(
        "no-tuple",
        unsupported_types=[UnsupportedType(TypeKind.TUPLE, "no tuples")],
    )


def _point_contract() -> ContractDefinition:
    point = object_type([
        Property("xy", tuple_of([primitive("number"), primitive("number")])),
    ], name="PointInput")
    return ContractDefinition(
        types=[TypeDefinition("PointInput", point)],
        endpoints=[Endpoint("get", "point.get", "query", point, point)],
    )


def test_unsupported_kind_with_fallback_warns_and_generates():
    """A fallback turns the unsupported tuple into exactly one warning."""
    result = TupleFallbackTarget().generate(_point_contract(), "out")

    assert len(result.diagnostics) == 1
    warning = result.diagnostics[0]
    assert warning.severity == "warning"
    assert warning.hint == "Will fall back to: array"
    assert result.files, "files must be produced when only warnings are reported"


def test_unsupported_kind_without_fallback_blocks_generation():
    result = NoTupleTarget().generate(_point_contract(), "out")

    assert len(result.errors) >= 1
    assert result.files == []
    assert not result.ok
    assert result.stages[-1].stage.value == "FAILED"


def test_unsupported_validation_is_only_a_warning():
    capabilities = create_capabilities(
        "no-regex",
        unsupported_validations=[UnsupportedValidation(ValidationKind.REGEX, "no regex engine")],
    )
    contract = ContractDefinition(types=[TypeDefinition("User", object_type([
        Property("name", primitive("string", rules(regex="^[a-z]+$"))),
    ]))])

    diagnostics = validate_support(contract, capabilities)

    assert [d.severity for d in diagnostics] == ["warning"]
    assert "regex" in diagnostics[0].message
    assert diagnostics[0].path == "types.User.name"


def test_usage_records_at_most_three_paths():
    """Usage follows properties, elements and wrappers, keeping three example paths per kind."""
    item = object_type([Property(f"f{i}", primitive("string")) for i in range(5)])
    contract = ContractDefinition(types=[TypeDefinition("Bag", object_type([
        Property("items", array_of(item, validation=rules(min_items=1))),
        Property("note", optional_of(primitive("string")), required=False),
    ]))])

    usage = collect_contract_usage(contract)

    assert len(usage.types[TypeKind.PRIMITIVE]) == 3
    assert usage.types[TypeKind.ARRAY] == ["types.Bag.items"]
    assert usage.validations[ValidationKind.MIN_ITEMS] == ["types.Bag.items"]
    assert TypeKind.OPTIONAL in usage.types


def test_generation_does_not_mutate_the_input_contract():
    """Each run works on a private copy; the caller's contract keeps its unnamed shapes."""
    inner = object_type([])
    contract = ContractDefinition(types=[TypeDefinition("Box", object_type([Property("inner", inner)]))])

    result = TupleFallbackTarget().generate(contract, "out")

    assert result.ok
    assert inner.name is None
    assert contract.types[0].type.name is None
