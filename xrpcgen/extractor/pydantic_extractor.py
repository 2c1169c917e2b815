"""Builds a ContractDefinition from a router of pydantic-typed endpoints."""
import logging
import re
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Sequence, Set, Tuple, Union, get_args, get_origin

from xrpcgen.core.errors import ContractExtractionError
from xrpcgen.core.workflow import GenerationStage
from xrpcgen.extractor.classifier import (
    NoneType,
    classify,
    element_annotation,
    is_enum_class,
    primitive_base,
    strip_annotated,
    string_format,
    union_members,
)
from xrpcgen.extractor.dsl import ENDPOINT_TYPES, EndpointDefinition
from xrpcgen.framework.utils import to_pascal_case
from xrpcgen.ir.contract import (
    ContractDefinition,
    Endpoint,
    Property,
    TypeDefinition,
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
    tuple_of,
    union_of,
)
from xrpcgen.ir.kinds import TypeKind

log = logging.getLogger(__name__)


def _constraint(metadata: Sequence[Any], attr: str) -> Any:
    """Last non-None value of ``attr`` across constraint objects."""
    found = None
    for item in metadata:
        value = getattr(item, attr, None)
        if value is not None:
            found = value
    return found


def rules_for(base: str, metadata: Sequence[Any], fmt: Optional[str] = None) -> Optional[ValidationRules]:
    """Validation rules carried by pydantic/annotated-types constraint metadata."""
    rules = ValidationRules()
    if base == "string":
        rules.min_length = _constraint(metadata, "min_length")
        rules.max_length = _constraint(metadata, "max_length")
        pattern = _constraint(metadata, "pattern")
        if isinstance(pattern, re.Pattern):
            pattern = pattern.pattern
        rules.regex = pattern
        if fmt == "email":
            rules.email = True
        elif fmt == "url":
            rules.url = True
        elif fmt == "uuid":
            rules.uuid = True
    elif base in ("number", "integer"):
        integer = base == "integer"
        rules.minimum = _constraint(metadata, "ge")
        rules.maximum = _constraint(metadata, "le")
        gt = _constraint(metadata, "gt")
        lt = _constraint(metadata, "lt")
        if gt == 0:
            rules.positive = True
        elif gt is not None:
            rules.minimum = gt + 1 if integer else gt
            if not integer:
                log.debug("exclusive bound gt=%s approximated as minimum", gt)
        if lt == 0:
            rules.negative = True
        elif lt is not None:
            rules.maximum = lt - 1 if integer else lt
            if not integer:
                log.debug("exclusive bound lt=%s approximated as maximum", lt)
        if integer:
            rules.integer = True
    elif base == "array":
        rules.min_items = _constraint(metadata, "min_length")
        rules.max_items = _constraint(metadata, "max_length")
    return None if rules.is_empty() else rules


def _annotated(annotation: Any, metadata: Sequence[Any]) -> Any:
    if not metadata:
        return annotation
    return Annotated[(annotation, *metadata)]


class SchemaExtractor:
    """Turns one top-level annotation into a TypeReference tree.

    Each pydantic model class maps to a single shared reference, so a model
    used twice is collected once and self-references form a cycle that is
    named after the class.
    """

    def __init__(self):
        self._models: Dict[type, TypeReference] = {}
        self._in_progress: Set[type] = set()

    def extract(self, annotation: Any, metadata: Sequence[Any] = ()) -> TypeReference:
        annotated = _annotated(annotation, metadata)
        bare, meta = strip_annotated(annotated)
        kind = classify(annotated)

        if kind == TypeKind.NULLABLE:
            members = tuple(m for m in union_members(bare) if m is not NoneType)
            inner = members[0] if len(members) == 1 else Union[members]
            return nullable_of(self.extract(inner, meta))
        if kind == TypeKind.OBJECT:
            return self.extract_model(bare)
        if kind == TypeKind.ARRAY:
            element = self.extract(element_annotation(bare))
            return array_of(element, validation=rules_for("array", meta))
        if kind == TypeKind.UNION:
            return union_of([self.extract(member) for member in get_args(bare)])
        if kind == TypeKind.ENUM:
            if is_enum_class(bare):
                return enum_of([member.value for member in bare], name=bare.__name__)
            return enum_of(list(get_args(bare)))
        if kind == TypeKind.LITERAL:
            return literal_of(get_args(bare)[0] if get_origin(bare) is Literal else None)
        if kind == TypeKind.RECORD:
            args = get_args(bare)
            value = args[1] if len(args) == 2 else Any
            return record_of(self.extract(value))
        if kind == TypeKind.TUPLE:
            return tuple_of([self.extract(arg) for arg in get_args(bare)])
        if kind == TypeKind.DATE:
            return date_type()

        base = primitive_base(bare)
        return primitive(base, validation=rules_for(base, meta, string_format(annotated)))

    def extract_model(self, model: type) -> TypeReference:
        if model in self._models:
            ref = self._models[model]
            if model in self._in_progress and not ref.name:
                ref.name = model.__name__
            return ref

        ref = object_type([])
        self._models[model] = ref
        self._in_progress.add(model)
        for field_name, info in model.model_fields.items():
            required = info.is_required()
            inner = self.extract(info.annotation, info.metadata)
            ref.properties.append(Property(
                name=info.alias or field_name,
                type=inner if required else optional_of(inner),
                required=required,
                validation=inner.unwrap().validation,
            ))
        self._in_progress.discard(model)
        return ref


def _endpoint_parts(definition: Any, group: str, name: str) -> Tuple[str, Any, Any]:
    if isinstance(definition, EndpointDefinition):
        parts = {"type": definition.type, "input": definition.input, "output": definition.output}
    elif isinstance(definition, Mapping):
        parts = dict(definition)
    else:
        raise ContractExtractionError(
            f"endpoint definition must be created with query() or mutation(), got {type(definition).__name__}",
            group=group, endpoint=name,
        )
    for key in ("type", "input", "output"):
        if parts.get(key) is None:
            raise ContractExtractionError(f"endpoint is missing '{key}'", group=group, endpoint=name)
    if parts["type"] not in ENDPOINT_TYPES:
        raise ContractExtractionError(
            f"endpoint type must be 'query' or 'mutation', got {parts['type']!r}",
            group=group, endpoint=name,
        )
    return parts["type"], parts["input"], parts["output"]


def _top_level(
    contract: ContractDefinition,
    name: str,
    schema: Any,
    group: str,
    endpoint: str,
) -> TypeReference:
    existing = contract.get_type(name)
    if existing is not None:
        return existing.type
    try:
        ref = SchemaExtractor().extract(schema)
    except ContractExtractionError:
        raise
    except (TypeError, ValueError, AttributeError) as exc:
        raise ContractExtractionError(f"cannot extract {name}: {exc}", group=group, endpoint=endpoint) from exc
    if ref.kind == TypeKind.OBJECT:
        ref.name = name
    contract.types.append(TypeDefinition(name=name, type=ref))
    return ref


def extract_contract(router: Any) -> ContractDefinition:
    """Build the IR for every endpoint of ``router``, in declaration order."""
    if not isinstance(router, Mapping):
        raise ContractExtractionError(
            f"router must be a mapping of endpoint groups, got {type(router).__name__}"
        )
    if not router:
        raise ContractExtractionError("router has no endpoint groups")

    contract = ContractDefinition()
    for group, endpoints in router.items():
        if not isinstance(endpoints, Mapping) or not endpoints:
            raise ContractExtractionError("endpoint group must be a non-empty mapping", group=group)
        for name, definition in endpoints.items():
            kind, input_schema, output_schema = _endpoint_parts(definition, group, name)
            if classify(input_schema) != TypeKind.OBJECT:
                raise ContractExtractionError("input must be a pydantic model", group=group, endpoint=name)
            base = to_pascal_case(group) + to_pascal_case(name)
            input_ref = _top_level(contract, f"{base}Input", input_schema, group, name)
            output_ref = _top_level(contract, f"{base}Output", output_schema, group, name)
            contract.endpoints.append(Endpoint(
                name=name,
                full_name=f"{group}.{name}",
                kind=kind,
                input=input_ref,
                output=output_ref,
            ))

    log.info(
        "extracted %d endpoint(s) and %d type(s)", len(contract.endpoints), len(contract.types),
        extra={"stage": GenerationStage.EXTRACT.value},
    )
    return contract


def endpoint_names(contract: ContractDefinition) -> List[str]:
    return [endpoint.full_name for endpoint in contract.endpoints]
