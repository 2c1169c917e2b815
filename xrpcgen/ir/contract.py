"""Intermediate representation of an API contract."""
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from xrpcgen.ir.kinds import PRIMITIVE_BASE_TYPES, ValidationKind, TypeKind, VALIDATION_KINDS

Scalar = Union[str, int, float, bool, None]

_RULE_FIELDS: Dict[ValidationKind, str] = {
    ValidationKind.MIN_LENGTH: "min_length",
    ValidationKind.MAX_LENGTH: "max_length",
    ValidationKind.EMAIL: "email",
    ValidationKind.URL: "url",
    ValidationKind.UUID: "uuid",
    ValidationKind.REGEX: "regex",
    ValidationKind.MIN: "minimum",
    ValidationKind.MAX: "maximum",
    ValidationKind.INT: "integer",
    ValidationKind.POSITIVE: "positive",
    ValidationKind.NEGATIVE: "negative",
    ValidationKind.MIN_ITEMS: "min_items",
    ValidationKind.MAX_ITEMS: "max_items",
}


@dataclass
class ValidationRules:
    """Field-level constraints, one optional slot per validation kind."""
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    email: Optional[bool] = None
    url: Optional[bool] = None
    uuid: Optional[bool] = None
    regex: Optional[str] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    integer: Optional[bool] = None
    positive: Optional[bool] = None
    negative: Optional[bool] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None

    def get(self, kind: ValidationKind) -> Any:
        return getattr(self, _RULE_FIELDS[ValidationKind(kind)])

    def set(self, kind: ValidationKind, value: Any) -> None:
        setattr(self, _RULE_FIELDS[ValidationKind(kind)], value)

    def has(self, kind: ValidationKind) -> bool:
        value = self.get(kind)
        return value is not None and value is not False

    def items(self) -> Iterator[Tuple[ValidationKind, Any]]:
        """Yield (kind, value) for every active rule in canonical kind order."""
        for kind in VALIDATION_KINDS:
            if self.has(kind):
                yield kind, self.get(kind)

    def kinds(self) -> List[ValidationKind]:
        return [kind for kind, _ in self.items()]

    def is_empty(self) -> bool:
        return not self.kinds()

    def to_dict(self) -> Dict[str, Any]:
        return {kind.value: value for kind, value in self.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidationRules":
        rules = cls()
        for key, value in data.items():
            rules.set(ValidationKind(key), value)
        return rules


@dataclass
class Property:
    name: str
    type: "TypeReference"
    required: bool = True
    validation: Optional[ValidationRules] = None

    def effective_validation(self) -> Optional[ValidationRules]:
        """Property-level rules win; otherwise the rules attached to the type itself."""
        if self.validation is not None and not self.validation.is_empty():
            return self.validation
        rules = self.type.validation
        if rules is None and self.type.kind in (TypeKind.OPTIONAL, TypeKind.NULLABLE):
            rules = self.type.unwrap().validation
        if rules is not None and not rules.is_empty():
            return rules
        return None


@dataclass
class TypeReference:
    """Tagged reference over the closed set of TypeKind values.

    Which attributes are meaningful depends on ``kind``; see the constructor
    helpers below for the shape of each.
    """
    kind: TypeKind
    name: Optional[str] = None
    base_type: Union[str, "TypeReference", None] = None
    element_type: Optional["TypeReference"] = None
    properties: List[Property] = field(default_factory=list)
    union_types: List["TypeReference"] = field(default_factory=list)
    enum_values: List[Union[str, int, float]] = field(default_factory=list)
    literal_value: Scalar = None
    value_type: Optional["TypeReference"] = None
    tuple_elements: List["TypeReference"] = field(default_factory=list)
    validation: Optional[ValidationRules] = None

    def __post_init__(self):
        self.kind = TypeKind(self.kind)

    @property
    def inner(self) -> Optional["TypeReference"]:
        """The wrapped reference of an optional/nullable kind."""
        if isinstance(self.base_type, TypeReference):
            return self.base_type
        return None

    @property
    def primitive_name(self) -> str:
        if self.kind == TypeKind.PRIMITIVE and isinstance(self.base_type, str):
            return self.base_type
        return "unknown"

    def unwrap(self) -> "TypeReference":
        """Strip optional/nullable wrappers."""
        ref = self
        while ref.kind in (TypeKind.OPTIONAL, TypeKind.NULLABLE) and ref.inner is not None:
            ref = ref.inner
        return ref

    def is_nullable(self) -> bool:
        ref = self
        while ref.kind in (TypeKind.OPTIONAL, TypeKind.NULLABLE) and ref.inner is not None:
            if ref.kind == TypeKind.NULLABLE:
                return True
            ref = ref.inner
        return False

    def accepts_null(self) -> bool:
        """True when null is a valid value: a nullable wrapper, a null literal,
        or a union with a null literal variant."""
        if self.is_nullable():
            return True
        ref = self.unwrap()
        if ref.kind == TypeKind.LITERAL:
            return ref.literal_value is None
        if ref.kind == TypeKind.UNION:
            return any(variant.accepts_null() for variant in ref.union_types)
        return False

    def children(self) -> List["TypeReference"]:
        """Directly nested references, in declaration order."""
        if self.kind == TypeKind.OBJECT:
            return [p.type for p in self.properties]
        if self.kind == TypeKind.ARRAY:
            return [self.element_type] if self.element_type is not None else []
        if self.kind in (TypeKind.OPTIONAL, TypeKind.NULLABLE):
            return [self.inner] if self.inner is not None else []
        if self.kind == TypeKind.UNION:
            return list(self.union_types)
        if self.kind == TypeKind.TUPLE:
            return list(self.tuple_elements)
        if self.kind == TypeKind.RECORD:
            return [self.value_type] if self.value_type is not None else []
        return []


@dataclass
class TypeDefinition:
    name: str
    type: TypeReference


@dataclass(frozen=True)
class Endpoint:
    name: str
    full_name: str
    kind: str
    input: TypeReference
    output: TypeReference

    @property
    def group(self) -> str:
        return self.full_name.split(".", 1)[0]


@dataclass
class ContractDefinition:
    types: List[TypeDefinition] = field(default_factory=list)
    endpoints: List[Endpoint] = field(default_factory=list)

    def get_type(self, name: str) -> Optional[TypeDefinition]:
        for definition in self.types:
            if definition.name == name:
                return definition
        return None


@dataclass
class CollectedType:
    name: str
    type_ref: TypeReference
    source: str


def object_type(properties: List[Property], name: Optional[str] = None) -> TypeReference:
    return TypeReference(kind=TypeKind.OBJECT, name=name, properties=list(properties))


def array_of(element: TypeReference, validation: Optional[ValidationRules] = None) -> TypeReference:
    return TypeReference(kind=TypeKind.ARRAY, element_type=element, validation=validation)


def primitive(base: str, validation: Optional[ValidationRules] = None) -> TypeReference:
    if base not in PRIMITIVE_BASE_TYPES:
        raise ValueError(
            f'Unknown primitive base type: "{base}". '
            f'Valid base types are: {", ".join(PRIMITIVE_BASE_TYPES)}'
        )
    return TypeReference(kind=TypeKind.PRIMITIVE, base_type=base, validation=validation)


def optional_of(base: TypeReference) -> TypeReference:
    return TypeReference(kind=TypeKind.OPTIONAL, base_type=base)


def nullable_of(base: TypeReference) -> TypeReference:
    return TypeReference(kind=TypeKind.NULLABLE, base_type=base)


def union_of(variants: List[TypeReference], name: Optional[str] = None) -> TypeReference:
    return TypeReference(kind=TypeKind.UNION, name=name, union_types=list(variants))


def enum_of(values: List[Union[str, int, float]], name: Optional[str] = None) -> TypeReference:
    return TypeReference(kind=TypeKind.ENUM, name=name, enum_values=list(values))


def literal_of(value: Scalar) -> TypeReference:
    return TypeReference(kind=TypeKind.LITERAL, literal_value=value)


def record_of(value: TypeReference) -> TypeReference:
    return TypeReference(kind=TypeKind.RECORD, value_type=value)


def tuple_of(elements: List[TypeReference], name: Optional[str] = None) -> TypeReference:
    return TypeReference(kind=TypeKind.TUPLE, name=name, tuple_elements=list(elements))


def date_type() -> TypeReference:
    return TypeReference(kind=TypeKind.DATE)


def rules(**kwargs: Any) -> ValidationRules:
    """Shorthand for ValidationRules using attribute names."""
    known = {f.name for f in fields(ValidationRules)}
    unknown = set(kwargs) - known
    if unknown:
        raise TypeError(f"unknown validation rule(s): {', '.join(sorted(unknown))}")
    return ValidationRules(**kwargs)


def named_objects(contract: ContractDefinition) -> List[Tuple[str, TypeReference]]:
    """Every named object reachable from the contract, first occurrence wins.

    Depth-first, top-level types before endpoints, declaration order throughout.
    """
    found: Dict[str, TypeReference] = {}
    seen: set = set()

    def walk(ref: Optional[TypeReference]) -> None:
        if ref is None or id(ref) in seen:
            return
        seen.add(id(ref))
        if ref.kind == TypeKind.OBJECT and ref.name and ref.name not in found:
            found[ref.name] = ref
        for child in ref.children():
            walk(child)

    for definition in contract.types:
        walk(definition.type)
    for endpoint in contract.endpoints:
        walk(endpoint.input)
        walk(endpoint.output)
    return list(found.items())
