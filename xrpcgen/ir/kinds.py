"""Closed kind sets shared by every stage of the pipeline."""
from enum import Enum
from typing import Tuple


class TypeKind(str, Enum):
    OBJECT = "object"
    ARRAY = "array"
    PRIMITIVE = "primitive"
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    UNION = "union"
    ENUM = "enum"
    LITERAL = "literal"
    RECORD = "record"
    TUPLE = "tuple"
    DATE = "date"


class ValidationKind(str, Enum):
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    EMAIL = "email"
    URL = "url"
    UUID = "uuid"
    REGEX = "regex"
    MIN = "min"
    MAX = "max"
    INT = "int"
    POSITIVE = "positive"
    NEGATIVE = "negative"
    MIN_ITEMS = "minItems"
    MAX_ITEMS = "maxItems"


TYPE_KINDS: Tuple[TypeKind, ...] = tuple(TypeKind)
VALIDATION_KINDS: Tuple[ValidationKind, ...] = tuple(ValidationKind)

STRING_VALIDATIONS: Tuple[ValidationKind, ...] = (
    ValidationKind.MIN_LENGTH,
    ValidationKind.MAX_LENGTH,
    ValidationKind.EMAIL,
    ValidationKind.URL,
    ValidationKind.UUID,
    ValidationKind.REGEX,
)
NUMBER_VALIDATIONS: Tuple[ValidationKind, ...] = (
    ValidationKind.MIN,
    ValidationKind.MAX,
    ValidationKind.INT,
    ValidationKind.POSITIVE,
    ValidationKind.NEGATIVE,
)
ARRAY_VALIDATIONS: Tuple[ValidationKind, ...] = (
    ValidationKind.MIN_ITEMS,
    ValidationKind.MAX_ITEMS,
)

# Base types a primitive reference may carry.
PRIMITIVE_BASE_TYPES: Tuple[str, ...] = (
    "string", "number", "integer", "boolean", "date", "uuid", "email", "any", "unknown",
)


def is_type_kind(value: str) -> bool:
    return value in {k.value for k in TypeKind}


def is_validation_kind(value: str) -> bool:
    return value in {k.value for k in ValidationKind}


def get_validations_for_type(base_type: str) -> Tuple[ValidationKind, ...]:
    """Return the validation kinds that may be attached to a field of the given base type."""
    if base_type == "string":
        return STRING_VALIDATIONS
    if base_type in ("number", "integer"):
        return NUMBER_VALIDATIONS
    if base_type == "array":
        return ARRAY_VALIDATIONS
    return ()
