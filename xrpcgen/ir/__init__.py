from xrpcgen.ir.kinds import (
    TypeKind,
    ValidationKind,
    TYPE_KINDS,
    VALIDATION_KINDS,
    get_validations_for_type,
)
from xrpcgen.ir.contract import (
    CollectedType,
    ContractDefinition,
    Endpoint,
    Property,
    TypeDefinition,
    TypeReference,
    ValidationRules,
)

__all__ = [
    "TypeKind",
    "ValidationKind",
    "TYPE_KINDS",
    "VALIDATION_KINDS",
    "get_validations_for_type",
    "CollectedType",
    "ContractDefinition",
    "Endpoint",
    "Property",
    "TypeDefinition",
    "TypeReference",
    "ValidationRules",
]
