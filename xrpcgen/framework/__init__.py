from xrpcgen.framework.capabilities import collect_contract_usage, create_capabilities, validate_support
from xrpcgen.framework.target import TargetGeneratorBase
from xrpcgen.framework.type_collector import TypeCollector
from xrpcgen.framework.type_mapper import TypeMapperBase, create_unsupported_type_handler
from xrpcgen.framework.types import (
    Diagnostic,
    GeneratedFile,
    GeneratedUtility,
    GenerationResult,
    TargetCapabilities,
    TypeContext,
    TypeResult,
    UnsupportedType,
    UnsupportedValidation,
    ValidationContext,
    ValidationResult,
)
from xrpcgen.framework.utility_collector import UtilityCollector
from xrpcgen.framework.validation_mapper import (
    ValidationMapperBase,
    create_no_op_validation_handler,
    create_unsupported_validation_handler,
)
