"""The TypeScript client leaves validation to the server."""
from xrpcgen.framework.types import ValidationMapping
from xrpcgen.framework.validation_mapper import ValidationMapperBase, create_no_op_validation_handler
from xrpcgen.ir.kinds import VALIDATION_KINDS


class TsValidationMapper(ValidationMapperBase[None]):
    target_name = "ts-client"

    def build_validation_mapping(self) -> ValidationMapping:
        return {kind: create_no_op_validation_handler() for kind in VALIDATION_KINDS}
