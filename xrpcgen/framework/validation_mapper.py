"""Exhaustive validation-rule dispatch shared by every target."""
import logging
from abc import ABC, abstractmethod
from typing import Callable, Generic, List, Optional, TypeVar

from xrpcgen.core.errors import MapperIncompleteError
from xrpcgen.framework.types import (
    Diagnostic,
    GeneratedUtility,
    ValidationContext,
    ValidationHandler,
    ValidationMapping,
    ValidationResult,
)
from xrpcgen.framework.utility_collector import UtilityCollector
from xrpcgen.ir.contract import ValidationRules
from xrpcgen.ir.kinds import VALIDATION_KINDS, ValidationKind, get_validations_for_type

log = logging.getLogger(__name__)

V = TypeVar("V")


class ValidationMapperBase(ABC, Generic[V]):
    """Maps validation rules to target-language check fragments."""

    target_name = "target"

    def __init__(self):
        self.utility_collector = UtilityCollector()
        self.diagnostics: List[Diagnostic] = []
        self.validation_mapping: ValidationMapping = self.build_validation_mapping()
        self.verify_completeness()

    @abstractmethod
    def build_validation_mapping(self) -> ValidationMapping:
        ...

    def map_validation(self, rule: ValidationKind, ctx: ValidationContext) -> ValidationResult:
        try:
            kind = ValidationKind(rule)
        except ValueError:
            raise ValueError(
                f'Unknown validation kind: "{rule}". '
                f'Valid kinds are: {", ".join(k.value for k in VALIDATION_KINDS)}'
            ) from None
        result = self.validation_mapping[kind](ctx)
        self.utility_collector.add_all(result.utilities)
        return result

    def map_all_validations(
        self,
        rules: ValidationRules,
        field_name: str,
        field_path: str,
        base_type: str,
        is_required: bool,
    ) -> List[ValidationResult]:
        """Map every active rule, in canonical kind order.

        Raises ValueError when a rule is attached to a base type it does not
        apply to; the extractor never produces such a contract.
        """
        applicable = get_validations_for_type(base_type)
        results = []
        for kind, value in rules.items():
            if kind not in applicable:
                raise ValueError(
                    f'Validation "{kind.value}" does not apply to base type "{base_type}" '
                    f'(field {field_name})'
                )
            ctx = ValidationContext(
                rule=kind,
                value=value,
                field_name=field_name,
                field_path=field_path,
                base_type=base_type,
                is_required=is_required,
                all_rules=rules,
            )
            results.append(self.map_validation(kind, ctx))
        return results

    def warn(self, message: str, path: Optional[str] = None, hint: Optional[str] = None) -> None:
        self.diagnostics.append(Diagnostic("warning", message, path=path, hint=hint))
        log.warning(message, extra={"target": self.target_name, "stage": "EMIT"})

    def get_collected_utilities(self) -> List[GeneratedUtility]:
        return self.utility_collector.get_all()

    def get_collected_imports(self) -> List[str]:
        return self.utility_collector.get_imports()

    def reset(self) -> None:
        self.utility_collector.clear()
        self.diagnostics.clear()

    def verify_completeness(self) -> None:
        missing = [
            kind.value for kind in VALIDATION_KINDS
            if not callable(self.validation_mapping.get(kind))
        ]
        if missing:
            raise MapperIncompleteError(type(self).__name__, missing)


def create_no_op_validation_handler() -> ValidationHandler:
    """Handler for targets that leave validation to a runtime library."""
    def handler(ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(validation=None)
    return handler


def create_unsupported_validation_handler(
    kind: ValidationKind,
    default_value: V,
    warn: Callable[..., None],
) -> ValidationHandler:
    def handler(ctx: ValidationContext) -> ValidationResult:
        warn(
            f'Validation "{ValidationKind(kind).value}" is not supported for this target.',
            path=ctx.field_path,
        )
        return ValidationResult(validation=default_value)
    return handler
