"""Maps validation rules to Python boolean checks."""
from dataclasses import dataclass
from typing import Optional

from xrpcgen.framework.types import ValidationContext, ValidationMapping, ValidationResult
from xrpcgen.framework.validation_mapper import ValidationMapperBase
from xrpcgen.generators.python_server.patterns import (
    create_py_email_pattern,
    create_py_url_pattern,
    create_py_uuid_pattern,
)
from xrpcgen.ir.kinds import ValidationKind


@dataclass(frozen=True)
class PyCheck:
    """A failing condition and the message reported when it holds."""
    condition: str
    message: str


def _number(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _guard_present(ctx: ValidationContext, condition: str) -> str:
    # Required strings report "" as missing once; the rule must not fire again.
    if ctx.is_required:
        return f'{ctx.field_path} != "" and {condition}'
    return condition


class PyValidationMapper(ValidationMapperBase[Optional[PyCheck]]):
    target_name = "python-server"

    def build_validation_mapping(self) -> ValidationMapping:
        return {
            ValidationKind.MIN_LENGTH: self.handle_min_length,
            ValidationKind.MAX_LENGTH: self.handle_max_length,
            ValidationKind.EMAIL: self.handle_email,
            ValidationKind.URL: self.handle_url,
            ValidationKind.UUID: self.handle_uuid,
            ValidationKind.REGEX: self.handle_regex,
            ValidationKind.MIN: self.handle_min,
            ValidationKind.MAX: self.handle_max,
            ValidationKind.INT: self.handle_int,
            ValidationKind.POSITIVE: self.handle_positive,
            ValidationKind.NEGATIVE: self.handle_negative,
            ValidationKind.MIN_ITEMS: self.handle_min_items,
            ValidationKind.MAX_ITEMS: self.handle_max_items,
        }

    def handle_min_length(self, ctx: ValidationContext) -> ValidationResult:
        condition = _guard_present(ctx, f"len({ctx.field_path}) < {int(ctx.value)}")
        return ValidationResult(validation=PyCheck(
            condition, f"must be at least {int(ctx.value)} character(s)"
        ))

    def handle_max_length(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(validation=PyCheck(
            f"len({ctx.field_path}) > {int(ctx.value)}",
            f"must be at most {int(ctx.value)} character(s)",
        ))

    def handle_email(self, ctx: ValidationContext) -> ValidationResult:
        condition = _guard_present(ctx, f"_EMAIL_RE.match({ctx.field_path}) is None")
        return ValidationResult(
            validation=PyCheck(condition, "must be a valid email address"),
            utilities=[create_py_email_pattern()],
        )

    def handle_url(self, ctx: ValidationContext) -> ValidationResult:
        condition = _guard_present(ctx, f"not _is_url({ctx.field_path})")
        return ValidationResult(
            validation=PyCheck(condition, "must be a valid URL"),
            utilities=[create_py_url_pattern()],
        )

    def handle_uuid(self, ctx: ValidationContext) -> ValidationResult:
        condition = _guard_present(ctx, f"_UUID_RE.match({ctx.field_path}) is None")
        return ValidationResult(
            validation=PyCheck(condition, "must be a valid UUID"),
            utilities=[create_py_uuid_pattern()],
        )

    def handle_regex(self, ctx: ValidationContext) -> ValidationResult:
        rules = ctx.all_rules
        # Format rules already constrain the string; a derived pattern would duplicate them.
        if rules.email or rules.url or rules.uuid:
            return ValidationResult(validation=None)
        condition = _guard_present(ctx, f"re.search({str(ctx.value)!r}, {ctx.field_path}) is None")
        return ValidationResult(
            validation=PyCheck(condition, "must match the required pattern"),
            imports=["import re"],
        )

    def handle_min(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(validation=PyCheck(
            f"{ctx.field_path} < {_number(ctx.value)}", f"must be at least {_number(ctx.value)}"
        ))

    def handle_max(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(validation=PyCheck(
            f"{ctx.field_path} > {_number(ctx.value)}", f"must be at most {_number(ctx.value)}"
        ))

    def handle_int(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(validation=PyCheck(
            f"isinstance({ctx.field_path}, float) and not {ctx.field_path}.is_integer()",
            "must be an integer",
        ))

    def handle_positive(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(validation=PyCheck(f"{ctx.field_path} <= 0", "must be positive"))

    def handle_negative(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(validation=PyCheck(f"{ctx.field_path} >= 0", "must be negative"))

    def handle_min_items(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(validation=PyCheck(
            f"len({ctx.field_path}) < {int(ctx.value)}",
            f"must have at least {int(ctx.value)} item(s)",
        ))

    def handle_max_items(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(validation=PyCheck(
            f"len({ctx.field_path}) > {int(ctx.value)}",
            f"must have at most {int(ctx.value)} item(s)",
        ))
