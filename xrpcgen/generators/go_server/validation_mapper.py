"""Maps validation rules to Go boolean checks."""
from dataclasses import dataclass
from typing import Optional

from xrpcgen.framework.types import (
    GeneratedUtility,
    ValidationContext,
    ValidationMapping,
    ValidationResult,
)
from xrpcgen.framework.validation_mapper import ValidationMapperBase
from xrpcgen.generators.go_server.patterns import go_string
from xrpcgen.ir.kinds import ValidationKind


@dataclass(frozen=True)
class GoCheck:
    """A failing condition and the message reported when it holds."""
    condition: str
    message: str


def _number(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _guard_present(ctx: ValidationContext, condition: str) -> str:
    if ctx.is_required:
        return f'{ctx.field_path} != "" && {condition}'
    return condition


def _raw_string(pattern: str) -> str:
    if "`" in pattern:
        return go_string(pattern)
    return f"`{pattern}`"


EMAIL_CHECK = GeneratedUtility(
    id="email_check",
    code="""func isEmail(s string) bool {
	addr, err := mail.ParseAddress(s)
	return err == nil && addr.Address == s
}""",
    imports=["net/mail"],
    include_once=True,
    priority=60,
)

URL_CHECK = GeneratedUtility(
    id="url_check",
    code="""func isURL(s string) bool {
	u, err := url.Parse(s)
	return err == nil && u.Scheme != "" && u.Host != ""
}""",
    imports=["net/url"],
    include_once=True,
    priority=60,
)

UUID_CHECK = GeneratedUtility(
    id="uuid_check",
    code='var uuidPattern = regexp.MustCompile(`^(?i)[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$`)',
    imports=["regexp"],
    include_once=True,
    priority=60,
)


class GoValidationMapper(ValidationMapperBase[Optional[GoCheck]]):
    target_name = "go-server"

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
        condition = _guard_present(ctx, f"utf8.RuneCountInString({ctx.field_path}) < {int(ctx.value)}")
        return ValidationResult(
            validation=GoCheck(condition, f"must be at least {int(ctx.value)} character(s)"),
            imports=["unicode/utf8"],
        )

    def handle_max_length(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(
            validation=GoCheck(
                f"utf8.RuneCountInString({ctx.field_path}) > {int(ctx.value)}",
                f"must be at most {int(ctx.value)} character(s)",
            ),
            imports=["unicode/utf8"],
        )

    def handle_email(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(
            validation=GoCheck(_guard_present(ctx, f"!isEmail({ctx.field_path})"),
                               "must be a valid email address"),
            utilities=[EMAIL_CHECK],
        )

    def handle_url(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(
            validation=GoCheck(_guard_present(ctx, f"!isURL({ctx.field_path})"), "must be a valid URL"),
            utilities=[URL_CHECK],
        )

    def handle_uuid(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(
            validation=GoCheck(_guard_present(ctx, f"!uuidPattern.MatchString({ctx.field_path})"),
                               "must be a valid UUID"),
            utilities=[UUID_CHECK],
        )

    def handle_regex(self, ctx: ValidationContext) -> ValidationResult:
        rules = ctx.all_rules
        if rules.email or rules.url or rules.uuid:
            return ValidationResult(validation=None)
        pattern = _raw_string(str(ctx.value))
        condition = _guard_present(ctx, f"!regexp.MustCompile({pattern}).MatchString({ctx.field_path})")
        return ValidationResult(
            validation=GoCheck(condition, "must match the required pattern"),
            imports=["regexp"],
        )

    def handle_min(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(validation=GoCheck(
            f"float64({ctx.field_path}) < {_number(ctx.value)}", f"must be at least {_number(ctx.value)}"
        ))

    def handle_max(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(validation=GoCheck(
            f"float64({ctx.field_path}) > {_number(ctx.value)}", f"must be at most {_number(ctx.value)}"
        ))

    def handle_int(self, ctx: ValidationContext) -> ValidationResult:
        value = f"float64({ctx.field_path})"
        return ValidationResult(
            validation=GoCheck(f"{value} != math.Trunc({value})", "must be an integer"),
            imports=["math"],
        )

    def handle_positive(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(validation=GoCheck(f"{ctx.field_path} <= 0", "must be positive"))

    def handle_negative(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(validation=GoCheck(f"{ctx.field_path} >= 0", "must be negative"))

    def handle_min_items(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(validation=GoCheck(
            f"len({ctx.field_path}) < {int(ctx.value)}", f"must have at least {int(ctx.value)} item(s)"
        ))

    def handle_max_items(self, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(validation=GoCheck(
            f"len({ctx.field_path}) > {int(ctx.value)}", f"must have at most {int(ctx.value)} item(s)"
        ))
