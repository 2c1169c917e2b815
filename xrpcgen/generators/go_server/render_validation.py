"""Renders validation.go: one Validate<Type> function per named struct."""
from typing import Callable, List, Optional, Set

from xrpcgen.framework.code_writer import CodeWriter
from xrpcgen.framework.utils import to_pascal_case
from xrpcgen.generators.go_server.patterns import go_string
from xrpcgen.generators.go_server.render_types import HEADER, go_field_name, is_optional, render_imports
from xrpcgen.generators.go_server.type_mapper import GoTypeMapper, go_literal
from xrpcgen.generators.go_server.validation_mapper import GoValidationMapper
from xrpcgen.ir.contract import ContractDefinition, Property, TypeReference, ValidationRules, named_objects
from xrpcgen.ir.kinds import TypeKind

SUPPORT_CODE = """type ValidationError struct {
	Field   string `json:"field"`
	Message string `json:"message"`
}

func (e *ValidationError) Error() string {
	return fmt.Sprintf("%s: %s", e.Field, e.Message)
}

type ValidationErrors []*ValidationError

func (e ValidationErrors) Error() string {
	messages := make([]string, 0, len(e))
	for _, err := range e {
		messages = append(messages, err.Error())
	}
	return strings.Join(messages, "; ")
}

// appendNested adds the errors of a nested value under prefix.
func appendNested(errs ValidationErrors, prefix string, err error) ValidationErrors {
	if err == nil {
		return errs
	}
	if nested, ok := err.(ValidationErrors); ok {
		for _, e := range nested {
			errs = append(errs, &ValidationError{Field: prefix + "." + e.Field, Message: e.Message})
		}
		return errs
	}
	return append(errs, &ValidationError{Field: prefix, Message: err.Error()})
}"""

STRING_PRIMITIVES = ("string", "uuid", "email")
NUMBER_PRIMITIVES = ("number", "integer")


def validator_name(type_name: str) -> str:
    return f"Validate{type_name}"


def _error(field_expr: str, message: str) -> str:
    return f"errs = append(errs, &ValidationError{{Field: {field_expr}, Message: {go_string(message)}}})"


def _child_field(field_expr: str, suffix_format: str, var: str) -> str:
    # Fold literal parents into the format string.
    if field_expr.startswith('"') and field_expr.endswith('"') and "%" not in field_expr:
        return f'fmt.Sprintf("{field_expr[1:-1]}{suffix_format}", {var})'
    return f'fmt.Sprintf("%s{suffix_format}", {field_expr}, {var})'


class GoValidationRenderer:
    def __init__(
        self,
        mapper: GoValidationMapper,
        type_mapper: GoTypeMapper,
        warn: Callable[..., None],
    ):
        self.mapper = mapper
        self.type_mapper = type_mapper
        self.warn = warn
        self.imports: Set[str] = {"fmt", "strings"}

    def check_lines(self, rules: Optional[ValidationRules], expr: str, field_expr: str,
                    base_type: str, required: bool) -> List[str]:
        if rules is None or rules.is_empty():
            return []
        lines: List[str] = []
        for result in self.mapper.map_all_validations(rules, field_expr, expr, base_type, required):
            self.imports.update(result.imports)
            check = result.validation
            if check is None:
                continue
            lines.extend([f"if {check.condition} {{", "\t" + _error(field_expr, check.message), "}"])
        return lines

    def value_lines(
        self,
        ref: TypeReference,
        expr: str,
        field_expr: str,
        required: bool,
        rules: Optional[ValidationRules],
        depth: int,
    ) -> List[str]:
        kind = ref.kind

        if kind in (TypeKind.OPTIONAL, TypeKind.NULLABLE):
            inner = ref.inner
            if inner is None:
                return []
            rules = rules or inner.validation
            if self._is_pointer(ref):
                body = self.value_lines(inner, f"*{expr}", field_expr, False, rules, depth)
                return self._wrap(f"if {expr} != nil {{", body)
            return self.value_lines(inner, expr, field_expr, required and kind == TypeKind.OPTIONAL,
                                    rules, depth)

        if kind == TypeKind.PRIMITIVE:
            base = ref.primitive_name
            if base in STRING_PRIMITIVES:
                lines = []
                if required:
                    lines.extend([f'if {expr} == "" {{', "\t" + _error(field_expr, "is required"), "}"])
                    lines.extend(self.check_lines(rules, expr, field_expr, base, True))
                    return lines
                return self._wrap(f'if {expr} != "" {{',
                                  self.check_lines(rules, expr, field_expr, base, False))
            if base in NUMBER_PRIMITIVES:
                return self.check_lines(rules, expr, field_expr, base, required)
            return []

        if kind == TypeKind.ENUM:
            return self._enum_lines(ref, expr, field_expr, required)

        if kind == TypeKind.LITERAL:
            value = ref.literal_value
            if not required or value is None or isinstance(value, bool):
                return []
            literal = go_literal(value)
            return [f"if {expr} != {literal} {{", "\t" + _error(field_expr, f"must be {literal}"), "}"]

        if kind == TypeKind.OBJECT:
            if not ref.name:
                return []
            fn = validator_name(to_pascal_case(ref.name))
            return [f"errs = appendNested(errs, {field_expr}, {fn}({expr}))"]

        if kind == TypeKind.ARRAY:
            lines = []
            if required:
                lines.extend([f"if {expr} == nil {{", "\t" + _error(field_expr, "is required"), "}"])
            body = self.check_lines(rules, expr, field_expr, "array", required)
            element = ref.element_type
            if element is not None:
                index, item = f"i{depth}", f"item{depth}"
                element_lines = self.value_lines(
                    element, item, _child_field(field_expr, "[%d]", index),
                    False, element.validation, depth + 1,
                )
                body.extend(self._wrap(f"for {index}, {item} := range {expr} {{", element_lines))
            if required:
                return lines + body
            return self._wrap(f"if {expr} != nil {{", body)

        if kind == TypeKind.RECORD:
            lines = []
            if required:
                lines.extend([f"if {expr} == nil {{", "\t" + _error(field_expr, "is required"), "}"])
            value_type = ref.value_type
            if value_type is not None:
                key, item = f"key{depth}", f"item{depth}"
                element_lines = self.value_lines(
                    value_type, item, _child_field(field_expr, ".%s", key),
                    False, value_type.validation, depth + 1,
                )
                lines.extend(self._wrap(f"for {key}, {item} := range {expr} {{", element_lines))
            return lines

        # Unions, tuples and dates are shape-checked by encoding/json.
        return []

    def _enum_lines(self, ref: TypeReference, expr: str, field_expr: str, required: bool) -> List[str]:
        values = ref.enum_values
        if not values:
            return []
        allowed = ", ".join(str(v) for v in values)
        if all(isinstance(v, str) for v in values):
            lines = []
            if required:
                lines.extend([f'if {expr} == "" {{', "\t" + _error(field_expr, "is required"), "}"])
            if ref.name:
                condition = f'{expr} != "" && !{expr}.IsValid()'
            else:
                condition = f'{expr} != "" && ' + " && ".join(f"{expr} != {go_string(v)}" for v in values)
            lines.extend([f"if {condition} {{", "\t" + _error(field_expr, f"must be one of: {allowed}"), "}"])
            return lines
        if required and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
            condition = " && ".join(f"{expr} != {go_literal(v)}" for v in values)
            return [f"if {condition} {{", "\t" + _error(field_expr, f"must be one of: {allowed}"), "}"]
        return []

    def _is_pointer(self, ref: TypeReference) -> bool:
        # Only the Go type is needed here; its warnings were reported when types.go was rendered.
        reported = len(self.type_mapper.diagnostics)
        go_type = self.type_mapper.map_type(ref).type
        del self.type_mapper.diagnostics[reported:]
        return go_type.startswith("*")

    @staticmethod
    def _wrap(opener: str, body: List[str]) -> List[str]:
        if not body:
            return []
        return [opener] + ["\t" + line if line else line for line in body] + ["}"]

    def property_lines(self, owner: str, prop: Property) -> List[str]:
        expr = f"input.{go_field_name(prop.name)}"
        field_expr = go_string(prop.name)
        optional = is_optional(prop)
        if prop.type.is_nullable() and not optional:
            self.warn(
                "Required nullable field is validated only when present",
                path=f"{owner}.{prop.name}",
                hint="Go decodes a missing field and an explicit null to the same value",
            )
        return self.value_lines(prop.type, expr, field_expr, not optional,
                                prop.effective_validation(), 0)

    def render_function(self, writer: CodeWriter, name: str, ref: TypeReference) -> None:
        with writer.block(f"func {validator_name(name)}(input {name}) error {{"):
            writer.line("var errs ValidationErrors")
            for prop in ref.properties:
                lines = self.property_lines(name, prop)
                if not lines:
                    continue
                writer.blank()
                writer.line(f"// {prop.name}")
                writer.lines(*lines)
            writer.blank()
            with writer.block("if len(errs) > 0 {"):
                writer.line("return errs")
            writer.line("return nil")


def render_validation_go(
    mapper: GoValidationMapper,
    type_mapper: GoTypeMapper,
    contract: ContractDefinition,
    package: str,
    warn: Callable[..., None],
) -> str:
    renderer = GoValidationRenderer(mapper, type_mapper, warn)
    functions = CodeWriter(indent="\t")
    names: List[str] = []
    for raw_name, ref in named_objects(contract):
        name = to_pascal_case(raw_name)
        if name in names:
            continue
        names.append(name)
        functions.blank()
        renderer.render_function(functions, name, ref)

    writer = CodeWriter(indent="\t")
    writer.line(HEADER)
    writer.blank()
    writer.line(f"package {package}")
    writer.blank()
    render_imports(writer, [*renderer.imports, *mapper.get_collected_imports()])
    writer.lines(*SUPPORT_CODE.split("\n"))
    for utility in mapper.get_collected_utilities():
        writer.blank()
        writer.lines(*utility.code.split("\n"))
    return writer.render() + functions.render()
