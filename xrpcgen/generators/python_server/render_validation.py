"""Renders validation.py: one validate_<type> function per named object."""
from typing import List, Optional, Set

from xrpcgen.framework.utils import to_pascal_case, to_snake_case
from xrpcgen.generators.python_server.patterns import py_literal
from xrpcgen.generators.python_server.validation_mapper import PyValidationMapper
from xrpcgen.ir.contract import ContractDefinition, Property, TypeReference, ValidationRules, named_objects
from xrpcgen.ir.kinds import TypeKind

HEADER = '"""Generated by xrpcgen. Do not edit."""'

PRIMITIVE_GUARDS = {
    "string": ("isinstance({v}, str)", "must be a string"),
    "uuid": ("isinstance({v}, str)", "must be a string"),
    "email": ("isinstance({v}, str)", "must be a string"),
    "number": ("isinstance({v}, (int, float)) and not isinstance({v}, bool)", "must be a number"),
    "integer": ("isinstance({v}, int) and not isinstance({v}, bool)", "must be an integer"),
    "boolean": ("isinstance({v}, bool)", "must be a boolean"),
    "date": ("is_datetime({v})", "must be a valid date-time string"),
}

SUPPORT_CODE = '''@dataclass(frozen=True)
class ValidationError:
    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


class ValidationErrors(Exception):
    """Raised when a payload fails validation."""

    def __init__(self, errors: List[ValidationError]):
        self.errors = list(errors)
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in self.errors))

    def to_list(self) -> List[Dict[str, str]]:
        return [e.to_dict() for e in self.errors]


def _join(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _index(path: str, index: int) -> str:
    return f"{path}[{index}]"'''

FOOTER = '''def ensure_valid(type_name: str, data: Any) -> Any:
    """Raise ValidationErrors unless data is a valid payload of type_name."""
    errors = VALIDATORS[type_name](data)
    if errors:
        raise ValidationErrors(errors)
    return data'''


def validator_name(type_name: str) -> str:
    return f"validate_{to_snake_case(type_name)}"


def _indent(lines: List[str], levels: int = 1) -> List[str]:
    pad = "    " * levels
    return [pad + line if line else line for line in lines]


def _error(field_var: str, message: str) -> str:
    return f"errors.append(ValidationError({field_var}, {message!r}))"


class ValidationRenderer:
    """Builds validate_* functions from the IR using the validation mapper's checks."""

    def __init__(self, mapper: PyValidationMapper):
        self.mapper = mapper
        self.uses_datetime = False
        self.imports: Set[str] = set()

    def rule_lines(
        self,
        rules: Optional[ValidationRules],
        value_var: str,
        field_var: str,
        base_type: str,
        required: bool,
    ) -> List[str]:
        if rules is None or rules.is_empty():
            return []
        lines: List[str] = []
        results = self.mapper.map_all_validations(rules, field_var, value_var, base_type, required)
        for result in results:
            self.imports.update(result.imports)
            check = result.validation
            if check is None:
                continue
            lines.append(f"if {check.condition}:")
            lines.append("    " + _error(field_var, check.message))
        return lines

    def predicate(self, ref: TypeReference, expr: str) -> str:
        """Boolean expression that holds when expr has the shape of ref."""
        kind = ref.kind
        if kind in (TypeKind.OPTIONAL, TypeKind.NULLABLE):
            if ref.inner is None:
                return "True"
            return f"({expr} is None or {self.predicate(ref.inner, expr)})"
        if kind == TypeKind.PRIMITIVE:
            guard = PRIMITIVE_GUARDS.get(ref.primitive_name)
            if guard is None:
                return "True"
            if ref.primitive_name == "date":
                self.uses_datetime = True
            return f"({guard[0].format(v=expr)})"
        if kind == TypeKind.DATE:
            self.uses_datetime = True
            return f"is_datetime({expr})"
        if kind == TypeKind.ENUM:
            return f"{expr} in {self._tuple_literal(ref.enum_values)}"
        if kind == TypeKind.LITERAL:
            if ref.literal_value is None:
                return f"{expr} is None"
            return f"{expr} == {py_literal(ref.literal_value)}"
        if kind == TypeKind.OBJECT:
            if ref.name:
                fn = validator_name(to_pascal_case(ref.name))
                return f"(isinstance({expr}, dict) and not {fn}({expr}))"
            return f"isinstance({expr}, dict)"
        if kind == TypeKind.ARRAY:
            return f"isinstance({expr}, list)"
        if kind == TypeKind.RECORD:
            return f"isinstance({expr}, dict)"
        if kind == TypeKind.TUPLE:
            return f"(isinstance({expr}, list) and len({expr}) == {len(ref.tuple_elements)})"
        if kind == TypeKind.UNION:
            if not ref.union_types:
                return "True"
            return "(" + " or ".join(self.predicate(v, expr) for v in ref.union_types) + ")"
        return "True"

    def value_lines(
        self,
        ref: TypeReference,
        value_var: str,
        field_var: str,
        required: bool,
        rules: Optional[ValidationRules],
        depth: int,
    ) -> List[str]:
        """Checks for a value that is known to be present."""
        kind = ref.kind

        if kind in (TypeKind.OPTIONAL, TypeKind.NULLABLE):
            inner = ref.inner
            if inner is None:
                return []
            body = self.value_lines(inner, value_var, field_var, False, rules or inner.validation, depth)
            if not body:
                return []
            return [f"if {value_var} is not None:"] + _indent(body)

        if kind in (TypeKind.PRIMITIVE, TypeKind.DATE):
            base = "date" if kind == TypeKind.DATE else ref.primitive_name
            body: List[str] = []
            if base in ("string", "uuid", "email") and required:
                body.append(f'if {value_var} == "":')
                body.append("    " + _error(field_var, "is required"))
            if kind == TypeKind.PRIMITIVE:
                body.extend(self.rule_lines(rules, value_var, field_var, base, required))
            guard = PRIMITIVE_GUARDS.get(base)
            if guard is None:
                return body
            if base == "date":
                self.uses_datetime = True
            lines = [f"if not ({guard[0].format(v=value_var)}):", "    " + _error(field_var, guard[1])]
            if body:
                lines.append("else:")
                lines.extend(_indent(body))
            return lines

        if kind == TypeKind.ENUM:
            allowed = ", ".join(str(v) for v in ref.enum_values)
            return [
                f"if {value_var} not in {self._tuple_literal(ref.enum_values)}:",
                "    " + _error(field_var, f"must be one of: {allowed}"),
            ]

        if kind == TypeKind.LITERAL:
            if ref.literal_value is None:
                return [f"if {value_var} is not None:", "    " + _error(field_var, "must be null")]
            literal = py_literal(ref.literal_value)
            return [f"if {value_var} != {literal}:", "    " + _error(field_var, f"must be {literal}")]

        if kind == TypeKind.OBJECT:
            lines = [f"if not isinstance({value_var}, dict):", "    " + _error(field_var, "must be an object")]
            if ref.name:
                fn = validator_name(to_pascal_case(ref.name))
                lines.append("else:")
                lines.append(f"    errors.extend({fn}({value_var}, {field_var}))")
            return lines

        if kind == TypeKind.ARRAY:
            body = self.rule_lines(rules, value_var, field_var, "array", required)
            element = ref.element_type
            if element is not None:
                item, index, item_field = f"item{depth}", f"i{depth}", f"field{depth}"
                element_lines = self.value_lines(
                    element, item, item_field, False, element.validation, depth + 1
                )
                if element_lines:
                    body.append(f"for {index}, {item} in enumerate({value_var}):")
                    body.append(f"    {item_field} = _index({field_var}, {index})")
                    body.extend(_indent(element_lines))
            return self._container("list", "must be an array", value_var, field_var, body)

        if kind == TypeKind.RECORD:
            body = []
            value_type = ref.value_type
            if value_type is not None:
                key, item, item_field = f"key{depth}", f"item{depth}", f"field{depth}"
                element_lines = self.value_lines(
                    value_type, item, item_field, False, value_type.validation, depth + 1
                )
                if element_lines:
                    body.append(f"for {key}, {item} in {value_var}.items():")
                    body.append(f"    {item_field} = _join({field_var}, {key})")
                    body.extend(_indent(element_lines))
            return self._container("dict", "must be an object", value_var, field_var, body)

        if kind == TypeKind.TUPLE:
            size = len(ref.tuple_elements)
            lines = [
                f"if not isinstance({value_var}, list) or len({value_var}) != {size}:",
                "    " + _error(field_var, f"must be a tuple of {size} element(s)"),
            ]
            body = []
            item_field = f"field{depth}"
            for position, element in enumerate(ref.tuple_elements):
                element_lines = self.value_lines(
                    element, f"{value_var}[{position}]", item_field, False, element.validation, depth + 1
                )
                if element_lines:
                    body.append(f"{item_field} = _index({field_var}, {position})")
                    body.extend(element_lines)
            if body:
                lines.append("else:")
                lines.extend(_indent(body))
            return lines

        if kind == TypeKind.UNION:
            return [
                f"if not {self.predicate(ref, value_var)}:",
                "    " + _error(field_var, "must match one of the allowed types"),
            ]

        return []

    def _container(self, py_type: str, message: str, value_var: str, field_var: str, body: List[str]) -> List[str]:
        lines = [f"if not isinstance({value_var}, {py_type}):", "    " + _error(field_var, message)]
        if body:
            lines.append("else:")
            lines.extend(_indent(body))
        return lines

    @staticmethod
    def _tuple_literal(values) -> str:
        rendered = ", ".join(py_literal(v) for v in values)
        return f"({rendered},)" if len(values) == 1 else f"({rendered})"

    def property_lines(self, prop: Property) -> List[str]:
        key = repr(prop.name)
        optional = not prop.required or prop.type.kind == TypeKind.OPTIONAL
        nullable = prop.type.accepts_null()
        body = self.value_lines(
            prop.type.unwrap(), "value", "field", not optional, prop.effective_validation(), 0
        )
        assign = [f"value = data[{key}]"] + body

        lines = [f"field = _join(path, {key})"]
        if not optional and not nullable:
            lines.append(f"if {key} not in data or data[{key}] is None:")
            lines.append("    " + _error("field", "is required"))
            if body:
                lines.append("else:")
                lines.extend(_indent(assign))
        elif not optional:
            lines.append(f"if {key} not in data:")
            lines.append("    " + _error("field", "is required"))
            if body:
                lines.append(f"elif data[{key}] is not None:")
                lines.extend(_indent(assign))
        elif not nullable:
            lines.append(f"if {key} in data:")
            lines.append(f"    if data[{key}] is None:")
            lines.append("        " + _error("field", "must not be null"))
            if body:
                lines.append("    else:")
                lines.extend(_indent(assign, 2))
        else:
            if not body:
                return []
            lines.append(f"if data.get({key}) is not None:")
            lines.extend(_indent(assign))
        return lines

    def render_function(self, name: str, ref: TypeReference) -> str:
        lines = [
            f"def {validator_name(name)}(data: Any, path: str = \"\") -> List[ValidationError]:",
            f'    """Validate a decoded {name} payload."""',
            "    errors: List[ValidationError] = []",
            "    if not isinstance(data, dict):",
            '        errors.append(ValidationError(path or "(root)", "must be an object"))',
            "        return errors",
        ]
        for prop in ref.properties:
            prop_lines = self.property_lines(prop)
            if prop_lines:
                lines.append("")
                lines.extend(_indent(prop_lines))
        lines.append("")
        lines.append("    return errors")
        return "\n".join(lines)


def render_validation_py(mapper: PyValidationMapper, contract: ContractDefinition) -> str:
    """Render the validation module for a fully named contract."""
    renderer = ValidationRenderer(mapper)
    functions: List[str] = []
    names: List[str] = []
    for raw_name, ref in named_objects(contract):
        name = to_pascal_case(raw_name)
        if name in names:
            continue
        names.append(name)
        functions.append(renderer.render_function(name, ref))

    imports = set(renderer.imports) | set(mapper.get_collected_imports())
    lines = [HEADER, "from __future__ import annotations", ""]
    lines.extend(sorted(i for i in imports if i.startswith("import ")))
    lines.extend(sorted(i for i in imports if i.startswith("from ")))
    lines.append("from dataclasses import dataclass")
    lines.append("from typing import Any, Callable, Dict, List")
    if renderer.uses_datetime:
        lines.append("")
        lines.append("from .models import is_datetime")

    for utility in mapper.get_collected_utilities():
        lines.extend(["", "", utility.code])

    lines.extend(["", "", SUPPORT_CODE])
    for function in functions:
        lines.extend(["", "", function])

    lines.extend(["", ""])
    lines.append("VALIDATORS: Dict[str, Callable[..., List[ValidationError]]] = {")
    for name in names:
        lines.append(f"    {name!r}: {validator_name(name)},")
    lines.append("}")
    lines.extend(["", "", FOOTER])
    return "\n".join(lines) + "\n"
