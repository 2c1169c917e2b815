"""Maps IR types to Go type expressions."""
import json

from xrpcgen.framework.type_mapper import TypeMapperBase
from xrpcgen.framework.types import TypeContext, TypeMapping, TypeResult
from xrpcgen.framework.utils import to_pascal_case
from xrpcgen.generators.go_server.patterns import (
    create_go_datetime_pattern,
    create_go_enum_pattern,
    create_go_tuple_pattern,
    create_go_union_pattern,
)
from xrpcgen.ir.kinds import TypeKind

PRIMITIVES = {
    "string": "string",
    "number": "float64",
    "integer": "int",
    "boolean": "bool",
    "date": "DateTime",
    "uuid": "string",
    "email": "string",
    "any": "interface{}",
    "unknown": "interface{}",
}

# Types that already have a nil zero value.
_NILABLE_PREFIXES = ("*", "[]", "map[", "interface{}")


def is_nilable(go_type: str) -> bool:
    return go_type.startswith(_NILABLE_PREFIXES)


class GoTypeMapper(TypeMapperBase[str]):
    target_name = "go-server"

    def build_type_mapping(self) -> TypeMapping:
        return {
            TypeKind.OBJECT: self.handle_object,
            TypeKind.ARRAY: self.handle_array,
            TypeKind.PRIMITIVE: self.handle_primitive,
            TypeKind.OPTIONAL: self.handle_optional,
            TypeKind.NULLABLE: self.handle_nullable,
            TypeKind.UNION: self.handle_union,
            TypeKind.ENUM: self.handle_enum,
            TypeKind.LITERAL: self.handle_literal,
            TypeKind.RECORD: self.handle_record,
            TypeKind.TUPLE: self.handle_tuple,
            TypeKind.DATE: self.handle_date,
        }

    def handle_object(self, ctx: TypeContext) -> TypeResult:
        if ctx.name:
            return TypeResult(type=to_pascal_case(ctx.name))
        self.warn(
            "Inline object reached the Go mapper without a name",
            path=ctx.field_name,
            hint="Mapped to map[string]interface{}",
        )
        return TypeResult(type="map[string]interface{}")

    def handle_array(self, ctx: TypeContext) -> TypeResult:
        element = ctx.type_ref.element_type
        if element is None:
            return TypeResult(type="[]interface{}")
        inner = self.map_nested_type(element, ctx.parent_name, ctx.field_name)
        return TypeResult(type=f"[]{inner.type}")

    def handle_primitive(self, ctx: TypeContext) -> TypeResult:
        base_type = ctx.type_ref.primitive_name
        if base_type == "date":
            return TypeResult(type="DateTime", utilities=[create_go_datetime_pattern()])
        return TypeResult(type=PRIMITIVES.get(base_type, "interface{}"))

    def handle_optional(self, ctx: TypeContext) -> TypeResult:
        # Absence is the zero value plus omitempty on the struct tag.
        inner = ctx.type_ref.inner
        if inner is None:
            return TypeResult(type="interface{}")
        return self.map_nested_type(inner, ctx.parent_name, ctx.field_name)

    def handle_nullable(self, ctx: TypeContext) -> TypeResult:
        inner = ctx.type_ref.inner
        if inner is None:
            return TypeResult(type="interface{}")
        return self._pointer(self.map_nested_type(inner, ctx.parent_name, ctx.field_name))

    def _pointer(self, base: TypeResult) -> TypeResult:
        if is_nilable(base.type):
            return base
        return TypeResult(type=f"*{base.type}")

    def handle_union(self, ctx: TypeContext) -> TypeResult:
        variants = ctx.type_ref.union_types
        if not variants:
            return TypeResult(type="interface{}")
        if ctx.name:
            name = to_pascal_case(ctx.name)
            mapped = [self.map_nested_type(v, ctx.parent_name, ctx.field_name).type for v in variants]
            return TypeResult(type=name, utilities=[create_go_union_pattern(name, mapped)])
        simplified = self.simplify_union(ctx, self._pointer)
        if simplified is not None:
            return simplified
        where = ".".join(p for p in (ctx.parent_name, ctx.field_name) if p) or None
        self.warn("Go has no union types; unnamed union mapped to interface{}", path=where,
                  hint="Name the union to get a wrapper type with accessors")
        return TypeResult(type="interface{}")

    def handle_enum(self, ctx: TypeContext) -> TypeResult:
        values = ctx.type_ref.enum_values
        if not values:
            return TypeResult(type="string")
        if all(isinstance(v, str) for v in values):
            if ctx.name:
                name = to_pascal_case(ctx.name)
                return TypeResult(type=name, utilities=[create_go_enum_pattern(name, values)])
            return TypeResult(type="string")
        if all(isinstance(v, (int, float)) for v in values):
            return TypeResult(type="float64")
        return TypeResult(type="interface{}")

    def handle_literal(self, ctx: TypeContext) -> TypeResult:
        value = ctx.type_ref.literal_value
        if isinstance(value, bool):
            return TypeResult(type="bool")
        if isinstance(value, str):
            return TypeResult(type="string")
        if isinstance(value, (int, float)):
            return TypeResult(type="float64")
        return TypeResult(type="interface{}")

    def handle_record(self, ctx: TypeContext) -> TypeResult:
        value_type = ctx.type_ref.value_type
        if value_type is None:
            return TypeResult(type="map[string]interface{}")
        value = self.map_nested_type(value_type, ctx.parent_name, ctx.field_name)
        return TypeResult(type=f"map[string]{value.type}")

    def handle_tuple(self, ctx: TypeContext) -> TypeResult:
        elements = ctx.type_ref.tuple_elements
        if ctx.name and elements:
            name = to_pascal_case(ctx.name)
            mapped = [self.map_nested_type(e, ctx.parent_name, ctx.field_name).type for e in elements]
            return TypeResult(type=name, utilities=[create_go_tuple_pattern(name, mapped)])
        return TypeResult(type="[]interface{}")

    def handle_date(self, ctx: TypeContext) -> TypeResult:
        return TypeResult(type="DateTime", utilities=[create_go_datetime_pattern()])


def go_literal(value) -> str:
    """Render a scalar as a Go constant expression."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value)
    if value is None:
        return "nil"
    return repr(float(value)) if isinstance(value, float) else str(value)
