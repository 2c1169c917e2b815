"""Maps IR types to TypeScript type expressions."""
import json
import re

from xrpcgen.framework.type_mapper import TypeMapperBase
from xrpcgen.framework.types import TypeContext, TypeMapping, TypeResult
from xrpcgen.framework.utils import to_pascal_case
from xrpcgen.generators.ts_client.patterns import (
    create_ts_enum_pattern,
    create_ts_tuple_pattern,
    create_ts_union_pattern,
    ts_literal,
)
from xrpcgen.ir.kinds import TypeKind

# Dates travel as ISO-8601 strings; the client does not revive them.
PRIMITIVES = {
    "string": "string",
    "number": "number",
    "integer": "number",
    "boolean": "boolean",
    "date": "string",
    "uuid": "string",
    "email": "string",
    "any": "unknown",
    "unknown": "unknown",
}

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def ts_key(name: str) -> str:
    return name if _IDENTIFIER.match(name) else json.dumps(name)


class TsTypeMapper(TypeMapperBase[str]):
    target_name = "ts-client"

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

    def map_property(self, prop, parent_name=None) -> str:
        """Type of a property; absence is expressed by ``?`` on the key."""
        ref = prop.type
        if ref.kind == TypeKind.OPTIONAL and ref.inner is not None:
            ref = ref.inner
        return self.map_nested_type(ref, parent_name, prop.name).type

    def handle_object(self, ctx: TypeContext) -> TypeResult:
        if ctx.name:
            return TypeResult(type=to_pascal_case(ctx.name))
        if not ctx.type_ref.properties:
            return TypeResult(type="Record<string, unknown>")
        members = []
        for prop in ctx.type_ref.properties:
            optional = "?" if not prop.required or prop.type.kind == TypeKind.OPTIONAL else ""
            members.append(f"{ts_key(prop.name)}{optional}: {self.map_property(prop, ctx.parent_name)}")
        return TypeResult(type="{ " + "; ".join(members) + " }")

    def handle_array(self, ctx: TypeContext) -> TypeResult:
        element = ctx.type_ref.element_type
        if element is None:
            return TypeResult(type="unknown[]")
        inner = self.map_nested_type(element, ctx.parent_name, ctx.field_name).type
        if "|" in inner or "&" in inner:
            inner = f"({inner})"
        return TypeResult(type=f"{inner}[]")

    def handle_primitive(self, ctx: TypeContext) -> TypeResult:
        return TypeResult(type=PRIMITIVES.get(ctx.type_ref.primitive_name, "unknown"))

    def handle_optional(self, ctx: TypeContext) -> TypeResult:
        inner = ctx.type_ref.inner
        if inner is None:
            return TypeResult(type="unknown | undefined")
        base = self.map_nested_type(inner, ctx.parent_name, ctx.field_name)
        return TypeResult(type=f"{base.type} | undefined")

    def handle_nullable(self, ctx: TypeContext) -> TypeResult:
        inner = ctx.type_ref.inner
        if inner is None:
            return TypeResult(type="unknown | null")
        base = self.map_nested_type(inner, ctx.parent_name, ctx.field_name)
        return TypeResult(type=f"{base.type} | null")

    def handle_union(self, ctx: TypeContext) -> TypeResult:
        variants = ctx.type_ref.union_types
        if not variants:
            return TypeResult(type="unknown")
        mapped = [self.map_nested_type(v, ctx.parent_name, ctx.field_name).type for v in variants]
        if ctx.name:
            name = to_pascal_case(ctx.name)
            return TypeResult(type=name, utilities=[create_ts_union_pattern(name, mapped)])
        return TypeResult(type=" | ".join(mapped))

    def handle_enum(self, ctx: TypeContext) -> TypeResult:
        values = ctx.type_ref.enum_values
        if not values:
            return TypeResult(type="string")
        if ctx.name:
            name = to_pascal_case(ctx.name)
            return TypeResult(type=name, utilities=[create_ts_enum_pattern(name, values)])
        return TypeResult(type=" | ".join(ts_literal(v) for v in values))

    def handle_literal(self, ctx: TypeContext) -> TypeResult:
        return TypeResult(type=ts_literal(ctx.type_ref.literal_value))

    def handle_record(self, ctx: TypeContext) -> TypeResult:
        value_type = ctx.type_ref.value_type
        if value_type is None:
            return TypeResult(type="Record<string, unknown>")
        value = self.map_nested_type(value_type, ctx.parent_name, ctx.field_name)
        return TypeResult(type=f"Record<string, {value.type}>")

    def handle_tuple(self, ctx: TypeContext) -> TypeResult:
        mapped = [
            self.map_nested_type(e, ctx.parent_name, ctx.field_name).type
            for e in ctx.type_ref.tuple_elements
        ]
        if ctx.name:
            name = to_pascal_case(ctx.name)
            return TypeResult(type=name, utilities=[create_ts_tuple_pattern(name, mapped)])
        return TypeResult(type=f"[{', '.join(mapped)}]")

    def handle_date(self, ctx: TypeContext) -> TypeResult:
        return TypeResult(type="string")
