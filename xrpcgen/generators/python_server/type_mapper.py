"""Maps IR types to Python annotations for TypedDict models."""
from xrpcgen.framework.type_mapper import TypeMapperBase
from xrpcgen.framework.types import TypeContext, TypeMapping, TypeResult
from xrpcgen.framework.utils import to_pascal_case
from xrpcgen.generators.python_server.patterns import (
    create_py_datetime_pattern,
    create_py_enum_pattern,
    create_py_tuple_pattern,
    create_py_union_pattern,
    py_literal,
)
from xrpcgen.ir.kinds import TypeKind

PRIMITIVES = {
    "string": "str",
    "number": "float",
    "integer": "int",
    "boolean": "bool",
    "date": "str",
    "uuid": "str",
    "email": "str",
    "any": "Any",
    "unknown": "Any",
}


class PyTypeMapper(TypeMapperBase[str]):
    target_name = "python-server"

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

    def map_primitive(self, base_type: str) -> str:
        return PRIMITIVES.get(base_type, "Any")

    def handle_object(self, ctx: TypeContext) -> TypeResult:
        if ctx.name:
            return TypeResult(type=to_pascal_case(ctx.name))
        self.warn(
            "Inline object reached the Python mapper without a name",
            path=ctx.field_name,
            hint="Mapped to Dict[str, Any]",
        )
        return TypeResult(type="Dict[str, Any]")

    def handle_array(self, ctx: TypeContext) -> TypeResult:
        element = ctx.type_ref.element_type
        if element is None:
            return TypeResult(type="List[Any]")
        inner = self.map_nested_type(element, ctx.parent_name, ctx.field_name)
        return TypeResult(type=f"List[{inner.type}]")

    def handle_primitive(self, ctx: TypeContext) -> TypeResult:
        base_type = ctx.type_ref.primitive_name
        utilities = [create_py_datetime_pattern()] if base_type == "date" else []
        return TypeResult(type=self.map_primitive(base_type), utilities=utilities)

    def handle_optional(self, ctx: TypeContext) -> TypeResult:
        # Absence is expressed with NotRequired at the field level.
        inner = ctx.type_ref.inner
        if inner is None:
            return TypeResult(type="Any")
        base = self.map_nested_type(inner, ctx.parent_name, ctx.field_name)
        return TypeResult(type=base.type)

    def handle_nullable(self, ctx: TypeContext) -> TypeResult:
        inner = ctx.type_ref.inner
        if inner is None:
            return TypeResult(type="Any")
        base = self.map_nested_type(inner, ctx.parent_name, ctx.field_name)
        return self._nullable(base)

    def _nullable(self, base: TypeResult) -> TypeResult:
        if base.type.startswith("Optional[") or base.type in ("Any", "None"):
            return base
        return TypeResult(type=f"Optional[{base.type}]")

    def handle_union(self, ctx: TypeContext) -> TypeResult:
        variants = ctx.type_ref.union_types
        if not variants:
            return TypeResult(type="Any")
        mapped = [self.map_nested_type(v, ctx.parent_name, ctx.field_name).type for v in variants]
        body = f"Union[{', '.join(mapped)}]"
        if ctx.name:
            name = to_pascal_case(ctx.name)
            return TypeResult(type=name, utilities=[create_py_union_pattern(name, body)])
        simplified = self.simplify_union(ctx, self._nullable)
        if simplified is not None:
            return simplified
        return TypeResult(type=body)

    def handle_enum(self, ctx: TypeContext) -> TypeResult:
        values = ctx.type_ref.enum_values
        if not values:
            return TypeResult(type="str")
        if ctx.name:
            name = to_pascal_case(ctx.name)
            return TypeResult(type=name, utilities=[create_py_enum_pattern(name, values)])
        return TypeResult(type=f"Literal[{', '.join(py_literal(v) for v in values)}]")

    def handle_literal(self, ctx: TypeContext) -> TypeResult:
        value = ctx.type_ref.literal_value
        if value is None:
            return TypeResult(type="None")
        return TypeResult(type=f"Literal[{py_literal(value)}]")

    def handle_record(self, ctx: TypeContext) -> TypeResult:
        value_type = ctx.type_ref.value_type
        if value_type is None:
            return TypeResult(type="Dict[str, Any]")
        value = self.map_nested_type(value_type, ctx.parent_name, ctx.field_name)
        return TypeResult(type=f"Dict[str, {value.type}]")

    def handle_tuple(self, ctx: TypeContext) -> TypeResult:
        elements = ctx.type_ref.tuple_elements
        if not elements:
            return TypeResult(type="Tuple[()]")
        mapped = [self.map_nested_type(e, ctx.parent_name, ctx.field_name).type for e in elements]
        # JSON arrays decode to lists; the alias documents the positional shape.
        body = f"Tuple[{', '.join(mapped)}]"
        if ctx.name:
            name = to_pascal_case(ctx.name)
            return TypeResult(type=name, utilities=[create_py_tuple_pattern(name, body)])
        return TypeResult(type=body)

    def handle_date(self, ctx: TypeContext) -> TypeResult:
        return TypeResult(type="str", utilities=[create_py_datetime_pattern()])
