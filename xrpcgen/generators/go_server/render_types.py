"""Renders types.go: request context, middleware types, structs and helper types."""
from typing import Iterable, List

from xrpcgen.framework.code_writer import CodeWriter
from xrpcgen.framework.utils import to_pascal_case
from xrpcgen.generators.go_server.type_mapper import GoTypeMapper
from xrpcgen.ir.contract import CollectedType, ContractDefinition, Property, TypeReference, named_objects
from xrpcgen.ir.kinds import TypeKind

HEADER = "// Code generated by xrpcgen. DO NOT EDIT."

CONTEXT_CODE = """// Context carries per-request state through middleware and handlers.
type Context struct {
	Request        *http.Request
	ResponseWriter http.ResponseWriter
	Data           map[string]interface{}
}

// Get returns a value stored by middleware.
func (c *Context) Get(key string) (interface{}, bool) {
	val, ok := c.Data[key]
	return val, ok
}

// MiddlewareFunc processes a request and may extend the context.
type MiddlewareFunc func(ctx *Context) *MiddlewareResult

type MiddlewareResult struct {
	Context  *Context
	Error    error
	Response *http.Response
}

// NewMiddlewareResult creates a successful middleware result.
func NewMiddlewareResult(ctx *Context) *MiddlewareResult {
	return &MiddlewareResult{Context: ctx}
}

// NewMiddlewareError creates a middleware result with an error.
func NewMiddlewareError(err error) *MiddlewareResult {
	return &MiddlewareResult{Error: err}
}

// NewMiddlewareResponse creates a middleware result that short-circuits the request.
func NewMiddlewareResponse(resp *http.Response) *MiddlewareResult {
	return &MiddlewareResult{Response: resp}
}"""


def go_field_name(name: str) -> str:
    field = to_pascal_case(name)
    if not field or not (field[0].isalpha() or field[0] == "_"):
        field = "F" + field
    return field


def render_imports(writer: CodeWriter, imports: Iterable[str]) -> None:
    ordered = sorted(set(imports))
    if not ordered:
        return
    with writer.block("import (", ")"):
        for path in ordered:
            writer.line(f'"{path}"')
    writer.blank()


def is_optional(prop: Property) -> bool:
    return not prop.required or prop.type.kind == TypeKind.OPTIONAL


def render_struct(writer: CodeWriter, mapper: GoTypeMapper, name: str, type_ref: TypeReference) -> None:
    with writer.block(f"type {name} struct {{"):
        for prop in type_ref.properties:
            go_type = mapper.map_type(prop.type, parent_name=name, field_name=prop.name).type
            tag = prop.name + (",omitempty" if is_optional(prop) else "")
            writer.line(f'{go_field_name(prop.name)} {go_type} `json:"{tag}"`')


def render_types_go(
    mapper: GoTypeMapper,
    contract: ContractDefinition,
    collected: List[CollectedType],
    package: str,
) -> str:
    body = CodeWriter(indent="\t")
    emitted = set()
    aliases: List[str] = []

    for definition in contract.types:
        name = to_pascal_case(definition.name)
        type_ref = definition.type
        if type_ref.kind == TypeKind.OBJECT:
            if name not in emitted:
                render_struct(body, mapper, name, type_ref)
                body.blank()
                emitted.add(name)
        elif type_ref.kind in (TypeKind.UNION, TypeKind.ENUM) or (
            type_ref.kind == TypeKind.TUPLE and type_ref.tuple_elements
        ):
            mapper.map_type(type_ref, name=name)
        else:
            aliases.append(f"type {name} = {mapper.map_type(type_ref, parent_name=name).type}")

    nested = [(item.name, item.type_ref) for item in collected] + named_objects(contract)
    for raw_name, type_ref in nested:
        name = to_pascal_case(raw_name)
        if name in emitted:
            continue
        render_struct(body, mapper, name, type_ref)
        body.blank()
        emitted.add(name)

    writer = CodeWriter(indent="\t")
    writer.line(HEADER)
    writer.blank()
    writer.line(f"package {package}")
    writer.blank()
    render_imports(writer, ["net/http", *mapper.get_collected_imports()])
    writer.lines(*CONTEXT_CODE.split("\n"))
    for utility in mapper.get_collected_utilities():
        writer.blank()
        writer.lines(*utility.code.split("\n"))
    writer.blank()
    rendered = writer.render() + body.render()
    if aliases:
        rendered += "\n".join(aliases) + "\n"
    return rendered.rstrip("\n") + "\n"
