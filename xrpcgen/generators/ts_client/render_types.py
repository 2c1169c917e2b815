"""Renders types.ts: interfaces, aliases and enum/tuple helpers."""
from typing import List

from xrpcgen.framework.code_writer import CodeWriter
from xrpcgen.framework.utils import to_pascal_case
from xrpcgen.generators.ts_client.type_mapper import TsTypeMapper, ts_key
from xrpcgen.ir.contract import CollectedType, ContractDefinition, TypeReference, named_objects
from xrpcgen.ir.kinds import TypeKind

HEADER = "// Generated by xrpcgen. Do not edit."


def render_interface(writer: CodeWriter, mapper: TsTypeMapper, name: str, type_ref: TypeReference) -> None:
    with writer.block(f"export interface {name} {{"):
        for prop in type_ref.properties:
            optional = "?" if not prop.required or prop.type.kind == TypeKind.OPTIONAL else ""
            writer.line(f"{ts_key(prop.name)}{optional}: {mapper.map_property(prop, name)};")


def render_types_ts(
    mapper: TsTypeMapper,
    contract: ContractDefinition,
    collected: List[CollectedType],
) -> str:
    interfaces = CodeWriter(indent="  ")
    aliases: List[str] = []
    emitted = set()

    for definition in contract.types:
        name = to_pascal_case(definition.name)
        type_ref = definition.type
        if type_ref.kind == TypeKind.OBJECT:
            if name not in emitted:
                render_interface(interfaces, mapper, name, type_ref)
                interfaces.blank()
                emitted.add(name)
        elif type_ref.kind in (TypeKind.UNION, TypeKind.TUPLE, TypeKind.ENUM):
            mapper.map_type(type_ref, name=name)
        else:
            aliases.append(f"export type {name} = {mapper.map_type(type_ref, parent_name=name).type};")

    nested = [(item.name, item.type_ref) for item in collected] + named_objects(contract)
    for raw_name, type_ref in nested:
        name = to_pascal_case(raw_name)
        if name in emitted:
            continue
        render_interface(interfaces, mapper, name, type_ref)
        interfaces.blank()
        emitted.add(name)

    writer = CodeWriter(indent="  ")
    writer.line(HEADER)
    writer.blank()
    for utility in mapper.get_collected_utilities():
        writer.lines(*utility.code.split("\n"))
        writer.blank()
    rendered = writer.render() + interfaces.render()
    if aliases:
        rendered += "\n".join(aliases) + "\n"
    return rendered.rstrip("\n") + "\n"
