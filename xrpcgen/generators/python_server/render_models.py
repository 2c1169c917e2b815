"""Renders models.py: TypedDict payload types and their aliases."""
import keyword
from typing import List, Tuple

from xrpcgen.framework.utils import to_pascal_case
from xrpcgen.generators.python_server.patterns import PRELUDE_PRIORITY
from xrpcgen.generators.python_server.type_mapper import PyTypeMapper
from xrpcgen.ir.contract import CollectedType, ContractDefinition, TypeReference, named_objects
from xrpcgen.ir.kinds import TypeKind

HEADER = '"""Generated by xrpcgen. Do not edit."""'


def _is_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def property_annotation(mapper: PyTypeMapper, owner: str, prop) -> str:
    annotation = mapper.map_type(prop.type, parent_name=owner, field_name=prop.name).type
    if not prop.required or prop.type.kind == TypeKind.OPTIONAL:
        return f"NotRequired[{annotation}]"
    return annotation


def render_typed_dict(mapper: PyTypeMapper, name: str, type_ref: TypeReference) -> str:
    fields: List[Tuple[str, str]] = [
        (prop.name, property_annotation(mapper, name, prop)) for prop in type_ref.properties
    ]
    if all(_is_identifier(field_name) for field_name, _ in fields):
        lines = [f"class {name}(TypedDict):"]
        if not fields:
            lines.append("    pass")
        for field_name, annotation in fields:
            lines.append(f"    {field_name}: {annotation}")
        return "\n".join(lines)

    # Keys that are not identifiers need the functional form.
    lines = [f"{name} = TypedDict("]
    lines.append(f"    {name!r},")
    lines.append("    {")
    for field_name, annotation in fields:
        lines.append(f"        {field_name!r}: {annotation!r},")
    lines.append("    },")
    lines.append(")")
    return "\n".join(lines)


def render_models_py(
    mapper: PyTypeMapper,
    contract: ContractDefinition,
    collected: List[CollectedType],
) -> str:
    """Render the models module for a fully named contract."""
    classes: List[str] = []
    aliases: List[str] = []
    emitted = set()

    for definition in contract.types:
        name = to_pascal_case(definition.name)
        type_ref = definition.type
        if type_ref.kind == TypeKind.OBJECT:
            if name not in emitted:
                classes.append(render_typed_dict(mapper, name, type_ref))
                emitted.add(name)
        elif type_ref.kind in (TypeKind.UNION, TypeKind.TUPLE, TypeKind.ENUM):
            # Named wrappers are emitted as utilities by the mapper.
            mapper.map_type(type_ref, name=name)
        else:
            body = mapper.map_type(type_ref, parent_name=name).type
            aliases.append(f"{name}: TypeAlias = {body!r}")

    nested = [(item.name, item.type_ref) for item in collected] + named_objects(contract)
    for raw_name, type_ref in nested:
        name = to_pascal_case(raw_name)
        if name in emitted:
            continue
        classes.append(render_typed_dict(mapper, name, type_ref))
        emitted.add(name)

    utilities = mapper.get_collected_utilities()
    prelude = [u.code for u in utilities if u.priority >= PRELUDE_PRIORITY]
    trailing = [u.code for u in utilities if u.priority < PRELUDE_PRIORITY]

    lines = [HEADER, "from __future__ import annotations", ""]
    extra_imports = mapper.get_collected_imports()
    if extra_imports:
        lines.extend(extra_imports)
    lines.append("from typing import Any, Dict, List, Literal, Optional, Tuple, Union")
    lines.append("")
    lines.append("from typing_extensions import NotRequired, TypeAlias, TypedDict")

    for block in [*prelude, *classes, *trailing]:
        lines.append("")
        lines.append("")
        lines.append(block)

    if aliases:
        lines.append("")
        lines.append("")
        lines.extend(aliases)

    return "\n".join(lines) + "\n"
