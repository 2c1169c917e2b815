"""TypeScript helper declarations emitted into types.ts."""
import json
from typing import List, Union

from xrpcgen.framework.types import GeneratedUtility
from xrpcgen.framework.utils import to_pascal_case


def ts_literal(value: Union[str, int, float, bool, None]) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return json.dumps(value)


def create_ts_enum_pattern(name: str, values: List[Union[str, int, float]]) -> GeneratedUtility:
    """Const object for string enums, a TS enum for numeric ones, a literal union otherwise."""
    strings = [v for v in values if isinstance(v, str)]
    numbers = [v for v in values if isinstance(v, (int, float)) and not isinstance(v, bool)]

    if strings and not numbers:
        entries = ",\n".join(f"  {to_pascal_case(v) or 'Empty'}: {ts_literal(v)}" for v in strings)
        code = f"""export const {name} = {{
{entries},
}} as const;

export type {name} = (typeof {name})[keyof typeof {name}];

export function is{name}(value: unknown): value is {name} {{
  return Object.values({name}).includes(value as {name});
}}"""
    elif numbers and not strings:
        entries = ",\n".join(f"  Value{i} = {ts_literal(v)}" for i, v in enumerate(numbers))
        code = f"""export enum {name} {{
{entries},
}}

export function is{name}(value: unknown): value is {name} {{
  return typeof value === "number" && Object.values({name}).includes(value);
}}"""
    else:
        rendered = [ts_literal(v) for v in values]
        code = f"""export type {name} = {" | ".join(rendered)};

export const {name}Values: readonly {name}[] = [{", ".join(rendered)}] as const;

export function is{name}(value: unknown): value is {name} {{
  return {name}Values.includes(value as {name});
}}"""
    return GeneratedUtility(id=f"enum_{name}", code=code, include_once=True, priority=100)


def create_ts_union_pattern(name: str, variants: List[str]) -> GeneratedUtility:
    return GeneratedUtility(
        id=f"union_{name}",
        code=f"export type {name} = {' | '.join(variants)};",
        include_once=True,
        priority=80,
    )


def create_ts_tuple_pattern(name: str, elements: List[str]) -> GeneratedUtility:
    params = ", ".join(f"v{i}: {e}" for i, e in enumerate(elements))
    values = ", ".join(f"v{i}" for i in range(len(elements)))
    code = f"""export type {name} = [{", ".join(elements)}];

export function create{name}({params}): {name} {{
  return [{values}];
}}

export function is{name}(value: unknown): value is {name} {{
  return Array.isArray(value) && value.length === {len(elements)};
}}"""
    return GeneratedUtility(id=f"tuple_{name}", code=code, include_once=True, priority=70)
