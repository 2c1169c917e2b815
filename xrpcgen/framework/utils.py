"""Naming helpers shared by the collector and every backend."""
import re


def to_pascal_case(name: str) -> str:
    """Convert snake_case, kebab-case, dotted or camelCase names to PascalCase."""
    words = [w for w in re.split(r'[-_.\s]+', name) if w]
    return "".join(w[0].upper() + w[1:] for w in words)


def to_camel_case(name: str) -> str:
    pascal = to_pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def to_snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    s0 = re.sub(r'[-.\s]+', '_', name)
    s1 = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', s0)
    s2 = re.sub('([a-z0-9])([A-Z])', r'\1_\2', s1)
    return re.sub('_+', '_', s2).lower()
