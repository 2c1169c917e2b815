"""Reusable Python snippets emitted alongside the generated server."""
from typing import List, Union

from xrpcgen.framework.types import GeneratedUtility
from xrpcgen.framework.utils import to_snake_case

# Utilities at or above this priority are emitted before the TypedDict classes.
PRELUDE_PRIORITY = 50


def py_literal(value: Union[str, int, float, bool, None]) -> str:
    """Render a scalar as Python source."""
    return repr(value)


def create_py_enum_pattern(name: str, values: List[Union[str, int, float]]) -> GeneratedUtility:
    constant = to_snake_case(name).upper() + "_VALUES"
    rendered = ", ".join(py_literal(v) for v in values)
    trailing = "," if len(values) == 1 else ""
    code = "\n".join([
        f"{name} = Literal[{rendered}]",
        f"{constant}: Tuple[Any, ...] = ({rendered}{trailing})",
        "",
        "",
        f"def is_{to_snake_case(name)}(value: Any) -> bool:",
        f'    """True when value is one of the allowed {name} values."""',
        f"    return value in {constant}",
    ])
    return GeneratedUtility(
        id=f"enum_{name}",
        code=code,
        include_once=True,
        priority=100,
    )


def create_py_datetime_pattern() -> GeneratedUtility:
    code = "\n".join([
        "def parse_datetime(value: str) -> datetime:",
        '    """Parse an ISO-8601 timestamp as sent on the wire."""',
        '    if value.endswith("Z"):',
        '        value = value[:-1] + "+00:00"',
        "    return datetime.fromisoformat(value)",
        "",
        "",
        "def is_datetime(value: Any) -> bool:",
        "    if not isinstance(value, str):",
        "        return False",
        "    try:",
        "        parse_datetime(value)",
        "    except ValueError:",
        "        return False",
        "    return True",
    ])
    return GeneratedUtility(
        id="datetime",
        code=code,
        imports=["from datetime import datetime"],
        include_once=True,
        priority=85,
    )


def create_py_union_pattern(name: str, body: str) -> GeneratedUtility:
    return GeneratedUtility(
        id=f"union_{name}",
        code=f"{name}: TypeAlias = {body!r}",
        include_once=True,
        priority=30,
    )


def create_py_tuple_pattern(name: str, body: str) -> GeneratedUtility:
    return GeneratedUtility(
        id=f"tuple_{name}",
        code=f"{name}: TypeAlias = {body!r}",
        include_once=True,
        priority=20,
    )


def create_py_email_pattern() -> GeneratedUtility:
    return GeneratedUtility(
        id="email_pattern",
        code='_EMAIL_RE = re.compile(r"^[^@\\s]+@[^@\\s]+\\.[^@\\s]+$")',
        imports=["import re"],
        include_once=True,
        priority=60,
    )


def create_py_uuid_pattern() -> GeneratedUtility:
    return GeneratedUtility(
        id="uuid_pattern",
        code=(
            "_UUID_RE = re.compile(\n"
            '    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE\n'
            ")"
        ),
        imports=["import re"],
        include_once=True,
        priority=60,
    )


def create_py_url_pattern() -> GeneratedUtility:
    code = "\n".join([
        "def _is_url(value: str) -> bool:",
        "    parsed = urlparse(value)",
        "    return bool(parsed.scheme) and bool(parsed.netloc)",
    ])
    return GeneratedUtility(
        id="url_check",
        code=code,
        imports=["from urllib.parse import urlparse"],
        include_once=True,
        priority=60,
    )
