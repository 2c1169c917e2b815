"""Renders router.py and the package __init__ for the Python server target."""
import re
from typing import List

from xrpcgen.framework.utils import to_pascal_case, to_snake_case
from xrpcgen.generators.python_server.render_validation import validator_name
from xrpcgen.generators.python_server.type_mapper import PyTypeMapper
from xrpcgen.ir.contract import ContractDefinition, Endpoint
from xrpcgen.ir.kinds import TypeKind

HEADER = '"""Generated by xrpcgen. Do not edit."""'

RUNTIME = '''@dataclass
class Context:
    """Per-call state shared between middleware and handlers."""
    request: Optional[Request] = None
    data: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)


class RpcError(Exception):
    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code


# Middleware may mutate the context, return a replacement, or raise RpcError.
Middleware = Callable[[Context], Any]'''

DISPATCH = '''    def use(self, middleware: Middleware) -> Middleware:
        self.middleware.append(middleware)
        return middleware

    def query(self, name: str, handler: Callable[..., Any]) -> None:
        if METHODS.get(name) != "query":
            raise ValueError(f"Unknown query: {name}")
        self.query_handlers[name] = handler

    def mutation(self, name: str, handler: Callable[..., Any]) -> None:
        if METHODS.get(name) != "mutation":
            raise ValueError(f"Unknown mutation: {name}")
        self.mutation_handlers[name] = handler

    async def call(self, method: str, params: Any = None, ctx: Optional[Context] = None) -> Any:
        """Run middleware, validate params and invoke the handler for method."""
        if method not in METHODS:
            raise RpcError("Method not found", status_code=404)
        ctx = ctx if ctx is not None else Context()
        for middleware in self.middleware:
            outcome = middleware(ctx)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            if isinstance(outcome, Context):
                ctx = outcome

        if METHODS[method] == "query":
            handler = self.query_handlers.get(method)
        else:
            handler = self.mutation_handlers.get(method)
        if handler is None:
            raise RpcError("Handler not found", status_code=404)

        params = {} if params is None else params
        validator = VALIDATORS.get(method)
        if validator is not None:
            errors = validator(params)
            if errors:
                raise ValidationErrors(errors)

        result = handler(ctx, params)
        if inspect.isawaitable(result):
            result = await result
        return result

    def as_fastapi(self, path: str = "/api") -> APIRouter:
        """Expose the router as a single POST endpoint speaking {method, params}."""
        api = APIRouter()

        @api.post(path)
        async def rpc(request: Request):
            try:
                body = await request.json()
            except ValueError:
                return JSONResponse({"error": "Invalid request: body is not JSON"}, status_code=400)
            if not isinstance(body, dict) or not isinstance(body.get("method"), str):
                return JSONResponse({"error": "Invalid request: missing method"}, status_code=400)
            try:
                result = await self.call(body["method"], body.get("params"), Context(request=request))
            except ValidationErrors as exc:
                return JSONResponse(
                    {"error": "Validation failed", "errors": exc.to_list()}, status_code=400
                )
            except RpcError as exc:
                return JSONResponse({"error": str(exc)}, status_code=exc.status_code)
            return JSONResponse({"result": result})

        return api'''


TYPING_NAMES = {
    "Any", "Dict", "List", "Literal", "Optional", "Tuple", "Union",
    "None", "str", "int", "float", "bool",
}


def referenced_names(annotation: str) -> List[str]:
    """Model names an annotation refers to, in order of appearance."""
    stripped = re.sub(r"'[^']*'|\"[^\"]*\"", "", annotation)
    names: List[str] = []
    for name in re.findall(r"[A-Za-z_][A-Za-z0-9_]*", stripped):
        if name not in TYPING_NAMES and name not in names:
            names.append(name)
    return names


def handler_method_name(endpoint: Endpoint) -> str:
    group, _, name = endpoint.full_name.partition(".")
    return f"{to_snake_case(group)}_{to_snake_case(name)}"


def render_router_py(mapper: PyTypeMapper, contract: ContractDefinition) -> str:
    model_names: List[str] = []
    validator_imports: List[str] = []
    aliases: List[str] = []
    methods: List[str] = []
    validators: List[str] = []
    registrations: List[str] = []

    for endpoint in contract.endpoints:
        base = to_pascal_case(endpoint.full_name)
        input_type = mapper.map_type(endpoint.input).type
        output_type = mapper.map_type(endpoint.output).type
        for mapped in (input_type, output_type):
            for name in referenced_names(mapped):
                if name not in model_names:
                    model_names.append(name)

        handler_alias = f"{base}Handler"
        signature = f"Callable[[Context, {input_type}], Union[{output_type}, Awaitable[{output_type}]]]"
        aliases.append(f"{handler_alias}: TypeAlias = {signature!r}")
        methods.append(f"    {endpoint.full_name!r}: {endpoint.kind!r},")

        if endpoint.input.kind == TypeKind.OBJECT and endpoint.input.name:
            fn = validator_name(to_pascal_case(endpoint.input.name))
            if fn not in validator_imports:
                validator_imports.append(fn)
            validators.append(f"    {endpoint.full_name!r}: {fn},")

        method = handler_method_name(endpoint)
        registrations.extend([
            "",
            f"    def {method}(self, handler: {handler_alias}) -> {handler_alias}:",
            f'        """Register the handler for the {endpoint.full_name} {endpoint.kind}."""',
            f"        self.{endpoint.kind}({endpoint.full_name!r}, handler)",
            "        return handler",
        ])

    lines = [
        HEADER,
        "from __future__ import annotations",
        "",
        "import inspect",
        "from dataclasses import dataclass, field",
        "from typing import Any, Awaitable, Callable, Dict, List, Optional, Union",
        "",
        "from fastapi import APIRouter, Request",
        "from fastapi.responses import JSONResponse",
        "from typing_extensions import TypeAlias",
        "",
    ]
    if model_names:
        lines.append("from .models import (")
        lines.extend(f"    {name}," for name in model_names)
        lines.append(")")
    lines.append("from .validation import (")
    lines.append("    ValidationErrors,")
    lines.extend(f"    {fn}," for fn in validator_imports)
    lines.append(")")
    lines.extend(["", "", RUNTIME, ""])
    lines.extend(aliases)
    lines.extend(["", "METHODS: Dict[str, str] = {"])
    lines.extend(methods)
    lines.append("}")
    lines.extend(["", "VALIDATORS: Dict[str, Callable[[Any], List[Any]]] = {"])
    lines.extend(validators)
    lines.append("}")
    lines.extend([
        "",
        "",
        "class Router:",
        "    def __init__(self) -> None:",
        "        self.query_handlers: Dict[str, Callable[..., Any]] = {}",
        "        self.mutation_handlers: Dict[str, Callable[..., Any]] = {}",
        "        self.middleware: List[Middleware] = []",
    ])
    lines.extend(registrations)
    lines.append("")
    lines.append(DISPATCH)
    return "\n".join(lines) + "\n"


def render_package_init() -> str:
    lines = [
        HEADER,
        "from .router import Context, Router, RpcError",
        "from .validation import ValidationError, ValidationErrors, ensure_valid",
        "",
        "__all__ = [",
        '    "Context",',
        '    "Router",',
        '    "RpcError",',
        '    "ValidationError",',
        '    "ValidationErrors",',
        '    "ensure_valid",',
        "]",
    ]
    return "\n".join(lines) + "\n"
