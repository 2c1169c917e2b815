"""Renders client.ts: a fetch-based client with one function per endpoint."""
import re
from typing import Dict, List

from xrpcgen.framework.code_writer import CodeWriter
from xrpcgen.framework.utils import to_camel_case, to_pascal_case
from xrpcgen.generators.ts_client.render_types import HEADER
from xrpcgen.generators.ts_client.type_mapper import TsTypeMapper, ts_key
from xrpcgen.ir.contract import ContractDefinition, Endpoint

RUNTIME = """export interface XRpcClientConfig {
  baseUrl: string;
  headers?: Record<string, string>;
}

export interface CallOptions {
  signal?: AbortSignal;
  headers?: Record<string, string>;
}

export interface FieldError {
  field: string;
  message: string;
}

export class XRpcError extends Error {
  readonly status: number;
  readonly errors: FieldError[];

  constructor(message: string, status: number, errors: FieldError[] = []) {
    super(message);
    this.name = "XRpcError";
    this.status = status;
    this.errors = errors;
  }
}

async function callRpc<T>(
  config: XRpcClientConfig,
  method: string,
  params: unknown,
  options?: CallOptions,
): Promise<T> {
  const response = await fetch(config.baseUrl, {
    method: "POST",
    headers: {
      "Content-Type": "application/json",
      ...config.headers,
      ...options?.headers,
    },
    body: JSON.stringify({ method, params }),
    signal: options?.signal,
  });

  const text = await response.text();
  let body: { result?: T; error?: string; errors?: FieldError[] } = {};
  try {
    body = text ? JSON.parse(text) : {};
  } catch {
    body = { error: text };
  }

  if (!response.ok || body.error) {
    throw new XRpcError(body.error || `HTTP ${response.status}`, response.status, body.errors ?? []);
  }
  return body.result as T;
}"""

_TYPE_NAME = re.compile(r"\b[A-Z][A-Za-z0-9_]*\b")
_BUILTIN = {"Record", "Array", "Date"}


def function_name(endpoint: Endpoint) -> str:
    group, _, name = endpoint.full_name.partition(".")
    return f"{to_camel_case(group)}{to_pascal_case(name)}"


def referenced_types(annotation: str) -> List[str]:
    stripped = re.sub(r'"(?:[^"\\]|\\.)*"', "", annotation)
    return [name for name in _TYPE_NAME.findall(stripped) if name not in _BUILTIN]


def group_endpoints(contract: ContractDefinition) -> Dict[str, List[Endpoint]]:
    groups: Dict[str, List[Endpoint]] = {}
    for endpoint in contract.endpoints:
        groups.setdefault(endpoint.group, []).append(endpoint)
    return groups


def render_client_ts(mapper: TsTypeMapper, contract: ContractDefinition) -> str:
    imports: List[str] = []
    functions = CodeWriter(indent="  ")
    signatures: Dict[str, str] = {}

    for endpoint in contract.endpoints:
        input_type = mapper.map_type(endpoint.input).type
        output_type = mapper.map_type(endpoint.output).type
        for name in referenced_types(input_type) + referenced_types(output_type):
            if name not in imports:
                imports.append(name)
        signatures[endpoint.full_name] = input_type

        fn = function_name(endpoint)
        functions.line(f"/** Calls the {endpoint.full_name} {endpoint.kind}. */")
        with functions.block(
            f"export async function {fn}(config: XRpcClientConfig, input: {input_type}, "
            f"options?: CallOptions): Promise<{output_type}> {{"
        ):
            functions.line(f'return callRpc<{output_type}>(config, "{endpoint.full_name}", input, options);')
        functions.blank()

    writer = CodeWriter(indent="  ")
    writer.line(HEADER)
    if imports:
        writer.line(f'import type {{ {", ".join(imports)} }} from "./types";')
    writer.blank()
    writer.lines(*RUNTIME.split("\n"))
    writer.blank()
    rendered = writer.render() + functions.render()

    factory = CodeWriter(indent="  ")
    with factory.block("export function createClient(config: XRpcClientConfig) {"):
        with factory.block("return {", "};"):
            for group, endpoints in group_endpoints(contract).items():
                with factory.block(f"{ts_key(group)}: {{", "},"):
                    for endpoint in endpoints:
                        method = ts_key(to_camel_case(endpoint.name))
                        factory.line(
                            f"{method}: (input: {signatures[endpoint.full_name]}, options?: CallOptions) =>"
                        )
                        factory.line(f"  {function_name(endpoint)}(config, input, options),")
    factory.blank()
    factory.line("export type ApiClient = ReturnType<typeof createClient>;")
    return rendered + factory.render()
