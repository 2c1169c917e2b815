"""Tests for the ts-client target output."""
from xrpcgen.generators.ts_client import TsClientGenerator
from xrpcgen.ir.contract import (
    ContractDefinition,
    Endpoint,
    Property,
    TypeDefinition,
    array_of,
    date_type,
    enum_of,
    nullable_of,
    object_type,
    optional_of,
    primitive,
    rules,
    tuple_of,
)


def _files(result):
    return {f.path: f.content for f in result.files}


def test_types_and_client_for_task_contract(task_contract):
    result = TsClientGenerator().generate(task_contract, "out")

    assert result.ok
    assert result.diagnostics == []
    files = _files(result)
    assert sorted(files) == ["client/client.ts", "client/types.ts"]

    types_ts = files["client/types.ts"]
    assert "export interface TaskCreateInput {" in types_ts
    assert "  title: string;" in types_ts
    assert '  priority: "low" | "medium" | "high" | "urgent";' in types_ts

    client_ts = files["client/client.ts"]
    assert 'import type { TaskCreateInput, TaskCreateOutput } from "./types";' in client_ts
    assert "export async function taskCreate(config: XRpcClientConfig, input: TaskCreateInput" in client_ts
    assert 'return callRpc<TaskCreateOutput>(config, "task.create", input, options);' in client_ts
    assert "export function createClient(config: XRpcClientConfig) {" in client_ts
    assert "export type ApiClient = ReturnType<typeof createClient>;" in client_ts


def test_validation_rules_are_left_to_the_server(task_contract):
    """The client carries types only; no validation code is generated."""
    client_ts = _files(TsClientGenerator().generate(task_contract, "out"))["client/client.ts"]

    assert "minLength" not in client_ts
    assert "at least 3" not in client_ts


def test_optional_nullable_and_dates():
    event = object_type([
        Property("title", primitive("string")),
        Property("note", optional_of(primitive("string")), required=False),
        Property("due", nullable_of(date_type())),
        Property("tags", array_of(nullable_of(primitive("string"))), validation=rules(max_items=5)),
        Property("display-name", primitive("string")),
    ], name="EventInput")
    contract = ContractDefinition(types=[TypeDefinition("EventInput", event)])
    types_ts = _files(TsClientGenerator().generate(contract, "out"))["client/types.ts"]

    assert "  note?: string;" in types_ts
    assert "  due: string | null;" in types_ts
    assert "  tags: (string | null)[];" in types_ts
    assert '  "display-name": string;' in types_ts


def test_named_enums_and_tuples_are_emitted_before_interfaces():
    point = tuple_of([primitive("number"), primitive("number")])
    shape = object_type([Property("origin", point)], name="ShapeInput")
    contract = ContractDefinition(types=[
        TypeDefinition("Priority", enum_of(["low", "high"])),
        TypeDefinition("Point", point),
        TypeDefinition("ShapeInput", shape),
    ])
    types_ts = _files(TsClientGenerator().generate(contract, "out"))["client/types.ts"]

    assert "export const Priority = {" in types_ts
    assert "export function isPriority(value: unknown): value is Priority {" in types_ts
    assert "export type Point = [number, number];" in types_ts
    assert "  origin: Point;" in types_ts
    assert types_ts.index("export const Priority") < types_ts.index("export type Point")
    assert types_ts.index("export type Point") < types_ts.index("export interface ShapeInput")


def test_client_groups_endpoints():
    echo = object_type([Property("text", primitive("string"))], name="EchoInput")
    contract = ContractDefinition(
        types=[TypeDefinition("EchoInput", echo)],
        endpoints=[
            Endpoint("say", "echo.say", "query", echo, primitive("string")),
            Endpoint("shout", "echo.shout", "mutation", echo, primitive("string")),
        ],
    )
    client_ts = _files(TsClientGenerator().generate(contract, "out", {"ts_directory": "web"}))["web/client.ts"]

    assert "  echo: {" in client_ts
    assert "say: (input: EchoInput, options?: CallOptions) =>" in client_ts
    assert "  echoShout(config, input, options)," in client_ts
