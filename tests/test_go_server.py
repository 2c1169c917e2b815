"""Tests for the go-server target output."""
from xrpcgen.generators.go_server import GoServerGenerator
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
    union_of,
)


def _files(result):
    return {f.path: f.content for f in result.files}


def test_task_contract_generates_three_files(task_contract):
    result = GoServerGenerator().generate(task_contract, "out", {"go_package_name": "api"})

    assert result.ok
    assert sorted(_files(result)) == ["api/router.go", "api/types.go", "api/validation.go"]
    assert result.diagnostics == []


def test_structs_and_validators(task_contract):
    files = _files(GoServerGenerator().generate(task_contract, "out", {"go_package_name": "api"}))
    types_go = files["api/types.go"]
    validation_go = files["api/validation.go"]

    assert types_go.startswith("// Code generated by xrpcgen. DO NOT EDIT.")
    assert "package api" in types_go
    assert "type TaskCreateInput struct {" in types_go
    assert 'Title string `json:"title"`' in types_go

    assert "func ValidateTaskCreateInput(input TaskCreateInput) error {" in validation_go
    assert 'if input.Title == "" {' in validation_go
    assert 'input.Title != "" && utf8.RuneCountInString(input.Title) < 3' in validation_go
    assert '"unicode/utf8"' in validation_go
    assert "must be one of: low, medium, high, urgent" in validation_go


def test_router_dispatches_and_validates(task_contract):
    router_go = _files(GoServerGenerator().generate(task_contract, "out"))["server/router.go"]

    assert "type TaskCreateHandler func(ctx *Context, input TaskCreateInput) (TaskCreateOutput, error)" in router_go
    assert "func (r *Router) HandleTaskCreate(handler TaskCreateHandler) {" in router_go
    assert 'case "task.create":' in router_go
    assert "if err := ValidateTaskCreateInput(input); err != nil {" in router_go
    assert 'writeJSON(w, http.StatusOK, map[string]interface{}{"result": result})' in router_go
    assert '"Method not found"' in router_go


def test_optional_fields_use_omitempty_and_guards():
    profile = object_type([
        Property("bio", optional_of(primitive("string", rules(max_length=10))), required=False),
        Property("tags", optional_of(array_of(primitive("string"), rules(max_items=3))), required=False),
    ], name="ProfileInput")
    contract = ContractDefinition(types=[TypeDefinition("ProfileInput", profile)])
    files = _files(GoServerGenerator().generate(contract, "out"))

    assert 'Bio string `json:"bio,omitempty"`' in files["server/types.go"]
    validation_go = files["server/validation.go"]
    assert 'if input.Bio != "" {' in validation_go
    assert "if input.Tags != nil {" in validation_go
    assert "len(input.Tags) > 3" in validation_go


def test_required_nullable_field_warns():
    """Go cannot tell a missing field from null, so the target says so."""
    event = object_type([
        Property("at", nullable_of(date_type())),
        Property("count", nullable_of(primitive("integer", rules(minimum=1)))),
    ], name="EventInput")
    contract = ContractDefinition(types=[TypeDefinition("EventInput", event)])
    result = GoServerGenerator().generate(contract, "out")

    assert result.ok
    messages = [(d.message, d.path) for d in result.warnings]
    assert ("Required nullable field is validated only when present", "EventInput.at") in messages
    assert ("Required nullable field is validated only when present", "EventInput.count") in messages

    files = _files(result)
    assert 'Count *int `json:"count"`' in files["server/types.go"]
    assert "type DateTime struct" in files["server/types.go"]
    assert "if input.Count != nil {" in files["server/validation.go"]
    assert "float64(*input.Count) < 1" in files["server/validation.go"]


def test_unions_generate_with_warnings():
    """Unions are supported through a fallback, so generation succeeds with warnings."""
    shape = object_type([
        Property("value", union_of([primitive("string"), primitive("number")])),
    ], name="ShapeInput")
    contract = ContractDefinition(
        types=[
            TypeDefinition("ShapeInput", shape),
            TypeDefinition("Status", enum_of(["open", "closed"])),
            TypeDefinition("Id", union_of([primitive("string"), primitive("integer")])),
        ],
    )
    result = GoServerGenerator().generate(contract, "out")

    assert result.ok
    assert result.files
    assert any("limited support" in d.message for d in result.warnings)
    assert any("interface{}" in d.message for d in result.warnings)

    types_go = _files(result)["server/types.go"]
    assert "type Status string" in types_go
    assert "func (e Status) IsValid() bool" in types_go
    assert "type Id struct" in types_go
    assert "func (u Id) AsString() (string, bool)" in types_go
    assert 'Value interface{} `json:"value"`' in types_go


def test_generator_instance_is_reusable(task_contract):
    """A second run on the same instance starts from a clean state."""
    generator = GoServerGenerator()
    first = _files(generator.generate(task_contract, "out"))
    second = _files(generator.generate(task_contract, "out"))

    assert first == second
