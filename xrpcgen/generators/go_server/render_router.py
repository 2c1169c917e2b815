"""Renders router.go: a net/http handler speaking the {method, params} protocol."""
from xrpcgen.framework.code_writer import CodeWriter
from xrpcgen.framework.utils import to_pascal_case
from xrpcgen.generators.go_server.patterns import go_string
from xrpcgen.generators.go_server.render_types import HEADER, render_imports
from xrpcgen.generators.go_server.render_validation import validator_name
from xrpcgen.generators.go_server.type_mapper import GoTypeMapper
from xrpcgen.ir.contract import ContractDefinition, Endpoint
from xrpcgen.ir.kinds import TypeKind

ROUTER_CODE = """type QueryHandler func(ctx *Context, input interface{}) (interface{}, error)

type MutationHandler func(ctx *Context, input interface{}) (interface{}, error)

type Router struct {
	queryHandlers    map[string]QueryHandler
	mutationHandlers map[string]MutationHandler
	middleware       []MiddlewareFunc
}

func NewRouter() *Router {
	return &Router{
		queryHandlers:    make(map[string]QueryHandler),
		mutationHandlers: make(map[string]MutationHandler),
		middleware:       make([]MiddlewareFunc, 0),
	}
}

func (r *Router) Query(name string, handler QueryHandler) {
	r.queryHandlers[name] = handler
}

func (r *Router) Mutation(name string, handler MutationHandler) {
	r.mutationHandlers[name] = handler
}

func (r *Router) Use(middleware MiddlewareFunc) {
	r.middleware = append(r.middleware, middleware)
}

func writeJSON(w http.ResponseWriter, status int, body interface{}) {
	w.Header().Set("Content-Type", "application/json")
	w.WriteHeader(status)
	json.NewEncoder(w).Encode(body)
}

func writeValidationError(w http.ResponseWriter, err error) {
	if validationErrs, ok := err.(ValidationErrors); ok {
		writeJSON(w, http.StatusBadRequest, map[string]interface{}{
			"error":  "Validation failed",
			"errors": validationErrs,
		})
		return
	}
	writeJSON(w, http.StatusBadRequest, map[string]interface{}{"error": err.Error()})
}

func decodeParams(params json.RawMessage, input interface{}) error {
	if len(params) == 0 {
		params = json.RawMessage("null")
	}
	return json.Unmarshal(params, input)
}"""

SERVE_PROLOGUE = """if req.Method != http.MethodPost {
	http.Error(w, "Method not allowed", http.StatusMethodNotAllowed)
	return
}

var request struct {
	Method string          `json:"method"`
	Params json.RawMessage `json:"params"`
}
if err := json.NewDecoder(req.Body).Decode(&request); err != nil {
	http.Error(w, fmt.Sprintf("Invalid request: %v", err), http.StatusBadRequest)
	return
}

ctx := &Context{
	Request:        req,
	ResponseWriter: w,
	Data:           make(map[string]interface{}),
}

for _, middleware := range r.middleware {
	result := middleware(ctx)
	if result.Error != nil {
		http.Error(w, fmt.Sprintf("Middleware error: %v", result.Error), http.StatusInternalServerError)
		return
	}
	if result.Response != nil {
		return
	}
	if result.Context != nil {
		ctx = result.Context
	}
}

var result interface{}
var err error"""

SERVE_EPILOGUE = """if err != nil {
	http.Error(w, fmt.Sprintf("Handler error: %v", err), http.StatusInternalServerError)
	return
}
writeJSON(w, http.StatusOK, map[string]interface{}{"result": result})"""


def handler_type_name(endpoint: Endpoint) -> str:
    return f"{to_pascal_case(endpoint.full_name)}Handler"


def _has_validator(endpoint: Endpoint) -> bool:
    return endpoint.input.kind == TypeKind.OBJECT and bool(endpoint.input.name)


def render_registration(writer: CodeWriter, mapper: GoTypeMapper, endpoint: Endpoint) -> None:
    input_type = mapper.map_type(endpoint.input).type
    output_type = mapper.map_type(endpoint.output).type
    base = to_pascal_case(endpoint.full_name)
    kind = to_pascal_case(endpoint.kind)
    writer.line(f"type {handler_type_name(endpoint)} func(ctx *Context, input {input_type}) ({output_type}, error)")
    writer.blank()
    writer.line(f"// Handle{base} registers the handler for the {endpoint.full_name} {endpoint.kind}.")
    with writer.block(f"func (r *Router) Handle{base}(handler {handler_type_name(endpoint)}) {{"):
        with writer.block(f"r.{kind}({go_string(endpoint.full_name)}, "
                          f"func(ctx *Context, input interface{{}}) (interface{{}}, error) {{", "})"):
            writer.line(f"return handler(ctx, input.({input_type}))")
    writer.blank()


def render_case(writer: CodeWriter, mapper: GoTypeMapper, endpoint: Endpoint) -> None:
    input_type = mapper.map_type(endpoint.input).type
    table = "queryHandlers" if endpoint.kind == "query" else "mutationHandlers"
    writer.line(f"case {go_string(endpoint.full_name)}:")
    with writer.indented():
        writer.line(f"handler, ok := r.{table}[{go_string(endpoint.full_name)}]")
        with writer.block("if !ok {"):
            writer.line('http.Error(w, "Handler not found", http.StatusNotFound)')
            writer.line("return")
        writer.line(f"var input {input_type}")
        with writer.block("if err := decodeParams(request.Params, &input); err != nil {"):
            writer.line('http.Error(w, fmt.Sprintf("Invalid params: %v", err), http.StatusBadRequest)')
            writer.line("return")
        if _has_validator(endpoint):
            name = to_pascal_case(endpoint.input.name)
            with writer.block(f"if err := {validator_name(name)}(input); err != nil {{"):
                writer.line("writeValidationError(w, err)")
                writer.line("return")
        writer.line("result, err = handler(ctx, input)")


def render_router_go(mapper: GoTypeMapper, contract: ContractDefinition, package: str) -> str:
    writer = CodeWriter(indent="\t")
    writer.line(HEADER)
    writer.blank()
    writer.line(f"package {package}")
    writer.blank()
    render_imports(writer, ["encoding/json", "fmt", "net/http"])
    writer.lines(*ROUTER_CODE.split("\n"))
    writer.blank()

    for endpoint in contract.endpoints:
        render_registration(writer, mapper, endpoint)

    with writer.block("func (r *Router) ServeHTTP(w http.ResponseWriter, req *http.Request) {"):
        writer.lines(*SERVE_PROLOGUE.split("\n"))
        writer.blank()
        with writer.block("switch request.Method {"):
            for endpoint in contract.endpoints:
                render_case(writer, mapper, endpoint)
            writer.line("default:")
            with writer.indented():
                writer.line('http.Error(w, "Method not found", http.StatusNotFound)')
                writer.line("return")
        writer.blank()
        writer.lines(*SERVE_EPILOGUE.split("\n"))
    return writer.render()
