"""Tests for configuration, logging and the code writer."""
import logging

from xrpcgen.core.config import Settings
from xrpcgen.core.logging import ContextFormatter
from xrpcgen.framework.code_writer import CodeWriter
from xrpcgen.framework.utils import to_camel_case, to_pascal_case, to_snake_case


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("XRPC_PACKAGE_NAME", "billing_api")
    monkeypatch.setenv("XRPC_STRICT", "true")
    monkeypatch.setenv("XRPC_DEFAULT_TARGETS", '["go-server", "ts-client"]')

    settings = Settings()

    assert settings.package_name == "billing_api"
    assert settings.strict is True
    assert settings.default_targets == ["go-server", "ts-client"]
    assert settings.go_package_name == "server"


def test_formatter_fills_missing_context():
    formatter = ContextFormatter("%(target)s %(stage)s %(message)s")
    plain = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    tagged = logging.LogRecord("x", logging.INFO, __file__, 1, "hello", None, None)
    tagged.target = "go-server"
    tagged.stage = "EMIT"

    assert formatter.format(plain) == "- - hello"
    assert formatter.format(tagged) == "go-server EMIT hello"


def test_code_writer_blocks_and_indentation():
    writer = CodeWriter(indent="\t")
    with writer.block("func main() {"):
        writer.line("x := 1")
        with writer.block("if x > 0 {"):
            writer.line("fmt.Println(x)")
        writer.blank()
    writer.line("// end")

    assert writer.render() == "func main() {\n\tx := 1\n\tif x > 0 {\n\t\tfmt.Println(x)\n\t}\n\n}\n// end\n"

    writer.reset()
    writer.dedent()
    assert writer.line("top").render() == "top\n"


def test_naming_helpers():
    assert to_pascal_case("task.create") == "TaskCreate"
    assert to_pascal_case("user_profile") == "UserProfile"
    assert to_pascal_case("createdAt") == "CreatedAt"
    assert to_camel_case("user-settings") == "userSettings"
    assert to_snake_case("TaskCreateInput") == "task_create_input"
