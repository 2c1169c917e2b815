"""Tests for the target registry, file writer and command line."""
import logging
import tempfile
from pathlib import Path

import pytest

from xrpcgen.cli import build_parser, main
from xrpcgen.core.errors import UnknownTargetError
from xrpcgen.framework.types import GeneratedFile
from xrpcgen.generators.python_server import PythonServerGenerator
from xrpcgen.registry import TargetRegistry
from xrpcgen.writer import write_files

CONTRACT_SOURCE = '''
from pydantic import BaseModel, Field

from xrpcgen.extractor import create_endpoint, create_router, mutation


class CreateTask(BaseModel):
    title: str = Field(min_length=3)


class Task(BaseModel):
    id: int
    title: str


router = create_router(task=create_endpoint(create=mutation(input=CreateTask, output=Task)))
'''

UNION_CONTRACT_SOURCE = '''
from typing import Union

from pydantic import BaseModel

from xrpcgen.extractor import create_endpoint, create_router, query


class Lookup(BaseModel):
    key: Union[int, str]


router = create_router(item=create_endpoint(get=query(input=Lookup, output=Lookup)))
'''


@pytest.fixture(autouse=True)
def restore_logging():
    """main() installs its own root handler; put the previous ones back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _write_contract(directory: Path, source: str, name: str = "contract.py") -> Path:
    path = directory / name
    path.write_text(source, encoding="utf-8")
    return path


def test_registry_lists_and_builds_targets():
    registry = TargetRegistry.default()

    assert registry.names() == ["go-server", "python-server", "ts-client"]
    first = registry.get("python-server")
    second = registry.get("python-server")
    assert isinstance(first, PythonServerGenerator)
    assert first is not second, "each lookup must return a fresh generator"


def test_registry_rejects_unknown_targets():
    with pytest.raises(UnknownTargetError) as exc_info:
        TargetRegistry.default().get("rust-server")

    assert "rust-server" in str(exc_info.value)
    assert "go-server" in str(exc_info.value)


def test_write_files_creates_parent_directories():
    with tempfile.TemporaryDirectory() as temp_dir:
        files = [
            GeneratedFile(path="pkg/__init__.py", content=""),
            GeneratedFile(path="pkg/sub/models.py", content="X = 1\n"),
        ]
        written = write_files(files, Path(temp_dir) / "out")

        assert [p.relative_to(Path(temp_dir) / "out").as_posix() for p in written] == [
            "pkg/__init__.py",
            "pkg/sub/models.py",
        ]
        assert (Path(temp_dir) / "out" / "pkg" / "sub" / "models.py").read_text(encoding="utf-8") == "X = 1\n"


def test_parser_defaults():
    args = build_parser().parse_args(["generate", "contract.py", "--targets", "go-server", "ts-client"])

    assert args.command == "generate"
    assert args.targets == ["go-server", "ts-client"]
    assert args.output is None


def test_generate_writes_every_target(capsys):
    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)
        contract = _write_contract(temp_path, CONTRACT_SOURCE)
        out_dir = temp_path / "generated"

        exit_code = main([
            "--log-level", "WARNING",
            "generate", str(contract),
            "--targets", "python-server", "go-server", "ts-client",
            "--output", str(out_dir),
            "--package", "tasks_api",
            "--go-package", "tasks",
        ])

        assert exit_code == 0
        assert (out_dir / "tasks_api" / "validation.py").exists()
        assert (out_dir / "tasks" / "router.go").exists()
        assert (out_dir / "client" / "client.ts").exists()
        validation = (out_dir / "tasks_api" / "validation.py").read_text(encoding="utf-8")
        assert "def validate_task_create_input(" in validation

    output = capsys.readouterr().out
    assert "✅ python-server" in output
    assert "✅ go-server" in output


def test_strict_mode_treats_warnings_as_failures(capsys):
    """Go reports unions as a warning; --strict refuses to write the files."""
    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)
        contract = _write_contract(temp_path, UNION_CONTRACT_SOURCE)
        out_dir = temp_path / "generated"

        exit_code = main([
            "--log-level", "WARNING",
            "generate", str(contract), "--targets", "go-server", "--output", str(out_dir), "--strict",
        ])

        assert exit_code == 1
        assert not out_dir.exists() or not any(out_dir.rglob("*.go"))

    output = capsys.readouterr().out
    assert "[go-server] warning:" in output
    assert "❌ go-server: generation failed, no files written" in output


def test_validate_reports_per_target(capsys):
    with tempfile.TemporaryDirectory() as temp_dir:
        contract = _write_contract(Path(temp_dir), UNION_CONTRACT_SOURCE)

        exit_code = main(["--log-level", "WARNING", "validate", str(contract)])

    assert exit_code == 0
    output = capsys.readouterr().out
    assert "Endpoints: item.get" in output
    assert "✅ python-server: supported (0 warning(s))" in output
    assert "✅ go-server: supported (1 warning(s))" in output


def test_cli_reports_extraction_errors(capsys):
    with tempfile.TemporaryDirectory() as temp_dir:
        exit_code = main(["--log-level", "WARNING", "generate", str(Path(temp_dir) / "missing.py")])

    assert exit_code == 1
    assert "❌ Error: contract file not found" in capsys.readouterr().out


def test_targets_command(capsys):
    assert main(["--log-level", "WARNING", "targets"]) == 0
    assert capsys.readouterr().out.split() == ["go-server", "python-server", "ts-client"]
