"""Shared contracts and helpers for the generator tests."""
import importlib
import itertools
import sys
import tempfile

import pytest

from xrpcgen.ir.contract import (
    ContractDefinition,
    Endpoint,
    Property,
    TypeDefinition,
    enum_of,
    object_type,
    primitive,
    rules,
)
from xrpcgen.writer import write_files

_package_ids = itertools.count()


def build_task_contract() -> ContractDefinition:
    """task.create: {title (3..200 chars), priority enum} -> {id uuid, title}."""
    task_input = object_type([
        Property("title", primitive("string", rules(min_length=3, max_length=200))),
        Property("priority", enum_of(["low", "medium", "high", "urgent"])),
    ], name="TaskCreateInput")
    task_output = object_type([
        Property("id", primitive("string", rules(uuid=True))),
        Property("title", primitive("string")),
    ], name="TaskCreateOutput")
    return ContractDefinition(
        types=[
            TypeDefinition("TaskCreateInput", task_input),
            TypeDefinition("TaskCreateOutput", task_output),
        ],
        endpoints=[
            Endpoint(
                name="create",
                full_name="task.create",
                kind="mutation",
                input=task_input,
                output=task_output,
            ),
        ],
    )


@pytest.fixture
def task_contract() -> ContractDefinition:
    return build_task_contract()


@pytest.fixture
def load_generated():
    """Write a python-server result to disk and import its package.

    Every call gets a unique package name so generated modules never collide
    in ``sys.modules``.
    """
    temp_dirs = []
    packages = []

    def load(generator, contract, module="validation"):
        package = f"xrpc_generated_{next(_package_ids)}"
        result = generator.generate(contract, options={"package_name": package})
        assert result.ok, f"generation failed: {[str(d) for d in result.errors]}"
        temp_dir = tempfile.TemporaryDirectory()
        temp_dirs.append(temp_dir)
        write_files(result.files, temp_dir.name)
        sys.path.insert(0, temp_dir.name)
        packages.append(package)
        return importlib.import_module(f"{package}.{module}")

    yield load

    for temp_dir in temp_dirs:
        if temp_dir.name in sys.path:
            sys.path.remove(temp_dir.name)
        temp_dir.cleanup()
    for name in list(sys.modules):
        if any(name == p or name.startswith(p + ".") for p in packages):
            del sys.modules[name]
