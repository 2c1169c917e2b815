"""Tests for building a contract from pydantic-typed endpoint definitions."""
import tempfile
import textwrap
import uuid
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Dict, List, Literal, Optional, Tuple, Union

import pytest
from pydantic import BaseModel, EmailStr, Field

from xrpcgen.core.errors import ContractExtractionError
from xrpcgen.extractor import (
    SchemaExtractor,
    create_endpoint,
    create_router,
    extract_contract,
    extract_contract_from_file,
    load_router,
    mutation,
    query,
)
from xrpcgen.extractor.classifier import classify
from xrpcgen.ir.contract import rules
from xrpcgen.ir.kinds import TypeKind


class Priority(str, Enum):
    LOW = "low"
    HIGH = "high"


class CreateTask(BaseModel):
    title: str = Field(min_length=3, max_length=200)
    priority: Priority
    owner: Optional[EmailStr] = None
    estimate: int = Field(default=1, ge=1, lt=100)


class Task(BaseModel):
    id: uuid.UUID
    title: str
    created_at: datetime


class TaskId(BaseModel):
    id: uuid.UUID


class TreeNode(BaseModel):
    label: str
    children: List["TreeNode"] = []


TreeNode.model_rebuild()


def _task_router():
    return create_router(
        task=create_endpoint(
            create=mutation(input=CreateTask, output=Task),
            get=query(input=TaskId, output=Task),
        ),
    )


@pytest.mark.parametrize("annotation, required, kind", [
    (str, False, TypeKind.OPTIONAL),
    (Optional[int], True, TypeKind.NULLABLE),
    (Task, True, TypeKind.OBJECT),
    (List[int], True, TypeKind.ARRAY),
    (Tuple[int, ...], True, TypeKind.ARRAY),
    (Union[int, str], True, TypeKind.UNION),
    (Priority, True, TypeKind.ENUM),
    (Literal["a", "b"], True, TypeKind.ENUM),
    (Literal["a"], True, TypeKind.LITERAL),
    (Dict[str, int], True, TypeKind.RECORD),
    (Tuple[int, str], True, TypeKind.TUPLE),
    (datetime, True, TypeKind.DATE),
    (bool, True, TypeKind.PRIMITIVE),
])
def test_classification_precedence(annotation, required, kind):
    assert classify(annotation, required=required) == kind


def test_task_router_extracts_endpoints_and_types():
    contract = extract_contract(_task_router())

    assert [e.full_name for e in contract.endpoints] == ["task.create", "task.get"]
    assert [e.kind for e in contract.endpoints] == ["mutation", "query"]
    assert [t.name for t in contract.types] == [
        "TaskCreateInput",
        "TaskCreateOutput",
        "TaskGetInput",
        "TaskGetOutput",
    ]
    assert contract.endpoints[0].input.name == "TaskCreateInput"


def test_field_constraints_become_rules():
    contract = extract_contract(_task_router())
    props = {p.name: p for p in contract.get_type("TaskCreateInput").type.properties}

    assert props["title"].required
    assert props["title"].validation == rules(min_length=3, max_length=200)

    assert props["priority"].type.kind == TypeKind.ENUM
    assert props["priority"].type.name == "Priority"
    assert props["priority"].type.enum_values == ["low", "high"]

    owner = props["owner"]
    assert not owner.required
    assert owner.type.kind == TypeKind.OPTIONAL
    assert owner.type.inner.kind == TypeKind.NULLABLE
    assert owner.validation == rules(email=True)

    assert props["estimate"].validation == rules(minimum=1, maximum=99, integer=True)


def test_format_types_map_to_string_rules():
    contract = extract_contract(_task_router())
    props = {p.name: p for p in contract.get_type("TaskCreateOutput").type.properties}

    assert props["id"].type.primitive_name == "string"
    assert props["id"].validation == rules(uuid=True)
    assert props["created_at"].type.kind == TypeKind.DATE


def test_positive_and_negative_bounds():
    class Account(BaseModel):
        balance: float = Field(gt=0)
        debt: int = Field(lt=0)
        ratio: float = Field(gt=0.5)

    ref = SchemaExtractor().extract(Account)
    props = {p.name: p.validation for p in ref.properties}

    assert props["balance"] == rules(positive=True)
    assert props["debt"] == rules(negative=True, integer=True)
    assert props["ratio"] == rules(minimum=0.5)


def test_array_constraints_and_pattern():
    class Batch(BaseModel):
        codes: List[str] = Field(min_length=1, max_length=10)
        slug: str = Field(pattern=r"^[a-z-]+$")

    ref = SchemaExtractor().extract(Batch)
    props = {p.name: p for p in ref.properties}

    assert props["codes"].type.kind == TypeKind.ARRAY
    assert props["codes"].validation == rules(min_items=1, max_items=10)
    assert props["slug"].validation == rules(regex=r"^[a-z-]+$")


def test_aliases_are_used_as_wire_names():
    class Page(BaseModel):
        page_size: int = Field(alias="pageSize")

    ref = SchemaExtractor().extract(Page)
    assert [p.name for p in ref.properties] == ["pageSize"]


def test_recursive_model_is_named_after_its_class():
    ref = SchemaExtractor().extract(TreeNode)
    children = ref.properties[1].type.unwrap()

    assert ref.name == "TreeNode"
    assert children.kind == TypeKind.ARRAY
    assert children.element_type is ref


def test_nested_models_are_left_unnamed():
    class Line(BaseModel):
        sku: str

    class Order(BaseModel):
        lines: List[Line]

    ref = SchemaExtractor().extract(Order)
    line = ref.properties[0].type.element_type

    assert line.kind == TypeKind.OBJECT
    assert line.name is None


def test_plain_mapping_endpoints_are_accepted():
    router = {"ping": {"check": {"type": "query", "input": TaskId, "output": bool}}}
    contract = extract_contract(router)

    assert contract.endpoints[0].full_name == "ping.check"
    assert contract.get_type("PingCheckOutput").type.primitive_name == "boolean"


@pytest.mark.parametrize("router, message", [
    ([], "router must be a mapping"),
    ({}, "router has no endpoint groups"),
    ({"task": {}}, "endpoint group must be a non-empty mapping"),
    ({"task": {"create": "nope"}}, "must be created with query() or mutation()"),
    ({"task": {"create": {"type": "query", "input": TaskId}}}, "missing 'output'"),
    ({"task": {"create": {"type": "subscription", "input": TaskId, "output": Task}}}, "must be 'query' or 'mutation'"),
    ({"task": {"create": query(input=int, output=Task)}}, "input must be a pydantic model"),
])
def test_malformed_routers_are_fatal(router, message):
    with pytest.raises(ContractExtractionError) as exc_info:
        extract_contract(router)

    assert message in str(exc_info.value)


def test_errors_name_the_offending_endpoint():
    with pytest.raises(ContractExtractionError) as exc_info:
        extract_contract({"task": {"create": {"type": "query", "input": TaskId}}})

    assert exc_info.value.group == "task"
    assert exc_info.value.endpoint == "create"
    assert str(exc_info.value).startswith("task.create: ")


CONTRACT_SOURCE = '''
from typing import List

from pydantic import BaseModel, Field

from xrpcgen.extractor import create_endpoint, create_router, mutation, query


class CreateNote(BaseModel):
    text: str = Field(min_length=1)


class Note(BaseModel):
    id: int
    text: str


class ListNotes(BaseModel):
    limit: int = 10


router = create_router(
    note=create_endpoint(
        create=mutation(input=CreateNote, output=Note),
        list=query(input=ListNotes, output=List[Note]),
    ),
)
'''


def test_load_contract_from_file():
    """A contract module on disk is imported by path and extracted."""
    with tempfile.TemporaryDirectory() as temp_dir:
        path = Path(temp_dir) / "notes_contract.py"
        path.write_text(textwrap.dedent(CONTRACT_SOURCE), encoding="utf-8")

        contract = extract_contract_from_file(path)

    assert [e.full_name for e in contract.endpoints] == ["note.create", "note.list"]
    assert contract.get_type("NoteListOutput").type.kind == TypeKind.ARRAY


def test_loader_failures():
    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)

        with pytest.raises(ContractExtractionError, match="not found"):
            load_router(temp_path / "missing.py")

        broken = temp_path / "broken.py"
        broken.write_text("import not_a_real_module_xyz\n", encoding="utf-8")
        with pytest.raises(ContractExtractionError, match="failed to import"):
            load_router(broken)

        empty = temp_path / "empty.py"
        empty.write_text("value = 1\n", encoding="utf-8")
        with pytest.raises(ContractExtractionError, match="does not export 'router'"):
            load_router(empty)
