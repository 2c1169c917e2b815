"""Endpoint DSL used by contract modules.

A contract module exports ``router``::

    router = create_router(
        task=create_endpoint(
            create=mutation(input=CreateTask, output=Task),
            list=query(input=ListTasks, output=List[Task]),
        ),
    )
"""
from dataclasses import dataclass
from typing import Any, Dict

QUERY = "query"
MUTATION = "mutation"
ENDPOINT_TYPES = (QUERY, MUTATION)


@dataclass(frozen=True)
class EndpointDefinition:
    type: str
    input: Any
    output: Any


def query(input: Any, output: Any) -> EndpointDefinition:
    return EndpointDefinition(type=QUERY, input=input, output=output)


def mutation(input: Any, output: Any) -> EndpointDefinition:
    return EndpointDefinition(type=MUTATION, input=input, output=output)


def create_endpoint(endpoints: Dict[str, EndpointDefinition] = None, **named: EndpointDefinition) -> Dict[str, EndpointDefinition]:
    """Group endpoints under one name; accepts a mapping, keywords, or both."""
    group = dict(endpoints or {})
    group.update(named)
    return group


def create_router(groups: Dict[str, Dict[str, EndpointDefinition]] = None, **named) -> Dict[str, Dict[str, EndpointDefinition]]:
    router = dict(groups or {})
    router.update(named)
    return router
