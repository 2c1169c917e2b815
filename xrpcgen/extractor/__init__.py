from xrpcgen.extractor.dsl import EndpointDefinition, create_endpoint, create_router, mutation, query
from xrpcgen.extractor.loader import extract_contract_from_file, load_router
from xrpcgen.extractor.pydantic_extractor import SchemaExtractor, extract_contract

__all__ = [
    "EndpointDefinition",
    "SchemaExtractor",
    "create_endpoint",
    "create_router",
    "extract_contract",
    "extract_contract_from_file",
    "load_router",
    "mutation",
    "query",
]
