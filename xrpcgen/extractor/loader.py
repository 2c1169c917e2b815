"""Loads a contract module from a file path."""
import importlib.util
import logging
import sys
from pathlib import Path
from typing import Any, Union

from xrpcgen.core.errors import ContractExtractionError
from xrpcgen.core.workflow import GenerationStage
from xrpcgen.extractor.pydantic_extractor import extract_contract
from xrpcgen.ir.contract import ContractDefinition

log = logging.getLogger(__name__)

ROUTER_EXPORT = "router"


def load_router(path: Union[str, Path], export: str = ROUTER_EXPORT) -> Any:
    """Import the Python file at ``path`` and return its router export."""
    path = Path(path)
    if not path.is_file():
        raise ContractExtractionError(f"contract file not found: {path}")

    module_name = f"xrpc_contract_{path.stem}"
    sys.modules.pop(module_name, None)
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ContractExtractionError(f"cannot load contract module: {path}")

    module = importlib.util.module_from_spec(spec)
    # Registered before exec so dataclasses and pydantic can resolve the module.
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        log.error(
            "failed to import %s: %s", path, exc,
            extra={"stage": GenerationStage.EXTRACT.value},
        )
        raise ContractExtractionError(f"failed to import {path}: {exc}") from exc

    if not hasattr(module, export):
        raise ContractExtractionError(f"{path} does not export '{export}'")
    return getattr(module, export)


def extract_contract_from_file(path: Union[str, Path], export: str = ROUTER_EXPORT) -> ContractDefinition:
    return extract_contract(load_router(path, export))
