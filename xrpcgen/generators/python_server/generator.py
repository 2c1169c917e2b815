"""Python server target: TypedDict models, validators and a FastAPI router."""
import logging
from typing import Any, Dict, List

from xrpcgen.core.config import settings
from xrpcgen.framework.capabilities import create_capabilities
from xrpcgen.framework.target import TargetGeneratorBase
from xrpcgen.framework.types import GeneratedFile
from xrpcgen.generators.python_server.render_models import render_models_py
from xrpcgen.generators.python_server.render_router import render_package_init, render_router_py
from xrpcgen.generators.python_server.render_validation import render_validation_py
from xrpcgen.generators.python_server.type_mapper import PyTypeMapper
from xrpcgen.generators.python_server.validation_mapper import PyValidationMapper
from xrpcgen.ir.contract import CollectedType, ContractDefinition

log = logging.getLogger(__name__)


class PythonServerGenerator(TargetGeneratorBase):
    name = "python-server"
    capabilities = create_capabilities("python-server")

    def create_type_mapper(self) -> PyTypeMapper:
        return PyTypeMapper()

    def create_validation_mapper(self) -> PyValidationMapper:
        return PyValidationMapper()

    def emit(
        self,
        contract: ContractDefinition,
        collected: List[CollectedType],
        options: Dict[str, Any],
    ) -> List[GeneratedFile]:
        package = options.get("package_name") or settings.package_name
        log.info(
            "emitting package %s", package,
            extra={"target": self.name, "stage": "EMIT"},
        )
        router = render_router_py(self.type_mapper, contract)
        models = render_models_py(self.type_mapper, contract, collected)
        validation = render_validation_py(self.validation_mapper, contract)
        return [
            GeneratedFile(path=f"{package}/__init__.py", content=render_package_init()),
            GeneratedFile(path=f"{package}/models.py", content=models),
            GeneratedFile(path=f"{package}/validation.py", content=validation),
            GeneratedFile(path=f"{package}/router.py", content=router),
        ]
