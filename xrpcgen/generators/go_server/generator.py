"""Go server target: structs, validators and a net/http router."""
import logging
from typing import Any, Dict, List

from xrpcgen.core.config import settings
from xrpcgen.framework.capabilities import create_capabilities
from xrpcgen.framework.target import TargetGeneratorBase
from xrpcgen.framework.types import GeneratedFile, UnsupportedType
from xrpcgen.generators.go_server.render_router import render_router_go
from xrpcgen.generators.go_server.render_types import render_types_go
from xrpcgen.generators.go_server.render_validation import render_validation_go
from xrpcgen.generators.go_server.type_mapper import GoTypeMapper
from xrpcgen.generators.go_server.validation_mapper import GoValidationMapper
from xrpcgen.ir.contract import CollectedType, ContractDefinition
from xrpcgen.ir.kinds import TypeKind

log = logging.getLogger(__name__)


class GoServerGenerator(TargetGeneratorBase):
    name = "go-server"
    capabilities = create_capabilities(
        "go-server",
        unsupported_types=[
            UnsupportedType(
                TypeKind.UNION,
                "Go has no sum types; variants are held in an interface{} wrapper",
                fallback="interface{} wrapper with typed accessors",
            ),
        ],
    )

    def create_type_mapper(self) -> GoTypeMapper:
        return GoTypeMapper()

    def create_validation_mapper(self) -> GoValidationMapper:
        return GoValidationMapper()

    def emit(
        self,
        contract: ContractDefinition,
        collected: List[CollectedType],
        options: Dict[str, Any],
    ) -> List[GeneratedFile]:
        package = options.get("go_package_name") or settings.go_package_name
        log.info(
            "emitting Go package %s", package,
            extra={"target": self.name, "stage": "EMIT"},
        )
        types = render_types_go(self.type_mapper, contract, collected, package)
        validation = render_validation_go(
            self.validation_mapper, self.type_mapper, contract, package, self.warn
        )
        router = render_router_go(self.type_mapper, contract, package)
        return [
            GeneratedFile(path=f"{package}/types.go", content=types),
            GeneratedFile(path=f"{package}/validation.go", content=validation),
            GeneratedFile(path=f"{package}/router.go", content=router),
        ]
