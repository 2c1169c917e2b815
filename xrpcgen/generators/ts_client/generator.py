"""TypeScript client target: payload types and a typed fetch client."""
import logging
from typing import Any, Dict, List

from xrpcgen.framework.capabilities import create_capabilities
from xrpcgen.framework.target import TargetGeneratorBase
from xrpcgen.framework.types import GeneratedFile
from xrpcgen.generators.ts_client.render_client import render_client_ts
from xrpcgen.generators.ts_client.render_types import render_types_ts
from xrpcgen.generators.ts_client.type_mapper import TsTypeMapper
from xrpcgen.generators.ts_client.validation_mapper import TsValidationMapper
from xrpcgen.ir.contract import CollectedType, ContractDefinition

log = logging.getLogger(__name__)


class TsClientGenerator(TargetGeneratorBase):
    name = "ts-client"
    capabilities = create_capabilities("ts-client")

    def create_type_mapper(self) -> TsTypeMapper:
        return TsTypeMapper()

    def create_validation_mapper(self) -> TsValidationMapper:
        return TsValidationMapper()

    def emit(
        self,
        contract: ContractDefinition,
        collected: List[CollectedType],
        options: Dict[str, Any],
    ) -> List[GeneratedFile]:
        directory = options.get("ts_directory", "client")
        log.info(
            "emitting TypeScript client into %s", directory,
            extra={"target": self.name, "stage": "EMIT"},
        )
        types = render_types_ts(self.type_mapper, contract, collected)
        client = render_client_ts(self.type_mapper, contract)
        return [
            GeneratedFile(path=f"{directory}/types.ts", content=types),
            GeneratedFile(path=f"{directory}/client.ts", content=client),
        ]
