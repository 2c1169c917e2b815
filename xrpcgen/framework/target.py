"""Base class orchestrating one target's generation run."""
import copy
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from xrpcgen.core.workflow import GenerationStage, StageResult
from xrpcgen.framework.capabilities import validate_support
from xrpcgen.framework.type_collector import TypeCollector
from xrpcgen.framework.type_mapper import TypeMapperBase
from xrpcgen.framework.types import (
    Diagnostic,
    GeneratedFile,
    GenerationResult,
    TargetCapabilities,
)
from xrpcgen.framework.utils import to_pascal_case
from xrpcgen.framework.validation_mapper import ValidationMapperBase
from xrpcgen.ir.contract import CollectedType, ContractDefinition

log = logging.getLogger(__name__)


class TargetGeneratorBase(ABC):
    """Collector -> capability check -> mapping -> emitters.

    Each instance owns its mappers and collectors and resets them at the start
    of every run, so one instance may serve several runs in sequence but must
    not be shared between concurrent runs.
    """

    name: str = "target"
    capabilities: TargetCapabilities

    def __init__(self):
        self.type_mapper: TypeMapperBase = self.create_type_mapper()
        self.validation_mapper: ValidationMapperBase = self.create_validation_mapper()
        self.type_collector = TypeCollector(self.naming)
        self.diagnostics: List[Diagnostic] = []

    @abstractmethod
    def create_type_mapper(self) -> TypeMapperBase:
        ...

    @abstractmethod
    def create_validation_mapper(self) -> ValidationMapperBase:
        ...

    @abstractmethod
    def emit(
        self,
        contract: ContractDefinition,
        collected: List[CollectedType],
        options: Dict[str, Any],
    ) -> List[GeneratedFile]:
        """Render output files from a fully named contract."""

    def naming(self, name: str) -> str:
        return to_pascal_case(name)

    def warn(self, message: str, path: Optional[str] = None, hint: Optional[str] = None) -> None:
        self.diagnostics.append(Diagnostic("warning", message, path=path, hint=hint))
        log.warning(message, extra={"target": self.name, "stage": GenerationStage.EMIT.value})

    def reset(self) -> None:
        self.type_mapper.reset()
        self.validation_mapper.reset()
        self.type_collector.reset()
        self.diagnostics = []

    def validate_contract(self, contract: ContractDefinition) -> List[Diagnostic]:
        return validate_support(contract, self.capabilities, self.name)

    def generate(
        self,
        contract: ContractDefinition,
        output_dir: str = "",
        options: Optional[Dict[str, Any]] = None,
    ) -> GenerationResult:
        """Run the pipeline on a private copy of ``contract``.

        Returns no files when any diagnostic is an error.
        """
        options = dict(options or {})
        extra = {"target": self.name}
        result = GenerationResult(output_dir=output_dir)

        self.reset()
        self.type_mapper.verify_completeness()
        self.validation_mapper.verify_completeness()
        result.stages.append(StageResult(GenerationStage.VERIFY, True, "mappers complete", []))

        working = copy.deepcopy(contract)

        capability_diagnostics = self.validate_contract(working)
        result.diagnostics.extend(capability_diagnostics)
        if result.errors:
            log.error(
                "contract not supported: %d error(s)", len(result.errors),
                extra={**extra, "stage": GenerationStage.CAPABILITIES.value},
            )
            result.stages.append(StageResult(
                GenerationStage.FAILED, False, "unsupported constructs", []
            ))
            return result
        result.stages.append(StageResult(
            GenerationStage.CAPABILITIES, True, f"{len(capability_diagnostics)} warning(s)", []
        ))

        collected = self.type_collector.collect_types(working)
        result.stages.append(StageResult(
            GenerationStage.COLLECT, True, f"{len(collected)} nested type(s)", [c.name for c in collected]
        ))

        files = self.emit(working, collected, options)
        result.diagnostics.extend(self.type_mapper.diagnostics)
        result.diagnostics.extend(self.validation_mapper.diagnostics)
        result.diagnostics.extend(self.diagnostics)
        if result.errors:
            result.stages.append(StageResult(GenerationStage.FAILED, False, "emit failed", []))
            return result

        result.files = files
        result.stages.append(StageResult(GenerationStage.EMIT, True, "", [f.path for f in files]))
        log.info(
            "generated %d file(s) with %d warning(s)", len(files), len(result.warnings),
            extra={**extra, "stage": GenerationStage.DONE.value},
        )
        return result
