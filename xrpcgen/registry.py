from dataclasses import dataclass
from typing import Dict, List, Type

from xrpcgen.core.errors import UnknownTargetError
from xrpcgen.framework.target import TargetGeneratorBase
from xrpcgen.generators.go_server import GoServerGenerator
from xrpcgen.generators.python_server import PythonServerGenerator
from xrpcgen.generators.ts_client import TsClientGenerator


@dataclass
class TargetRegistry:
    mapping: Dict[str, Type[TargetGeneratorBase]]

    def get(self, name: str) -> TargetGeneratorBase:
        """A fresh generator instance; instances are never shared between runs."""
        if name not in self.mapping:
            raise UnknownTargetError(name, self.names())
        return self.mapping[name]()

    def names(self) -> List[str]:
        return sorted(self.mapping)

    @staticmethod
    def default() -> "TargetRegistry":
        return TargetRegistry(mapping={
            PythonServerGenerator.name: PythonServerGenerator,
            GoServerGenerator.name: GoServerGenerator,
            TsClientGenerator.name: TsClientGenerator,
        })
