from dataclasses import dataclass
from enum import Enum

class GenerationStage(str, Enum):
    EXTRACT = "EXTRACT"
    VERIFY = "VERIFY"
    CAPABILITIES = "CAPABILITIES"
    COLLECT = "COLLECT"
    EMIT = "EMIT"
    WRITE = "WRITE"
    DONE = "DONE"
    FAILED = "FAILED"

@dataclass(frozen=True)
class StageResult:
    stage: GenerationStage
    ok: bool
    message: str
    artifacts: list[str]
