"""Dataclasses shared by the mapping framework and the target generators."""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from xrpcgen.core.workflow import StageResult
from xrpcgen.ir.contract import TypeReference, ValidationRules
from xrpcgen.ir.kinds import TypeKind, ValidationKind

T = TypeVar("T")
V = TypeVar("V")


@dataclass
class TypeContext:
    """Context handed to a type handler."""
    type_ref: TypeReference
    name: Optional[str] = None
    depth: int = 0
    parent_name: Optional[str] = None
    field_name: Optional[str] = None


@dataclass
class ValidationContext:
    """Context handed to a validation handler.

    ``field_path`` is the target-language expression that evaluates to the
    field value (e.g. ``value`` or ``input.Title``).
    """
    rule: ValidationKind
    value: Any
    field_name: str
    field_path: str
    base_type: str
    is_required: bool
    all_rules: ValidationRules


@dataclass
class GeneratedUtility:
    """Reusable source fragment keyed by ``id`` for deduplication."""
    id: str
    code: str
    imports: List[str] = field(default_factory=list)
    include_once: bool = False
    priority: int = 0


@dataclass
class TypeResult(Generic[T]):
    type: T
    utilities: List[GeneratedUtility] = field(default_factory=list)
    imports: List[str] = field(default_factory=list)


@dataclass
class ValidationResult(Generic[V]):
    validation: V
    utilities: List[GeneratedUtility] = field(default_factory=list)
    imports: List[str] = field(default_factory=list)


TypeHandler = Callable[[TypeContext], TypeResult]
ValidationHandler = Callable[[ValidationContext], ValidationResult]
TypeMapping = Dict[TypeKind, TypeHandler]
ValidationMapping = Dict[ValidationKind, ValidationHandler]


@dataclass(frozen=True)
class UnsupportedType:
    kind: TypeKind
    reason: str
    fallback: Optional[str] = None


@dataclass(frozen=True)
class UnsupportedValidation:
    kind: ValidationKind
    reason: str
    fallback: Optional[str] = None


@dataclass(frozen=True)
class TargetCapabilities:
    """Static declaration of what a target can represent."""
    name: str
    supported_types: tuple
    supported_validations: tuple
    unsupported_types: tuple = ()
    unsupported_validations: tuple = ()


@dataclass(frozen=True)
class Diagnostic:
    severity: str  # "warning" or "error"
    message: str
    path: Optional[str] = None
    hint: Optional[str] = None

    def __str__(self) -> str:
        text = f"{self.severity}: {self.message}"
        if self.path:
            text += f" (at {self.path})"
        if self.hint:
            text += f" [{self.hint}]"
        return text


@dataclass
class GeneratedFile:
    """Represents a generated file."""
    path: str  # Relative path from output directory
    content: str


@dataclass
class GenerationResult:
    """Files are relative to output_dir; nothing is written here."""
    output_dir: str = ""
    files: List[GeneratedFile] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    stages: List[StageResult] = field(default_factory=list)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "error"]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == "warning"]

    @property
    def ok(self) -> bool:
        return not self.errors

    def get_file(self, path: str) -> Optional[GeneratedFile]:
        for generated in self.files:
            if generated.path == path:
                return generated
        return None
