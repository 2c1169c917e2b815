"""Exhaustive type-mapping dispatch shared by every target."""
import logging
from abc import ABC, abstractmethod
from typing import Callable, Generic, List, Optional, TypeVar

from xrpcgen.core.errors import MapperIncompleteError
from xrpcgen.framework.types import (
    Diagnostic,
    GeneratedUtility,
    TypeContext,
    TypeHandler,
    TypeMapping,
    TypeResult,
)
from xrpcgen.framework.utility_collector import UtilityCollector
from xrpcgen.ir.contract import TypeReference
from xrpcgen.ir.kinds import TYPE_KINDS, TypeKind

log = logging.getLogger(__name__)

T = TypeVar("T")

Warn = Callable[..., None]


class TypeMapperBase(ABC, Generic[T]):
    """Maps TypeReference values to target-language type expressions.

    Subclasses return a handler for every TypeKind from ``build_type_mapping``.
    The table is checked when the mapper is constructed, so an incomplete
    mapper can never reach a contract.
    """

    target_name = "target"

    def __init__(self):
        self.utility_collector = UtilityCollector()
        self.diagnostics: List[Diagnostic] = []
        self.type_mapping: TypeMapping = self.build_type_mapping()
        self.verify_completeness()

    @abstractmethod
    def build_type_mapping(self) -> TypeMapping:
        ...

    def map_type(
        self,
        type_ref: TypeReference,
        name: Optional[str] = None,
        depth: int = 0,
        parent_name: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> TypeResult:
        try:
            kind = TypeKind(type_ref.kind)
        except ValueError:
            raise ValueError(
                f'Unknown type kind: "{type_ref.kind}". '
                f'Valid kinds are: {", ".join(k.value for k in TYPE_KINDS)}'
            ) from None
        ctx = TypeContext(
            type_ref=type_ref,
            name=name if name is not None else type_ref.name,
            depth=depth,
            parent_name=parent_name,
            field_name=field_name,
        )
        result = self.type_mapping[kind](ctx)
        self.utility_collector.add_all(result.utilities)
        return result

    def map_nested_type(
        self,
        type_ref: TypeReference,
        parent_name: Optional[str] = None,
        field_name: Optional[str] = None,
    ) -> TypeResult:
        return self.map_type(type_ref, name=type_ref.name, depth=1,
                             parent_name=parent_name, field_name=field_name)

    def simplify_union(
        self,
        ctx: TypeContext,
        make_nullable: Callable[[TypeResult], TypeResult],
    ) -> Optional[TypeResult]:
        """Collapse an unnamed union when the target can express it without a wrapper.

        A union whose variants all map to one type becomes that type; exactly one
        non-null variant plus a null literal becomes the nullable form.
        """
        variants = ctx.type_ref.union_types
        if not variants:
            return None
        non_null = [
            v for v in variants
            if not (v.kind == TypeKind.LITERAL and v.literal_value is None)
        ]
        if len(non_null) == 1 and len(variants) == 2:
            inner = self.map_nested_type(non_null[0], ctx.parent_name, ctx.field_name)
            return make_nullable(inner)
        mapped = [self.map_nested_type(v, ctx.parent_name, ctx.field_name) for v in variants]
        if len({m.type for m in mapped}) == 1:
            return mapped[0]
        return None

    def warn(self, message: str, path: Optional[str] = None, hint: Optional[str] = None) -> None:
        self.diagnostics.append(Diagnostic("warning", message, path=path, hint=hint))
        log.warning(message, extra={"target": self.target_name, "stage": "EMIT"})

    def get_collected_utilities(self) -> List[GeneratedUtility]:
        return self.utility_collector.get_all()

    def get_collected_imports(self) -> List[str]:
        return self.utility_collector.get_imports()

    def reset(self) -> None:
        self.utility_collector.clear()
        self.diagnostics.clear()

    def verify_completeness(self) -> None:
        missing = [
            kind.value for kind in TYPE_KINDS
            if not callable(self.type_mapping.get(kind))
        ]
        if missing:
            raise MapperIncompleteError(type(self).__name__, missing)


def create_unsupported_type_handler(kind: TypeKind, fallback_type: T, warn: Warn) -> TypeHandler:
    """Handler that records a warning and maps ``kind`` to a fixed fallback type."""
    def handler(ctx: TypeContext) -> TypeResult:
        where = ".".join(p for p in (ctx.parent_name, ctx.field_name) if p) or None
        warn(
            f'Type kind "{TypeKind(kind).value}" is not fully supported. Using fallback type.',
            path=where,
            hint=f"Mapped to {fallback_type}",
        )
        return TypeResult(type=fallback_type)
    return handler
