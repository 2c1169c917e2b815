"""Checks a contract against a target's declared capabilities."""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from xrpcgen.framework.types import (
    Diagnostic,
    TargetCapabilities,
    UnsupportedType,
    UnsupportedValidation,
)
from xrpcgen.ir.contract import ContractDefinition, TypeReference, ValidationRules
from xrpcgen.ir.kinds import TYPE_KINDS, VALIDATION_KINDS, TypeKind, ValidationKind

log = logging.getLogger(__name__)

MAX_USAGE_PATHS = 3

_NAMED_KINDS = (TypeKind.OBJECT, TypeKind.UNION, TypeKind.TUPLE, TypeKind.ENUM)


@dataclass
class ContractUsage:
    """Kinds reachable from a contract, each with up to three example paths."""
    types: Dict[TypeKind, List[str]] = field(default_factory=dict)
    validations: Dict[ValidationKind, List[str]] = field(default_factory=dict)


def _add_usage(usage: Dict, kind, path: str) -> None:
    paths = usage.setdefault(kind, [])
    if len(paths) < MAX_USAGE_PATHS and path not in paths:
        paths.append(path)


def _collect_validations(rules: Optional[ValidationRules], path: str, usage: ContractUsage) -> None:
    if rules is None:
        return
    for kind in rules.kinds():
        _add_usage(usage.validations, kind, path)


def _collect_type_usage(
    type_ref: Optional[TypeReference],
    path: str,
    usage: ContractUsage,
    visited: Set[str],
) -> None:
    if type_ref is None:
        return

    _add_usage(usage.types, type_ref.kind, path)
    _collect_validations(type_ref.validation, path, usage)

    if type_ref.kind in _NAMED_KINDS and type_ref.name:
        key = f"{type_ref.kind.value}:{type_ref.name}"
        if key in visited:
            return
        visited.add(key)

    for prop in type_ref.properties:
        prop_path = f"{path}.{prop.name}"
        _collect_type_usage(prop.type, prop_path, usage, visited)
        _collect_validations(prop.validation, prop_path, usage)

    if type_ref.element_type is not None:
        _collect_type_usage(type_ref.element_type, f"{path}[]", usage, visited)
    if type_ref.inner is not None:
        _collect_type_usage(type_ref.inner, path, usage, visited)
    for index, variant in enumerate(type_ref.union_types):
        _collect_type_usage(variant, f"{path}[{index}]", usage, visited)
    for index, element in enumerate(type_ref.tuple_elements):
        _collect_type_usage(element, f"{path}[{index}]", usage, visited)
    if type_ref.value_type is not None:
        _collect_type_usage(type_ref.value_type, f"{path}.value", usage, visited)


def collect_contract_usage(contract: ContractDefinition) -> ContractUsage:
    usage = ContractUsage()
    visited: Set[str] = set()
    for definition in contract.types:
        _collect_type_usage(definition.type, f"types.{definition.name or 'unknown'}", usage, visited)
    for endpoint in contract.endpoints:
        _collect_type_usage(endpoint.input, f"{endpoint.full_name}.input", usage, visited)
        _collect_type_usage(endpoint.output, f"{endpoint.full_name}.output", usage, visited)
    return usage


def validate_support(
    contract: ContractDefinition,
    capabilities: TargetCapabilities,
    target_name: Optional[str] = None,
) -> List[Diagnostic]:
    """Report used kinds the target cannot represent.

    Unsupported type kinds are warnings when a fallback is declared and errors
    otherwise. Unsupported validations are always warnings.
    """
    target = target_name or capabilities.name
    diagnostics: List[Diagnostic] = []
    usage = collect_contract_usage(contract)

    supported_types = set(capabilities.supported_types)
    for kind, paths in usage.types.items():
        if kind in supported_types:
            continue
        entry = _find(capabilities.unsupported_types, kind)
        if entry is not None and entry.fallback:
            diagnostics.append(Diagnostic(
                severity="warning",
                message=f'Type "{kind.value}" has limited support in {target}: {entry.reason}',
                path=paths[0],
                hint=f"Will fall back to: {entry.fallback}",
            ))
        else:
            reason = f": {entry.reason}" if entry is not None else ""
            diagnostics.append(Diagnostic(
                severity="error",
                message=f'Type "{kind.value}" is not supported by {target}{reason}',
                path=paths[0],
            ))

    supported_validations = set(capabilities.supported_validations)
    for kind, paths in usage.validations.items():
        if kind in supported_validations:
            continue
        entry = _find(capabilities.unsupported_validations, kind)
        if entry is not None:
            message = f'Validation "{kind.value}" has limited support in {target}: {entry.reason}'
        else:
            message = f'Validation "{kind.value}" is not supported by {target}'
        diagnostics.append(Diagnostic(
            severity="warning",
            message=message,
            path=paths[0],
            hint=f"Will fall back to: {entry.fallback}" if entry is not None and entry.fallback else None,
        ))

    for diagnostic in diagnostics:
        log.info(
            "%s", diagnostic,
            extra={"target": target, "stage": "CAPABILITIES"},
        )
    return diagnostics


def _find(entries: Iterable, kind):
    for entry in entries:
        if entry.kind == kind:
            return entry
    return None


def create_capabilities(
    name: str,
    unsupported_types: Iterable[UnsupportedType] = (),
    unsupported_validations: Iterable[UnsupportedValidation] = (),
) -> TargetCapabilities:
    """Capabilities supporting every kind except the ones listed as unsupported."""
    unsupported_types = tuple(unsupported_types)
    unsupported_validations = tuple(unsupported_validations)
    missing_types = {entry.kind for entry in unsupported_types}
    missing_validations = {entry.kind for entry in unsupported_validations}
    return TargetCapabilities(
        name=name,
        supported_types=tuple(k for k in TYPE_KINDS if k not in missing_types),
        supported_validations=tuple(k for k in VALIDATION_KINDS if k not in missing_validations),
        unsupported_types=unsupported_types,
        unsupported_validations=unsupported_validations,
    )
