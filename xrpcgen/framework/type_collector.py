"""Assigns names to anonymous object shapes nested inside a contract."""
import logging
from typing import Callable, Dict, List, Set

from xrpcgen.framework.utils import to_pascal_case
from xrpcgen.ir.contract import CollectedType, ContractDefinition, Property, TypeReference, named_objects
from xrpcgen.ir.kinds import TypeKind

log = logging.getLogger(__name__)


class TypeCollector:
    """Walks a contract depth-first and names every unnamed object in place.

    Must run to completion on a contract before anything maps or emits it.
    Traversal follows declaration order, so the same contract always yields
    the same names.
    """

    def __init__(self, naming: Callable[[str], str] = to_pascal_case):
        self.naming = naming
        self._collected: Dict[str, CollectedType] = {}
        self._used_names: Set[str] = set()
        self._visited: Set[int] = set()

    def collect_types(self, contract: ContractDefinition) -> List[CollectedType]:
        self.reset()

        for definition in contract.types:
            self._used_names.add(self.naming(definition.name))
        for name, _ in named_objects(contract):
            self._used_names.add(self.naming(name))

        for definition in contract.types:
            root = self.naming(definition.name)
            type_ref = definition.type
            if type_ref.kind in (TypeKind.OBJECT, TypeKind.UNION, TypeKind.TUPLE, TypeKind.ENUM) \
                    and not type_ref.name:
                type_ref.name = root
            self._process_type_reference(type_ref, root, definition.name)

        for endpoint in contract.endpoints:
            base = self.naming(endpoint.full_name)
            self._process_type_reference(endpoint.input, f"{base}Input", f"{endpoint.full_name}.input")
            self._process_type_reference(endpoint.output, f"{base}Output", f"{endpoint.full_name}.output")

        collected = list(self._collected.values())
        log.info(
            "collected %d nested types", len(collected),
            extra={"stage": "COLLECT"},
        )
        return collected

    def reset(self) -> None:
        self._collected.clear()
        self._used_names.clear()
        self._visited.clear()

    def _process_property(self, prop: Property, parent: str) -> None:
        self._process_type_reference(
            prop.type,
            f"{parent}{self.naming(prop.name)}",
            f"{parent}.{prop.name}",
        )

    def _process_type_reference(self, type_ref: TypeReference, suggested: str, source: str) -> None:
        kind = type_ref.kind

        if kind in (TypeKind.OPTIONAL, TypeKind.NULLABLE):
            if type_ref.inner is not None:
                self._process_type_reference(type_ref.inner, suggested, f"{source}.{kind.value}")
            return

        if kind == TypeKind.ARRAY:
            if type_ref.element_type is not None:
                element_name = suggested if suggested.endswith("Item") else f"{suggested}Item"
                self._process_type_reference(type_ref.element_type, element_name, f"{source}.array")
            return

        if kind == TypeKind.RECORD:
            if type_ref.value_type is not None:
                self._process_type_reference(type_ref.value_type, f"{suggested}Value", f"{source}.record")
            return

        if kind == TypeKind.TUPLE:
            for index, element in enumerate(type_ref.tuple_elements):
                self._process_type_reference(element, f"{suggested}V{index}", f"{source}.tuple[{index}]")
            return

        if kind == TypeKind.UNION:
            for index, variant in enumerate(type_ref.union_types):
                self._process_type_reference(
                    variant, f"{suggested}Variant{index}", f"{source}.union[{index}]"
                )
            return

        if kind != TypeKind.OBJECT:
            return

        if id(type_ref) in self._visited:
            return
        self._visited.add(id(type_ref))

        if not type_ref.name:
            assigned = self.assign_unique_name(suggested)
            type_ref.name = assigned
            self._collected[assigned] = CollectedType(name=assigned, type_ref=type_ref, source=source)
            root = assigned
        else:
            root = self.naming(type_ref.name)

        for prop in type_ref.properties:
            self._process_property(prop, root)

    def assign_unique_name(self, base_name: str) -> str:
        """First of base, base1, base2, ... not already taken."""
        name = base_name
        counter = 1
        while name in self._used_names:
            name = f"{base_name}{counter}"
            counter += 1
        self._used_names.add(name)
        return name
