"""Deduplicating store for generated helper code."""
from typing import Dict, Iterable, List, Optional

from xrpcgen.framework.types import GeneratedUtility


class UtilityCollector:
    """Collects utilities produced by type and validation handlers.

    Utilities are keyed by ``id``. When an entry with the same id already
    exists and was added with ``include_once=True`` the newcomer is ignored;
    otherwise the newcomer replaces it.
    """

    def __init__(self):
        self._utilities: Dict[str, GeneratedUtility] = {}

    def add(self, utility: GeneratedUtility) -> None:
        existing = self._utilities.get(utility.id)
        if existing is not None and existing.include_once:
            return
        self._utilities[utility.id] = utility

    def add_all(self, utilities: Iterable[GeneratedUtility]) -> None:
        for utility in utilities:
            self.add(utility)

    def has(self, utility_id: str) -> bool:
        return utility_id in self._utilities

    def get(self, utility_id: str) -> Optional[GeneratedUtility]:
        return self._utilities.get(utility_id)

    def get_all(self) -> List[GeneratedUtility]:
        """All utilities, highest priority first, ties broken by id."""
        return sorted(self._utilities.values(), key=lambda u: (-u.priority, u.id))

    def get_imports(self) -> List[str]:
        imports = set()
        for utility in self._utilities.values():
            imports.update(utility.imports)
        return sorted(imports)

    def size(self) -> int:
        return len(self._utilities)

    def __len__(self) -> int:
        return self.size()

    def clear(self) -> None:
        self._utilities.clear()

    def merge(self, other: "UtilityCollector") -> None:
        self.add_all(other.get_all())

    def generate_code(self, separator: str = "\n\n") -> str:
        return separator.join(u.code for u in self.get_all())
