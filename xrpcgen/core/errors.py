"""Exception types raised by the generator."""
from typing import Optional, Sequence


class XrpcError(Exception):
    """Base class for all generator errors."""


class ContractExtractionError(XrpcError):
    """The contract module could not be turned into a ContractDefinition.

    Always fatal: no part of a partially extracted contract is usable.
    """

    def __init__(self, message: str, group: Optional[str] = None, endpoint: Optional[str] = None):
        self.group = group
        self.endpoint = endpoint
        location = ".".join(p for p in (group, endpoint) if p)
        super().__init__(f"{location}: {message}" if location else message)


class MapperIncompleteError(XrpcError):
    """A mapper's handler table does not cover every kind."""

    def __init__(self, mapper: str, missing: Sequence[str]):
        self.mapper = mapper
        self.missing = list(missing)
        super().__init__(f"{mapper} is missing handlers for: {', '.join(self.missing)}")


class UnknownTargetError(XrpcError):
    def __init__(self, name: str, available: Sequence[str] = ()):
        self.name = name
        hint = f" (available: {', '.join(available)})" if available else ""
        super().__init__(f"Unknown target: {name}{hint}")
