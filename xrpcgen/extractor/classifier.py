"""Closed classification of Python annotations into TypeKind tags."""
import datetime
import decimal
import enum
import types
import typing
import uuid
from typing import Annotated, Any, List, Literal, Optional, Tuple, get_args, get_origin

from pydantic import AnyUrl, BaseModel, EmailStr

from xrpcgen.ir.kinds import TypeKind

NoneType = type(None)

_UNION_ORIGINS = (typing.Union, types.UnionType)
_ARRAY_ORIGINS = (list, set, frozenset)
_SEQUENCE_NAMES = ("Sequence", "MutableSequence", "Iterable", "Collection", "Set", "MutableSet")
_MAPPING_NAMES = ("Mapping", "MutableMapping")


def _origin(annotation: Any) -> Any:
    """get_origin, with abstract collection origins folded onto list and dict."""
    origin = get_origin(annotation)
    if origin is None or origin in _UNION_ORIGINS:
        return origin
    name = getattr(origin, "__name__", "")
    if name in _SEQUENCE_NAMES:
        return list
    if name in _MAPPING_NAMES:
        return dict
    return origin


def strip_annotated(annotation: Any) -> Tuple[Any, List[Any]]:
    """Unwrap ``Annotated[...]`` layers, returning the bare type and their metadata."""
    metadata: List[Any] = []
    while get_origin(annotation) is Annotated:
        args = get_args(annotation)
        annotation = args[0]
        metadata.extend(args[1:])
    return annotation, metadata


def union_members(annotation: Any) -> Tuple[Any, ...]:
    if _origin(annotation) in _UNION_ORIGINS:
        return get_args(annotation)
    return ()


def is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def is_enum_class(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, enum.Enum)


def is_variadic_tuple(annotation: Any) -> bool:
    args = get_args(annotation)
    return _origin(annotation) is tuple and len(args) == 2 and args[1] is Ellipsis


def element_annotation(annotation: Any) -> Any:
    args = get_args(annotation)
    return args[0] if args else Any


def classify(annotation: Any, required: bool = True) -> TypeKind:
    """Exactly one kind per annotation, in fixed precedence order."""
    annotation, _ = strip_annotated(annotation)
    origin = _origin(annotation)

    if not required:
        return TypeKind.OPTIONAL
    if NoneType in union_members(annotation):
        return TypeKind.NULLABLE
    if is_model(annotation):
        return TypeKind.OBJECT
    if annotation in _ARRAY_ORIGINS or origin in _ARRAY_ORIGINS or is_variadic_tuple(annotation):
        return TypeKind.ARRAY
    if origin in _UNION_ORIGINS:
        return TypeKind.UNION
    if is_enum_class(annotation) or (origin is Literal and len(get_args(annotation)) > 1):
        return TypeKind.ENUM
    if origin is Literal or annotation is None or annotation is NoneType:
        return TypeKind.LITERAL
    if annotation is dict or origin is dict:
        return TypeKind.RECORD
    if annotation is tuple or origin is tuple:
        return TypeKind.TUPLE
    if annotation in (datetime.datetime, datetime.date):
        return TypeKind.DATE
    return TypeKind.PRIMITIVE


def primitive_base(annotation: Any) -> str:
    """IR primitive name for a leaf annotation; formats map onto ``string``."""
    annotation, _ = strip_annotated(annotation)
    if annotation is bool:
        return "boolean"
    if annotation is int:
        return "integer"
    if annotation in (float, decimal.Decimal):
        return "number"
    if string_format(annotation) is not None:
        return "string"
    if isinstance(annotation, type) and issubclass(annotation, str):
        return "string"
    if annotation is Any:
        return "any"
    return "unknown"


def string_format(annotation: Any) -> Optional[str]:
    """Validation kind implied by a string-like type, if any."""
    annotation, metadata = strip_annotated(annotation)
    if annotation is EmailStr:
        return "email"
    if annotation is uuid.UUID:
        return "uuid"
    if isinstance(annotation, type) and issubclass(annotation, AnyUrl):
        return "url"
    if any(hasattr(m, "allowed_schemes") for m in metadata):
        return "url"
    return None
