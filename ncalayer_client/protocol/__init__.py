from .frames import RequestFrame
from .envelope import ResponseEnvelope
from .catalog import OperationCatalog
from .keys import is_none, extract_key_alias
from .classifier import classify_error, resolve_category

__all__ = [
    "OperationCatalog",
    "RequestFrame",
    "ResponseEnvelope",
    "classify_error",
    "extract_key_alias",
    "is_none",
    "resolve_category",
]
