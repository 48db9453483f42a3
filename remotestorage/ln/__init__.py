from . import types as types
from .types import Undefined, Unset, is_sentinel

__all__ = (
    "types",
    "Undefined",
    "Unset",
    "is_sentinel",
)
