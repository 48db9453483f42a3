from ._sentinel import (
    SingletonType,
    Undefined,
    UndefinedType,
    Unset,
    UnsetType,
    is_sentinel,
)
from .utils import Enum

__all__ = (
    # Sentinel types
    "Undefined",
    "Unset",
    "SingletonType",
    "UndefinedType",
    "UnsetType",
    "is_sentinel",
    # Base classes
    "Enum",
)
