from __future__ import annotations

from typing import Any, Final

__all__ = (
    "SingletonType",
    "Undefined",
    "UndefinedType",
    "Unset",
    "UnsetType",
    "is_sentinel",
)


class _SingletonMeta(type):
    """One instance per sentinel class."""

    _instances: dict[type, SingletonType] = {}

    def __call__(cls, *args, **kwargs):
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]


class SingletonType(metaclass=_SingletonMeta):
    """Falsy marker value that survives copy and pickle with its identity."""

    __slots__: tuple[str, ...] = ()
    _name: str = "Sentinel"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return self._name

    __str__ = __repr__

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return self._name


class UndefinedType(SingletonType):
    """A slot that never received a value.

    Combinator result slots whose task failed hold it, as do fields missing
    from a resolved value.

    Example:
        >>> {"a": 1}.get("b", Undefined) is Undefined
        True
    """

    __slots__ = ()
    _name = "Undefined"


class UnsetType(SingletonType):
    """The result of a future that has not settled yet."""

    __slots__ = ()
    _name = "Unset"


Undefined: Final = UndefinedType()
Unset: Final = UnsetType()


def is_sentinel(value: Any) -> bool:
    return isinstance(value, SingletonType)
