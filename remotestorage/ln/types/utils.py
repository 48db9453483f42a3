from enum import Enum as _Enum

__all__ = ("Enum",)


class Enum(_Enum):
    """Enum whose members can list their wire values."""

    @classmethod
    def allowed(cls) -> tuple[str, ...]:
        """Values accepted when parsing a member from text, in definition order."""
        return tuple(member.value for member in cls)
