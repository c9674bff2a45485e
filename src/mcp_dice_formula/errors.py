from __future__ import annotations


class DiceError(ValueError):
    """User-facing dice errors. Messages start with a stable [CODE]."""


class InvalidDieSpec(DiceError):
    """A die was constructed with an impossible shape (no faces, empty table, ...)."""


class FormulaSyntaxError(DiceError):
    """Raised by strict parsing when part of a formula is not understood."""

    def __init__(self, message: str, fragment: str = "", position: int = -1) -> None:
        super().__init__(message)
        self.fragment = fragment
        self.position = position
