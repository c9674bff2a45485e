from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias

from .errors import InvalidDieSpec


RollMode: TypeAlias = Literal["normal", "advantage", "disadvantage"]
Sign: TypeAlias = Literal[1, -1]
CriticalState: TypeAlias = Literal["normal", "crit_hit", "crit_miss"]

ROLL_MODES: tuple[RollMode, ...] = ("normal", "advantage", "disadvantage")


@dataclass(frozen=True)
class StandardDie:
    faces: int

    def __post_init__(self) -> None:
        if self.faces < 1:
            raise InvalidDieSpec(
                f"[INVALID_DIE] A die needs at least one face, got d{self.faces}. Example: 'd6'."
            )


@dataclass(frozen=True)
class CustomValuesDie:
    values: tuple[int, ...]

    def __post_init__(self) -> None:
        # Accept lists and iterables from callers but keep the dataclass hashable.
        values = tuple(self.values)
        if not values:
            raise InvalidDieSpec("[INVALID_DIE] A custom die needs at least one face value.")
        object.__setattr__(self, "values", values)


@dataclass(frozen=True)
class WeightedDie:
    entries: tuple[tuple[int, int], ...]

    def __post_init__(self) -> None:
        entries = tuple((int(value), int(weight)) for value, weight in self.entries)
        if not entries:
            raise InvalidDieSpec("[INVALID_DIE] A weighted die needs at least one (value, weight) entry.")
        for value, weight in entries:
            if weight < 1:
                raise InvalidDieSpec(
                    f"[INVALID_DIE] Weight for face {value} must be a positive integer, got {weight}."
                )
        object.__setattr__(self, "entries", entries)


@dataclass(frozen=True)
class ConstantDie:
    value: int


Die: TypeAlias = StandardDie | CustomValuesDie | WeightedDie | ConstantDie


@dataclass(frozen=True)
class Term:
    die: Die
    count: int = 1
    sign: Sign = 1

    @property
    def is_constant(self) -> bool:
        return isinstance(self.die, ConstantDie)


@dataclass(frozen=True)
class SingleDieRoll:
    die: Die
    value: int
    coefficient: Sign = 1


@dataclass(frozen=True)
class RollResult:
    total: int
    rolls: tuple[SingleDieRoll, ...]
    max_total: int
    breakdown: str


EMPTY_RESULT = RollResult(total=0, rolls=(), max_total=0, breakdown="Empty")


@dataclass(frozen=True)
class ModeResult:
    mode: RollMode
    primary: RollResult
    secondary: RollResult | None = None


@dataclass(frozen=True)
class SkippedSpan:
    start: int
    text: str


@dataclass(frozen=True)
class ParsedFormula:
    input: str
    normalized_input: str
    terms: tuple[Term, ...]
    skipped: tuple[SkippedSpan, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.normalized_input

    @property
    def recognized_chars(self) -> int:
        return len(self.normalized_input) - sum(len(s.text) for s in self.skipped)
