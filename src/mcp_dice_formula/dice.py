from __future__ import annotations

import secrets
from typing import Protocol, Sequence

from .models import ConstantDie, CustomValuesDie, Die, StandardDie, WeightedDie


class RandomSource(Protocol):
    """Anything with the `random.Random` draw API (Random, SystemRandom, fakes)."""

    def randint(self, a: int, b: int) -> int: ...

    def choices(self, population: Sequence[int], weights: Sequence[int] | None = None, *, k: int = 1) -> list[int]: ...


_system_rng = secrets.SystemRandom()


def default_rng() -> RandomSource:
    return _system_rng


def draw(die: Die, rng: RandomSource | None = None) -> int:
    """Draw one face. Every call is independent of the previous ones."""

    rng = rng or _system_rng
    if isinstance(die, StandardDie):
        return rng.randint(1, die.faces)
    if isinstance(die, CustomValuesDie):
        return die.values[rng.randint(0, len(die.values) - 1)]
    if isinstance(die, WeightedDie):
        values = [value for value, _ in die.entries]
        weights = [weight for _, weight in die.entries]
        return rng.choices(values, weights=weights)[0]
    if isinstance(die, ConstantDie):
        return die.value
    raise TypeError(f"Unsupported die type: {type(die).__name__}")


def max_value(die: Die) -> int:
    if isinstance(die, StandardDie):
        return die.faces
    if isinstance(die, CustomValuesDie):
        return max(die.values)
    if isinstance(die, WeightedDie):
        return max(value for value, _ in die.entries)
    if isinstance(die, ConstantDie):
        return die.value
    raise TypeError(f"Unsupported die type: {type(die).__name__}")


def min_value(die: Die) -> int:
    if isinstance(die, StandardDie):
        return 1
    if isinstance(die, CustomValuesDie):
        return min(die.values)
    if isinstance(die, WeightedDie):
        return min(value for value, _ in die.entries)
    if isinstance(die, ConstantDie):
        return die.value
    raise TypeError(f"Unsupported die type: {type(die).__name__}")


def possible_values(die: Die) -> tuple[int, ...]:
    """All values `die` can show.

    Custom dice keep their raw face list (repeats included), weighted dice
    list each value once, constants have a single value.
    """

    if isinstance(die, StandardDie):
        return tuple(range(1, die.faces + 1))
    if isinstance(die, CustomValuesDie):
        return die.values
    if isinstance(die, WeightedDie):
        return tuple(dict.fromkeys(value for value, _ in die.entries))
    if isinstance(die, ConstantDie):
        return (die.value,)
    raise TypeError(f"Unsupported die type: {type(die).__name__}")


def die_label(die: Die) -> str:
    # Count-less label, e.g. "d6", "d[1,1,2]", "d[1:3,6:1]" or "5".
    if isinstance(die, StandardDie):
        return f"d{die.faces}"
    if isinstance(die, CustomValuesDie):
        return "d[" + ",".join(str(v) for v in die.values) + "]"
    if isinstance(die, WeightedDie):
        return "d[" + ",".join(f"{v}:{w}" for v, w in die.entries) + "]"
    if isinstance(die, ConstantDie):
        return str(die.value)
    raise TypeError(f"Unsupported die type: {type(die).__name__}")
