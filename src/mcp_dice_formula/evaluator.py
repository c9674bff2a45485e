from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .dice import RandomSource, default_rng, draw, max_value, min_value
from .models import EMPTY_RESULT, RollResult, SingleDieRoll, Term
from .parser import parse_formula, term_label


logger = logging.getLogger(__name__)


def format_breakdown(terms: Sequence[Term], rolls: Sequence[SingleDieRoll]) -> str:
    """Rebuild the formula with the rolled values filled in, e.g. ``2d6(3,5) + 3``.

    `rolls` must be the flat list produced by evaluating `terms`, in order.
    """

    parts: list[str] = []
    cursor = 0

    for index, term in enumerate(terms):
        if index == 0:
            parts.append("-" if term.sign < 0 else "")
        else:
            parts.append(" - " if term.sign < 0 else " + ")

        parts.append(term_label(term))

        term_rolls = rolls[cursor : cursor + term.count]
        cursor += term.count
        if not term.is_constant:
            parts.append("(" + ",".join(str(r.value) for r in term_rolls) + ")")

    return "".join(parts)


def evaluate(terms: Iterable[Term], rng: RandomSource | None = None) -> RollResult:
    rng = rng or default_rng()
    terms = tuple(terms)

    total = 0
    max_total = 0
    rolls: list[SingleDieRoll] = []

    for term in terms:
        drawn = [draw(term.die, rng) for _ in range(term.count)]
        rolls.extend(SingleDieRoll(die=term.die, value=v, coefficient=term.sign) for v in drawn)
        total += term.sign * sum(drawn)

        if term.sign > 0:
            max_total += term.count * max_value(term.die)
        else:
            max_total -= term.count * min_value(term.die)

    # Animation scales intermediate values against this, so it must stay positive.
    max_total = max(max_total, 1)

    result = RollResult(
        total=total,
        rolls=tuple(rolls),
        max_total=max_total,
        breakdown=format_breakdown(terms, rolls),
    )
    logger.debug("Rolled %s => %d (max %d)", result.breakdown, result.total, result.max_total)
    return result


def parse_and_roll(formula: str, rng: RandomSource | None = None, strict: bool = False) -> RollResult:
    """Parse then roll. Blank input gives the "Empty" result instead of an error."""

    parsed = parse_formula(formula, strict=strict)
    if parsed.is_empty:
        return EMPTY_RESULT
    return evaluate(parsed.terms, rng)


def preview_values(terms: Iterable[Term], rng: RandomSource | None = None) -> tuple[SingleDieRoll, ...]:
    """Fresh cosmetic draws for an animation frame. Not a roll result."""

    rng = rng or default_rng()
    return tuple(
        SingleDieRoll(die=term.die, value=draw(term.die, rng), coefficient=term.sign)
        for term in terms
        for _ in range(term.count)
    )
