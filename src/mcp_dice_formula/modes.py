from __future__ import annotations

from typing import Iterable, cast

from .dice import RandomSource, default_rng
from .errors import DiceError
from .evaluator import evaluate
from .models import EMPTY_RESULT, ROLL_MODES, ModeResult, RollMode, Term
from .parser import parse_formula


def check_mode(mode: str) -> RollMode:
    if mode not in ROLL_MODES:
        raise DiceError(
            f"[INVALID_MODE] Unknown roll mode '{mode}'. Use one of: normal, advantage, disadvantage."
        )
    return cast(RollMode, mode)


def evaluate_with_mode(terms: Iterable[Term], mode: RollMode = "normal", rng: RandomSource | None = None) -> ModeResult:
    """Roll `terms` once (normal) or twice (advantage / disadvantage).

    Both candidates are drawn independently; the loser is returned as
    `secondary` so it can be shown next to the kept result. Ties keep the
    first evaluation.
    """

    mode = check_mode(mode)
    rng = rng or default_rng()
    terms = tuple(terms)

    first = evaluate(terms, rng)
    if mode == "normal":
        return ModeResult(mode=mode, primary=first)

    second = evaluate(terms, rng)
    if mode == "advantage":
        keep_second = second.total > first.total
    else:
        keep_second = second.total < first.total

    if keep_second:
        return ModeResult(mode=mode, primary=second, secondary=first)
    return ModeResult(mode=mode, primary=first, secondary=second)


def roll_with_mode(
    formula: str,
    mode: RollMode = "normal",
    rng: RandomSource | None = None,
    strict: bool = False,
) -> ModeResult:
    mode = check_mode(mode)
    parsed = parse_formula(formula, strict=strict)
    if parsed.is_empty:
        return ModeResult(mode=mode, primary=EMPTY_RESULT)
    return evaluate_with_mode(parsed.terms, mode, rng)
