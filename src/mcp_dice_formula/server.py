from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .actions import critical_state, parse_steps, roll_combo as _roll_combo
from .config import settings
from .dice import die_label
from .errors import DiceError
from .models import EMPTY_RESULT, ModeResult, RollResult
from .modes import check_mode, evaluate_with_mode
from .parser import canonical_formula, is_valid, parse_formula


logger = logging.getLogger(__name__)

mcp = FastMCP("mcp-dice-formula")

_rng = settings.make_rng()


def _result_dict(result: RollResult) -> dict[str, Any]:
    return {
        "total": result.total,
        "max_total": result.max_total,
        "breakdown": result.breakdown,
        "rolls": [
            {"die": die_label(r.die), "value": r.value, "coefficient": r.coefficient}
            for r in result.rolls
        ],
        "critical": critical_state(result),
    }


def roll_payload(formula: str, mode: str = "normal") -> dict[str, Any]:
    """Parse and roll `formula`, shaped for a tool response. Raises DiceError."""

    parsed = parse_formula(formula, strict=settings.strict_parsing)
    if parsed.is_empty:
        rolled = ModeResult(mode=check_mode(mode), primary=EMPTY_RESULT)
    else:
        rolled = evaluate_with_mode(parsed.terms, mode, _rng)

    payload = {
        "input": formula,
        "normalized_expression": canonical_formula(parsed.terms),
        "mode": rolled.mode,
        **_result_dict(rolled.primary),
        "secondary": _result_dict(rolled.secondary) if rolled.secondary else None,
        "skipped": [span.text for span in parsed.skipped],
    }
    return payload


@mcp.tool()
def roll_formula(formula: str, mode: str = "normal"):
    """Roll a dice formula such as '2d6+3' or '1d20-1d4'.

    Input: formula (string), mode ('normal', 'advantage' or 'disadvantage')
    Output: total, best-case total, per-die values and a breakdown string.
    Under advantage/disadvantage the discarded roll is returned as 'secondary'.
    """

    try:
        return roll_payload(formula, mode)
    except DiceError as e:
        # Surface stable error codes in the message.
        raise ValueError(str(e)) from None


@mcp.tool()
def validate_formula(formula: str):
    """Check whether a formula is good enough to be saved as a preset."""

    return {"formula": formula, "valid": is_valid(formula)}


@mcp.tool()
def roll_combo(steps: str, mode: str = "normal"):
    """Roll an attack followed by damage steps.

    Input: steps as 'name;formula;isAttack;threshold|...', e.g.
    'Attack;1d20+5;true;15|Damage;1d8+3;false'.
    Damage is skipped after a miss and its dice are doubled after a natural 20.
    """

    try:
        combo = _roll_combo(parse_steps(steps), mode, _rng)
    except DiceError as e:
        raise ValueError(str(e)) from None

    return {
        "result": combo.result_text,
        "breakdown": combo.breakdown,
        "total": combo.total,
        "max_total": combo.max_total,
        "critical": combo.critical,
        "primary_display": combo.primary_display,
        "secondary_display": combo.secondary_display,
    }


def run() -> None:
    logging.basicConfig(level=settings.log_level.upper())
    logger.info("Starting mcp-dice-formula (strict_parsing=%s)", settings.strict_parsing)
    # Default transport is stdio.
    mcp.run()


if __name__ == "__main__":
    run()
