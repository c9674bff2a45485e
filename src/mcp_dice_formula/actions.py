"""Action-card rolls built on top of the evaluator.

Covers natural 20 / natural 1 detection and "combo" cards: an attack roll
followed by damage rolls that only land if the attack hit, with dice
doubled on a critical.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .dice import RandomSource, default_rng
from .models import CriticalState, RollMode, RollResult, StandardDie
from .modes import roll_with_mode
from .parser import double_dice, parse_formula


logger = logging.getLogger(__name__)


def _rolls_d20(formula: str) -> bool:
    return any(
        isinstance(t.die, StandardDie) and t.die.faces == 20 for t in parse_formula(formula).terms
    )


def _d20_values(result: RollResult) -> list[int]:
    return [r.value for r in result.rolls if isinstance(r.die, StandardDie) and r.die.faces == 20]


def is_natural_20(result: RollResult) -> bool:
    return 20 in _d20_values(result)


def is_natural_1(result: RollResult) -> bool:
    return 1 in _d20_values(result)


def critical_state(result: RollResult) -> CriticalState:
    if is_natural_20(result):
        return "crit_hit"
    if is_natural_1(result):
        return "crit_miss"
    return "normal"


@dataclass(frozen=True)
class ComboStep:
    name: str
    formula: str
    is_attack: bool
    threshold: int = 0


@dataclass(frozen=True)
class ComboResult:
    result_text: str
    breakdown: str
    total: int
    max_total: int
    is_nat20: bool
    is_nat1: bool
    primary_display: int
    secondary_display: int | None

    @property
    def critical(self) -> CriticalState:
        if self.is_nat20:
            return "crit_hit"
        if self.is_nat1:
            return "crit_miss"
        return "normal"


def parse_steps(text: str) -> list[ComboStep]:
    """Read the stored ``name;formula;isAttack[;threshold]|...`` form.

    Entries with fewer than three fields are dropped; a missing or
    non-numeric threshold counts as 0.
    """

    if not text or not text.strip():
        return []

    steps: list[ComboStep] = []
    for chunk in text.split("|"):
        parts = chunk.split(";")
        if len(parts) < 3:
            logger.debug("Dropping malformed combo step %r", chunk)
            continue
        threshold = 0
        if len(parts) >= 4:
            try:
                threshold = int(parts[3].strip())
            except ValueError:
                threshold = 0
        steps.append(
            ComboStep(
                name=parts[0],
                formula=parts[1],
                is_attack=parts[2].strip().lower() == "true",
                threshold=threshold,
            )
        )
    return steps


def format_steps(steps: list[ComboStep]) -> str:
    return "|".join(
        f"{s.name};{s.formula};{'true' if s.is_attack else 'false'};{s.threshold if s.is_attack else ''}"
        for s in steps
    )


def _attack_hits(total: int, threshold: int, nat20: bool, nat1: bool) -> bool:
    if nat1:
        return False
    if nat20:
        return True
    if threshold > 0:
        return total >= threshold
    return True


def roll_combo(steps: list[ComboStep], mode: RollMode = "normal", rng: RandomSource | None = None) -> ComboResult:
    rng = rng or default_rng()

    result_parts: list[str] = []
    breakdown_parts: list[str] = []

    last_crit = False
    last_hit = True
    any_nat20 = False
    any_nat1 = False
    total = 0
    max_total = 0

    primary_display: int | None = None
    secondary_display: int | None = None
    display_locked = False

    for index, step in enumerate(steps):
        if step.is_attack:
            last_crit = False
            last_hit = True
        elif not last_hit:
            breakdown_parts.append(f"\n{step.name}: Skipped (Miss)")
            continue

        formula = double_dice(step.formula) if not step.is_attack and last_crit else step.formula
        # Advantage/disadvantage only applies to d20 rolls; damage dice are rolled once.
        step_mode = mode if step.is_attack or _rolls_d20(formula) else "normal"
        rolled = roll_with_mode(formula, step_mode, rng)
        result = rolled.primary

        has_d20 = bool(_d20_values(result))
        nat20 = is_natural_20(result)
        nat1 = is_natural_1(result)

        if step.is_attack:
            last_crit = nat20
            any_nat20 = any_nat20 or nat20
            any_nat1 = any_nat1 or nat1
            last_hit = _attack_hits(result.total, step.threshold, nat20, nat1)

        # Under advantage/disadvantage only the first attack drives the display pair.
        if mode == "normal":
            primary_display = secondary_display = result.total
        elif not display_locked:
            display_locked = step.is_attack or has_d20
            primary_display = result.total
            secondary_display = rolled.secondary.total if rolled.secondary else result.total

        text = f"{step.name}: {result.total}"
        if step.is_attack and nat20:
            text += " (CRIT!)"
        if step.is_attack and nat1:
            text += " (MISS!)"
        elif step.is_attack and not last_hit:
            text += " (Miss)"
        result_parts.append((" / " if index > 0 else "") + text)

        line = f"{step.name}: {result.breakdown}"
        if step.is_attack and step.threshold > 0:
            line += f" vs AC {step.threshold}"
        breakdown_parts.append((" | " if index > 0 else "") + line)

        total = result.total
        max_total += result.max_total

    logger.debug("Combo of %d steps => %s", len(steps), "".join(result_parts))

    return ComboResult(
        result_text="".join(result_parts),
        breakdown="".join(breakdown_parts),
        total=total,
        max_total=max_total,
        is_nat20=any_nat20,
        is_nat1=any_nat1,
        primary_display=primary_display if primary_display is not None else total,
        secondary_display=secondary_display,
    )
