from __future__ import annotations

import logging
import re
from dataclasses import replace

from .dice import die_label
from .errors import FormulaSyntaxError, InvalidDieSpec
from .models import ConstantDie, ParsedFormula, SkippedSpan, StandardDie, Term


logger = logging.getLogger(__name__)

# One term: optional sign, then either [count]d<faces> or a flat number.
_TERM_RE = re.compile(r"(?P<sign>[+-]?)(?:(?P<count>\d*)d(?P<faces>\d+)|(?P<constant>\d+))")

# Counts/faces/constants beyond a signed 32-bit int fall back to defaults.
_INT_LIMIT = 2**31 - 1

DEFAULT_COUNT = 1
DEFAULT_FACES = 6
DEFAULT_CONSTANT = 0


def normalize_text(text: str) -> str:
    return re.sub(r"\s+", "", text).lower()


def _to_int(digits: str, default: int) -> int:
    if not digits:
        return default
    value = int(digits)
    if value > _INT_LIMIT:
        logger.debug("Number %s out of range, using %d", digits, default)
        return default
    return value


def _build_term(m: re.Match[str]) -> Term:
    sign = -1 if m.group("sign") == "-" else 1

    if m.group("faces") is not None:
        count = _to_int(m.group("count"), DEFAULT_COUNT)
        if count < 1:
            count = DEFAULT_COUNT
        faces = _to_int(m.group("faces"), DEFAULT_FACES)
        return Term(die=StandardDie(faces), count=count, sign=sign)

    constant = _to_int(m.group("constant"), DEFAULT_CONSTANT)
    return Term(die=ConstantDie(constant), count=1, sign=sign)


def tokenize(normalized: str) -> tuple[list[re.Match[str]], list[SkippedSpan]]:
    """Split a normalized formula into term matches and the spans between them."""

    matches: list[re.Match[str]] = []
    skipped: list[SkippedSpan] = []
    pos = 0

    for m in _TERM_RE.finditer(normalized):
        if m.start() > pos:
            skipped.append(SkippedSpan(start=pos, text=normalized[pos : m.start()]))
        matches.append(m)
        pos = m.end()

    if pos < len(normalized):
        skipped.append(SkippedSpan(start=pos, text=normalized[pos:]))

    return matches, skipped


def parse_formula(text: str, strict: bool = False) -> ParsedFormula:
    """Parse a dice formula into signed terms.

    Unrecognized fragments are skipped and reported in `skipped`. With
    ``strict=True`` the first such fragment raises FormulaSyntaxError.
    A bad die (e.g. ``d0``) always raises InvalidDieSpec.
    """

    normalized = normalize_text(text or "")
    if not normalized:
        return ParsedFormula(input=text, normalized_input="", terms=())

    matches, skipped = tokenize(normalized)

    for span in skipped:
        logger.debug("Skipping unrecognized fragment %r at %d in %r", span.text, span.start, text)

    if strict and skipped:
        span = skipped[0]
        raise FormulaSyntaxError(
            f"[UNPARSEABLE_INPUT] Could not understand '{span.text}' at position {span.start}. "
            "Example: '2d6+3' or '1d20-1d4'.",
            fragment=span.text,
            position=span.start,
        )
    if strict and not matches:
        raise FormulaSyntaxError(
            "[UNPARSEABLE_INPUT] No dice or modifiers found. Example: 'd20' or '2d6+3'."
        )

    terms = tuple(_build_term(m) for m in matches)

    return ParsedFormula(
        input=text,
        normalized_input=normalized,
        terms=terms,
        skipped=tuple(skipped),
    )


def is_valid(formula: str) -> bool:
    """Gate for user-authored formulas before they are saved as presets."""

    if not formula or not formula.strip():
        return False
    try:
        parsed = parse_formula(formula)
    except InvalidDieSpec:
        return False
    if not parsed.terms:
        return False
    # Most of the input has to be formula, not leftovers.
    return parsed.recognized_chars * 2 >= len(parsed.normalized_input)


def term_label(term: Term) -> str:
    if term.is_constant:
        return die_label(term.die)
    return f"{term.count}{die_label(term.die)}"


def canonical_formula(terms: tuple[Term, ...] | list[Term]) -> str:
    chunks: list[str] = []
    for term in terms:
        if term.sign < 0:
            chunks.append("-")
        elif chunks:
            chunks.append("+")
        chunks.append(term_label(term))
    return "".join(chunks)


def double_dice(formula: str) -> str:
    """Critical-hit damage: double every dice count, keep flat modifiers."""

    parsed = parse_formula(formula)
    if not parsed.terms:
        return formula
    doubled = [t if t.is_constant else replace(t, count=t.count * 2) for t in parsed.terms]
    return canonical_formula(doubled)
