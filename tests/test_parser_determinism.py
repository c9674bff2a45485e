from mcp_dice_formula.parser import parse_formula


def test_parse_is_deterministic():
    text = "4d8 - 1d4 + 3"
    a = parse_formula(text)
    b = parse_formula(text)

    assert a.normalized_input == b.normalized_input
    assert a.terms == b.terms
    assert a.skipped == b.skipped
