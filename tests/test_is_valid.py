import pytest

from mcp_dice_formula.parser import is_valid


@pytest.mark.parametrize(
    ("formula", "valid"),
    [
        ("2d6+3", True),
        ("d20", True),
        ("-1d4", True),
        ("1D8 - 1", True),
        ("2d6 + 3 str", True),
        ("2d6 + str", False),
        ("hello", False),
        ("hello1", False),
        ("", False),
        ("   ", False),
        ("1d0", False),
        ("+-", False),
    ],
)
def test_is_valid(formula, valid):
    assert is_valid(formula) is valid
