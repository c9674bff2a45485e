import random
from collections import Counter

import pytest

from mcp_dice_formula.dice import die_label, draw, max_value, min_value, possible_values
from mcp_dice_formula.errors import InvalidDieSpec
from mcp_dice_formula.models import ConstantDie, CustomValuesDie, StandardDie, WeightedDie


@pytest.mark.parametrize("faces", [1, 4, 6, 20, 100])
def test_standard_draws_stay_in_range(faces):
    rng = random.Random(faces)
    die = StandardDie(faces)
    assert all(1 <= draw(die, rng) <= faces for _ in range(2000))


def test_standard_draws_are_roughly_uniform():
    rng = random.Random(7)
    counts = Counter(draw(StandardDie(6), rng) for _ in range(6000))

    assert set(counts) == {1, 2, 3, 4, 5, 6}
    assert all(800 <= n <= 1200 for n in counts.values())


def test_custom_values_draw_from_the_list():
    rng = random.Random(3)
    die = CustomValuesDie((0, 0, 1, 5))
    seen = {draw(die, rng) for _ in range(500)}

    assert seen == {0, 1, 5}


def test_weighted_draws_follow_weights():
    rng = random.Random(11)
    die = WeightedDie(((1, 1), (6, 9)))
    sixes = sum(draw(die, rng) == 6 for _ in range(5000))

    assert 0.85 <= sixes / 5000 <= 0.95


def test_constant_always_draws_its_value():
    assert {draw(ConstantDie(5)) for _ in range(20)} == {5}


@pytest.mark.parametrize(
    ("die", "maximum", "minimum", "values", "label"),
    [
        (StandardDie(4), 4, 1, (1, 2, 3, 4), "d4"),
        (CustomValuesDie((2, 2, 3)), 3, 2, (2, 2, 3), "d[2,2,3]"),
        (WeightedDie(((1, 3), (4, 1), (1, 2))), 4, 1, (1, 4), "d[1:3,4:1,1:2]"),
        (ConstantDie(7), 7, 7, (7,), "7"),
    ],
)
def test_die_metadata(die, maximum, minimum, values, label):
    assert max_value(die) == maximum
    assert min_value(die) == minimum
    assert possible_values(die) == values
    assert max(possible_values(die)) == max_value(die)
    assert die_label(die) == label


def test_custom_values_accepts_a_list():
    die = CustomValuesDie([1, 2])
    assert die.values == (1, 2)
    assert hash(die) == hash(CustomValuesDie((1, 2)))


@pytest.mark.parametrize(
    "build",
    [
        lambda: StandardDie(0),
        lambda: StandardDie(-3),
        lambda: CustomValuesDie(()),
        lambda: WeightedDie(()),
        lambda: WeightedDie(((1, 0),)),
        lambda: WeightedDie(((1, 2), (3, -1))),
    ],
)
def test_invalid_dice_fail_at_construction(build):
    with pytest.raises(InvalidDieSpec) as exc:
        build()
    assert str(exc.value).startswith("[INVALID_DIE]")


@pytest.mark.parametrize(
    "build",
    [
        lambda: CustomValuesDie(v for v in ()),
        lambda: WeightedDie(e for e in ()),
    ],
)
def test_empty_iterables_fail_at_construction(build):
    with pytest.raises(InvalidDieSpec):
        build()


def test_custom_values_accepts_a_generator():
    assert CustomValuesDie(v for v in (4, 2)).values == (4, 2)
