import pytest


class ScriptedRng:
    """Random source that hands out pre-chosen values in order."""

    def __init__(self, values):
        self._values = list(values)

    @property
    def remaining(self):
        return len(self._values)

    def randint(self, a, b):
        value = self._values.pop(0)
        assert a <= value <= b, f"scripted value {value} outside [{a}, {b}]"
        return value

    def choices(self, population, weights=None, *, k=1):
        value = self._values.pop(0)
        assert value in population
        return [value] * k


@pytest.fixture
def scripted():
    return ScriptedRng
