"""
Test suite for balanced scenario selection.

System role: Verification of fair condition assignment
"""

import random

import pytest

from backend.core.scenario_selector import ScenarioTally, pick_balanced_scenario


def tally(id: str, completed: int) -> ScenarioTally:
    return ScenarioTally(id=id, title=id.upper(), description="", completed_count=completed)


class TestPickBalancedScenario:
    """Test suite for pick_balanced_scenario()."""

    def test_empty_input_should_return_none(self) -> None:
        assert pick_balanced_scenario([]) is None

    def test_single_scenario_should_be_returned(self) -> None:
        only = tally("a", 7)

        assert pick_balanced_scenario([only]) is only

    def test_should_never_pick_over_served_scenario(self) -> None:
        """Counts {A:3, B:3, C:5} always yield A or B."""
        # Arrange
        scenarios = [tally("A", 3), tally("B", 3), tally("C", 5)]
        rng = random.Random(7)

        # Act
        picks = {pick_balanced_scenario(scenarios, rng).id for _ in range(500)}

        # Assert
        assert picks == {"A", "B"}

    def test_ties_should_be_broken_randomly(self) -> None:
        scenarios = [tally("A", 0), tally("B", 0), tally("C", 0)]
        rng = random.Random(11)

        picks = [pick_balanced_scenario(scenarios, rng).id for _ in range(300)]

        assert set(picks) == {"A", "B", "C"}
        assert min(picks.count(s) for s in "ABC") > 50

    @pytest.mark.parametrize("counts,expected", [((0, 1, 2), "A"), ((4, 2, 9), "B"), ((5, 5, 1), "C")])
    def test_unique_minimum_should_always_win(self, counts, expected) -> None:
        scenarios = [tally(name, n) for name, n in zip("ABC", counts)]

        assert pick_balanced_scenario(scenarios, random.Random(0)).id == expected
