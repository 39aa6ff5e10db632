"""
Balanced scenario selection.

Narrows the enabled scenarios to the least-served ones (fewest completed
sessions) and picks one uniformly at random.

Dependencies: random (stdlib)
System role: Fair condition assignment across participants
"""

import random
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class ScenarioTally:
    """An enabled scenario annotated with its completed-session count."""

    id: str
    title: str
    description: str
    short_label: str | None = None
    enabled: bool = True
    completed_count: int = 0


def pick_balanced_scenario(
    scenarios: Sequence[ScenarioTally],
    rng: random.Random | None = None,
) -> ScenarioTally | None:
    """
    Pick a least-served scenario, breaking ties uniformly at random.

    Args:
        scenarios: Enabled scenarios with completed-session counts
        rng: Optional random source (module-level random when omitted)

    Returns:
        ScenarioTally | None: Chosen scenario, or None when the input is empty
    """
    if not scenarios:
        return None
    rng = rng or random
    min_count = min(int(s.completed_count or 0) for s in scenarios)
    candidates = [s for s in scenarios if int(s.completed_count or 0) == min_count]
    return rng.choice(candidates)
