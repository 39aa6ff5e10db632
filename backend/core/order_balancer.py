"""
Statement order counterbalancing.

Each session shows half of its images under one question framing
("statement") and half under the other. Which framing comes first is drawn
once per session; which images land in the first half is decided by one of
two strategies behind a common interface:

- HalfSplitStrategy: shuffle everything and cut it in half.
- PairedHistoryStrategy: with exactly two images per category, send to the
  first half the member of each pair that keeps that image's historical
  statement-1 / statement-2 exposure closest to even.

The final presentation order lists all first-statement images (shuffled)
before all second-statement images (shuffled).

Dependencies: random (stdlib)
System role: Per-session and per-image order balancing
"""

import random
from dataclasses import dataclass, field
from typing import Mapping, Protocol, Sequence

STATEMENT_ONE = 1
STATEMENT_TWO = 2

# image_id -> (times shown under statement 1, times shown under statement 2)
StatementHistory = Mapping[str, tuple[int, int]]


@dataclass(frozen=True)
class SelectedImage:
    """An image reserved for a session, before ordering."""

    image_id: str
    category: str


@dataclass(frozen=True)
class OrderedImage:
    """An image with its statement and position in the session."""

    image_id: str
    category: str
    statement: int
    order_index: int


@dataclass
class OrderAssignment:
    """Result of order balancing for one session."""

    statement_order: int
    strategy: str
    images: list[OrderedImage] = field(default_factory=list)


def other_statement(statement: int) -> int:
    """Return the opposite statement value."""
    return STATEMENT_TWO if statement == STATEMENT_ONE else STATEMENT_ONE


class OrderStrategy(Protocol):
    """Decides which selected images are shown under the first statement."""

    name: str
    uses_history: bool

    def applies(self, selection: Mapping[str, Sequence[SelectedImage]], count: int) -> bool:
        ...

    def split(
        self,
        selection: Mapping[str, Sequence[SelectedImage]],
        first_statement: int,
        history: StatementHistory,
        rng: random.Random,
    ) -> tuple[list[SelectedImage], list[SelectedImage]]:
        ...


class HalfSplitStrategy:
    """Shuffle the whole selection and cut it into two equal halves."""

    name = "half_split"
    uses_history = False

    def applies(self, selection: Mapping[str, Sequence[SelectedImage]], count: int) -> bool:
        return True

    def split(
        self,
        selection: Mapping[str, Sequence[SelectedImage]],
        first_statement: int,
        history: StatementHistory,
        rng: random.Random,
    ) -> tuple[list[SelectedImage], list[SelectedImage]]:
        pool = [image for images in selection.values() for image in images]
        rng.shuffle(pool)
        half = len(pool) // 2
        return pool[:half], pool[half:]


class PairedHistoryStrategy:
    """Pick one member of each category pair using per-image statement history."""

    name = "paired_history"
    uses_history = True

    def applies(self, selection: Mapping[str, Sequence[SelectedImage]], count: int) -> bool:
        if not selection:
            return False
        if any(len(images) != 2 for images in selection.values()):
            return False
        return 2 * len(selection) == count

    @staticmethod
    def _imbalance(history: StatementHistory, image_id: str, statement: int) -> int:
        shown_one, shown_two = history.get(image_id, (0, 0))
        skew = shown_one - shown_two
        skew += 1 if statement == STATEMENT_ONE else -1
        return abs(skew)

    def split(
        self,
        selection: Mapping[str, Sequence[SelectedImage]],
        first_statement: int,
        history: StatementHistory,
        rng: random.Random,
    ) -> tuple[list[SelectedImage], list[SelectedImage]]:
        second_statement = other_statement(first_statement)
        first_half: list[SelectedImage] = []
        second_half: list[SelectedImage] = []

        for category in sorted(selection):
            a, b = selection[category]
            a_first = self._imbalance(history, a.image_id, first_statement) + self._imbalance(
                history, b.image_id, second_statement
            )
            b_first = self._imbalance(history, b.image_id, first_statement) + self._imbalance(
                history, a.image_id, second_statement
            )
            if a_first < b_first or (a_first == b_first and rng.random() < 0.5):
                first_half.append(a)
                second_half.append(b)
            else:
                first_half.append(b)
                second_half.append(a)

        return first_half, second_half


DEFAULT_STRATEGIES: tuple[OrderStrategy, ...] = (PairedHistoryStrategy(), HalfSplitStrategy())


def select_strategy(
    selection: Mapping[str, Sequence[SelectedImage]],
    count: int,
    strategies: Sequence[OrderStrategy] = DEFAULT_STRATEGIES,
) -> OrderStrategy:
    """Return the first strategy whose precondition holds for the selection."""
    for strategy in strategies:
        if strategy.applies(selection, count):
            return strategy
    return HalfSplitStrategy()


def assign_order(
    selection: Mapping[str, Sequence[SelectedImage]],
    count: int,
    history: StatementHistory | None = None,
    rng: random.Random | None = None,
    strategy: OrderStrategy | None = None,
) -> OrderAssignment:
    """
    Assign statements and presentation positions to a session's images.

    Args:
        selection: Reserved images grouped by category
        count: Target image count of the session
        history: Per-image statement exposure counts (paired strategy only)
        rng: Optional random source
        strategy: Strategy override; chosen by precondition when omitted

    Returns:
        OrderAssignment: statement_order plus images with contiguous order_index
    """
    rng = rng or random.Random()
    strategy = strategy or select_strategy(selection, count)
    first_statement = rng.choice((STATEMENT_ONE, STATEMENT_TWO))
    second_statement = other_statement(first_statement)

    first_half, second_half = strategy.split(selection, first_statement, history or {}, rng)
    rng.shuffle(first_half)
    rng.shuffle(second_half)

    ordered = [(image, first_statement) for image in first_half]
    ordered += [(image, second_statement) for image in second_half]

    return OrderAssignment(
        statement_order=first_statement,
        strategy=strategy.name,
        images=[
            OrderedImage(
                image_id=image.image_id,
                category=image.category,
                statement=statement,
                order_index=index,
            )
            for index, (image, statement) in enumerate(ordered)
        ],
    )
