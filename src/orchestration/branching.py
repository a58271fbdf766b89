# ABOUTME: Weighted outcome tables and the selector that maps a drawn integer to an outcome.
# ABOUTME: Cumulative intervals partition [0, total); boundaries are checked from the highest threshold down.

from collections.abc import Hashable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

from src.utils.rng import SeededRandom

T = TypeVar("T", bound=Hashable)


@dataclass(frozen=True)
class WeightedOutcome(Generic[T]):
    """One row of an outcome table"""

    weight: int
    outcome: T

    def __post_init__(self) -> None:
        if isinstance(self.weight, bool) or not isinstance(self.weight, int):
            raise TypeError(f"Weight must be an integer, got {self.weight!r}")
        if self.weight < 0:
            raise ValueError(f"Weight must be non-negative, got {self.weight}")


@dataclass(frozen=True)
class OutcomeTable(Generic[T]):
    """
    Ordered (weight, outcome) rows.

    Row i owns the interval [sum(weights[:i]), sum(weights[:i + 1])), so the
    rows partition [0, total) in declaration order. Zero-weight rows own an
    empty interval and can never be drawn.
    """

    rows: tuple[WeightedOutcome[T], ...]

    def __post_init__(self) -> None:
        if not self.rows:
            raise ValueError("Outcome table needs at least one row")
        if self.total <= 0:
            raise ValueError("Outcome table weights must sum to a positive total")

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[int, T]]) -> "OutcomeTable[T]":
        """
        Build a table from (weight, outcome) pairs.

        Examples:
            >>> table = OutcomeTable.from_pairs([(35, "A"), (65, "B")])
            >>> table.total
            100
        """
        return cls(tuple(WeightedOutcome(weight, outcome) for weight, outcome in pairs))

    @property
    def total(self) -> int:
        return sum(row.weight for row in self.rows)

    def lower_bounds(self) -> list[int]:
        """Inclusive lower bound of every row's interval, in declaration order"""
        bounds = []
        running = 0
        for row in self.rows:
            bounds.append(running)
            running += row.weight
        return bounds

    def intervals(self) -> list[tuple[int, int, T]]:
        """(start, stop, outcome) for every row, stop exclusive"""
        return [
            (start, start + row.weight, row.outcome)
            for start, row in zip(self.lower_bounds(), self.rows)
        ]


class RandomBranchSelector(Generic[T]):
    """
    Pure mapping from a draw in [0, total) to an outcome.

    draw() walks the thresholds from the highest cumulative lower bound down
    and returns the first row whose lower bound the value reaches. For a
    gap-free partition this picks the row whose interval contains the value;
    rows sharing a lower bound (zero-weight rows) resolve to the later,
    non-empty row.

    Examples:
        >>> selector = RandomBranchSelector(OutcomeTable.from_pairs([(35, "A"), (65, "B")]))
        >>> selector.draw(34), selector.draw(35)
        ('A', 'B')
    """

    def __init__(self, table: OutcomeTable[T]):
        self._table = table
        self._total = table.total
        bounds = table.lower_bounds()
        reachable = [
            (bounds[index], row.outcome)
            for index, row in enumerate(table.rows)
            if row.weight > 0
        ]
        # Highest threshold first
        self._thresholds: list[tuple[int, T]] = sorted(
            reachable, key=lambda entry: entry[0], reverse=True
        )

    @property
    def table(self) -> OutcomeTable[T]:
        return self._table

    @property
    def total(self) -> int:
        return self._total

    def draw(self, value: int) -> T:
        """
        Map a drawn integer to its outcome.

        Args:
            value: Integer in [0, total)

        Returns:
            Outcome whose interval contains value

        Raises:
            ValueError: If value is outside [0, total)
        """
        if not 0 <= value < self._total:
            raise ValueError(f"Draw must be in [0, {self._total}), got {value}")
        for lower, outcome in self._thresholds:
            if value >= lower:
                return outcome
        raise AssertionError("Outcome table does not cover 0")  # pragma: no cover

    def draw_from(self, rng: SeededRandom) -> tuple[int, T]:
        """
        Consume exactly one value from the stream and map it.

        Returns:
            Tuple of (raw draw, outcome) so callers can record the roll
        """
        value = rng.next_int(self._total)
        return value, self.draw(value)
