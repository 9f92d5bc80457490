"""Domain models for ranged calorie summaries."""

from dataclasses import dataclass

from calorie_tracker.domain.entries import DailyTotal


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar interval, both bounds formatted YYYY-MM-DD."""

    start: str
    end: str


@dataclass(frozen=True)
class RangeSummary:
    """Flat per-date totals for a range."""

    start: str
    end: str
    totals: list[DailyTotal]


@dataclass(frozen=True)
class MealTypeTotals:
    """Per-meal-type calorie breakdown for one date."""

    date: str
    breakfast: float = 0.0
    lunch: float = 0.0
    dinner: float = 0.0
    snacks: float = 0.0


@dataclass(frozen=True)
class MealTypeRangeSummary:
    """Per-date meal-type breakdown for a range."""

    start: str
    end: str
    totals: list[MealTypeTotals]


@dataclass(frozen=True)
class TotalCorrection:
    """Ledger row rewritten by a repair pass."""

    date: str
    previous_total: float
    total_calories: float
