"""Domain models for food log entries and daily totals."""

from dataclasses import dataclass
from enum import StrEnum


class MealType(StrEnum):
    """Closed set of meal buckets."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACKS = "snacks"


@dataclass(frozen=True)
class EntryDraft:
    """Entry fields known before the store assigns an id."""

    timestamp: str
    date: str
    meal_type: str
    item: str
    quantity: str
    calories: float
    confidence: float
    source: str
    raw_text: str


@dataclass(frozen=True)
class Entry:
    """Persisted food log entry."""

    entry_id: str
    timestamp: str
    date: str
    meal_type: str
    item: str
    quantity: str
    calories: float
    confidence: float
    source: str
    raw_text: str


@dataclass(frozen=True)
class EntryChanges:
    """Full set of mutable fields written back on update."""

    date: str
    meal_type: str
    item: str
    quantity: str
    calories: float
    confidence: float
    source: str
    raw_text: str


@dataclass(frozen=True)
class EntryUpdate:
    """Sparse update; None means keep the stored value."""

    date: str | None = None
    meal_type: MealType | None = None
    item: str | None = None
    quantity: str | None = None
    calories: float | None = None
    confidence: float | None = None
    source: str | None = None
    raw_text: str | None = None

    def merge(self, current: Entry) -> EntryChanges:
        """Return the effective record after applying this update."""
        return EntryChanges(
            date=current.date if self.date is None else self.date,
            meal_type=(
                current.meal_type if self.meal_type is None else str(self.meal_type)
            ),
            item=current.item if self.item is None else self.item,
            quantity=current.quantity if self.quantity is None else self.quantity,
            calories=current.calories if self.calories is None else self.calories,
            confidence=(
                current.confidence if self.confidence is None else self.confidence
            ),
            source=current.source if self.source is None else self.source,
            raw_text=current.raw_text if self.raw_text is None else self.raw_text,
        )


@dataclass(frozen=True)
class LogItem:
    """Single validated item of a log request."""

    name: str
    quantity: str
    calories: float
    confidence: float


@dataclass(frozen=True)
class LogCommand:
    """Validated batch of items sharing a date and meal type."""

    date: str
    meal_type: MealType
    items: list[LogItem]
    source: str = ""
    raw_text: str = ""


@dataclass(frozen=True)
class UpdateCommand:
    """Validated sparse update for one entry."""

    entry_id: str
    changes: EntryUpdate


@dataclass(frozen=True)
class DeleteCommand:
    """Validated delete request."""

    entry_id: str


@dataclass(frozen=True)
class DailyTotal:
    """Ledger row: the running calorie sum for a date."""

    date: str
    total_calories: float
