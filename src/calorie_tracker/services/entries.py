"""Entry mutation service that keeps the daily totals ledger in sync."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Protocol

from calorie_tracker.domain.entries import (
    DailyTotal,
    DeleteCommand,
    Entry,
    EntryChanges,
    EntryDraft,
    LogCommand,
    UpdateCommand,
)
from calorie_tracker.domain.errors import EntryNotFoundError
from calorie_tracker.domain.validation import round_amount

logger = logging.getLogger(__name__)


class EntryRepository(Protocol):
    """Persistence interface for food log entries."""

    def create_entries(self, drafts: list[EntryDraft]) -> list[Entry]:
        """Persist drafts and return them with store-assigned ids."""

    def get_entry(self, entry_id: str) -> Entry | None:
        """Return an entry by id."""

    def update_entry(self, entry_id: str, changes: EntryChanges) -> None:
        """Overwrite the mutable fields of an entry."""

    def delete_entry(self, entry_id: str) -> Entry | None:
        """Remove an entry and return it, or None when absent."""

    def list_entries(self, day: str, limit: int, offset: int) -> list[Entry]:
        """Return entries for a date, most recent first."""

    def list_entries_range(
        self, start: str, end: str, limit: int, offset: int
    ) -> list[Entry]:
        """Return entries in [start, end], by date then most recent first."""


class TotalsRepository(Protocol):
    """Persistence interface for the per-date calorie ledger."""

    def increment_total(self, day: str, delta: float) -> None:
        """Atomically add delta to the total for a date."""

    def get_total(self, day: str) -> float:
        """Return the total for a date, 0 when absent."""

    def list_totals(self, start: str, end: str) -> list[DailyTotal]:
        """Return stored rows in [start, end], ascending by date."""

    def set_total(self, day: str, total: float) -> None:
        """Overwrite the total for a date."""


@dataclass(frozen=True)
class LogResult:
    """Outcome of logging a batch of items."""

    date: str
    total_calories: float
    entry_ids: list[str]


@dataclass(frozen=True)
class EntryTotalResult:
    """Outcome of updating or deleting one entry."""

    entry_id: str
    date: str
    total_calories: float


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class EntryService:
    """Runs entry mutations and issues the matching ledger deltas."""

    entries: EntryRepository
    totals: TotalsRepository
    clock: Callable[[], datetime] = field(default=_utc_now)

    def log_entries(self, command: LogCommand) -> LogResult:
        """Persist a batch of items and add their calories to the ledger."""
        timestamp = self.clock().isoformat()
        drafts = [
            EntryDraft(
                timestamp=timestamp,
                date=command.date,
                meal_type=str(command.meal_type),
                item=item.name,
                quantity=item.quantity,
                calories=round_amount(item.calories),
                confidence=round_amount(item.confidence),
                source=command.source,
                raw_text=command.raw_text,
            )
            for item in command.items
        ]
        created = self.entries.create_entries(drafts)
        entry_ids = [entry.entry_id for entry in created]
        delta = round_amount(sum(draft.calories for draft in drafts))
        self._apply_delta(command.date, delta, entry_ids)

        total = self.totals.get_total(command.date)
        logger.info(
            "Logged entries",
            extra={"date": command.date, "count": len(entry_ids), "delta": delta},
        )
        return LogResult(date=command.date, total_calories=total, entry_ids=entry_ids)

    def update_entry(self, command: UpdateCommand) -> EntryTotalResult:
        """Merge an update into an entry and reconcile affected dates."""
        current = self.entries.get_entry(command.entry_id)
        if current is None:
            raise EntryNotFoundError(command.entry_id)

        merged = command.changes.merge(current)
        merged = replace(
            merged,
            calories=round_amount(merged.calories),
            confidence=round_amount(merged.confidence),
        )
        self.entries.update_entry(command.entry_id, merged)

        old_calories = round_amount(current.calories)
        ids = [command.entry_id]
        if merged.date != current.date:
            self._apply_delta(current.date, -old_calories, ids)
            self._apply_delta(merged.date, merged.calories, ids)
        else:
            delta = round_amount(merged.calories - old_calories)
            if delta != 0:
                self._apply_delta(merged.date, delta, ids)

        total = self.totals.get_total(merged.date)
        logger.info(
            "Updated entry",
            extra={
                "entry_id": command.entry_id,
                "old_date": current.date,
                "new_date": merged.date,
            },
        )
        return EntryTotalResult(
            entry_id=command.entry_id, date=merged.date, total_calories=total
        )

    def delete_entry(self, command: DeleteCommand) -> EntryTotalResult:
        """Remove an entry and subtract its calories from its date."""
        removed = self.entries.delete_entry(command.entry_id)
        if removed is None:
            raise EntryNotFoundError(command.entry_id)

        self._apply_delta(
            removed.date, -round_amount(removed.calories), [command.entry_id]
        )
        total = self.totals.get_total(removed.date)
        logger.info(
            "Deleted entry",
            extra={"entry_id": command.entry_id, "date": removed.date},
        )
        return EntryTotalResult(
            entry_id=command.entry_id, date=removed.date, total_calories=total
        )

    def list_entries(self, day: str, limit: int = 100, offset: int = 0) -> list[Entry]:
        """Return one day's entries, most recent first."""
        return self.entries.list_entries(day, limit, offset)

    def list_entries_range(
        self, start: str, end: str, limit: int = 100, offset: int = 0
    ) -> list[Entry]:
        """Return entries across a range."""
        return self.entries.list_entries_range(start, end, limit, offset)

    def _apply_delta(self, day: str, delta: float, entry_ids: list[str]) -> None:
        try:
            self.totals.increment_total(day, delta)
        except Exception:
            logger.exception(
                "Ledger increment failed after entry write; totals need repair",
                extra={"date": day, "delta": delta, "entry_ids": entry_ids},
            )
            raise
