"""In-memory entry and totals repositories."""

import threading
from collections import defaultdict
from dataclasses import asdict
from uuid import uuid4

from calorie_tracker.domain.entries import DailyTotal, Entry, EntryChanges, EntryDraft
from calorie_tracker.domain.validation import round_amount
from calorie_tracker.services.entries import EntryRepository, TotalsRepository


class InMemoryEntryRepository(EntryRepository):
    """Thread-safe entry store backed by a dict."""

    def __init__(self) -> None:
        self._entries: dict[str, Entry] = {}
        self._lock = threading.Lock()

    def create_entries(self, drafts: list[EntryDraft]) -> list[Entry]:
        """Store drafts under fresh ids."""
        created = [Entry(entry_id=str(uuid4()), **asdict(draft)) for draft in drafts]
        with self._lock:
            for entry in created:
                self._entries[entry.entry_id] = entry
        return created

    def get_entry(self, entry_id: str) -> Entry | None:
        """Return an entry by id."""
        with self._lock:
            return self._entries.get(entry_id)

    def update_entry(self, entry_id: str, changes: EntryChanges) -> None:
        """Overwrite mutable fields; unknown ids are ignored."""
        with self._lock:
            current = self._entries.get(entry_id)
            if current is None:
                return
            self._entries[entry_id] = Entry(
                entry_id=entry_id, timestamp=current.timestamp, **asdict(changes)
            )

    def delete_entry(self, entry_id: str) -> Entry | None:
        """Remove and return an entry."""
        with self._lock:
            return self._entries.pop(entry_id, None)

    def list_entries(self, day: str, limit: int, offset: int) -> list[Entry]:
        """Return a date's entries, most recent first."""
        with self._lock:
            matches = [entry for entry in self._entries.values() if entry.date == day]
        matches.sort(key=lambda entry: entry.timestamp, reverse=True)
        return matches[offset : offset + limit]

    def list_entries_range(
        self, start: str, end: str, limit: int, offset: int
    ) -> list[Entry]:
        """Return entries in the range, by date then most recent first."""
        with self._lock:
            matches = [
                entry
                for entry in self._entries.values()
                if start <= entry.date <= end
            ]
        matches.sort(key=lambda entry: entry.timestamp, reverse=True)
        matches.sort(key=lambda entry: entry.date)
        return matches[offset : offset + limit]


class InMemoryTotalsRepository(TotalsRepository):
    """Ledger map with one lock per date so increments never lose updates."""

    def __init__(self) -> None:
        self._totals: dict[str, float] = {}
        self._locks: defaultdict[str, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    def increment_total(self, day: str, delta: float) -> None:
        """Atomically add delta to a date's total."""
        with self._lock_for(day):
            self._totals[day] = round_amount(self._totals.get(day, 0.0) + delta)

    def get_total(self, day: str) -> float:
        """Return a date's total, 0 when absent."""
        with self._lock_for(day):
            return round_amount(self._totals.get(day, 0.0))

    def list_totals(self, start: str, end: str) -> list[DailyTotal]:
        """Return stored rows in the range, ascending by date."""
        rows = [
            DailyTotal(date=day, total_calories=round_amount(total))
            for day, total in list(self._totals.items())
            if start <= day <= end
        ]
        return sorted(rows, key=lambda row: row.date)

    def set_total(self, day: str, total: float) -> None:
        """Overwrite a date's total."""
        with self._lock_for(day):
            self._totals[day] = round_amount(total)

    def _lock_for(self, day: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks[day]
