"""Supabase repository for food log entries."""

from dataclasses import asdict, dataclass

from supabase import Client

from calorie_tracker.domain.entries import Entry, EntryChanges, EntryDraft
from calorie_tracker.services.entries import EntryRepository

_ENTRY_COLUMNS = (
    "entry_id, timestamp, date, meal_type, item, quantity, calories, confidence, "
    "source, raw_text"
)


@dataclass
class SupabaseEntryRepository(EntryRepository):
    """Supabase implementation for entries."""

    client: Client
    table: str = "entries"

    def create_entries(self, drafts: list[EntryDraft]) -> list[Entry]:
        """Insert drafts in one request and return the stored rows."""
        if not drafts:
            return []
        response = (
            self.client.table(self.table)
            .insert([asdict(draft) for draft in drafts])
            .execute()
        )
        if not response.data or len(response.data) != len(drafts):
            raise RuntimeError("Failed to create entries")
        return [_parse_entry(row) for row in response.data]

    def get_entry(self, entry_id: str) -> Entry | None:
        """Return an entry by id."""
        response = (
            self.client.table(self.table)
            .select(_ENTRY_COLUMNS)
            .eq("entry_id", entry_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def update_entry(self, entry_id: str, changes: EntryChanges) -> None:
        """Write the merged mutable fields."""
        self.client.table(self.table).update(asdict(changes)).eq(
            "entry_id", entry_id
        ).execute()

    def delete_entry(self, entry_id: str) -> Entry | None:
        """Delete an entry and return the removed row."""
        response = (
            self.client.table(self.table).delete().eq("entry_id", entry_id).execute()
        )
        if not response.data:
            return None
        return _parse_entry(response.data[0])

    def list_entries(self, day: str, limit: int, offset: int) -> list[Entry]:
        """Return a date's entries, most recent first."""
        response = (
            self.client.table(self.table)
            .select(_ENTRY_COLUMNS)
            .eq("date", day)
            .order("timestamp", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def list_entries_range(
        self, start: str, end: str, limit: int, offset: int
    ) -> list[Entry]:
        """Return entries in the range, by date then most recent first."""
        response = (
            self.client.table(self.table)
            .select(_ENTRY_COLUMNS)
            .gte("date", start)
            .lte("date", end)
            .order("date", desc=False)
            .order("timestamp", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]


def _parse_entry(row: dict[str, object]) -> Entry:
    return Entry(
        entry_id=str(row["entry_id"]),
        timestamp=str(row.get("timestamp") or ""),
        date=str(row.get("date") or "").strip(),
        meal_type=str(row.get("meal_type") or ""),
        item=str(row.get("item") or ""),
        quantity=str(row.get("quantity") or ""),
        calories=float(row.get("calories") or 0.0),
        confidence=float(row.get("confidence") or 0.0),
        source=str(row.get("source") or ""),
        raw_text=str(row.get("raw_text") or ""),
    )
