"""Supabase repository for the daily totals ledger."""

from dataclasses import dataclass

from supabase import Client

from calorie_tracker.domain.entries import DailyTotal
from calorie_tracker.domain.validation import round_amount
from calorie_tracker.services.entries import TotalsRepository


@dataclass
class SupabaseTotalsRepository(TotalsRepository):
    """Supabase implementation for daily totals.

    Increments go through a Postgres function so the add happens server-side
    in a single statement (see supabase/schema.sql).
    """

    client: Client
    table: str = "daily_totals"
    increment_function: str = "increment_daily_total"

    def increment_total(self, day: str, delta: float) -> None:
        """Atomically add delta to a date's total."""
        self.client.rpc(
            self.increment_function, {"target_date": day, "delta": delta}
        ).execute()

    def get_total(self, day: str) -> float:
        """Return a date's total, 0 when the row is missing."""
        response = (
            self.client.table(self.table)
            .select("total_calories")
            .eq("date", day)
            .limit(1)
            .execute()
        )
        if not response.data:
            return 0.0
        return round_amount(float(response.data[0].get("total_calories") or 0.0))

    def list_totals(self, start: str, end: str) -> list[DailyTotal]:
        """Return stored rows in the range, ascending by date."""
        response = (
            self.client.table(self.table)
            .select("date, total_calories")
            .gte("date", start)
            .lte("date", end)
            .order("date", desc=False)
            .execute()
        )
        return [_parse_total(row) for row in response.data or []]

    def set_total(self, day: str, total: float) -> None:
        """Overwrite a date's total."""
        self.client.table(self.table).upsert(
            {"date": day, "total_calories": total}, on_conflict="date"
        ).execute()


def _parse_total(row: dict[str, object]) -> DailyTotal:
    return DailyTotal(
        date=str(row.get("date", "")),
        total_calories=round_amount(float(row.get("total_calories") or 0.0)),
    )
