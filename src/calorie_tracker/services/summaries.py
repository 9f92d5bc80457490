"""Summary service for daily and ranged calorie totals."""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import date

from calorie_tracker.domain.dates import enumerate_dates, trailing_window
from calorie_tracker.domain.entries import DailyTotal, Entry, MealType
from calorie_tracker.domain.summaries import (
    DateRange,
    MealTypeRangeSummary,
    MealTypeTotals,
    RangeSummary,
    TotalCorrection,
)
from calorie_tracker.domain.validation import round_amount
from calorie_tracker.services.entries import EntryRepository, TotalsRepository

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 1000


@dataclass
class SummaryService:
    """Answers point, range and grouped calorie queries."""

    entries: EntryRepository
    totals: TotalsRepository
    today: Callable[[], date] = field(default=date.today)
    page_size: int = DEFAULT_PAGE_SIZE

    def get_total(self, day: str) -> DailyTotal:
        """Return the ledger total for a single date."""
        return DailyTotal(date=day, total_calories=self.totals.get_total(day))

    def get_range(self, date_range: DateRange, include_empty: bool) -> RangeSummary:
        """Return ledger totals for a range, optionally gap-filled with zeros."""
        days = enumerate_dates(date_range.start, date_range.end)
        rows = [
            DailyTotal(date=row.date, total_calories=round_amount(row.total_calories))
            for row in self.totals.list_totals(date_range.start, date_range.end)
        ]
        if include_empty:
            by_date = {row.date: row.total_calories for row in rows}
            rows = [
                DailyTotal(date=day, total_calories=by_date.get(day, 0.0))
                for day in days
            ]
        return RangeSummary(start=date_range.start, end=date_range.end, totals=rows)

    def get_range_by_meal_type(
        self, date_range: DateRange, include_empty: bool
    ) -> MealTypeRangeSummary:
        """Return per-date meal-type breakdowns derived from entries."""
        days = enumerate_dates(date_range.start, date_range.end)
        buckets: dict[str, dict[str, float]] = {}
        for entry in self._iter_entries(date_range):
            day_buckets = buckets.setdefault(entry.date, _empty_buckets())
            meal = str(entry.meal_type or "")
            if meal in day_buckets:
                day_buckets[meal] = round_amount(
                    day_buckets[meal] + round_amount(entry.calories)
                )

        selected = days if include_empty else sorted(buckets)
        totals = [
            MealTypeTotals(date=day, **buckets.get(day, _empty_buckets()))
            for day in selected
        ]
        return MealTypeRangeSummary(
            start=date_range.start, end=date_range.end, totals=totals
        )

    def get_last_days(self, days: int, include_empty: bool) -> RangeSummary:
        """Return flat totals for the trailing window ending today."""
        start, end = trailing_window(days, self.today())
        return self.get_range(DateRange(start=start, end=end), include_empty)

    def rebuild_totals(self, date_range: DateRange) -> list[TotalCorrection]:
        """Recompute ledger rows from entries and overwrite any that drifted."""
        days = enumerate_dates(date_range.start, date_range.end)
        expected = dict.fromkeys(days, 0.0)
        for entry in self._iter_entries(date_range):
            if entry.date in expected:
                expected[entry.date] = round_amount(
                    expected[entry.date] + round_amount(entry.calories)
                )
        stored = {
            row.date: round_amount(row.total_calories)
            for row in self.totals.list_totals(date_range.start, date_range.end)
        }

        corrections = []
        for day in days:
            previous = stored.get(day)
            if previous is None and expected[day] == 0:
                continue
            if previous == expected[day]:
                continue
            self.totals.set_total(day, expected[day])
            corrections.append(
                TotalCorrection(
                    date=day,
                    previous_total=previous or 0.0,
                    total_calories=expected[day],
                )
            )
        if corrections:
            logger.warning(
                "Repaired drifted daily totals",
                extra={"dates": [item.date for item in corrections]},
            )
        return corrections

    def _iter_entries(self, date_range: DateRange) -> Iterator[Entry]:
        offset = 0
        while True:
            page = self.entries.list_entries_range(
                date_range.start, date_range.end, self.page_size, offset
            )
            yield from page
            if len(page) < self.page_size:
                return
            offset += len(page)


def _empty_buckets() -> dict[str, float]:
    return {str(meal): 0.0 for meal in MealType}
