"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import UTC, datetime

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.auth import require_token
from calorie_tracker.api.models import (
    DeleteRequestBody,
    LogRequestBody,
    RepairRequestBody,
    UpdateRequestBody,
)
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.entries import DailyTotal, Entry
from calorie_tracker.domain.errors import EntryNotFoundError, EntryValidationError
from calorie_tracker.domain.summaries import (
    MealTypeRangeSummary,
    MealTypeTotals,
    RangeSummary,
)
from calorie_tracker.domain.validation import (
    normalize_date,
    parse_flag,
    validate_date_range,
    validate_delete_request,
    validate_log_request,
    validate_update_request,
    validate_window_days,
)

DEFAULT_WINDOW_DAYS = 7


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    lenient = container.settings.lenient_numbers

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Calorie tracker starting",
            extra={"storage_backend": container.settings.storage_backend},
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    authorized = [Depends(require_token)]

    @app.exception_handler(EntryValidationError)
    async def handle_validation_error(
        request: Request, exc: EntryValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"ok": False, "error": str(exc)},
        )

    @app.exception_handler(EntryNotFoundError)
    async def handle_not_found(
        request: Request, exc: EntryNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"ok": False, "error": "entry_id not found"},
        )

    @app.get("/health")
    async def health() -> dict[str, bool]:
        """Simple health check endpoint."""
        return {"ok": True}

    @app.get("/time")
    async def current_time() -> dict[str, str]:
        """Return the server clock in UTC."""
        return {"datetime": datetime.now(tz=UTC).isoformat()}

    @app.get("/summary", dependencies=authorized)
    def summary(request: Request, date: str | None = None) -> dict[str, object]:
        """Return the ledger total for one date."""
        state_container: AppContainer = request.app.state.container
        total = state_container.summary_service.get_total(normalize_date(date))
        return _serialize_total(total)

    @app.get("/summary-range", dependencies=authorized)
    def summary_range(
        request: Request,
        start: str | None = None,
        end: str | None = None,
        include_empty: str | None = None,
        group: str | None = None,
    ) -> dict[str, object]:
        """Return flat or meal-type grouped totals for a range."""
        state_container: AppContainer = request.app.state.container
        date_range = validate_date_range(start, end)
        fill = parse_flag(include_empty)
        if str(group or "").lower() == "meal_type":
            grouped = state_container.summary_service.get_range_by_meal_type(
                date_range, fill
            )
            return _serialize_grouped(grouped)
        flat = state_container.summary_service.get_range(date_range, fill)
        return _serialize_range(flat)

    @app.get("/summary-last", dependencies=authorized)
    def summary_last(
        request: Request,
        days: str | None = None,
        include_empty: str | None = None,
    ) -> dict[str, object]:
        """Return flat totals for the last N local calendar days."""
        state_container: AppContainer = request.app.state.container
        window = validate_window_days(days or DEFAULT_WINDOW_DAYS)
        result = state_container.summary_service.get_last_days(
            window, parse_flag(include_empty)
        )
        return _serialize_range(result)

    @app.get("/list", dependencies=authorized)
    def list_entries(
        request: Request,
        date: str | None = None,
        limit: int = Query(default=100, ge=1),
        offset: int = Query(default=0, ge=0),
    ) -> dict[str, object]:
        """Return one day's entries, most recent first."""
        state_container: AppContainer = request.app.state.container
        day = normalize_date(date)
        entries = state_container.entry_service.list_entries(day, limit, offset)
        return {"date": day, "entries": [_serialize_entry(e) for e in entries]}

    @app.get("/entries-range", dependencies=authorized)
    def entries_range(
        request: Request,
        start: str | None = None,
        end: str | None = None,
        limit: int = Query(default=100, ge=1),
        offset: int = Query(default=0, ge=0),
    ) -> dict[str, object]:
        """Return entries across a range."""
        state_container: AppContainer = request.app.state.container
        date_range = validate_date_range(start, end)
        entries = state_container.entry_service.list_entries_range(
            date_range.start, date_range.end, limit, offset
        )
        return {
            "start": date_range.start,
            "end": date_range.end,
            "entries": [_serialize_entry(e) for e in entries],
        }

    @app.post("/log", dependencies=authorized)
    def log_entries(body: LogRequestBody, request: Request) -> dict[str, object]:
        """Log a batch of items and return the updated daily total."""
        state_container: AppContainer = request.app.state.container
        command = validate_log_request(body.model_dump(), lenient_numbers=lenient)
        result = state_container.entry_service.log_entries(command)
        return {
            "ok": True,
            "date": result.date,
            "total_calories": result.total_calories,
            "entry_ids": result.entry_ids,
        }

    @app.post("/update", dependencies=authorized)
    def update_entry(body: UpdateRequestBody, request: Request) -> dict[str, object]:
        """Apply a sparse update to an entry."""
        state_container: AppContainer = request.app.state.container
        command = validate_update_request(
            {"entry_id": body.entry_id, "updates": body.updates},
            lenient_numbers=lenient,
        )
        result = state_container.entry_service.update_entry(command)
        return {"ok": True, **asdict(result)}

    @app.post("/delete", dependencies=authorized)
    def delete_entry(body: DeleteRequestBody, request: Request) -> dict[str, object]:
        """Delete an entry and return its date's remaining total."""
        state_container: AppContainer = request.app.state.container
        command = validate_delete_request({"entry_id": body.entry_id})
        result = state_container.entry_service.delete_entry(command)
        return {"ok": True, **asdict(result)}

    @app.post("/repair", dependencies=authorized)
    def repair_totals(body: RepairRequestBody, request: Request) -> dict[str, object]:
        """Recompute ledger rows for a range from the stored entries."""
        state_container: AppContainer = request.app.state.container
        date_range = validate_date_range(body.start, body.end)
        corrections = state_container.summary_service.rebuild_totals(date_range)
        return {
            "ok": True,
            "start": date_range.start,
            "end": date_range.end,
            "corrections": [asdict(item) for item in corrections],
        }

    return app


def _serialize_total(total: DailyTotal) -> dict[str, object]:
    return {"date": total.date, "total_calories": total.total_calories}


def _serialize_range(summary: RangeSummary) -> dict[str, object]:
    return {
        "start": summary.start,
        "end": summary.end,
        "totals": [_serialize_total(row) for row in summary.totals],
    }


def _serialize_meal_totals(row: MealTypeTotals) -> dict[str, object]:
    return {
        "date": row.date,
        "totals": {
            "breakfast": row.breakfast,
            "lunch": row.lunch,
            "dinner": row.dinner,
            "snacks": row.snacks,
        },
    }


def _serialize_grouped(summary: MealTypeRangeSummary) -> dict[str, object]:
    return {
        "start": summary.start,
        "end": summary.end,
        "group": "meal_type",
        "totals": [_serialize_meal_totals(row) for row in summary.totals],
    }


def _serialize_entry(entry: Entry) -> dict[str, object]:
    return asdict(entry)
