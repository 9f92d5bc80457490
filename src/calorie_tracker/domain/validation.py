"""Parse and validate untyped request payloads into typed commands."""

import math
from collections.abc import Mapping
from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext

from calorie_tracker.domain.dates import format_local_date, parse_calendar_date
from calorie_tracker.domain.entries import (
    DeleteCommand,
    EntryUpdate,
    LogCommand,
    LogItem,
    MealType,
    UpdateCommand,
)
from calorie_tracker.domain.errors import EntryValidationError
from calorie_tracker.domain.summaries import DateRange

_CENTS = Decimal("0.01")
# Enough digits to hold any finite float at cent precision.
_ROUNDING_PRECISION = 400


def round_amount(value: float) -> float:
    """Round to 2 decimals, halves away from zero."""
    with localcontext() as context:
        context.prec = _ROUNDING_PRECISION
        exact = Decimal(repr(float(value)))
        rounded = float(exact.quantize(_CENTS, ROUND_HALF_UP))
    return rounded or 0.0


def coerce_number(value: object, field: str, *, lenient: bool = True) -> float:
    """Coerce untyped input to a rounded number.

    Missing values count as 0 and booleans count as 0 or 1. Malformed values
    count as 0 under the lenient policy and fail validation otherwise.
    Negative values are kept as given.
    """
    if value is None:
        return 0.0
    parsed: float | None = None
    if isinstance(value, int | float):
        try:
            parsed = float(value)
        except OverflowError:
            parsed = None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            parsed = float(text)
        except ValueError:
            parsed = None
    if parsed is None or not math.isfinite(parsed):
        if lenient:
            return 0.0
        raise EntryValidationError(f"{field} must be a number")
    return round_amount(parsed)


def normalize_date(value: object, field: str = "date") -> str:
    """Return a YYYY-MM-DD string for a date-like value."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return format_local_date(value.date())
    if isinstance(value, date):
        return format_local_date(value)
    text = str(value).strip() if value is not None else ""
    if not text:
        raise EntryValidationError(f"Missing payload field: {field}")
    parse_calendar_date(text)
    return text


def normalize_meal_type(value: object) -> MealType:
    """Return the canonical meal type, case-insensitively."""
    text = str(value or "").strip().lower()
    try:
        return MealType(text)
    except ValueError as exc:
        raise EntryValidationError(
            "Invalid meal_type. Use breakfast, lunch, dinner, or snacks."
        ) from exc


def parse_flag(value: object) -> bool:
    """Interpret a query flag; only the string 'true' is truthy."""
    return str(value or "").strip().lower() == "true"


def validate_log_request(
    payload: Mapping[str, object], *, lenient_numbers: bool = True
) -> LogCommand:
    """Validate a log payload into a LogCommand."""
    day = normalize_date(payload.get("date"))
    meal_type = normalize_meal_type(payload.get("meal_type"))
    raw_items = payload.get("items")
    if not isinstance(raw_items, list) or not raw_items:
        raise EntryValidationError("items must be a non-empty array")

    items = []
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, Mapping):
            raise EntryValidationError(f"items[{index}] must be an object")
        name = raw.get("name")
        if name is None or str(name).strip() == "":
            raise EntryValidationError(f"items[{index}].name is required")
        quantity = raw.get("quantity")
        items.append(
            LogItem(
                name=str(name),
                quantity=str(quantity) if quantity else "",
                calories=coerce_number(
                    raw.get("calories"), "calories", lenient=lenient_numbers
                ),
                confidence=coerce_number(
                    raw.get("confidence"), "confidence", lenient=lenient_numbers
                ),
            )
        )

    return LogCommand(
        date=day,
        meal_type=meal_type,
        items=items,
        source=str(payload.get("source") or ""),
        raw_text=str(payload.get("raw_text") or ""),
    )


def validate_update_request(
    payload: Mapping[str, object], *, lenient_numbers: bool = True
) -> UpdateCommand:
    """Validate an update payload; absent fields stay None."""
    entry_id = _require_entry_id(payload)
    updates = payload.get("updates") or {}
    if not isinstance(updates, Mapping):
        raise EntryValidationError("updates must be an object")

    changes = EntryUpdate(
        date=normalize_date(updates["date"]) if updates.get("date") else None,
        meal_type=(
            normalize_meal_type(updates["meal_type"])
            if updates.get("meal_type")
            else None
        ),
        item=_optional_text(updates, "item"),
        quantity=_optional_text(updates, "quantity"),
        calories=_optional_number(updates, "calories", lenient_numbers),
        confidence=_optional_number(updates, "confidence", lenient_numbers),
        source=_optional_text(updates, "source"),
        raw_text=_optional_text(updates, "raw_text"),
    )
    return UpdateCommand(entry_id=entry_id, changes=changes)


def validate_delete_request(payload: Mapping[str, object]) -> DeleteCommand:
    """Validate a delete payload."""
    return DeleteCommand(entry_id=_require_entry_id(payload))


def validate_date_range(start: object, end: object) -> DateRange:
    """Validate an inclusive range with start <= end."""
    start_text = normalize_date(start, "start")
    end_text = normalize_date(end, "end")
    if parse_calendar_date(start_text) > parse_calendar_date(end_text):
        raise EntryValidationError("start must be before end")
    return DateRange(start=start_text, end=end_text)


def validate_window_days(value: object) -> int:
    """Validate a trailing window size; fractional sizes round up."""
    try:
        days = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise EntryValidationError("days must be a positive number") from exc
    if not math.isfinite(days) or days <= 0:
        raise EntryValidationError("days must be a positive number")
    return math.ceil(days)


def _require_entry_id(payload: Mapping[str, object]) -> str:
    value = payload.get("entry_id")
    text = str(value).strip() if value is not None else ""
    if not text:
        raise EntryValidationError("Missing payload field: entry_id")
    return text


def _optional_text(updates: Mapping[str, object], key: str) -> str | None:
    value = updates.get(key)
    return None if value is None else str(value)


def _optional_number(
    updates: Mapping[str, object], key: str, lenient: bool
) -> float | None:
    value = updates.get(key)
    return None if value is None else coerce_number(value, key, lenient=lenient)
