"""Tests for request validation and numeric coercion."""

from datetime import date, datetime, timedelta, timezone

import pytest

from calorie_tracker.domain.entries import MealType
from calorie_tracker.domain.errors import EntryValidationError
from calorie_tracker.domain.validation import (
    coerce_number,
    normalize_date,
    normalize_meal_type,
    parse_flag,
    round_amount,
    validate_date_range,
    validate_delete_request,
    validate_log_request,
    validate_update_request,
    validate_window_days,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (10.126, 10.13),
        (0.125, 0.13),
        (-0.125, -0.13),
        (2.675, 2.68),
        (105, 105.0),
        (-0.001, 0.0),
    ],
)
def test_round_amount_rounds_half_away_from_zero(value, expected) -> None:
    assert round_amount(value) == expected


def test_coerce_number_lenient_defaults_to_zero() -> None:
    assert coerce_number("abc", "calories") == 0
    assert coerce_number(None, "calories") == 0
    assert coerce_number("", "calories") == 0
    assert coerce_number(float("nan"), "calories") == 0
    assert coerce_number("inf", "calories") == 0
    assert coerce_number(" 95.555 ", "calories") == 95.56


def test_coerce_number_strict_rejects_malformed() -> None:
    with pytest.raises(EntryValidationError, match="calories must be a number"):
        coerce_number("abc", "calories", lenient=False)
    assert coerce_number(None, "calories", lenient=False) == 0


def test_coerce_number_keeps_very_large_values() -> None:
    assert coerce_number(1e27, "calories") == 1e27
    assert coerce_number("1.7e308", "calories") == 1.7e308
    assert round_amount(9e25 * 3) == pytest.approx(2.7e26)


def test_coerce_number_treats_oversized_integers_as_malformed() -> None:
    assert coerce_number(10**400, "calories") == 0
    with pytest.raises(EntryValidationError, match="calories must be a number"):
        coerce_number(10**400, "calories", lenient=False)


def test_coerce_number_booleans_count_as_zero_or_one() -> None:
    assert coerce_number(True, "calories") == 1
    assert coerce_number(False, "calories", lenient=False) == 0


def test_coerce_number_keeps_negative_values() -> None:
    assert coerce_number(-120.555, "calories") == -120.56


def test_normalize_meal_type_is_case_insensitive() -> None:
    assert normalize_meal_type("Breakfast") is MealType.BREAKFAST
    assert normalize_meal_type(" SNACKS ") is MealType.SNACKS


def test_normalize_meal_type_rejects_unknown() -> None:
    with pytest.raises(EntryValidationError, match="Invalid meal_type"):
        normalize_meal_type("brunch")


def test_normalize_date_accepts_strings_and_dates() -> None:
    assert normalize_date(" 2026-02-03 ") == "2026-02-03"
    assert normalize_date(date(2026, 2, 3)) == "2026-02-03"
    eastern = timezone(timedelta(hours=-5))
    late_evening = datetime(2026, 2, 3, 23, 30, tzinfo=eastern)
    assert normalize_date(late_evening) == "2026-02-04"


@pytest.mark.parametrize("value", ["2026/02/03", "2026-02-30", "yesterday"])
def test_normalize_date_rejects_bad_format(value) -> None:
    with pytest.raises(EntryValidationError, match="Invalid date format"):
        normalize_date(value)


def test_normalize_date_requires_value() -> None:
    with pytest.raises(EntryValidationError, match="Missing payload field: start"):
        normalize_date(None, "start")


def test_validate_log_request_coerces_items() -> None:
    command = validate_log_request(
        {
            "date": "2026-02-03",
            "meal_type": "Lunch",
            "items": [
                {"name": "Banana", "calories": 105},
                {"name": 42, "quantity": 2, "calories": "oops", "confidence": 0.876},
            ],
        }
    )

    assert command.meal_type is MealType.LUNCH
    assert command.items[0].calories == 105
    assert command.items[0].quantity == ""
    assert command.items[1].name == "42"
    assert command.items[1].quantity == "2"
    assert command.items[1].calories == 0
    assert command.items[1].confidence == 0.88
    assert command.source == ""


@pytest.mark.parametrize("items", [[], None, "banana"])
def test_validate_log_request_requires_items(items) -> None:
    with pytest.raises(EntryValidationError, match="non-empty array"):
        validate_log_request(
            {"date": "2026-02-03", "meal_type": "lunch", "items": items}
        )


def test_validate_log_request_requires_item_name() -> None:
    with pytest.raises(EntryValidationError, match=r"items\[0\].name is required"):
        validate_log_request(
            {"date": "2026-02-03", "meal_type": "lunch", "items": [{"calories": 5}]}
        )


def test_validate_log_request_strict_numbers() -> None:
    with pytest.raises(EntryValidationError):
        validate_log_request(
            {
                "date": "2026-02-03",
                "meal_type": "lunch",
                "items": [{"name": "Soup", "calories": "lots"}],
            },
            lenient_numbers=False,
        )


def test_validate_update_request_keeps_absent_fields_empty() -> None:
    command = validate_update_request(
        {"entry_id": "abc", "updates": {"calories": 123.456, "meal_type": "dinner"}}
    )

    assert command.entry_id == "abc"
    assert command.changes.calories == 123.46
    assert command.changes.meal_type is MealType.DINNER
    assert command.changes.date is None
    assert command.changes.item is None


def test_validate_update_request_ignores_empty_date_and_meal() -> None:
    command = validate_update_request(
        {"entry_id": "abc", "updates": {"date": "", "meal_type": "", "item": ""}}
    )

    assert command.changes.date is None
    assert command.changes.meal_type is None
    assert command.changes.item == ""


def test_validate_update_request_requires_entry_id() -> None:
    with pytest.raises(EntryValidationError, match="entry_id"):
        validate_update_request({"updates": {"calories": 1}})


def test_validate_delete_request_requires_entry_id() -> None:
    with pytest.raises(EntryValidationError, match="entry_id"):
        validate_delete_request({"entry_id": "  "})
    assert validate_delete_request({"entry_id": "xyz"}).entry_id == "xyz"


def test_validate_date_range_rejects_inverted_bounds() -> None:
    with pytest.raises(EntryValidationError, match="start must be before end"):
        validate_date_range("2026-02-04", "2026-02-02")


@pytest.mark.parametrize("value", [0, -3, "inf", "abc", None])
def test_validate_window_days_rejects_invalid(value) -> None:
    with pytest.raises(EntryValidationError, match="days must be a positive number"):
        validate_window_days(value)


def test_validate_window_days_rounds_fractions_up() -> None:
    assert validate_window_days("7") == 7
    assert validate_window_days(2.5) == 3


def test_parse_flag() -> None:
    assert parse_flag("TRUE") is True
    assert parse_flag("1") is False
    assert parse_flag(None) is False
