from datetime import date, datetime, timedelta
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from engine.errors import InvalidDateError
from models.schemas import Stay

_DATE_FIELDS = {
    "entry_date": "entry_date",
    "entryDate": "entry_date",
    "exit_date": "exit_date",
    "exitDate": "exit_date",
}

StayLike = Stay | Mapping[str, Any]


def _load_stay(record: StayLike) -> Stay:
    if isinstance(record, Stay):
        stay = record
    else:
        try:
            stay = Stay.model_validate(record)
        except ValidationError as exc:
            for err in exc.errors():
                loc = err.get("loc") or ()
                if loc and loc[0] in _DATE_FIELDS:
                    raise InvalidDateError(record.get("id"), _DATE_FIELDS[loc[0]], err.get("input")) from exc
            raise
    if stay.exit_date is not None and stay.exit_date < stay.entry_date:
        raise InvalidDateError(stay.id, "exit_date", stay.exit_date.isoformat(), "before the entry date")
    return stay


def load_stays(records: Iterable[StayLike]) -> list[Stay]:
    """
    Turn stay records from the store (camelCase or snake_case mappings, ISO date
    strings) into Stay values. Raises InvalidDateError for unusable dates.
    """
    return [_load_stay(record) for record in records]


def normalize_reference_date(value: date | datetime | str | None) -> date:
    """
    Reduce a reference moment to its calendar day. None means today; this is the
    only place the engine reads the clock.
    """
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise InvalidDateError(None, "reference_date", value) from exc


def inclusive_days(start: date, end: date) -> int:
    """Number of calendar days in [start, end]; 0 when the range is empty."""
    if end < start:
        return 0
    return (end - start).days + 1


def overlap_days(start: date, end: date, window_start: date, window_end: date) -> int:
    return inclusive_days(max(start, window_start), min(end, window_end))


def day_before(value: date) -> date:
    return value - timedelta(days=1)
