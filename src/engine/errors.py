from datetime import date
from typing import Any


class VisaEngineError(Exception):
    """Base class for errors raised by the visa-day engine."""


class InvalidDateError(VisaEngineError):
    """
    A stay record carries a date that cannot be used for day counting: either
    it does not parse as a calendar date or the exit precedes the entry.
    """

    def __init__(self, stay_id: str | None, field: str, value: Any, reason: str = "not a valid calendar date"):
        self.stay_id = stay_id
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Stay {stay_id or '<unknown>'}: {field}={value!r} is {reason}")


def describe_date(value: date | None) -> str:
    return value.isoformat() if value else "open"
