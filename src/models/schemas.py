from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RuleType(str, Enum):
    reset = "reset"
    rolling = "rolling"
    annual = "annual"


class StatusLevel(str, Enum):
    safe = "safe"
    warning = "warning"
    danger = "danger"


class Stay(BaseModel):
    """
    One continuous period of presence in a single country. An absent exit_date
    means the stay is still ongoing.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    country_code: str = Field(alias="countryCode")
    city: str | None = None
    from_country_code: str | None = Field(default=None, alias="fromCountryCode")
    from_city: str | None = Field(default=None, alias="fromCity")
    entry_date: date = Field(alias="entryDate")
    exit_date: date | None = Field(default=None, alias="exitDate")
    visa_type: str | None = Field(default=None, alias="visaType")
    notes: str | None = None

    @field_validator("country_code", "from_country_code")
    @classmethod
    def _upper_code(cls, value: str | None) -> str | None:
        if value:
            return value.strip().upper()
        return value

    @property
    def is_open(self) -> bool:
        return self.exit_date is None


class VisaRule(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    max_days: int = Field(alias="maxDays")
    rule_type: RuleType = Field(alias="ruleType")
    period_days: int | None = Field(default=None, alias="periodDays")
    reset_info: str | None = Field(default=None, alias="resetInfo")
    source_url: str | None = Field(default=None, alias="sourceUrl")
    last_updated: str | None = Field(default=None, alias="lastUpdated")


class Country(BaseModel):
    code: str
    name: str | None = None


class VisaStatus(BaseModel):
    country: Country
    rule_type: RuleType | None = None
    days_used: int
    current_days: int
    planned_days: int
    max_days: int
    remaining_days: int
    percentage: float
    status: StatusLevel


class StayCorrection(BaseModel):
    """Fields a caller must write back after reconciliation changed a stay."""

    id: str
    exit_date: date | None = None
    from_country_code: str | None = None
    from_city: str | None = None


class ReconcileRequest(BaseModel):
    stays: list[dict[str, Any]]


class ReconcileResponse(BaseModel):
    stays: list[Stay]
    corrections: list[StayCorrection]


class StaysResponse(BaseModel):
    user_id: str
    stays: list[Stay]
    corrections: list[StayCorrection] = []
    removed: list[str] = []


class VisaStatusResponse(BaseModel):
    user_id: str
    passport: str
    reference_date: date
    statuses: list[VisaStatus]


class RuleTableResponse(BaseModel):
    passport: str
    rules: dict[str, VisaRule]
