from datetime import date

import httpx

from models.schemas import RuleType, Stay, VisaRule


def d(value: str) -> date:
    return date.fromisoformat(value)


def make_stay(stay_id: str, country: str, entry: str, exit_on: str | None = None, **extra) -> Stay:
    return Stay(
        id=stay_id,
        country_code=country,
        entry_date=d(entry),
        exit_date=d(exit_on) if exit_on else None,
        **extra,
    )


def reset_rule(max_days: int) -> VisaRule:
    return VisaRule(max_days=max_days, rule_type=RuleType.reset)


def rolling_rule(max_days: int, period_days: int) -> VisaRule:
    return VisaRule(max_days=max_days, period_days=period_days, rule_type=RuleType.rolling)


def asgi_client(app) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
