import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Mapping, Optional, Tuple

from engine.dates import StayLike, inclusive_days, load_stays, normalize_reference_date, overlap_days
from engine.rule_data import COUNTRY_NAMES
from engine.rules import DEFAULT_OVERRIDES, RuleOverride, RuleProvider, resolve_rule
from models.schemas import Country, RuleType, StatusLevel, Stay, VisaRule, VisaStatus

logger = logging.getLogger(__name__)

# Gap (in days) between visits that restarts a reset-on-exit counter.
RESET_GAP_DAYS = 7
DANGER_PERCENTAGE = 80
WARNING_PERCENTAGE = 60

# (days_used, current_days, planned_days)
DayCounts = Tuple[int, int, int]


def _as_country(country: Country | Mapping | str) -> Country:
    if isinstance(country, Country):
        return country
    if isinstance(country, str):
        code = country.upper()
        return Country(code=code, name=COUNTRY_NAMES.get(code))
    return Country.model_validate(country)


def _effective_exit(stay: Stay, reference: date) -> date:
    if stay.exit_date is not None:
        return stay.exit_date
    # An open stay runs until the reference day; one that has not started yet
    # only covers its entry day.
    return max(stay.entry_date, reference)


def _split_at(entry: date, end: date, reference: date) -> Tuple[int, int]:
    current = inclusive_days(entry, min(end, reference))
    planned = inclusive_days(max(entry, reference + timedelta(days=1)), end)
    return current, planned


def _count_reset(stays: List[Stay], reference: date) -> DayCounts:
    current_total = planned_total = 0
    more_recent_entry: Optional[date] = None
    for stay in sorted(stays, key=lambda s: s.entry_date, reverse=True):
        exit_date = _effective_exit(stay, reference)
        if more_recent_entry is not None and (more_recent_entry - exit_date).days >= RESET_GAP_DAYS:
            break
        current, planned = _split_at(stay.entry_date, exit_date, reference)
        current_total += current
        planned_total += planned
        more_recent_entry = stay.entry_date
    return current_total + planned_total, current_total, planned_total


def _count_rolling(stays: List[Stay], reference: date, period_days: Optional[int]) -> DayCounts:
    if not period_days:
        return 0, 0, 0
    window_start = reference - timedelta(days=period_days - 1)
    used = planned = 0
    for stay in stays:
        end = _effective_exit(stay, reference)
        if stay.entry_date > reference:
            planned += inclusive_days(stay.entry_date, end)
            continue
        used += overlap_days(stay.entry_date, end, window_start, reference)
        if end > reference:
            planned += inclusive_days(reference + timedelta(days=1), end)
    return used, used, planned


def _count_annual(stays: List[Stay], reference: date) -> DayCounts:
    year_start = date(reference.year, 1, 1)
    year_end = date(reference.year, 12, 31)
    used = planned = 0
    for stay in stays:
        end = _effective_exit(stay, reference)
        used += overlap_days(stay.entry_date, end, year_start, reference)
        planned += overlap_days(stay.entry_date, end, reference + timedelta(days=1), year_end)
    return used, used, planned


def classify(percentage: float) -> StatusLevel:
    if percentage >= DANGER_PERCENTAGE:
        return StatusLevel.danger
    if percentage >= WARNING_PERCENTAGE:
        return StatusLevel.warning
    return StatusLevel.safe


def _status_for(country: Country, country_stays: List[Stay], rule: Optional[VisaRule], reference: date) -> VisaStatus:
    if rule is None:
        return VisaStatus(
            country=country,
            days_used=0,
            current_days=0,
            planned_days=0,
            max_days=0,
            remaining_days=0,
            percentage=0.0,
            status=StatusLevel.safe,
        )

    if rule.rule_type == RuleType.reset:
        days_used, current, planned = _count_reset(country_stays, reference)
    elif rule.rule_type == RuleType.rolling:
        days_used, current, planned = _count_rolling(country_stays, reference, rule.period_days)
    else:
        days_used, current, planned = _count_annual(country_stays, reference)

    percentage = days_used * 100 / rule.max_days if rule.max_days > 0 else 0.0
    return VisaStatus(
        country=country,
        rule_type=rule.rule_type,
        days_used=days_used,
        current_days=current,
        planned_days=planned,
        max_days=rule.max_days,
        remaining_days=max(0, rule.max_days - days_used),
        percentage=min(100.0, percentage),
        status=classify(percentage),
    )


def calculate_visa_status(
    stays: Iterable[StayLike],
    country: Country | Mapping | str,
    rule: Optional[VisaRule],
    reference_date: date | datetime | str | None = None,
    overrides: Iterable[RuleOverride] = DEFAULT_OVERRIDES,
) -> VisaStatus:
    """
    Work out how much of a country's visa-free allowance the stay history uses
    as of reference_date (today when omitted).

    Overrides are checked before `rule`, so a marker such as the Korean
    "183/365" visa type replaces the table rule for this call. A missing rule
    yields an all-zero "safe" status.
    """
    target = _as_country(country)
    reference = normalize_reference_date(reference_date)
    country_stays = [stay for stay in load_stays(stays) if stay.country_code == target.code]
    effective = resolve_rule(country_stays, target.code, rule, overrides)
    if effective is not rule:
        logger.debug("Rule override applied for %s", target.code)
    return _status_for(target, country_stays, effective, reference)


def visited_countries(stays: Iterable[StayLike]) -> List[Country]:
    seen: dict[str, Country] = {}
    for stay in load_stays(stays):
        if stay.country_code not in seen:
            seen[stay.country_code] = Country(code=stay.country_code, name=COUNTRY_NAMES.get(stay.country_code))
    return list(seen.values())


def calculate_all_statuses(
    stays: Iterable[StayLike],
    rules: RuleProvider,
    passport: Optional[str] = None,
    reference_date: date | datetime | str | None = None,
    overrides: Iterable[RuleOverride] = DEFAULT_OVERRIDES,
) -> List[VisaStatus]:
    """One status per visited country, with rules looked up for the passport."""
    loaded = load_stays(stays)
    reference = normalize_reference_date(reference_date)
    overrides = tuple(overrides)
    return [
        calculate_visa_status(loaded, country, rules.get_rule(country.code, passport), reference, overrides)
        for country in visited_countries(loaded)
    ]
