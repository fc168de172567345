import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Protocol

from engine.rule_data import KR_PASSPORT_RULES, US_PASSPORT_RULES
from models.schemas import RuleType, Stay, VisaRule

logger = logging.getLogger(__name__)


class RuleProvider(Protocol):
    def get_rule(self, country_code: str, passport: Optional[str] = None) -> Optional[VisaRule]:
        ...


class RuleTable:
    """
    Visa rules keyed by passport nationality, then by destination country.
    Lookups without a passport use the default one.
    """

    def __init__(self, tables: Mapping[str, Mapping[str, VisaRule]], default_passport: str = "US"):
        self._tables: Dict[str, Dict[str, VisaRule]] = {
            passport.upper(): dict(rules) for passport, rules in tables.items()
        }
        self.default_passport = default_passport.upper()

    def passports(self) -> List[str]:
        return sorted(self._tables)

    def rules_for(self, passport: Optional[str] = None) -> Optional[Dict[str, VisaRule]]:
        key = (passport or self.default_passport).upper()
        rules = self._tables.get(key)
        if rules is None:
            logger.warning("No visa rule table for passport %s", key)
            return None
        return dict(rules)

    def get_rule(self, country_code: str, passport: Optional[str] = None) -> Optional[VisaRule]:
        rules = self._tables.get((passport or self.default_passport).upper()) or {}
        return rules.get(country_code.upper())


@dataclass(frozen=True)
class RuleOverride:
    """Replace a country's rule whenever one of its stays carries visa_type."""

    country_code: str
    visa_type: str
    rule: VisaRule

    def applies(self, country_code: str, stays: Iterable[Stay]) -> bool:
        if country_code.upper() != self.country_code:
            return False
        return any(stay.visa_type == self.visa_type for stay in stays)


KOREA_LONG_STAY = RuleOverride(
    country_code="KR",
    visa_type="183/365",
    rule=VisaRule(
        max_days=183,
        period_days=365,
        rule_type=RuleType.rolling,
        reset_info="Special resident status: 183 days in any 365-day period",
    ),
)

DEFAULT_OVERRIDES: tuple[RuleOverride, ...] = (KOREA_LONG_STAY,)


def resolve_rule(
    stays: Iterable[Stay],
    country_code: str,
    rule: Optional[VisaRule],
    overrides: Iterable[RuleOverride] = DEFAULT_OVERRIDES,
) -> Optional[VisaRule]:
    """
    Pick the rule to apply for one country. The first matching override wins
    over the table rule; stays of other countries never trigger an override.
    """
    country_stays = [stay for stay in stays if stay.country_code == country_code]
    for override in overrides:
        if override.applies(country_code, country_stays):
            return override.rule
    return rule


def default_rule_table(default_passport: str = "US") -> RuleTable:
    return RuleTable({"US": US_PASSPORT_RULES, "KR": KR_PASSPORT_RULES}, default_passport=default_passport)
