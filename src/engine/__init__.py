from .calculator import calculate_all_statuses, calculate_visa_status, classify, visited_countries
from .dates import load_stays, normalize_reference_date
from .errors import InvalidDateError, VisaEngineError
from .reconciler import (
    diff_corrections,
    find_unresolved_overlaps,
    has_unresolved_overlaps,
    reconcile_all,
    reconcile_insert,
    remove_duplicate_stays,
)
from .rules import DEFAULT_OVERRIDES, KOREA_LONG_STAY, RuleOverride, RuleProvider, RuleTable, default_rule_table, resolve_rule

__all__ = [
    "calculate_all_statuses",
    "calculate_visa_status",
    "classify",
    "visited_countries",
    "load_stays",
    "normalize_reference_date",
    "InvalidDateError",
    "VisaEngineError",
    "diff_corrections",
    "find_unresolved_overlaps",
    "has_unresolved_overlaps",
    "reconcile_all",
    "reconcile_insert",
    "remove_duplicate_stays",
    "DEFAULT_OVERRIDES",
    "KOREA_LONG_STAY",
    "RuleOverride",
    "RuleProvider",
    "RuleTable",
    "default_rule_table",
    "resolve_rule",
]
