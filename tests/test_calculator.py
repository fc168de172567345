import unittest
from datetime import datetime

from engine.calculator import calculate_all_statuses, calculate_visa_status, classify, visited_countries
from engine.rules import RuleOverride, default_rule_table
from models.schemas import Country, RuleType, StatusLevel, VisaRule
from tests.helpers import make_stay, reset_rule, rolling_rule

JAPAN = Country(code="JP", name="Japan")
THAILAND = Country(code="TH", name="Thailand")
KOREA = Country(code="KR", name="South Korea")


class RollingRuleTests(unittest.TestCase):
    def test_single_past_stay_in_window(self):
        stays = [make_stay("a", "JP", "2024-01-01", "2024-01-31")]

        status = calculate_visa_status(stays, JAPAN, rolling_rule(90, 180), "2024-02-01")

        self.assertEqual(status.days_used, 31)
        self.assertEqual(status.current_days, 31)
        self.assertEqual(status.planned_days, 0)
        self.assertEqual(status.remaining_days, 59)
        self.assertEqual(status.status, StatusLevel.safe)
        self.assertEqual(status.rule_type, RuleType.rolling)

    def test_reference_datetime_is_reduced_to_its_day(self):
        stays = [make_stay("a", "JP", "2024-01-01", "2024-01-31")]

        status = calculate_visa_status(stays, JAPAN, rolling_rule(90, 180), datetime(2024, 2, 1, 23, 59))

        self.assertEqual(status.days_used, 31)

    def test_days_outside_window_are_not_counted(self):
        stays = [make_stay("a", "JP", "2023-01-01", "2023-12-31")]

        status = calculate_visa_status(stays, JAPAN, rolling_rule(90, 180), "2024-01-10")

        # window is 2023-07-15 .. 2024-01-10
        self.assertEqual(status.days_used, 170)
        self.assertEqual(status.percentage, 100.0)
        self.assertEqual(status.remaining_days, 0)
        self.assertEqual(status.status, StatusLevel.danger)

    def test_future_stay_is_planned_only(self):
        stays = [
            make_stay("a", "JP", "2024-01-01", "2024-01-10"),
            make_stay("b", "JP", "2024-03-10", "2024-03-19"),
        ]

        status = calculate_visa_status(stays, JAPAN, rolling_rule(90, 180), "2024-03-01")

        self.assertEqual(status.days_used, 10)
        self.assertEqual(status.current_days, 10)
        self.assertEqual(status.planned_days, 10)

    def test_ongoing_stay_splits_at_reference_date(self):
        stays = [make_stay("a", "JP", "2024-02-25", "2024-03-05")]

        status = calculate_visa_status(stays, JAPAN, rolling_rule(90, 180), "2024-03-01")

        self.assertEqual(status.days_used, 6)
        self.assertEqual(status.planned_days, 4)

    def test_open_stay_counts_through_reference_date(self):
        stays = [make_stay("a", "JP", "2024-02-20")]

        status = calculate_visa_status(stays, JAPAN, rolling_rule(90, 180), "2024-03-01")

        self.assertEqual(status.days_used, 11)
        self.assertEqual(status.planned_days, 0)

    def test_rolling_rule_without_period_counts_nothing(self):
        stays = [make_stay("a", "JP", "2024-01-01", "2024-01-31")]
        rule = VisaRule(max_days=90, rule_type=RuleType.rolling)

        status = calculate_visa_status(stays, JAPAN, rule, "2024-02-01")

        self.assertEqual(status.days_used, 0)


class ResetRuleTests(unittest.TestCase):
    def test_gap_of_seven_days_or_more_resets(self):
        stays = [
            make_stay("a", "TH", "2024-01-01", "2024-01-20"),
            make_stay("b", "TH", "2024-02-01", "2024-02-28"),
        ]

        status = calculate_visa_status(stays, THAILAND, reset_rule(60), "2024-03-01")

        self.assertEqual(status.days_used, 28)
        self.assertEqual(status.remaining_days, 32)
        self.assertEqual(status.rule_type, RuleType.reset)

    def test_short_gap_joins_visits(self):
        stays = [
            make_stay("a", "TH", "2024-01-01", "2024-01-10"),
            make_stay("b", "TH", "2024-01-15", "2024-01-20"),
        ]

        status = calculate_visa_status(stays, THAILAND, reset_rule(60), "2024-03-01")

        self.assertEqual(status.days_used, 16)

    def test_open_stay_runs_to_reference_date(self):
        stays = [make_stay("a", "TH", "2024-02-20")]

        status = calculate_visa_status(stays, THAILAND, reset_rule(60), "2024-03-01")

        self.assertEqual(status.days_used, 11)
        self.assertEqual(status.current_days, 11)

    def test_stay_across_reference_date_is_split(self):
        stays = [make_stay("a", "TH", "2024-02-25", "2024-03-05")]

        status = calculate_visa_status(stays, THAILAND, reset_rule(60), "2024-03-01")

        self.assertEqual(status.current_days, 6)
        self.assertEqual(status.planned_days, 4)
        self.assertEqual(status.days_used, 10)

    def test_other_countries_are_ignored(self):
        stays = [
            make_stay("a", "TH", "2024-02-01", "2024-02-10"),
            make_stay("b", "JP", "2024-02-10", "2024-02-28"),
        ]

        status = calculate_visa_status(stays, "TH", reset_rule(60), "2024-03-01")

        self.assertEqual(status.days_used, 10)
        self.assertEqual(status.country.name, "Thailand")

    def test_lower_case_stay_codes_still_match_country(self):
        stays = [make_stay("a", "th", "2024-02-01", "2024-02-10")]

        status = calculate_visa_status(stays, THAILAND, reset_rule(60), "2024-03-01")

        self.assertEqual(status.days_used, 10)
        self.assertEqual([c.code for c in visited_countries(stays)], ["TH"])


class AnnualRuleTests(unittest.TestCase):
    def test_counts_calendar_year_of_reference_date(self):
        rule = VisaRule(max_days=180, rule_type=RuleType.annual)
        stays = [
            make_stay("a", "CO", "2023-12-20", "2024-01-10"),
            make_stay("b", "CO", "2024-06-01", "2024-06-10"),
        ]

        status = calculate_visa_status(stays, {"code": "CO"}, rule, "2024-03-01")

        self.assertEqual(status.days_used, 10)
        self.assertEqual(status.planned_days, 10)
        self.assertEqual(status.remaining_days, 170)


class StatusTests(unittest.TestCase):
    def test_eighty_percent_is_danger(self):
        stays = [make_stay("a", "JP", "2024-01-01", "2024-03-12")]

        status = calculate_visa_status(stays, JAPAN, rolling_rule(90, 180), "2024-03-12")

        self.assertEqual(status.days_used, 72)
        self.assertEqual(status.percentage, 80.0)
        self.assertEqual(status.status, StatusLevel.danger)

    def test_thresholds(self):
        self.assertEqual(classify(60), StatusLevel.warning)
        self.assertEqual(classify(59.9), StatusLevel.safe)
        self.assertEqual(classify(79.9), StatusLevel.warning)
        self.assertEqual(classify(150), StatusLevel.danger)

    def test_missing_rule_gives_zero_safe_status(self):
        stays = [make_stay("a", "JP", "2024-01-01", "2024-01-31")]

        status = calculate_visa_status(stays, JAPAN, None, "2024-02-01")

        self.assertEqual(status.days_used, 0)
        self.assertEqual(status.max_days, 0)
        self.assertEqual(status.remaining_days, 0)
        self.assertEqual(status.percentage, 0.0)
        self.assertEqual(status.status, StatusLevel.safe)
        self.assertIsNone(status.rule_type)

    def test_zero_allowance_does_not_divide_by_zero(self):
        stays = [make_stay("a", "CN", "2024-01-01", "2024-01-05")]

        status = calculate_visa_status(stays, "CN", reset_rule(0), "2024-02-01")

        self.assertEqual(status.days_used, 5)
        self.assertEqual(status.percentage, 0.0)
        self.assertEqual(status.remaining_days, 0)

    def test_no_stays_for_country(self):
        status = calculate_visa_status([], JAPAN, rolling_rule(90, 180))

        self.assertEqual(status.days_used, 0)
        self.assertEqual(status.remaining_days, 90)


class OverrideTests(unittest.TestCase):
    def test_korea_long_stay_marker_switches_to_rolling_183_365(self):
        stays = [make_stay("a", "KR", "2024-01-01", "2024-03-31", visa_type="183/365")]

        status = calculate_visa_status(stays, KOREA, reset_rule(90), "2024-04-01")

        self.assertEqual(status.max_days, 183)
        self.assertEqual(status.rule_type, RuleType.rolling)
        self.assertEqual(status.days_used, 91)
        self.assertEqual(status.remaining_days, 92)
        self.assertEqual(status.status, StatusLevel.safe)

    def test_without_marker_table_rule_applies(self):
        stays = [make_stay("a", "KR", "2024-01-01", "2024-03-31", visa_type="visa-free")]

        status = calculate_visa_status(stays, KOREA, reset_rule(90), "2024-04-01")

        self.assertEqual(status.max_days, 90)
        self.assertEqual(status.days_used, 91)
        self.assertEqual(status.status, StatusLevel.danger)

    def test_marker_on_another_country_is_ignored(self):
        stays = [make_stay("a", "JP", "2024-01-01", "2024-01-31", visa_type="183/365")]

        status = calculate_visa_status(stays, JAPAN, rolling_rule(90, 180), "2024-02-01")

        self.assertEqual(status.max_days, 90)

    def test_custom_overrides(self):
        long_stay = VisaRule(max_days=180, rule_type=RuleType.reset)
        overrides = [RuleOverride(country_code="TH", visa_type="DTV", rule=long_stay)]
        stays = [make_stay("a", "TH", "2024-01-01", "2024-03-31", visa_type="DTV")]

        status = calculate_visa_status(stays, THAILAND, reset_rule(60), "2024-04-01", overrides=overrides)

        self.assertEqual(status.max_days, 180)
        self.assertEqual(status.days_used, 91)


class AllStatusesTests(unittest.TestCase):
    def test_visited_countries_keep_first_appearance_order(self):
        stays = [
            make_stay("a", "TH", "2024-01-01", "2024-01-05"),
            make_stay("b", "JP", "2024-01-05", "2024-01-10"),
            make_stay("c", "TH", "2024-01-10", "2024-01-12"),
        ]

        countries = visited_countries(stays)

        self.assertEqual([c.code for c in countries], ["TH", "JP"])
        self.assertEqual(countries[1].name, "Japan")

    def test_statuses_use_passport_rule_table(self):
        stays = [
            make_stay("a", "JP", "2024-01-01", "2024-01-31"),
            make_stay("b", "ZZ", "2024-01-31", "2024-02-01"),
        ]
        rules = default_rule_table()

        us = calculate_all_statuses(stays, rules, reference_date="2024-02-01")
        kr = calculate_all_statuses(stays, rules, passport="KR", reference_date="2024-02-01")

        self.assertEqual([s.country.code for s in us], ["JP", "ZZ"])
        self.assertEqual(us[0].rule_type, RuleType.rolling)
        self.assertEqual(us[0].days_used, 31)
        self.assertEqual(kr[0].rule_type, RuleType.reset)
        self.assertEqual(us[1].max_days, 0)
        self.assertEqual(us[1].status, StatusLevel.safe)


if __name__ == "__main__":
    unittest.main()
