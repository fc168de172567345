from typing import Dict, Optional

from models.schemas import RuleType, VisaRule


def _reset(max_days: int, info: Optional[str] = None, url: Optional[str] = None, updated: Optional[str] = None) -> VisaRule:
    return VisaRule(max_days=max_days, rule_type=RuleType.reset, reset_info=info, source_url=url, last_updated=updated)


def _rolling(
    max_days: int,
    period_days: int,
    info: Optional[str] = None,
    url: Optional[str] = None,
    updated: Optional[str] = None,
) -> VisaRule:
    return VisaRule(
        max_days=max_days,
        period_days=period_days,
        rule_type=RuleType.rolling,
        reset_info=info,
        source_url=url,
        last_updated=updated,
    )


SCHENGEN_INFO = "Schengen Area: 90 days in any 180-day period. ETIAS (EUR 20) required from Q4 2026."
SCHENGEN_COUNTRIES = (
    "AT", "BE", "CZ", "DK", "EE", "FI", "FR", "DE", "GR", "HU", "IS", "IT", "LV", "LT",
    "LU", "MT", "NL", "NO", "PL", "PT", "SK", "SI", "ES", "SE", "CH",
)

US_PASSPORT_RULES: Dict[str, VisaRule] = {
    # Asia-Pacific
    "KR": _reset(90, "Resets upon exit. Immediate re-entry allowed.", "https://www.visa.go.kr/openPage.do?MENU_ID=10301", "2024-11"),
    "JP": _rolling(90, 180, "90 days within any 180-day period", "https://www.mofa.go.jp/j_info/visit/visa/short/novisa.html", "2024-11"),
    "TH": _reset(60, "Resets upon exit. Land border: max 2 entries/year.", "https://www.thaiembassy.com/thailand/thailand-visa-exemption", "2024-07"),
    "VN": _reset(90, "E-visa required. Multiple entry available. Cannot extend beyond 90 days.", "https://evisa.xuatnhapcanh.gov.vn/", "2023-08"),
    "SG": _reset(90, "Resets upon exit. Frequent visa runs may be questioned.", "https://www.ica.gov.sg/enter-depart/entry_requirements/visa_requirements", "2024-11"),
    "MY": _reset(90, "Resets upon exit. Multiple entries allowed.", "https://www.imi.gov.my/index.php/en/home/", "2024-11"),
    "PH": _reset(30, "Resets upon exit. Can extend up to 36 months in-country."),
    "ID": _reset(30, "Resets upon exit. Can extend once for 30 days."),
    "TW": _reset(90, "Resets upon exit. Immediate re-entry allowed."),
    "HK": _reset(90, "Resets upon exit. Immediate re-entry allowed."),
    "KH": _reset(30, "Visa on arrival or e-visa. Can extend once for 30 days."),
    "LA": _reset(30, "Visa on arrival. Can extend up to 60 days total."),
    "MM": _reset(28, "E-visa required in advance. 28 days granted, single entry."),
    "CN": _reset(0, "Visa required in advance. Duration varies by visa type."),
    "IN": _reset(60, "E-visa required in advance."),
    "LK": _reset(30, "ETA required. Can extend up to 180 days total."),
    "AU": _reset(90, "ETA required. 90 days per visit, multiple entries in 12 months."),
    "NZ": _reset(90, "NZeTA required. 90 days per visit."),
    # Non-Schengen Europe
    "GB": _rolling(180, 365, "180 days in any 365-day period", "https://www.gov.uk/check-uk-visa", "2024-11"),
    "IE": _reset(90, "Resets upon exit. Independent from UK and Schengen."),
    "HR": _rolling(90, 180, "90 days in any 180-day period"),
    "RO": _rolling(90, 180, "90 days in any 180-day period (non-Schengen)"),
    # Americas
    "CA": _rolling(180, 365, "180 days in any 365-day period", "https://www.canada.ca/en/immigration-refugees-citizenship/services/visit-canada.html", "2024-11"),
    "US": _reset(9999, "No visa required for US citizens in the United States", "https://travel.state.gov/", "2024-11"),
    "MX": _reset(180, "Up to 180 days per entry. Tourist card required."),
    "BR": _reset(90, "Can extend once for 90 days (180 total)."),
    "AR": _reset(90, "Can extend for 90 days."),
    "CL": _reset(90, "Can extend for 90 days (180 total)."),
    "CO": _reset(90, "Can extend to 180 days per calendar year."),
    "CR": _reset(90, "Resets after 72 hours outside. Can extend once."),
    "EC": _rolling(90, 365, "90 days per year, extendable to 180 days."),
    "PA": _reset(180, "180 days per entry for US citizens."),
    "PE": _rolling(90, 180, "90 days in 180-day period. Can extend."),
    "UY": _reset(90, "Can extend for 90 days."),
    # Middle East & Africa
    "AE": _reset(30, "Can extend twice for 30 days each (90 total)."),
    "TR": _rolling(90, 180, "90 days in any 180-day period."),
    "IL": _reset(90, "90 days per entry. May face questions on frequent entries."),
    "EG": _reset(30, "Visa on arrival or e-visa. Can extend in-country."),
    "MA": _reset(90, "90 days per entry. Cannot extend tourist visa."),
    "ZA": _reset(90, "90 days per year. Can apply for extension once."),
}
US_PASSPORT_RULES.update(
    {code: _rolling(90, 180, SCHENGEN_INFO) for code in SCHENGEN_COUNTRIES if code not in US_PASSPORT_RULES}
)

KR_PASSPORT_RULES: Dict[str, VisaRule] = {
    "JP": _reset(90, "Resets upon exit. Tourism and business.", "https://www.kr.emb-japan.go.jp/", "2024-11"),
    "TH": _reset(90, "Resets upon exit. 30 days when entering overland.", "https://www.thaiembassy.com/thailand/", "2024-11"),
    "SG": _reset(90, "Resets upon exit.", "https://www.ica.gov.sg/", "2024-11"),
    "VN": _reset(45, "45 days visa-free. Immediate re-entry after exit allowed.", "https://vietnam.vn/", "2024-08"),
    "FR": _rolling(90, 180, "Schengen Area: 90 days in any 180-day period.", "https://france-visas.gouv.fr/", "2024-11"),
    "DE": _rolling(90, 180, "Schengen Area: 90 days in any 180-day period.", "https://www.germany.info/", "2024-11"),
    "US": _reset(90, "ESTA required. Valid for 2 years, 90 days per stay.", "https://esta.cbp.dhs.gov/", "2024-11"),
    "CA": _reset(180, "eTA required. Valid for 5 years or until passport expiry.", "https://www.canada.ca/", "2024-11"),
    "MX": _reset(180, "Up to 180 days, decided at entry.", "https://www.gob.mx/inm", "2024-11"),
    "AU": _reset(90, "ETA required. Valid for 12 months, 90 days per visit.", "https://immi.homeaffairs.gov.au/", "2024-11"),
    "NZ": _reset(90, "NZeTA required. Valid for 2 years.", "https://www.immigration.govt.nz/", "2024-11"),
}

COUNTRY_NAMES: Dict[str, str] = {
    "KR": "South Korea",
    "JP": "Japan",
    "VN": "Vietnam",
    "TH": "Thailand",
    "SG": "Singapore",
    "MY": "Malaysia",
    "PH": "Philippines",
    "ID": "Indonesia",
    "TW": "Taiwan",
    "HK": "Hong Kong",
    "KH": "Cambodia",
    "LA": "Laos",
    "MM": "Myanmar",
    "CN": "China",
    "IN": "India",
    "LK": "Sri Lanka",
    "AU": "Australia",
    "NZ": "New Zealand",
    "AT": "Austria",
    "BE": "Belgium",
    "CZ": "Czech Republic",
    "DK": "Denmark",
    "EE": "Estonia",
    "FI": "Finland",
    "FR": "France",
    "DE": "Germany",
    "GR": "Greece",
    "HU": "Hungary",
    "IS": "Iceland",
    "IT": "Italy",
    "LV": "Latvia",
    "LT": "Lithuania",
    "LU": "Luxembourg",
    "MT": "Malta",
    "NL": "Netherlands",
    "NO": "Norway",
    "PL": "Poland",
    "PT": "Portugal",
    "SK": "Slovakia",
    "SI": "Slovenia",
    "ES": "Spain",
    "SE": "Sweden",
    "CH": "Switzerland",
    "GB": "United Kingdom",
    "IE": "Ireland",
    "HR": "Croatia",
    "RO": "Romania",
    "CA": "Canada",
    "US": "United States",
    "MX": "Mexico",
    "BR": "Brazil",
    "AR": "Argentina",
    "CL": "Chile",
    "CO": "Colombia",
    "CR": "Costa Rica",
    "EC": "Ecuador",
    "PA": "Panama",
    "PE": "Peru",
    "UY": "Uruguay",
    "AE": "UAE",
    "TR": "Turkey",
    "IL": "Israel",
    "EG": "Egypt",
    "MA": "Morocco",
    "ZA": "South Africa",
}
