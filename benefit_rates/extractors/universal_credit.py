"""
Extractor for gov.uk/universal-credit.

The "what you'll get" part has several two-column tables (description |
monthly amount). Disabled child additions put the amount in the label
cell ("£158.76 - the lower amount"). Carer element, childcare caps,
capital limits and the free school meals threshold are only in prose.
"""

from benefit_rates.core.models import SourceDocuments
from benefit_rates.core.normalizer import Number, search_amount
from benefit_rates.core.selectors import LabelRule, classify, iter_table_rows

from .base import RateExtractor

COUPLE = ("partner", "couple")


class UniversalCreditExtractor(RateExtractor):
    """Standard allowances, elements, childcare caps and capital limits."""

    benefit_id = "universal_credit"
    path = "/universal-credit"
    section = "what-youll-get"
    rate_keys = (
        "standard_allowance_single_under_25_monthly",
        "standard_allowance_single_25_plus_monthly",
        "standard_allowance_couple_under_25_monthly",
        "standard_allowance_couple_25_plus_monthly",
        "child_element_first_monthly",
        "child_element_subsequent_monthly",
        "disabled_child_lower_monthly",
        "disabled_child_higher_monthly",
        "lcwra_element_monthly",
        "carer_element_monthly",
        "childcare_one_child_max_monthly",
        "childcare_two_children_max_monthly",
        "capital_upper_threshold",
        "capital_lower_threshold",
        "free_school_meals_income_threshold",
    )

    # Order matters: the first matching rule wins
    ROW_RULES = (
        LabelRule("standard_allowance_single_under_25_monthly", all_of=("single", "under 25")),
        LabelRule("standard_allowance_single_25_plus_monthly", all_of=("single", "25 or over")),
        LabelRule("standard_allowance_couple_under_25_monthly", all_of=("both under 25",), any_of=COUPLE),
        LabelRule("standard_allowance_couple_25_plus_monthly", all_of=("25 or over",), any_of=COUPLE),
        LabelRule("child_element_first_monthly", all_of=("first child", "before")),
        LabelRule("child_element_subsequent_monthly", any_of=("second child", "other eligible children")),
        LabelRule("child_element_subsequent_monthly", all_of=("first child", "after"), keep_existing=True),
        LabelRule("disabled_child_lower_monthly", all_of=("lower amount",), prefer_first=True),
        LabelRule("disabled_child_higher_monthly", all_of=("higher amount",), prefer_first=True),
        LabelRule("lcwra_element_monthly", all_of=("limited capability", "work-related activity")),
    )

    # (key, use whole page?, patterns tried in order)
    PROSE_FIELDS = (
        ("carer_element_monthly", True, (
            r"carer['’s]*\s+element.*?£([\d,]+\.\d{2})",
            r"£([\d,]+\.\d{2})[^£\n]*?carer",
        )),
        ("childcare_one_child_max_monthly", True, (
            r"£([\d,]+\.\d{2})[^£\n]*?(?:one|1)\s+child",
        )),
        ("childcare_two_children_max_monthly", True, (
            r"£([\d,]+\.\d{2})[^£\n]*?(?:two|2|more)\s+child",
        )),
        ("capital_upper_threshold", False, (
            r"£([\d,]+)\s+or\s+less.*?(?:savings|investment|money)",
            r"and\s+£([\d,]+)\s*\.",
            r"between.*?and\s+£([\d,]+)",
        )),
        ("capital_lower_threshold", False, (
            r"(?:more\s+than|over)\s+£([\d,]+).*?(?:savings|investment|money)",
            r"between\s+£([\d,]+)",
        )),
        ("free_school_meals_income_threshold", False, (
            r"(?:earn|income).*?£([\d,]+).*?(?:free\s+school\s+meals|fsm)",
            r"free\s+school\s+meals.*?£([\d,]+)",
        )),
    )

    def parse_rates(self, documents: SourceDocuments) -> dict[str, Number]:
        rates: dict[str, Number] = {}

        for row in iter_table_rows(self.section_html(documents)):
            amounts = row.amounts()
            if not amounts:
                continue

            rule = classify(row.text, self.ROW_RULES)
            if rule is None:
                continue
            if rule.keep_existing and rule.key in rates:
                continue

            rates[rule.key] = amounts[0] if rule.prefer_first else amounts[-1]

        section_text = self.section_text(documents)
        page_text = self.page_text(documents)

        for key, whole_page, patterns in self.PROSE_FIELDS:
            value = search_amount(page_text if whole_page else section_text, *patterns)
            if value is not None:
                rates[key] = value

        return rates
