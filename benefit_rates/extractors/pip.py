"""
Extractor for gov.uk/pip.

The rates table has one row per component with the row header in a th:

    |                   | Lower weekly rate | Higher weekly rate |
    | Daily living part | £73.90            | £110.40            |
    | Mobility part     | £29.20            | £77.05             |
"""

from benefit_rates.core.models import SourceDocuments
from benefit_rates.core.normalizer import Number
from benefit_rates.core.selectors import LabelRule, classify, iter_table_rows

from .base import RateExtractor


class PIPExtractor(RateExtractor):
    """Standard and enhanced weekly rates for both PIP components."""

    benefit_id = "pip"
    path = "/pip"
    section = "how-much-youll-get"
    rate_keys = (
        "daily_living_standard_weekly",
        "daily_living_enhanced_weekly",
        "mobility_standard_weekly",
        "mobility_enhanced_weekly",
    )

    # Rule key is the component prefix; standard/enhanced suffixes are added per row
    ROW_RULES = (
        LabelRule("daily_living", all_of=("daily living",)),
        LabelRule("mobility", all_of=("mobility",)),
    )

    def parse_rates(self, documents: SourceDocuments) -> dict[str, Number]:
        rates: dict[str, Number] = {}

        for row in iter_table_rows(self.section_html(documents)):
            rule = classify(row.header, self.ROW_RULES)
            amounts = row.amounts()
            if rule is None or len(amounts) < 2:
                continue
            rates[f"{rule.key}_standard_weekly"] = min(amounts)
            rates[f"{rule.key}_enhanced_weekly"] = max(amounts)

        return rates
