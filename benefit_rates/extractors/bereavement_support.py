"""
Extractor for gov.uk/bereavement-support-payment.

Rows read "Higher rate | £3,500 | £350" (lump sum then monthly); a row
with a single amount only gives the lump sum.
"""

from benefit_rates.core.models import SourceDocuments
from benefit_rates.core.normalizer import Number, extract_integer
from benefit_rates.core.selectors import LabelRule, classify, iter_table_rows

from .base import RateExtractor


class BereavementSupportExtractor(RateExtractor):
    """Lump sums and monthly payments for both rates, plus the payment period."""

    benefit_id = "bereavement_support_payment"
    path = "/bereavement-support-payment"
    section = "what-youll-get"
    rate_keys = (
        "higher_lump_sum",
        "higher_monthly",
        "standard_lump_sum",
        "standard_monthly",
        "duration_months",
    )

    # Rule key is the rate prefix; lump sum/monthly suffixes are added per row
    ROW_RULES = (
        LabelRule("higher", all_of=("higher",)),
        LabelRule("standard", all_of=("standard",)),
    )

    DURATION_PATTERN = r"(\d+)\s+month"

    def parse_rates(self, documents: SourceDocuments) -> dict[str, Number]:
        rates: dict[str, Number] = {}

        for row in iter_table_rows(self.section_html(documents)):
            label = row.all_cells[0].lower() if row.all_cells else ""
            rule = classify(label, self.ROW_RULES)
            amounts = row.amounts(include_headers=True)
            if rule is None or not amounts:
                continue

            if len(amounts) >= 2:
                rates[f"{rule.key}_lump_sum"] = max(amounts)
                rates[f"{rule.key}_monthly"] = min(amounts)
            else:
                rates[f"{rule.key}_lump_sum"] = amounts[0]

        months = extract_integer(self.section_text(documents), self.DURATION_PATTERN)
        if months is not None:
            rates["duration_months"] = months

        return rates
