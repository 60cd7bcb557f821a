"""
Extractor for gov.uk/attendance-allowance.
"""

from benefit_rates.core.models import SourceDocuments
from benefit_rates.core.normalizer import Number, extract_all_amounts, extract_first_amount
from benefit_rates.core.selectors import LabelRule, classify, iter_table_rows

from .base import RateExtractor


class AttendanceAllowanceExtractor(RateExtractor):
    """Lower and higher weekly rates, from the rates table or page prose."""

    benefit_id = "attendance_allowance"
    path = "/attendance-allowance"
    section = "what-youll-get"
    rate_keys = ("lower_weekly", "higher_weekly")

    ROW_RULES = (
        LabelRule("lower_weekly", all_of=("lower",)),
        LabelRule("higher_weekly", all_of=("higher",)),
    )

    def parse_rates(self, documents: SourceDocuments) -> dict[str, Number]:
        html = self.section_html(documents)
        rates: dict[str, Number] = {}

        # Rows look like "Lower rate | £73.90"
        for row in iter_table_rows(html):
            rule = classify(row.label, self.ROW_RULES)
            amount = extract_first_amount(" ".join(row.data_cells))
            if rule and amount is not None:
                rates[rule.key] = amount

        if "lower_weekly" in rates and "higher_weekly" in rates:
            return rates

        # AA has exactly two rates, so the two smallest distinct amounts are lower/higher
        distinct = sorted(set(extract_all_amounts(self.section_text(documents))))
        if len(distinct) >= 2:
            self.logger.debug("using_prose_fallback", amounts=distinct[:2])
            rates["lower_weekly"] = distinct[0]
            rates["higher_weekly"] = distinct[1]

        return rates
