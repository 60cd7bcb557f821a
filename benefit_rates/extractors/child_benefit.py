"""
Extractor for gov.uk/child-benefit.

Weekly rates come from the rates table. The High Income Child Benefit
Charge thresholds live on a separate page, which is optional: if it
cannot be fetched the HICBC fields are simply left out.
"""

from benefit_rates.core.models import SourceDocuments, get_section
from benefit_rates.core.normalizer import Number, extract_first_amount, html_to_text, search_amount
from benefit_rates.core.selectors import LabelRule, classify, iter_table_rows

from .base import RateExtractor

TAX_CHARGE_PATH = "/child-benefit-tax-charge"


class ChildBenefitExtractor(RateExtractor):
    """Weekly rates per child plus HICBC threshold and full clawback income."""

    benefit_id = "child_benefit"
    path = "/child-benefit"
    section = "what-youll-get"
    optional_paths = (TAX_CHARGE_PATH,)
    rate_keys = (
        "first_child_weekly",
        "additional_child_weekly",
        "hicbc_threshold",
        "hicbc_full_clawback",
    )

    ROW_RULES = (
        LabelRule("first_child_weekly", any_of=("eldest", "only", "first")),
        LabelRule("additional_child_weekly", any_of=("additional", "other")),
    )

    THRESHOLD_PATTERNS = (
        r"(?:income\s+is\s+)?(?:over|more\s+than)\s+£([\d,]+)",
        r"£([\d,]+)",
    )
    CLAWBACK_PATTERNS = (
        r"£([\d,]+)[^£\n]*?(?:equal\s+to|100%|all\s+of)",
    )

    def parse_rates(self, documents: SourceDocuments) -> dict[str, Number]:
        rates: dict[str, Number] = {}

        # "Eldest or only child | £26.05"
        for row in iter_table_rows(self.section_html(documents)):
            rule = classify(row.label, self.ROW_RULES)
            amount = extract_first_amount(row.data_cells[-1])
            if rule and amount is not None:
                rates[rule.key] = amount

        tax_charge = documents.optional.get(TAX_CHARGE_PATH)
        if tax_charge is not None:
            rates.update(self._parse_tax_charge(html_to_text(get_section(tax_charge))))

        return rates

    def _parse_tax_charge(self, text: str) -> dict[str, Number]:
        rates: dict[str, Number] = {}

        threshold = search_amount(text, *self.THRESHOLD_PATTERNS)
        if threshold is not None:
            rates["hicbc_threshold"] = threshold

        clawback = search_amount(text, *self.CLAWBACK_PATTERNS)
        if clawback is not None and clawback > (threshold or 0):
            rates["hicbc_full_clawback"] = clawback

        return rates
