"""
Extractor for gov.uk/marriage-allowance.

"Marriage Allowance lets you transfer £1,260 of your Personal Allowance
... This reduces their tax by up to £252 in the tax year."
"""

from benefit_rates.core.models import SourceDocuments
from benefit_rates.core.normalizer import Number, extract_integer, search_amount

from .base import RateExtractor


class MarriageAllowanceExtractor(RateExtractor):
    """Transferable allowance, tax saving and backdating period from prose."""
    benefit_id = "marriage_allowance"
    path = "/marriage-allowance"
    rate_keys = ("transferable_amount", "annual_value", "backdate_years")

    TRANSFER_PATTERN = r"transfer\s+£([\d,]+)"
    VALUE_PATTERN = r"(?:reduce|save).*?£([\d,]+(?:\.\d{2})?)"
    BACKDATE_PATTERN = r"(?:backdate|back\s+date).*?(\d+)\s+year"

    def parse_rates(self, documents: SourceDocuments) -> dict[str, Number]:
        text = self.page_text(documents)
        rates: dict[str, Number] = {}

        transfer = search_amount(text, self.TRANSFER_PATTERN)
        if transfer is not None:
            rates["transferable_amount"] = transfer

        value = search_amount(text, self.VALUE_PATTERN)
        if value is not None:
            rates["annual_value"] = value

        years = extract_integer(text, self.BACKDATE_PATTERN)
        if years is not None:
            rates["backdate_years"] = years

        return rates
