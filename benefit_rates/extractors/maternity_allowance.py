"""
Extractor for gov.uk/maternity-allowance.
"""

from benefit_rates.core.models import SourceDocuments
from benefit_rates.core.normalizer import Number, extract_integer, search_amount

from .base import RateExtractor


class MaternityAllowanceExtractor(RateExtractor):
    """Weekly rate and how many weeks it is paid for."""

    benefit_id = "maternity_allowance"
    path = "/maternity-allowance"
    rate_keys = ("weekly", "duration_weeks")

    WEEKLY_PATTERN = r"£([\d,]+\.\d{2})\s+a?\s*week"
    DURATION_PATTERN = r"(\d+)\s+weeks"

    def parse_rates(self, documents: SourceDocuments) -> dict[str, Number]:
        text = self.page_text(documents)
        rates: dict[str, Number] = {}

        weekly = search_amount(text, self.WEEKLY_PATTERN)
        if weekly is not None:
            rates["weekly"] = weekly

        weeks = extract_integer(text, self.DURATION_PATTERN)
        if weeks is not None:
            rates["duration_weeks"] = weeks

        return rates
