"""
Extractor for gov.uk/carers-allowance.
"""

import re

from benefit_rates.core.models import SourceDocuments
from benefit_rates.core.normalizer import Number, parse_amount, search_amount

from .base import RateExtractor


class CarersAllowanceExtractor(RateExtractor):
    """Weekly rate and the weekly earnings limit."""

    benefit_id = "carers_allowance"
    path = "/carers-allowance"
    rate_keys = ("weekly", "earnings_limit_weekly")

    WEEKLY_PATTERN = r"£([\d,]+\.\d{2})\s+a\s+week"
    # "your earnings are £196 or less a week"
    EARNINGS_PATTERNS = (
        r"earnings\s+are\s+£([\d,]+(?:\.\d{2})?)",
        r"£([\d,]+(?:\.\d{2})?)\s+(?:or\s+less\s+)?a?\s*week",
    )

    def parse_rates(self, documents: SourceDocuments) -> dict[str, Number]:
        text = self.page_text(documents)
        rates: dict[str, Number] = {}

        weekly = search_amount(text, self.WEEKLY_PATTERN)
        if weekly is not None:
            rates["weekly"] = weekly

        # The weekly rate also reads "£X a week", so only a different figure counts
        for pattern in self.EARNINGS_PATTERNS:
            for match in re.finditer(pattern, text, re.IGNORECASE):
                value = parse_amount(match.group(1))
                if value is not None and value != weekly:
                    rates["earnings_limit_weekly"] = value
                    return rates

        return rates
