"""
Extractor for gov.uk/pension-credit.

Pension Credit rates are published in prose:
"Guarantee Credit tops up your weekly income to £227.10 if you're single"
"""

import re

from benefit_rates.core.models import SourceDocuments
from benefit_rates.core.normalizer import Number, search_amount

from .base import RateExtractor

# Characters after "Savings Credit" searched for the savings credit maxima
SAVINGS_CREDIT_WINDOW = 500


class PensionCreditExtractor(RateExtractor):
    """Guarantee credit, savings credit maxima and the capital disregard."""

    benefit_id = "pension_credit"
    path = "/pension-credit"
    section = "what-youll-get"
    rate_keys = (
        "single_weekly",
        "couple_weekly",
        "savings_credit_single_max_weekly",
        "savings_credit_couple_max_weekly",
        "capital_disregard",
    )

    SINGLE_PATTERNS = (
        r"(?:income\s+to|topped\s+up\s+to)\s+£([\d,]+\.\d{2})[^£\n]*?single",
    )
    COUPLE_PATTERNS = (
        r"(?:income\s+to|topped\s+up\s+to)\s+£([\d,]+\.\d{2})[^£\n]*?partner",
        r"£([\d,]+\.\d{2})[^£\n]*?(?:couple|partner)",
        r"partner[^£\n]*?£([\d,]+\.\d{2})",
    )
    SAVINGS_SINGLE_PATTERNS = (
        r"£([\d,]+\.\d{2})[^£\n]*?single",
    )
    SAVINGS_COUPLE_PATTERNS = (
        r"partner.*?£([\d,]+\.\d{2})",
        r"£([\d,]+\.\d{2})[^£\n]*?partner",
    )
    CAPITAL_PATTERNS = (
        r"£([\d,]+)\s+(?:or\s+less\s+)?(?:in\s+)?(?:savings|capital)",
    )

    def parse_rates(self, documents: SourceDocuments) -> dict[str, Number]:
        text = self.section_text(documents)
        rates: dict[str, Number] = {}

        fields = (
            ("single_weekly", text, self.SINGLE_PATTERNS),
            ("couple_weekly", text, self.COUPLE_PATTERNS),
            ("capital_disregard", text, self.CAPITAL_PATTERNS),
        )

        savings = self._savings_credit_window(text)
        if savings:
            fields += (
                ("savings_credit_single_max_weekly", savings, self.SAVINGS_SINGLE_PATTERNS),
                ("savings_credit_couple_max_weekly", savings, self.SAVINGS_COUPLE_PATTERNS),
            )

        for key, source, patterns in fields:
            value = search_amount(source, *patterns)
            if value is not None:
                rates[key] = value

        return rates

    def _savings_credit_window(self, text: str) -> str:
        """Text from the Savings Credit heading to SAVINGS_CREDIT_WINDOW chars past it."""
        match = re.search(r"Savings\s+Credit", text, re.IGNORECASE)
        if not match:
            return ""
        return text[match.start():match.end() + SAVINGS_CREDIT_WINDOW]
