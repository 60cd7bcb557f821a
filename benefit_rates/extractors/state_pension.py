"""
Extractor for gov.uk/new-state-pension.

The full new State Pension rate is stored at the root of the rate set
(rates.state_pension_full_new_weekly), not in a nested object.
"""

from benefit_rates.core.models import SourceDocuments
from benefit_rates.core.normalizer import Number, search_amount

from .base import RateExtractor


class StatePensionExtractor(RateExtractor):
    """Full new State Pension weekly rate, stored as a root key."""
    benefit_id = "state_pension"
    path = "/new-state-pension"
    root_keys = ("state_pension_full_new_weekly",)
    rate_keys = root_keys

    # "The full new State Pension is £230.25 per week."
    WEEKLY_PATTERN = r"(?:full|maximum).*?£([\d,]+\.\d{2}).*?(?:per\s+)?week"

    def parse_rates(self, documents: SourceDocuments) -> dict[str, Number]:
        weekly = search_amount(self.page_text(documents), self.WEEKLY_PATTERN)
        if weekly is None:
            return {}
        return {"state_pension_full_new_weekly": weekly}
