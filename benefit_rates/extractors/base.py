"""
Base class for benefit rate extractors.

Each benefit page on GOV.UK is laid out differently, so every benefit
has its own extractor. Extraction is split into two phases:

- fetch: download the primary page (required) and any optional pages
- parse: a pure function from the fetched documents to rate values

A failure to fetch the primary page propagates as FetchError. A failure
to fetch an optional page is logged and the fields derived from it are
left out.
"""

from abc import ABC, abstractmethod
from typing import Optional

import structlog

from benefit_rates.core.content_api import ContentApiClient
from benefit_rates.core.exceptions import FetchError
from benefit_rates.core.models import ContentDocument, SourceDocuments, get_section
from benefit_rates.core.normalizer import Number, extract_all_amounts, html_to_text

logger = structlog.get_logger(__name__)


class RateExtractor(ABC):
    """
    Abstract base class for per-benefit rate extractors.

    Subclasses declare where their content lives and implement
    ``parse_rates``; they never catch fetch errors themselves.
    """

    # Key of the benefit in the rate store, e.g. "attendance_allowance"
    benefit_id: str = ""
    # GOV.UK path of the primary page
    path: str = ""
    # Part slug holding the rates (None: all parts)
    section: Optional[str] = None
    # Secondary pages whose failure is tolerated
    optional_paths: tuple[str, ...] = ()
    # Keys stored at the root of the rate set instead of a nested object
    root_keys: tuple[str, ...] = ()
    # Every key this extractor can produce
    rate_keys: tuple[str, ...] = ()

    def __init__(self):
        self.logger = logger.bind(extractor=self.__class__.__name__, benefit=self.benefit_id)

    async def fetch(self, client: ContentApiClient) -> SourceDocuments:
        """
        Fetch the primary page and optional pages.

        Raises:
            FetchError: If the primary page cannot be fetched
        """
        primary = await client.fetch_document(self.path)

        optional: dict[str, ContentDocument] = {}
        for path in self.optional_paths:
            try:
                optional[path] = await client.fetch_document(path)
            except FetchError as e:
                self.logger.warning("optional_fetch_failed", path=path, error=str(e))

        return SourceDocuments(primary=primary, optional=optional)

    def parse(self, documents: SourceDocuments) -> dict[str, Number]:
        """
        Parse rates from fetched documents.

        A primary page with no £ amount anywhere yields nothing.

        Returns:
            Partial mapping of rate key -> value; missing keys were not found
        """
        full_text = html_to_text(get_section(documents.primary))
        if not extract_all_amounts(full_text):
            self.logger.warning("no_amounts_on_page", path=documents.primary.path)
            return {}

        rates = self.parse_rates(documents)
        missing = [key for key in self.rate_keys if key not in rates]
        if missing:
            self.logger.warning("rates_not_found", missing=missing)
        return rates

    @abstractmethod
    def parse_rates(self, documents: SourceDocuments) -> dict[str, Number]:
        """
        Extract rate values from the documents.

        Args:
            documents: Primary page plus successfully fetched optional pages

        Returns:
            Partial mapping of rate key -> value
        """
        pass

    async def extract(self, client: ContentApiClient) -> dict[str, Number]:
        """Fetch and parse in one step."""
        documents = await self.fetch(client)
        rates = self.parse(documents)
        self.logger.info("rates_extracted", found=len(rates), expected=len(self.rate_keys))
        return rates

    def section_html(self, documents: SourceDocuments) -> str:
        """HTML of the configured section of the primary page."""
        return get_section(documents.primary, self.section)

    def section_text(self, documents: SourceDocuments) -> str:
        """Plain text of the configured section of the primary page."""
        return html_to_text(self.section_html(documents))

    def page_text(self, documents: SourceDocuments) -> str:
        """Plain text of every part of the primary page."""
        return html_to_text(get_section(documents.primary))

    def get_extractor_name(self) -> str:
        """Return human-readable extractor name."""
        return self.__class__.__name__
