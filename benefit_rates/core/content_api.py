"""
GOV.UK Content API fetcher.

The Content API returns JSON for any GOV.UK path with the page HTML in
``details.body`` or, for guides, in ``details.parts[].body``. No
authentication is needed.
"""

from typing import Optional

import structlog

from .http_client import HttpClient
from .models import ContentDocument

logger = structlog.get_logger(__name__)


DEFAULT_API_BASE = "https://www.gov.uk/api/content"


class ContentApiClient:
    """Fetches GOV.UK pages as ContentDocument objects."""

    def __init__(self, http_client: HttpClient, api_base: Optional[str] = None):
        self.http_client = http_client
        self.api_base = (api_base or DEFAULT_API_BASE).rstrip("/")

    def url_for(self, path: str) -> str:
        """Build the Content API URL for a GOV.UK path."""
        if not path.startswith("/"):
            path = "/" + path
        return f"{self.api_base}{path}"

    async def fetch_document(self, path: str) -> ContentDocument:
        """
        Fetch a page from the Content API.

        Args:
            path: GOV.UK path, e.g. "/attendance-allowance"

        Returns:
            ContentDocument with title, body and parts

        Raises:
            FetchError: If the page cannot be fetched or decoded
        """
        url = self.url_for(path)
        payload = await self.http_client.get_json(url)
        document = ContentDocument.from_api(path, payload)

        logger.debug(
            "document_fetched",
            path=path,
            parts=len(document.parts),
            has_body=document.body is not None,
        )
        return document
