"""Exceptions raised by the rate update pipeline."""

from typing import Optional


class BenefitRatesError(Exception):
    """Base class for all benefit rate errors."""


class FetchError(BenefitRatesError):
    """Upstream content could not be fetched (bad status, timeout, bad payload)."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        message = f"Failed to fetch {url}: {reason}"
        if status_code is not None:
            message = f"Failed to fetch {url}: HTTP {status_code}"
        super().__init__(message)


class RatesFileError(BenefitRatesError):
    """The persisted rate store is missing, unreadable or malformed."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid rates file {path}: {reason}")
