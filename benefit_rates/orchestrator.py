"""
Orchestrator for the rate update pipeline.

Coordinates:
- Rate store loading
- Layout resolution
- Concurrent extraction
- Merging and change reporting
- Validation
- Atomic write
"""

from datetime import date
from pathlib import Path
from typing import Optional, Sequence, Union

import httpx
import structlog

from .aggregator import aggregate_rates
from .config.loader import UpdaterSettings, load_settings
from .core.content_api import ContentApiClient
from .core.exceptions import FetchError, RatesFileError
from .core.http_client import HttpClient
from .core.merger import merge_rates
from .core.models import (
    ChangeKind,
    ExitCode,
    MergeResult,
    RateSet,
    UpdateOutcome,
    ValidationResult,
)
from .core.storage import load_rates_file, write_rates_file
from .core.validator import validate_rates
from .extractors import get_extractors
from .extractors.base import RateExtractor

logger = structlog.get_logger(__name__)


# Log event per merge outcome
MERGE_EVENTS = {
    ChangeKind.CHANGED: "rate_changed",
    ChangeKind.NEW: "rate_added",
    ChangeKind.UNCHANGED: "rate_unchanged",
    ChangeKind.KEPT: "rate_kept",
}


class RateUpdater:
    """
    Orchestrator for one update run.

    Loads the rate store, extracts fresh rates from GOV.UK, merges and
    validates them, and replaces the store only when everything passed.
    """

    def __init__(
        self,
        settings: Optional[UpdaterSettings] = None,
        rates_file: Optional[Union[str, Path]] = None,
        extractors: Optional[Sequence[RateExtractor]] = None,
        dry_run: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        today: Optional[date] = None,
    ):
        """
        Initialize the updater.

        Args:
            settings: Updater settings (defaults when omitted)
            rates_file: Path to the rate store (overrides settings)
            extractors: Extractors to run (default: settings.benefits)
            dry_run: Validate but never write
            transport: Optional httpx transport for the shared HTTP client
            today: Date stamped into last_updated (default: today)
        """
        self.settings = settings or UpdaterSettings()
        self.rates_file = Path(rates_file or self.settings.rates_file)
        self.extractors = (
            list(extractors) if extractors is not None
            else get_extractors(self.settings.benefits)
        )
        self.dry_run = dry_run
        self.transport = transport
        self.today = today

    async def run(self) -> UpdateOutcome:
        """
        Run the update pipeline.

        Returns:
            UpdateOutcome; exit code 0 on success or no-op, 1 when
            validation failed, 2 when the store or a page could not be read
        """
        logger.info(
            "starting_update",
            rates_file=str(self.rates_file),
            benefits=[e.benefit_id for e in self.extractors],
            dry_run=self.dry_run,
        )

        try:
            rates_file = load_rates_file(self.rates_file)
        except RatesFileError as e:
            logger.error("rates_file_invalid", path=e.path, reason=e.reason)
            return UpdateOutcome(ExitCode.FETCH_FAILED, error=str(e))

        rate_set = RateSet.resolve(
            rates_file.rates,
            {e.benefit_id: e.root_keys for e in self.extractors},
        )

        try:
            parsed = await self._extract()
        except FetchError as e:
            logger.error("fetch_failed", url=e.url, status_code=e.status_code, reason=e.reason)
            return UpdateOutcome(ExitCode.FETCH_FAILED, error=str(e))

        merge = merge_rates(parsed, rate_set)
        self._report_merge(merge)

        if merge.changed == 0:
            logger.info("no_changes_detected")
            return UpdateOutcome(ExitCode.SUCCESS, merge=merge)

        validation = validate_rates(
            merge.rates,
            rates_file.rates,
            rates_file.tax_year,
            warning_pct=self.settings.warning_threshold_pct,
            error_pct=self.settings.error_threshold_pct,
        )
        self._report_validation(validation)

        if not validation.valid:
            logger.error("validation_failed", errors=len(validation.errors))
            return UpdateOutcome(ExitCode.VALIDATION_FAILED, merge=merge, validation=validation)

        if self.dry_run:
            logger.info("dry_run_complete", changed=merge.changed)
            return UpdateOutcome(ExitCode.SUCCESS, merge=merge, validation=validation)

        write_rates_file(self.rates_file, rates_file.updated(merge.rates, self.today))
        logger.info("update_complete", changed=merge.changed, path=str(self.rates_file))
        return UpdateOutcome(ExitCode.SUCCESS, merge=merge, validation=validation, written=True)

    def check(self) -> UpdateOutcome:
        """
        Validate the stored rate file on its own, without network access.

        Returns:
            UpdateOutcome with exit code 0 or 1 (2 if the file is unreadable)
        """
        try:
            rates_file = load_rates_file(self.rates_file)
        except RatesFileError as e:
            logger.error("rates_file_invalid", path=e.path, reason=e.reason)
            return UpdateOutcome(ExitCode.FETCH_FAILED, error=str(e))

        validation = validate_rates(
            rates_file.rates,
            rates_file.rates,
            rates_file.tax_year,
            warning_pct=self.settings.warning_threshold_pct,
            error_pct=self.settings.error_threshold_pct,
        )
        self._report_validation(validation)

        if not validation.valid:
            logger.error("check_failed", errors=len(validation.errors))
            return UpdateOutcome(ExitCode.VALIDATION_FAILED, validation=validation)

        logger.info("check_passed", path=str(self.rates_file), tax_year=rates_file.tax_year)
        return UpdateOutcome(ExitCode.SUCCESS, validation=validation)

    async def _extract(self):
        """Run all extractors against one shared HTTP client."""
        http_client = HttpClient(
            requests_per_second=self.settings.requests_per_second,
            timeout=self.settings.timeout,
            transport=self.transport,
        )
        async with http_client:
            client = ContentApiClient(http_client, api_base=self.settings.api_base)
            return await aggregate_rates(client, self.extractors)

    def _report_merge(self, merge: MergeResult) -> None:
        for event in merge.events:
            log = logger.info if event.kind in (ChangeKind.CHANGED, ChangeKind.NEW) else logger.debug
            log(MERGE_EVENTS[event.kind], path=event.path, old=event.old, new=event.new)

        logger.info(
            "merge_complete",
            changed=merge.changed,
            unchanged=merge.unchanged,
            kept=merge.kept,
        )

    def _report_validation(self, validation: ValidationResult) -> None:
        for warning in validation.warnings:
            logger.warning("validation_warning", message=warning)
        for error in validation.errors:
            logger.error("validation_error", message=error)


async def run_update(
    rates_file: Optional[str] = None,
    config_path: Optional[str] = None,
    benefits: Optional[list[str]] = None,
    dry_run: bool = False,
) -> UpdateOutcome:
    """
    Convenience function to run an update.

    Args:
        rates_file: Path to the rate store (default from settings)
        config_path: Path to settings.yml
        benefits: Benefit ids to update (None = settings / all)
        dry_run: Validate but never write

    Returns:
        UpdateOutcome
    """
    settings = load_settings(config_path)
    if benefits:
        settings.benefits = benefits

    updater = RateUpdater(settings=settings, rates_file=rates_file, dry_run=dry_run)
    return await updater.run()
