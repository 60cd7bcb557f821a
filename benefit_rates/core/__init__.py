"""
Core layer - stable foundation for the rate updater.

Components:
- models: ContentDocument, RateSet, BenefitRatesFile, merge/validation results
- http_client: Rate-limited async HTTP client
- content_api: GOV.UK Content API fetcher
- normalizer: Sterling amount and text normalization
- selectors: Table rows and keyword classification
- merger: Parsed rates -> rate set
- validator: Sanity checks before persistence
- storage: Rate store load / atomic write
"""

from .exceptions import BenefitRatesError, FetchError, RatesFileError
from .models import (
    BenefitRatesFile,
    ChangeKind,
    ContentDocument,
    ContentPart,
    ExitCode,
    GroupedBenefit,
    MergeEvent,
    MergeResult,
    ParsedRates,
    RateSet,
    RootKeys,
    SourceDocuments,
    UpdateOutcome,
    ValidationResult,
    get_section,
)
from .normalizer import (
    extract_all_amounts,
    extract_first_amount,
    extract_integer,
    html_to_text,
    parse_amount,
    search_amount,
)
from .merger import merge_rates
from .validator import flatten_rates, validate_rates, validate_tax_year
from .storage import load_rates_file, write_rates_file

__all__ = [
    "BenefitRatesError",
    "FetchError",
    "RatesFileError",
    "BenefitRatesFile",
    "ChangeKind",
    "ContentDocument",
    "ContentPart",
    "ExitCode",
    "GroupedBenefit",
    "MergeEvent",
    "MergeResult",
    "ParsedRates",
    "RateSet",
    "RootKeys",
    "SourceDocuments",
    "UpdateOutcome",
    "ValidationResult",
    "get_section",
    "extract_all_amounts",
    "extract_first_amount",
    "extract_integer",
    "html_to_text",
    "parse_amount",
    "search_amount",
    "merge_rates",
    "flatten_rates",
    "validate_rates",
    "validate_tax_year",
    "load_rates_file",
    "write_rates_file",
]
