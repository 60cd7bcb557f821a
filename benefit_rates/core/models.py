"""
Data models for the benefit rate updater.

Covers the GOV.UK content document, the persisted rate file and the
transient values passed between pipeline stages.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum, IntEnum
from typing import Any, Optional, Union

from .normalizer import Number

# benefit id -> rate key -> value; absence means "could not extract"
ParsedRates = dict[str, dict[str, Number]]


def is_rate_value(value: Any) -> bool:
    """True for finite int/float values (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # ints of any size are finite; math.isfinite overflows on huge ones
    return isinstance(value, int) or math.isfinite(value)


@dataclass
class ContentPart:
    """A named sub-section of a GOV.UK guide."""
    slug: str
    body: str = ""
    title: str = ""


@dataclass
class ContentDocument:
    """
    Document returned by the GOV.UK Content API.

    Guides carry their content in ``parts``; simple pages only have a
    default ``body``.
    """

    path: str
    title: str = ""
    body: Optional[str] = None
    parts: list[ContentPart] = field(default_factory=list)

    @classmethod
    def from_api(cls, path: str, payload: dict) -> "ContentDocument":
        """Create from a Content API JSON payload."""
        details = payload.get("details") or {}
        parts = [
            ContentPart(
                slug=part.get("slug", ""),
                body=part.get("body") or "",
                title=part.get("title") or "",
            )
            for part in details.get("parts") or []
            if isinstance(part, dict)
        ]
        return cls(
            path=path,
            title=payload.get("title") or "",
            body=details.get("body"),
            parts=parts,
        )

    def get_section(self, slug: Optional[str] = None) -> str:
        """See :func:`get_section`."""
        return get_section(self, slug)


def get_section(document: ContentDocument, slug: Optional[str] = None) -> str:
    """
    Return HTML for one section of a document.

    Args:
        document: Fetched document
        slug: Part slug, e.g. "what-youll-get"

    Returns:
        The named part's body if the slug exists, else all parts joined
        with newlines, else the default body, else an empty string
    """
    if slug:
        for part in document.parts:
            if part.slug == slug:
                return part.body
    if document.parts:
        return "\n".join(part.body for part in document.parts)
    return document.body or ""


@dataclass
class SourceDocuments:
    """Documents handed to an extractor: the primary page plus optional extras."""
    primary: ContentDocument
    optional: dict[str, ContentDocument] = field(default_factory=dict)


@dataclass(frozen=True)
class GroupedBenefit:
    """Benefit whose rates live in a nested object, e.g. rates.pip.*"""
    benefit_id: str
    rates: dict = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class RootKeys:
    """Benefit whose rates live directly at the root of the rate set."""
    benefit_id: str
    keys: frozenset = frozenset()


BenefitLayout = Union[GroupedBenefit, RootKeys]


@dataclass
class RateSet:
    """
    Canonical rate store contents with a per-benefit layout.

    ``values`` is the raw mapping as persisted; ``layouts`` records, for
    every benefit an extractor may produce, where its keys live.
    """

    values: dict[str, Any]
    layouts: dict[str, BenefitLayout] = field(default_factory=dict)

    @classmethod
    def resolve(
        cls,
        values: dict[str, Any],
        root_keys: dict[str, tuple[str, ...]],
    ) -> "RateSet":
        """
        Resolve the layout of each benefit once, at load time.

        Args:
            values: Raw ``rates`` mapping from the rate file
            root_keys: benefit id -> declared root-level keys (empty for
                       grouped benefits)

        Returns:
            RateSet with a layout for every benefit in ``root_keys``
        """
        layouts: dict[str, BenefitLayout] = {}
        for benefit_id, keys in root_keys.items():
            existing = values.get(benefit_id)
            if isinstance(existing, dict):
                layouts[benefit_id] = GroupedBenefit(benefit_id, dict(existing))
            elif keys:
                layouts[benefit_id] = RootKeys(benefit_id, frozenset(keys))
            else:
                layouts[benefit_id] = GroupedBenefit(benefit_id, {})
        return cls(values=dict(values), layouts=layouts)


@dataclass
class BenefitRatesFile:
    """The persisted rate store."""

    tax_year: str
    last_updated: str
    source: str
    rates: dict[str, Any]
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "BenefitRatesFile":
        """Create from parsed JSON. Raises KeyError/TypeError on bad shape."""
        rates = data["rates"]
        if not isinstance(rates, dict):
            raise TypeError("rates must be an object")
        known = {"tax_year", "last_updated", "source", "rates"}
        return cls(
            tax_year=str(data["tax_year"]),
            last_updated=str(data.get("last_updated", "")),
            source=str(data.get("source", "")),
            rates=rates,
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> dict:
        """Convert to a dictionary for JSON serialization."""
        return {
            "tax_year": self.tax_year,
            "last_updated": self.last_updated,
            "source": self.source,
            "rates": self.rates,
            **self.extra,
        }

    def updated(self, rates: dict[str, Any], today: Optional[date] = None) -> "BenefitRatesFile":
        """Copy with new rates and ``last_updated`` stamped with today's date."""
        stamp = (today or date.today()).isoformat()
        return BenefitRatesFile(
            tax_year=self.tax_year,
            last_updated=stamp,
            source=self.source,
            rates=rates,
            extra=dict(self.extra),
        )


class ChangeKind(str, Enum):
    """Outcome of merging a single rate value."""
    CHANGED = "changed"
    NEW = "new"
    UNCHANGED = "unchanged"
    KEPT = "kept"  # Present in the store, not parsed this run


@dataclass
class MergeEvent:
    """One merge decision for one rate path."""
    kind: ChangeKind
    path: str
    old: Optional[Number] = None
    new: Optional[Number] = None

    def describe(self) -> str:
        if self.kind == ChangeKind.CHANGED:
            return f"{self.path}: {self.old} → {self.new}"
        if self.kind == ChangeKind.NEW:
            return f"{self.path}: {self.new} (new)"
        return f"{self.path}: {self.old}"


@dataclass
class MergeResult:
    """Updated rates plus the events that produced them."""

    rates: dict[str, Any]
    events: list[MergeEvent] = field(default_factory=list)

    def _count(self, *kinds: ChangeKind) -> int:
        return sum(1 for event in self.events if event.kind in kinds)

    @property
    def changed(self) -> int:
        """Changed plus newly added values."""
        return self._count(ChangeKind.CHANGED, ChangeKind.NEW)

    @property
    def unchanged(self) -> int:
        return self._count(ChangeKind.UNCHANGED)

    @property
    def kept(self) -> int:
        return self._count(ChangeKind.KEPT)


@dataclass
class ValidationResult:
    """Outcome of validating a merged rate set."""
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": self.errors, "warnings": self.warnings}


class ExitCode(IntEnum):
    """Process exit codes of an update run."""
    SUCCESS = 0
    VALIDATION_FAILED = 1
    FETCH_FAILED = 2


@dataclass
class UpdateOutcome:
    """Result of one orchestrator run."""
    exit_code: ExitCode
    merge: Optional[MergeResult] = None
    validation: Optional[ValidationResult] = None
    written: bool = False
    error: Optional[str] = None
