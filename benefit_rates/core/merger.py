"""
Merge freshly parsed rates into the canonical rate set.

Only values that were parsed are touched; everything else in the store
is carried over unchanged. The merge is pure: it returns a new mapping
and a list of events rather than logging or mutating its inputs.
"""

from typing import Any, Mapping, Optional

from .models import (
    ChangeKind,
    GroupedBenefit,
    MergeEvent,
    MergeResult,
    ParsedRates,
    RateSet,
    RootKeys,
    is_rate_value,
)
from .normalizer import Number


def _classify(path: str, old: Any, new: Number) -> MergeEvent:
    if is_rate_value(old) and old == new:
        return MergeEvent(ChangeKind.UNCHANGED, path, old=old, new=new)
    if is_rate_value(old):
        return MergeEvent(ChangeKind.CHANGED, path, old=old, new=new)
    return MergeEvent(ChangeKind.NEW, path, new=new)


def _merge_values(
    target: dict[str, Any],
    parsed: Mapping[str, Any],
    prefix: Optional[str],
    events: list[MergeEvent],
) -> None:
    """Merge parsed values onto target in place, recording one event per value."""
    for key, value in parsed.items():
        if not is_rate_value(value):
            continue

        path = f"{prefix}.{key}" if prefix else key
        event = _classify(path, target.get(key), value)
        events.append(event)

        # Unchanged values keep the stored object so the file does not churn
        if event.kind != ChangeKind.UNCHANGED:
            target[key] = value


def _record_kept(
    existing: Mapping[str, Any],
    keys,
    parsed: Mapping[str, Any],
    prefix: Optional[str],
    events: list[MergeEvent],
) -> None:
    for key in keys:
        if key in parsed:
            continue
        value = existing.get(key)
        if not is_rate_value(value):
            continue
        path = f"{prefix}.{key}" if prefix else key
        events.append(MergeEvent(ChangeKind.KEPT, path, old=value))


def merge_rates(parsed: ParsedRates, rate_set: RateSet) -> MergeResult:
    """
    Fold parsed rates into the existing rate set.

    For grouped benefits, the parsed keys are merged into the benefit's
    nested object; stored keys that were not parsed are kept. For
    root-level benefits the parsed keys are merged onto the root.

    Args:
        parsed: benefit id -> parsed rate mapping
        rate_set: Existing rates with resolved layouts

    Returns:
        MergeResult with the updated rates and one event per decision
    """
    updated: dict[str, Any] = dict(rate_set.values)
    events: list[MergeEvent] = []

    for benefit_id, values in parsed.items():
        layout = rate_set.layouts.get(benefit_id)
        if layout is None:
            existing = updated.get(benefit_id)
            layout = (
                GroupedBenefit(benefit_id, dict(existing))
                if isinstance(existing, dict)
                else RootKeys(benefit_id, frozenset())
            )

        if isinstance(layout, GroupedBenefit):
            group = dict(layout.rates)
            _merge_values(group, values, benefit_id, events)
            _record_kept(layout.rates, layout.rates.keys(), values, benefit_id, events)
            updated[benefit_id] = group
        else:
            _merge_values(updated, values, None, events)
            _record_kept(rate_set.values, sorted(layout.keys), values, None, events)

    return MergeResult(rates=updated, events=events)
