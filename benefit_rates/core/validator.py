"""Sanity checks run on merged rates before they are allowed to be written."""

import math
import re
from typing import Any, Mapping, Optional

from .models import ValidationResult

TAX_YEAR_PATTERN = re.compile(r"(\d{4})-(\d{2})", re.ASCII)

WARNING_THRESHOLD_PCT = 10.0
ERROR_THRESHOLD_PCT = 50.0


def _format_pct(value: float) -> str:
    value = float(value)
    if value.is_integer():
        return f"{int(value)}"
    return f"{value:g}"


def validate_tax_year(tax_year: str) -> list[str]:
    """Check a tax year looks like "2025-26" with consecutive years."""
    match = TAX_YEAR_PATTERN.fullmatch(tax_year or "")
    if not match:
        return [f'tax_year format invalid: "{tax_year}" (expected YYYY-YY)']

    start_year = int(match.group(1))
    end_year_short = int(match.group(2))
    if end_year_short != (start_year + 1) % 100:
        return [f"tax_year years don't match: {tax_year}"]
    return []


def flatten_rates(rates: Mapping[str, Any], prefix: str = "") -> dict[str, float]:
    """
    Flatten nested rates to dot-joined paths.

    Only numbers are kept; nested plain mappings are recursed into and
    everything else (strings, lists, bools, null) is ignored.
    """
    flat: dict[str, float] = {}
    for key, value in rates.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            flat[path] = value
        elif isinstance(value, Mapping):
            flat.update(flatten_rates(value, path))
    return flat


def _as_finite(value) -> Optional[float]:
    """Return value as a float, or None when it is NaN, infinite or too large."""
    try:
        value = float(value)
    except OverflowError:
        return None
    return value if math.isfinite(value) else None


def _validate_value(
    path: str,
    new_value: float,
    old_value,
    warning_pct: float,
    error_pct: float,
) -> tuple[list[str], list[str]]:
    errors: list[str] = []
    warnings: list[str] = []

    new_number = _as_finite(new_value)
    if new_number is None:
        errors.append(f"{path}: value is {new_value} (is not a finite number)")
        return errors, warnings

    if new_number <= 0:
        errors.append(f"{path}: value is {new_value} (must be positive)")

    old_number = _as_finite(old_value) if old_value is not None else None
    if old_number is not None and old_number > 0:
        change_pct = abs(new_number - old_number) * 100 / old_number
        if change_pct > error_pct:
            errors.append(
                f"{path}: changed by {change_pct:.1f}% ({old_value} → {new_value}) "
                f"- exceeds {_format_pct(error_pct)}% threshold"
            )
        elif change_pct > warning_pct:
            warnings.append(
                f"{path}: changed by {change_pct:.1f}% ({old_value} → {new_value})"
            )

    return errors, warnings


def validate_rates(
    new_rates: Mapping[str, Any],
    old_rates: Mapping[str, Any],
    tax_year: str,
    warning_pct: float = WARNING_THRESHOLD_PCT,
    error_pct: float = ERROR_THRESHOLD_PCT,
) -> ValidationResult:
    """
    Validate merged rates against the previous rates.

    Checks, accumulating every finding:
    - tax year format and consecutive years
    - no previously present rate has disappeared (error)
    - newly appeared rates (warning)
    - every rate is positive
    - drift from the previous value: > warning_pct warns, > error_pct fails

    Args:
        new_rates: Merged rates about to be written
        old_rates: Rates currently in the store
        tax_year: Tax year of the rate file, e.g. "2025-26"
        warning_pct: Drift percentage above which a warning is raised
        error_pct: Drift percentage above which validation fails

    Returns:
        ValidationResult; valid when there are no errors
    """
    result = ValidationResult()
    result.errors.extend(validate_tax_year(tax_year))

    old_flat = flatten_rates(old_rates)
    new_flat = flatten_rates(new_rates)

    for path in old_flat:
        if path not in new_flat:
            result.errors.append(f"Missing key: {path} (was in old rates but not in new)")

    for path in new_flat:
        if path not in old_flat:
            result.warnings.append(f"New key: {path} (not in old rates)")

    for path, new_value in new_flat.items():
        errors, warnings = _validate_value(
            path, new_value, old_flat.get(path), warning_pct, error_pct
        )
        result.errors.extend(errors)
        result.warnings.extend(warnings)

    return result
