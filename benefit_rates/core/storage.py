"""
Rate store persistence.

The rate store is a single JSON file read once at the start of a run
and, when an update is warranted, replaced in one atomic step.
"""

import json
import os
from pathlib import Path
from typing import Union

import structlog

from .exceptions import RatesFileError
from .models import BenefitRatesFile

logger = structlog.get_logger(__name__)


def load_rates_file(path: Union[str, Path]) -> BenefitRatesFile:
    """
    Load the rate store.

    Args:
        path: Path to benefit-rates.json

    Returns:
        BenefitRatesFile

    Raises:
        RatesFileError: If the file is missing, not JSON or badly shaped
    """
    filepath = Path(path)

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise RatesFileError(str(filepath), "file not found") from e
    except (OSError, ValueError) as e:
        raise RatesFileError(str(filepath), str(e)) from e

    if not isinstance(data, dict):
        raise RatesFileError(str(filepath), "top level must be an object")

    try:
        rates_file = BenefitRatesFile.from_dict(data)
    except KeyError as e:
        raise RatesFileError(str(filepath), f"missing field {e}") from e
    except TypeError as e:
        raise RatesFileError(str(filepath), str(e)) from e

    logger.info(
        "rates_file_loaded",
        path=str(filepath),
        tax_year=rates_file.tax_year,
        last_updated=rates_file.last_updated,
    )
    return rates_file


def write_rates_file(path: Union[str, Path], rates_file: BenefitRatesFile) -> str:
    """
    Write the rate store atomically.

    The JSON is written with two-space indentation and a trailing newline
    to a temporary file next to the target, then moved into place.

    Args:
        path: Path to benefit-rates.json
        rates_file: Contents to write

    Returns:
        Path to the written file
    """
    filepath = Path(path)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    tmp = filepath.with_suffix(filepath.suffix + ".tmp")

    content = json.dumps(rates_file.to_dict(), ensure_ascii=False, indent=2) + "\n"

    try:
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, filepath)
    except OSError:
        if tmp.exists():
            tmp.unlink()
        raise

    logger.info("rates_file_written", path=str(filepath), last_updated=rates_file.last_updated)
    return str(filepath)
