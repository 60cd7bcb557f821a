"""
Normalization utilities for GOV.UK rate pages.

Handles:
- Sterling amounts (£73.90, £1,031.88, £16,000)
- Integer durations (39 weeks, 18 months)
- HTML to plain text conversion
"""

import re
from typing import Optional, Union

from bs4 import BeautifulSoup

Number = Union[int, float]

# "£" followed by digits, optional thousands separators, up to two decimals
AMOUNT_PATTERN = re.compile(r"£([\d,]+(?:\.\d{1,2})?)")


def parse_amount(raw: str) -> Optional[Number]:
    """
    Parse a captured amount string into a number.

    Thousands separators are stripped. Whole amounts come back as ``int``
    so that ``£16,000`` is stored as ``16000`` rather than ``16000.0``.

    Args:
        raw: Digits as captured from the page (e.g. "1,031.88")

    Returns:
        int or float, or None if the string holds no digits
    """
    if not raw:
        return None

    cleaned = raw.replace(",", "").strip()
    if not cleaned or not any(ch.isdigit() for ch in cleaned):
        return None

    try:
        value = float(cleaned)
    except ValueError:
        return None

    if value.is_integer():
        return int(value)
    return value


def extract_first_amount(text: str) -> Optional[Number]:
    """
    Return the first £ amount in text.

    Args:
        text: Text to search, e.g. "Lower rate - £73.90"

    Returns:
        Amount or None if no £ amount is present
    """
    if not text:
        return None

    match = AMOUNT_PATTERN.search(text)
    if not match:
        return None
    return parse_amount(match.group(1))


def extract_all_amounts(text: str) -> list[Number]:
    """
    Return every £ amount in text, in document order.

    Args:
        text: Text to search

    Returns:
        List of amounts (empty if none found)
    """
    if not text:
        return []

    amounts = []
    for match in AMOUNT_PATTERN.finditer(text):
        value = parse_amount(match.group(1))
        if value is not None:
            amounts.append(value)
    return amounts


def search_amount(text: str, *patterns: str, flags: int = re.IGNORECASE) -> Optional[Number]:
    """
    Try regex patterns in order and parse the first group of the first match.

    Args:
        text: Text to search
        *patterns: Regex patterns whose first group captures the digits
        flags: Regex flags

    Returns:
        Parsed amount or None
    """
    if not text:
        return None

    for pattern in patterns:
        match = re.search(pattern, text, flags)
        if match:
            value = parse_amount(match.group(1))
            if value is not None:
                return value
    return None


def extract_integer(text: str, pattern: str, flags: int = re.IGNORECASE) -> Optional[int]:
    """
    Extract an integer captured by the first group of pattern.

    Used for durations such as "39 weeks" or "18 months".
    """
    if not text:
        return None

    match = re.search(pattern, text, flags)
    if not match:
        return None
    try:
        return int(match.group(1))
    except (TypeError, ValueError):
        return None


def html_to_text(html: str) -> str:
    """
    Convert an HTML fragment to plain text.

    Line structure of the source is kept so that prose patterns do not
    run across paragraphs; runs of spaces and non-breaking spaces are
    collapsed.

    Args:
        html: HTML fragment

    Returns:
        Visible text
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "lxml")
    text = soup.get_text()
    text = text.replace("\u00a0", " ")  # Non-breaking space
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    return text.strip()
