"""
HTML table helpers and keyword classification for rate pages.

GOV.UK rate tables are usually two columns (label | amount), sometimes
with a row header cell. Rows are classified by case-insensitive
substring containment against per-benefit keyword rules.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from .normalizer import Number, extract_first_amount


@dataclass
class TableRow:
    """A single table row split into header (th) and data (td) cells."""

    header_cells: list[str] = field(default_factory=list)
    data_cells: list[str] = field(default_factory=list)
    all_cells: list[str] = field(default_factory=list)

    @property
    def header(self) -> str:
        """Lower-cased text of the row header cells."""
        return " ".join(self.header_cells).lower()

    @property
    def label(self) -> str:
        """Lower-cased text of the first data cell."""
        return self.data_cells[0].lower() if self.data_cells else ""

    @property
    def text(self) -> str:
        """Lower-cased text of all data cells joined together."""
        return " ".join(self.data_cells).lower()

    def amounts(self, include_headers: bool = False) -> list[Number]:
        """First £ amount of each cell that has one, in cell order."""
        cells = self.all_cells if include_headers else self.data_cells
        found = []
        for cell in cells:
            amount = extract_first_amount(cell)
            if amount is not None:
                found.append(amount)
        return found


def _cell_text(cell: Tag) -> str:
    return cell.get_text(" ", strip=True)


def iter_table_rows(html: str) -> Iterator[TableRow]:
    """
    Yield every body row of every table in the fragment.

    Rows without any td cell (column header rows) are skipped.

    Args:
        html: HTML fragment

    Yields:
        TableRow objects in document order
    """
    if not html:
        return

    soup = BeautifulSoup(html, "lxml")
    for table in soup.find_all("table"):
        for row in table.find_all("tr"):
            cells = row.find_all(["th", "td"])
            data_cells = [_cell_text(c) for c in cells if c.name == "td"]
            if not data_cells:
                continue
            yield TableRow(
                header_cells=[_cell_text(c) for c in cells if c.name == "th"],
                data_cells=data_cells,
                all_cells=[_cell_text(c) for c in cells],
            )


@dataclass(frozen=True)
class LabelRule:
    """
    Keyword rule mapping matching text to a rate key.

    The rule matches when every ``all_of`` keyword is contained in the
    text and, if ``any_of`` is given, at least one of those is too.
    """

    key: str
    all_of: tuple[str, ...] = ()
    any_of: tuple[str, ...] = ()
    keep_existing: bool = False  # Do not overwrite a value set by an earlier row
    prefer_first: bool = False  # Take the first amount in the row, not the last

    def matches(self, text: str) -> bool:
        text = text.lower()
        if not all(keyword in text for keyword in self.all_of):
            return False
        if self.any_of and not any(keyword in text for keyword in self.any_of):
            return False
        return bool(self.all_of or self.any_of)


def classify(text: str, rules: Sequence[LabelRule]) -> Optional[LabelRule]:
    """
    Return the first rule matching text.

    Rules are evaluated in order so that overlaps resolve predictably,
    e.g. "first child ... before" is tried before "first child ... after".
    """
    for rule in rules:
        if rule.matches(text):
            return rule
    return None
