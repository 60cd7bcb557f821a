"""Tests for rate store persistence."""

import json

import pytest

from benefit_rates.core.exceptions import RatesFileError
from benefit_rates.core.models import BenefitRatesFile
from benefit_rates.core.storage import load_rates_file, write_rates_file


class TestLoadRatesFile:
    """Tests for load_rates_file function."""

    def test_load(self, rates_path, rates_data):
        """Test loading a valid file."""
        rates_file = load_rates_file(rates_path)

        assert rates_file.tax_year == "2025-26"
        assert rates_file.rates == rates_data["rates"]

    def test_missing_file(self, tmp_path):
        """Test a missing file raises RatesFileError."""
        with pytest.raises(RatesFileError, match="file not found"):
            load_rates_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        """Test malformed JSON raises RatesFileError."""
        path = tmp_path / "rates.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RatesFileError):
            load_rates_file(path)

    @pytest.mark.parametrize("content", [
        [],
        {"rates": {}},
        {"tax_year": "2025-26", "rates": "none"},
    ])
    def test_bad_shape(self, tmp_path, content):
        """Test structurally invalid files raise RatesFileError."""
        path = tmp_path / "rates.json"
        path.write_text(json.dumps(content), encoding="utf-8")
        with pytest.raises(RatesFileError):
            load_rates_file(path)


class TestWriteRatesFile:
    """Tests for write_rates_file function."""

    def test_round_trip(self, tmp_path, rates_data):
        """Test writing then loading yields the same mapping."""
        path = tmp_path / "out" / "benefit-rates.json"
        write_rates_file(path, BenefitRatesFile.from_dict(rates_data))

        assert load_rates_file(path).to_dict() == rates_data

    def test_formatting(self, tmp_path):
        """Test two-space indent, trailing newline and raw non-ASCII."""
        path = tmp_path / "benefit-rates.json"
        rates_file = BenefitRatesFile(
            tax_year="2025-26",
            last_updated="2025-04-07",
            source="DWP – rates",
            rates={"pip": {"mobility_standard_weekly": 29.2}},
        )
        write_rates_file(path, rates_file)
        content = path.read_text(encoding="utf-8")

        assert content.endswith("}\n")
        assert '\n  "tax_year": "2025-26",' in content
        assert '\n    "pip": {' in content
        assert "DWP – rates" in content

    def test_no_temp_file_left(self, tmp_path, rates_data):
        """Test the temporary file is moved into place."""
        path = tmp_path / "benefit-rates.json"
        write_rates_file(path, BenefitRatesFile.from_dict(rates_data))

        assert [p.name for p in tmp_path.iterdir()] == ["benefit-rates.json"]

    def test_replaces_existing(self, rates_path, rates_data):
        """Test an existing file is replaced."""
        rates_file = BenefitRatesFile.from_dict(rates_data)
        write_rates_file(rates_path, rates_file.updated(rates_file.rates))

        assert load_rates_file(rates_path).last_updated != "2025-04-07"
