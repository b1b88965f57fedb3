"""
Tests for the PSM column schema and peptide helpers.
"""

import pytest

from masic_merger.errors import RequiredColumnMissingError
from masic_merger.psm.columns import (
    DART_ID_FIELDS,
    find_column,
    find_scan_number_column,
    resolve_columns,
)
from masic_merger.psm.sequence import get_primary_sequence


class TestFindColumn:
    """Tests for header lookups."""

    def test_case_insensitive(self):
        """Test that header names are compared ignoring case."""
        assert find_column(["ResultID", "fragmethod"], ["FragMethod"]) == 1

    def test_first_name_wins(self):
        """Test that names are tried in order, not header order."""
        header = ["SpecEValue", "MSGFDB_SpecEValue"]

        assert find_column(header, ["MSGFDB_SpecEValue", "SpecEValue"]) == 1

    def test_not_found(self):
        """Test that a missing name returns None."""
        assert find_column(["A", "B"], ["C"]) is None

    @pytest.mark.parametrize(
        "header,expected",
        [
            (["ResultID", "Scan", "Charge"], 1),
            (["ScanNum", "Scan"], 0),
            (["ResultID", "scan number"], 1),
            (["ResultID", "Charge"], None),
        ],
    )
    def test_scan_number_column(self, header, expected):
        """Test that the leftmost recognised scan header is used."""
        assert find_scan_number_column(header) == expected


class TestResolveColumns:
    """Tests for resolving the DART-ID column schema."""

    HEADER = [
        "ResultID", "Scan", "Charge", "Peptide", "Protein", "MSGFDB_SpecEValue",
        "ElutionTime", "PeakWidthMinutes",
    ]

    def test_resolve_all(self):
        """Test that every field is mapped to its position."""
        columns = resolve_columns(self.HEADER, DART_ID_FIELDS)

        assert columns == {
            "scan": 1,
            "charge": 2,
            "peptide": 3,
            "protein": 4,
            "spec_e_value": 5,
            "elution_time": 6,
            "peak_width": 7,
        }

    def test_aliases(self):
        """Test that ScanNum and SpecEValue are accepted."""
        header = ["ScanNum", "Charge", "Peptide", "Protein", "SpecEValue",
                  "ElutionTime", "PeakWidthMinutes"]

        columns = resolve_columns(header)

        assert columns["scan"] == 0
        assert columns["spec_e_value"] == 4

    def test_scan_is_optional(self):
        """Test that a header without a scan column still resolves."""
        header = [h for h in self.HEADER if h != "Scan"]

        columns = resolve_columns(header)

        assert "scan" not in columns

    def test_missing_required_columns(self):
        """Test that every missing required column is named in the error."""
        header = ["Scan", "Peptide", "Protein", "ElutionTime"]

        with pytest.raises(RequiredColumnMissingError) as exc_info:
            resolve_columns(header, source="results.txt")

        assert exc_info.value.missing == ["MSGFDB_SpecEValue", "Charge", "PeakWidthMinutes"]
        assert "results.txt" in str(exc_info.value)

    def test_missing_column_is_value_error(self):
        """Test that the error can be caught as a ValueError."""
        with pytest.raises(ValueError):
            resolve_columns([])


class TestPrimarySequence:
    """Tests for removing flanking residues."""

    @pytest.mark.parametrize(
        "peptide,expected",
        [
            ("K.PEPT*IDE.R", "PEPT*IDE"),
            ("-.MPEPTIDE.K", "MPEPTIDE"),
            ("R.PEPTIDE.-", "PEPTIDE"),
            ("PEPTIDE", "PEPTIDE"),
            ("", ""),
        ],
    )
    def test_get_primary_sequence(self, peptide, expected):
        """Test that prefix and suffix residues are stripped."""
        assert get_primary_sequence(peptide) == expected
