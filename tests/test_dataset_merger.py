"""
Tests for DatasetMerger - combining per-dataset outputs with dataset IDs.
"""

import pytest

from masic_merger.config import COLLISION_MODE_NOT_DEFINED
from masic_merger.merger.datasets import DatasetMerger, assign_dataset_ids, common_base_name
from masic_merger.merger.stream import ProcessedDatasetRecord


def _record(directory, write_file, base_name, rows, mode=""):
    suffix = f"_{mode}" if mode else ""
    path = write_file(directory / f"{base_name}{suffix}_PlusSICStats.txt", ["Scan", "Peptide", "ElutionTime"], rows)
    record = ProcessedDatasetRecord(base_name=base_name)
    record.add_output_file(mode, path)
    return record


class TestCommonBaseName:
    """Tests for the shared name prefix."""

    def test_shared_prefix_trimmed_to_underscore(self):
        """Test that the prefix is cut back to the last underscore."""
        assert common_base_name(["QC_Shew_20_01_R1", "QC_Shew_20_01_R2"]) == "QC_Shew_20_01"

    def test_single_name(self):
        assert common_base_name(["Sample_A"]) == "Sample_A"

    def test_one_shared_character_keeps_first_name(self):
        """Test that a single shared character does not shorten the prefix."""
        assert common_base_name(["Alpha_1", "Beta_2"]) == "Alpha_1"

    def test_case_insensitive(self):
        assert common_base_name(["SAMPLE_Run1", "sample_Run2"]) == "SAMPLE"

    def test_underscore_too_early_not_trimmed(self):
        """Test that an underscore before position 4 is not used as a cut point."""
        assert common_base_name(["AB_xyz1", "AB_xyz2"]) == "AB_xyz"


class TestAssignDatasetIds:
    """Tests for numbering datasets."""

    def test_ids_in_first_seen_order(self):
        records = [
            ProcessedDatasetRecord("B"),
            ProcessedDatasetRecord("A"),
            ProcessedDatasetRecord("B"),
            ProcessedDatasetRecord("C"),
        ]

        assert assign_dataset_ids(records) == {"B": 1, "A": 2, "C": 3}


class TestDatasetMerger:
    """Tests for writing the combined files."""

    def test_merge_two_datasets(self, tmp_path, output_dir, write_file, read_table):
        """Test that rows are prefixed with dataset IDs and the header is written once."""
        records = [
            _record(tmp_path, write_file, "Sample_Run1", [["3", "K.PEP.R", "11.0"], ["4", "K.QEP.R", "11.5"]]),
            _record(tmp_path, write_file, "Sample_Run2", [["7", "K.REP.R", "12.0"]]),
        ]

        output_files = DatasetMerger(output_dir).merge(records)

        merged_path = output_dir / "MergedData_Sample_PlusSICStats.txt"
        map_path = output_dir / "MergedData_Sample_DatasetMap.txt"
        assert output_files == [merged_path, map_path]
        assert read_table(merged_path) == [
            ["DatasetID", "Scan", "Peptide", "ElutionTime"],
            ["1", "3", "K.PEP.R", "11.0"],
            ["1", "4", "K.QEP.R", "11.5"],
            ["2", "7", "K.REP.R", "12.0"],
        ]
        assert read_table(map_path) == [
            ["DatasetID", "DatasetName"],
            ["1", "Sample_Run1"],
            ["2", "Sample_Run2"],
        ]

    def test_dataset_ids_are_contiguous(self, tmp_path, output_dir, write_file, read_table):
        """Test that every dataset gets a distinct ID from 1 to N."""
        records = [
            _record(tmp_path, write_file, f"Sample_Run{i}", [[str(i), "K.PEP.R", "1.0"]])
            for i in range(1, 5)
        ]

        DatasetMerger(output_dir).merge(records)

        rows = read_table(output_dir / "MergedData_Sample_PlusSICStats.txt")
        assert [row[0] for row in rows[1:]] == ["1", "2", "3", "4"]

    def test_one_file_per_collision_mode(self, tmp_path, output_dir, write_file, read_table):
        """Test that each collision mode gets its own combined file."""
        records = []
        for name in ("Sample_Run1", "Sample_Run2"):
            record = _record(tmp_path, write_file, name, [["3", "K.PEP.R", "11.0"]], mode="hcd")
            cid = _record(tmp_path, write_file, name, [["4", "K.QEP.R", "11.5"]], mode="cid")
            record.output_files.update(cid.output_files)
            records.append(record)

        output_files = DatasetMerger(output_dir).merge(records)

        assert [p.name for p in output_files] == [
            "MergedData_Sample_cid_PlusSICStats.txt",
            "MergedData_Sample_hcd_PlusSICStats.txt",
            "MergedData_Sample_DatasetMap.txt",
        ]
        hcd_rows = read_table(output_dir / "MergedData_Sample_hcd_PlusSICStats.txt")
        assert [row[0] for row in hcd_rows[1:]] == ["1", "2"]

    def test_fewer_than_two_datasets(self, tmp_path, output_dir, write_file):
        """Test that nothing is written for a single dataset."""
        records = [_record(tmp_path, write_file, "Sample_Run1", [["3", "K.PEP.R", "11.0"]])]

        assert DatasetMerger(output_dir).merge(records) == []
        assert list(output_dir.iterdir()) == []

    def test_missing_source_skipped(self, tmp_path, output_dir, write_file, read_table, caplog):
        """Test that a source file that no longer exists is skipped with a warning."""
        records = [
            _record(tmp_path, write_file, "Sample_Run1", [["3", "K.PEP.R", "11.0"]]),
            ProcessedDatasetRecord("Sample_Run2", {COLLISION_MODE_NOT_DEFINED: tmp_path / "gone.txt"}),
        ]

        DatasetMerger(output_dir).merge(records)

        rows = read_table(output_dir / "MergedData_Sample_PlusSICStats.txt")
        assert [row[0] for row in rows[1:]] == ["1"]
        assert "skipping" in caplog.text
