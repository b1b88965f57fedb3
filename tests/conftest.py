"""
Pytest configuration and fixtures for MASIC Results Merger tests.

Fixtures write small MASIC and peptide hit files into tmp_path.  The standard
dataset is QC_Shew_20_01 with six scans (elution times 10.0 to 12.5 minutes,
0.5 minutes apart) and SIC entries for fragmentation scans 3, 4 and 6.
"""

import pytest
from pathlib import Path
from typing import List, Sequence


DATASET_NAME = "QC_Shew_20_01"

SCAN_STATS_HEADER = [
    "Dataset", "ScanNumber", "ScanTime", "ScanType", "TotalIonIntensity",
    "BasePeakIntensity", "BasePeakMZ", "BasePeakSignalToNoiseRatio",
    "IonCount", "IonCountRaw", "ScanTypeName",
]

SIC_STATS_HEADER = [
    "Dataset", "ParentIonIndex", "MZ", "SurveyScanNumber", "FragScanNumber",
    "OptimalPeakApexScanNumber", "PeakApexOverrideParentIonIndex", "CustomSICPeak",
    "PeakScanStart", "PeakScanEnd", "PeakScanMaxIntensity", "PeakMaxIntensity",
    "PeakSignalToNoiseRatio", "FWHMInScans", "PeakArea", "ParentIonIntensity",
    "PeakBaselineNoiseLevel", "PeakBaselineNoiseStDev", "PeakBaselinePointsUsed",
    "StatMomentsArea", "CenterOfMassScan", "PeakStDev", "PeakSkew", "PeakKSStat",
    "StatMomentsDataCountUsed",
]

REPORTER_IONS_HEADER = [
    "Dataset", "ScanNumber", "Collision Mode", "ParentIonMZ", "BasePeakIntensity",
    "BasePeakMZ", "ReporterIonIntensityMax", "Ion_126.128", "Ion_127.125",
]

PSM_HEADER = ["ResultID", "Scan", "FragMethod", "Charge", "Peptide", "Protein", "MSGFDB_SpecEValue"]

# (scan, elution time, scan type)
SCANS = [
    (1, "10.0000", "1"),
    (2, "10.5000", "2"),
    (3, "11.0000", "2"),
    (4, "11.5000", "2"),
    (5, "12.0000", "1"),
    (6, "12.5000", "2"),
]

# (frag scan, optimal scan, peak scan start, peak scan end)
SIC_ENTRIES = [
    (3, "3", "2", "4"),
    (4, "4", "3", "6"),
    (6, "6", "5", "99"),
]

# (scan, collision mode)
REPORTER_IONS = [
    (2, "hcd"),
    (3, "hcd"),
    (4, "cid"),
    (6, "hcd"),
]

PSM_ROWS = [
    ["1", "3", "HCD", "2", "K.PEPTIDEK.R", "ProtA", "1.5E-12"],
    ["2", "3", "HCD", "2", "K.PEPTIDEK.R", "ProtB", "1.5E-12"],
    ["3", "4", "CID", "3", "R.ANOTHERPEP.K", "ProtC", "2.0E-09"],
    ["4", "99", "HCD", "2", "K.MISSINGSCAN.R", "ProtD", "3.0E-05"],
    ["5", "6", "HCD", "2", "K.LASTPEP.-", "ProtE", "4.0E-07"],
]


def write_table(path: Path, header: Sequence[str], rows: Sequence[Sequence[str]]) -> Path:
    """Write a tab-delimited file; header may be empty for a headerless file."""
    with open(path, "w", encoding="utf-8") as f:
        if header:
            f.write("\t".join(header) + "\n")
        for row in rows:
            f.write("\t".join(str(v) for v in row) + "\n")
    return path


def scan_stats_row(scan: int, elution_time: str, scan_type: str) -> List[str]:
    return [
        "1234", str(scan), elution_time, scan_type, f"{scan}.0E+07",
        f"{scan}.0E+05", f"{400 + scan}.25", "12.5", "200", "210", "HMSn",
    ]


def sic_stats_row(frag_scan: int, optimal: str, start: str, end: str) -> List[str]:
    row = [""] * len(SIC_STATS_HEADER)
    row[0] = "1234"
    row[1] = str(frag_scan - 1)
    row[2] = f"{500 + frag_scan}.75"
    row[3] = str(frag_scan - 1)
    row[4] = str(frag_scan)
    row[5] = optimal
    row[6] = "0"
    row[7] = "0"
    row[8] = start
    row[9] = end
    row[10] = optimal
    row[11] = f"{frag_scan}.5E+06"
    row[12] = "25.1"
    row[13] = "6"
    row[14] = f"{frag_scan}.2E+07"
    row[15] = f"{frag_scan}.1E+06"
    row[16] = "1000"
    row[17] = "50"
    row[18] = "20"
    row[19] = f"{frag_scan}.0E+07"
    row[20] = optimal
    row[21] = "1.2"
    row[22] = "0.1"
    row[23] = "0.05"
    row[24] = "12"
    return row


def reporter_ions_row(scan: int, collision_mode: str) -> List[str]:
    return [
        "1234", str(scan), collision_mode, "600.5", "1.0E+05", "126.128",
        f"{scan}000", f"{scan}000", f"{scan}500",
    ]


@pytest.fixture
def dataset_name():
    """Return the name of the standard dataset."""
    return DATASET_NAME


@pytest.fixture
def masic_dir(tmp_path):
    """Directory with _ScanStats.txt and _SICstats.txt files for the standard dataset."""
    directory = tmp_path / "masic"
    directory.mkdir()
    write_table(
        directory / f"{DATASET_NAME}_ScanStats.txt",
        SCAN_STATS_HEADER,
        [scan_stats_row(*scan) for scan in SCANS],
    )
    write_table(
        directory / f"{DATASET_NAME}_SICstats.txt",
        SIC_STATS_HEADER,
        [sic_stats_row(*entry) for entry in SIC_ENTRIES],
    )
    return directory


@pytest.fixture
def masic_dir_with_reporter_ions(masic_dir):
    """The standard MASIC directory plus a _ReporterIons.txt file."""
    write_table(
        masic_dir / f"{DATASET_NAME}_ReporterIons.txt",
        REPORTER_IONS_HEADER,
        [reporter_ions_row(*entry) for entry in REPORTER_IONS],
    )
    return masic_dir


@pytest.fixture
def scan_stats_file(masic_dir):
    return masic_dir / f"{DATASET_NAME}_ScanStats.txt"


@pytest.fixture
def sic_stats_file(masic_dir):
    return masic_dir / f"{DATASET_NAME}_SICstats.txt"


@pytest.fixture
def reporter_ions_file(masic_dir_with_reporter_ions):
    return masic_dir_with_reporter_ions / f"{DATASET_NAME}_ReporterIons.txt"


@pytest.fixture
def psm_file(masic_dir):
    """MS-GF+ style synopsis file for the standard dataset, beside the MASIC files."""
    return write_table(masic_dir / f"{DATASET_NAME}_msgfplus_syn.txt", PSM_HEADER, PSM_ROWS)


@pytest.fixture
def output_dir(tmp_path):
    """Empty output directory."""
    directory = tmp_path / "output"
    directory.mkdir()
    return directory


def read_lines(path: Path) -> List[List[str]]:
    """Read a tab-delimited file into lists of fields."""
    with open(path, "r", encoding="utf-8") as f:
        return [line.rstrip("\n").split("\t") for line in f if line.strip()]


@pytest.fixture
def read_table():
    """Return a function that reads a tab-delimited file into lists of fields."""
    return read_lines


@pytest.fixture
def write_file():
    """Return a function that writes a tab-delimited file (header, rows)."""
    return write_table


@pytest.fixture
def psm_header():
    return list(PSM_HEADER)


@pytest.fixture
def psm_rows():
    return [list(row) for row in PSM_ROWS]
