"""
Readers that build scan-indexed lookup tables from MASIC result files.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional, Tuple, TypeVar

import pandas as pd

from masic_merger.config import (
    MAX_INDIVIDUAL_WARNINGS,
    REPORTER_ION_COLUMNS,
    REPORTER_ION_FALLBACK_HEADERS,
    SCAN_STATS_COLUMNS,
    SIC_STATS_COLUMNS,
)
from masic_merger.stats.models import (
    SICStatsIndex,
    SICStatsRecord,
    ScanStatsIndex,
    ScanStatsRecord,
)
from masic_merger.utils.files import open_text, read_tab_delimited
from masic_merger.utils.text import split_line, try_parse_int

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


def _complete_rows(df: pd.DataFrame, last_column: int) -> pd.DataFrame:
    """Keep rows that have a value (possibly empty) for every column up to last_column."""
    if df.empty or df.shape[1] <= last_column:
        return df.iloc[0:0]
    return df[df[last_column].notna()]


def _store_unique(
    index: Dict[int, RecordT],
    scan_number: int,
    record: RecordT,
    duplicates: List[int],
) -> None:
    """Add a record unless its scan is already present; duplicates keep the first record."""
    if scan_number in index:
        duplicates.append(scan_number)
        return
    index[scan_number] = record


def _report_duplicates(file_name: str, duplicates: List[int]) -> None:
    for scan_number in duplicates[:MAX_INDIVIDUAL_WARNINGS]:
        logger.warning(
            f"Scan {scan_number} appears more than once in {file_name}; keeping the first entry"
        )
    if len(duplicates) > MAX_INDIVIDUAL_WARNINGS:
        logger.warning(f"{file_name} has {len(duplicates)} duplicate scan numbers in total")


def read_scan_stats(path: Optional[Path]) -> ScanStatsIndex:
    """
    Read a MASIC _ScanStats.txt file.

    Args:
        path: Path to the file; None or a missing file yields an empty index

    Returns:
        Mapping from scan number to ScanStatsRecord
    """
    index: ScanStatsIndex = {}
    if path is None or not Path(path).is_file():
        return index

    path = Path(path)
    logger.info(f"  Reading: {path.name}")

    cols = SCAN_STATS_COLUMNS
    df = _complete_rows(read_tab_delimited(path), cols["base_peak_mz"])
    if df.empty:
        return index

    duplicates: List[int] = []
    for row in df.itertuples(index=False, name=None):
        scan_number = try_parse_int(row[cols["scan_number"]])
        if scan_number is None:
            continue
        record = ScanStatsRecord(
            scan_number=scan_number,
            elution_time=row[cols["scan_time"]],
            scan_type=row[cols["scan_type"]],
            total_ion_intensity=row[cols["total_ion_intensity"]],
            base_peak_intensity=row[cols["base_peak_intensity"]],
            base_peak_mz=row[cols["base_peak_mz"]],
        )
        _store_unique(index, scan_number, record, duplicates)

    _report_duplicates(path.name, duplicates)
    logger.debug(f"Loaded {len(index)} scans from {path.name}")
    return index


def read_sic_stats(path: Optional[Path]) -> SICStatsIndex:
    """
    Read a MASIC _SICstats.txt file.

    Args:
        path: Path to the file; None or a missing file yields an empty index

    Returns:
        Mapping from fragmentation scan number to SICStatsRecord
    """
    index: SICStatsIndex = {}
    if path is None or not Path(path).is_file():
        return index

    path = Path(path)
    logger.info(f"  Reading: {path.name}")

    cols = SIC_STATS_COLUMNS
    df = _complete_rows(read_tab_delimited(path), cols["stat_moments_area"])
    if df.empty:
        return index

    duplicates: List[int] = []
    for row in df.itertuples(index=False, name=None):
        frag_scan = try_parse_int(row[cols["frag_scan_number"]])
        if frag_scan is None:
            continue
        record = SICStatsRecord(
            frag_scan_number=frag_scan,
            optimal_scan_number=row[cols["optimal_peak_apex_scan_number"]],
            peak_max_intensity=row[cols["peak_max_intensity"]],
            peak_signal_to_noise_ratio=row[cols["peak_signal_to_noise_ratio"]],
            fwhm_in_scans=row[cols["fwhm_in_scans"]],
            peak_area=row[cols["peak_area"]],
            parent_ion_intensity=row[cols["parent_ion_intensity"]],
            parent_ion_mz=row[cols["mz"]],
            stat_moments_area=row[cols["stat_moments_area"]],
            peak_scan_start=row[cols["peak_scan_start"]],
            peak_scan_end=row[cols["peak_scan_end"]],
        )
        _store_unique(index, frag_scan, record, duplicates)

    _report_duplicates(path.name, duplicates)
    logger.debug(f"Loaded {len(index)} parent ions from {path.name}")
    return index


def read_reporter_ions(
    path: Optional[Path], scan_index: ScanStatsIndex
) -> Tuple[ScanStatsIndex, str]:
    """
    Apply a MASIC _ReporterIons.txt file to a scan stats index.

    The collision mode column and every column from the maximum reporter ion
    intensity onward are carried through as opaque text.

    Args:
        path: Path to the reporter ions file; None or a missing file leaves the
              index unchanged
        scan_index: Index produced by read_scan_stats; not modified

    Returns:
        Tuple of (new index with collision mode and reporter ion data set,
        tab-delimited reporter ion header text or "" when no file was read)
    """
    if path is None or not Path(path).is_file():
        return scan_index, ""

    path = Path(path)
    logger.info(f"  Reading: {path.name}")

    cols = REPORTER_ION_COLUMNS
    data_start = cols["reporter_ion_intensity_max"]
    min_fields = data_start + 1

    enriched = dict(scan_index)
    reporter_headers = ""
    header_read = False
    unknown_scans = 0

    with open_text(path) as f:
        for line in f:
            if not line.strip():
                continue
            fields = split_line(line)

            if not header_read:
                header_read = True
                if len(fields) >= min_fields:
                    reporter_headers = "\t".join(
                        [fields[cols["collision_mode"]]] + fields[data_start:]
                    )
                else:
                    reporter_headers = "\t".join(REPORTER_ION_FALLBACK_HEADERS)

            if len(fields) < min_fields:
                continue

            scan_number = try_parse_int(fields[cols["scan_number"]])
            if scan_number is None:
                continue

            record = enriched.get(scan_number)
            if record is None:
                if unknown_scans < MAX_INDIVIDUAL_WARNINGS:
                    logger.warning(
                        f"{path.name} refers to scan {scan_number}, "
                        f"but that scan was not in the scan stats file"
                    )
                elif unknown_scans == MAX_INDIVIDUAL_WARNINGS:
                    logger.warning(
                        f"{path.name} has {MAX_INDIVIDUAL_WARNINGS} or more scan numbers "
                        f"that are not defined in the scan stats file"
                    )
                unknown_scans += 1
                continue

            if record.scan_number != scan_number:
                logger.warning(
                    f"Scan number mismatch while reading {path.name}: "
                    f"{record.scan_number} vs. {scan_number}"
                )
                continue

            enriched[scan_number] = replace(
                record,
                collision_mode=fields[cols["collision_mode"]],
                reporter_ion_data="\t".join(fields[data_start:]),
            )

    return enriched, reporter_headers
