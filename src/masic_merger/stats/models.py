"""
Records read from MASIC result files.

Numeric values are kept as the original text so that the merged output
reproduces them exactly.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional


@dataclass(frozen=True)
class ScanStatsRecord:
    """One row of a _ScanStats.txt file, optionally enriched with reporter ion data."""

    scan_number: int
    elution_time: str = ""
    scan_type: str = ""
    total_ion_intensity: str = ""
    base_peak_intensity: str = ""
    base_peak_mz: str = ""
    collision_mode: str = ""
    reporter_ion_data: str = ""


@dataclass(frozen=True)
class SICStatsRecord:
    """One row of a _SICstats.txt file, keyed by fragmentation scan number."""

    frag_scan_number: int
    optimal_scan_number: str = ""
    peak_max_intensity: str = ""
    peak_signal_to_noise_ratio: str = ""
    fwhm_in_scans: str = ""
    peak_area: str = ""
    parent_ion_intensity: str = ""
    parent_ion_mz: str = ""
    stat_moments_area: str = ""
    peak_scan_start: str = ""
    peak_scan_end: str = ""


ScanStatsIndex = Dict[int, ScanStatsRecord]
SICStatsIndex = Dict[int, SICStatsRecord]


@dataclass
class DatasetInfo:
    """Dataset name and numeric ID (0 when unknown)."""

    dataset_name: str
    dataset_id: int = 0


@dataclass
class MASICFileInfo:
    """Paths to the MASIC files found for a dataset."""

    scan_stats_file: Optional[Path] = None
    sic_stats_file: Optional[Path] = None
    reporter_ions_file: Optional[Path] = None
