"""MASIC result file models, readers, and lookup."""

from masic_merger.stats.models import (
    DatasetInfo,
    MASICFileInfo,
    ScanStatsRecord,
    SICStatsRecord,
)
from masic_merger.stats.reader import read_reporter_ions, read_scan_stats, read_sic_stats
from masic_merger.stats.resolver import find_masic_files

__all__ = [
    "DatasetInfo",
    "MASICFileInfo",
    "ScanStatsRecord",
    "SICStatsRecord",
    "find_masic_files",
    "read_reporter_ions",
    "read_scan_stats",
    "read_sic_stats",
]
