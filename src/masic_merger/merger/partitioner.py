"""
CollisionModePartitioner - decide which output file each collision mode is written to.
"""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, List, Optional

from masic_merger.config import (
    COLLISION_MODE_NA,
    FRAG_METHOD_COLUMN,
    RESULTS_SUFFIX,
)
from masic_merger.psm.columns import find_column, find_scan_number_column
from masic_merger.stats.models import ScanStatsIndex, ScanStatsRecord
from masic_merger.utils.files import open_text
from masic_merger.utils.text import split_line, try_parse_int

logger = logging.getLogger(__name__)


@dataclass
class CollisionModeBucket:
    """One output file of a merge, holding the rows of one collision mode."""

    label: str
    path: Path
    lines_written: int = 0


@dataclass
class CollisionModePartition:
    """Output buckets plus the lookup used to route rows to them."""

    buckets: List[CollisionModeBucket]
    scan_index: ScanStatsIndex
    scan_number_column: int
    # Lower-cased collision mode -> bucket index
    mode_map: Dict[str, int] = field(default_factory=dict)

    def bucket_index(self, collision_mode: Optional[str]) -> int:
        """Bucket for a collision mode; unknown or undefined modes go to bucket 0."""
        if collision_mode is None:
            return 0
        return self.mode_map.get(collision_mode.lower(), 0)


def normalize_label(collision_mode: str) -> str:
    """Blank collision modes are written as "na"."""
    return collision_mode.strip() if collision_mode and collision_mode.strip() else COLLISION_MODE_NA


class CollisionModePartitioner:
    """
    Determines the collision modes present in a dataset.

    Phase 1 uses the collision modes already present in the scan stats index
    (set from a _ReporterIons.txt file).  When that yields nothing useful,
    phase 2 reads the FragMethod column of the peptide hit file and returns a
    new scan stats index with those collision modes applied.
    """

    def summarize_collision_modes(
        self,
        input_file: Path,
        base_name: str,
        output_dir: Path,
        scan_index: ScanStatsIndex,
        scan_number_column: int,
    ) -> CollisionModePartition:
        """
        Build the output buckets for a peptide hit file.

        Args:
            input_file: Peptide hit results file
            base_name: Base name for the output files
            output_dir: Directory for the output files
            scan_index: Scan stats index (not modified)
            scan_number_column: 1-based scan number column of the input file

        Returns:
            CollisionModePartition with at least one bucket
        """
        modes = self._modes_from_scan_stats(scan_index)

        if not modes or (len(modes) == 1 and not modes[0].strip()):
            modes, scan_index, scan_number_column = self._modes_from_frag_method(
                Path(input_file), scan_index, scan_number_column
            )

        partition = CollisionModePartition(
            buckets=[],
            scan_index=scan_index,
            scan_number_column=scan_number_column,
        )

        if not modes:
            modes = [""]

        bucket_by_label: Dict[str, int] = {}
        for mode in modes:
            label = normalize_label(mode)
            bucket = bucket_by_label.get(label.lower())
            if bucket is None:
                bucket = len(partition.buckets)
                bucket_by_label[label.lower()] = bucket
                partition.buckets.append(
                    CollisionModeBucket(
                        label=label,
                        path=Path(output_dir) / f"{base_name}_{label}{RESULTS_SUFFIX}",
                    )
                )
            partition.mode_map.setdefault(mode.lower(), bucket)

        logger.info(
            f"Collision modes for {Path(input_file).name}: "
            f"{', '.join(b.label for b in partition.buckets)}"
        )
        return partition

    @staticmethod
    def _modes_from_scan_stats(scan_index: ScanStatsIndex) -> List[str]:
        """Distinct collision modes (case-insensitive, first-seen order), including blank."""
        seen = set()
        modes: List[str] = []
        for record in scan_index.values():
            key = record.collision_mode.lower()
            if key not in seen:
                seen.add(key)
                modes.append(record.collision_mode)
        return modes

    def _modes_from_frag_method(
        self,
        input_file: Path,
        scan_index: ScanStatsIndex,
        scan_number_column: int,
    ):
        """
        Read collision modes from the FragMethod column of the peptide hit file.

        Returns:
            Tuple of (modes, new scan stats index, scan number column)
        """
        modes: List[str] = []
        seen = set()
        enriched = dict(scan_index)
        frag_method_index = None
        header_read = False

        with open_text(input_file) as f:
            for line in f:
                if not line.strip():
                    continue
                fields = split_line(line)

                if not header_read:
                    header_read = True
                    frag_method_index = find_column(fields, [FRAG_METHOD_COLUMN])
                    if frag_method_index is None:
                        logger.warning(
                            "Unable to determine the collision mode for results being merged. "
                            "This is typically obtained from a MASIC _ReporterIons.txt file "
                            f"or from the {FRAG_METHOD_COLUMN} column in the MS-GF+ results file"
                        )
                        return [], scan_index, scan_number_column

                    scan_index_in_header = find_scan_number_column(fields)
                    if scan_index_in_header is not None:
                        scan_number_column = scan_index_in_header + 1
                    continue

                if len(fields) < scan_number_column or len(fields) <= frag_method_index:
                    continue
                scan_number = try_parse_int(fields[scan_number_column - 1])
                if scan_number is None:
                    continue

                collision_mode = fields[frag_method_index]
                if collision_mode.lower() not in seen:
                    seen.add(collision_mode.lower())
                    modes.append(collision_mode)

                record = enriched.get(scan_number)
                if record is None:
                    enriched[scan_number] = ScanStatsRecord(
                        scan_number=scan_number, collision_mode=collision_mode
                    )
                else:
                    enriched[scan_number] = replace(record, collision_mode=collision_mode)

        return modes, enriched, scan_number_column
