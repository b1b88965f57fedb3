"""
StreamMerger - append MASIC statistics to each row of a peptide hit results file.
"""

import logging
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from masic_merger.config import (
    COLLISION_MODE_NOT_DEFINED,
    DEFAULT_SCAN_NUMBER_COLUMN,
    EMPTY_FILE_DELETE_DELAY,
    GENERIC_COLUMN_PREFIX,
    RESULTS_SUFFIX,
    SCAN_STATS_HEADERS,
    SIC_STATS_HEADERS,
)
from masic_merger.merger.partitioner import (
    CollisionModeBucket,
    CollisionModePartition,
    CollisionModePartitioner,
)
from masic_merger.psm.columns import find_scan_number_column
from masic_merger.stats.models import (
    SICStatsIndex,
    SICStatsRecord,
    ScanStatsIndex,
    ScanStatsRecord,
)
from masic_merger.utils.files import open_text, remove_empty_file
from masic_merger.utils.text import split_line, try_parse_float, try_parse_int

logger = logging.getLogger(__name__)


@dataclass
class ProcessedDatasetRecord:
    """Output files written for one dataset, keyed by collision mode."""

    base_name: str
    output_files: Dict[str, Path] = field(default_factory=dict)

    def add_output_file(self, collision_mode: str, output_path: Path) -> None:
        key = collision_mode if collision_mode else COLLISION_MODE_NOT_DEFINED
        self.output_files[key] = Path(output_path)


def compute_peak_width(sic_record: SICStatsRecord, scan_index: ScanStatsIndex) -> float:
    """
    Peak width in minutes: elution time of the peak end scan minus that of the start scan.

    Returns 0 when either scan is not in the index or its elution time is not numeric.
    """
    start_scan = try_parse_int(sic_record.peak_scan_start)
    end_scan = try_parse_int(sic_record.peak_scan_end)
    if start_scan is None or end_scan is None:
        return 0.0

    start_record = scan_index.get(start_scan)
    end_record = scan_index.get(end_scan)
    if start_record is None or end_record is None:
        return 0.0

    start_time = try_parse_float(start_record.elution_time)
    end_time = try_parse_float(end_record.elution_time)
    if start_time is None or end_time is None:
        return 0.0

    return end_time - start_time


def scan_stats_columns(record: Optional[ScanStatsRecord]) -> List[str]:
    """Scan stats add-on fields for a row; empty fields when the scan is unknown."""
    if record is None:
        return [""] * len(SCAN_STATS_HEADERS)
    return [
        record.elution_time,
        record.scan_type,
        record.total_ion_intensity,
        record.base_peak_intensity,
        record.base_peak_mz,
    ]


def sic_stats_columns(
    record: Optional[SICStatsRecord], scan_index: ScanStatsIndex
) -> List[str]:
    """SIC stats add-on fields (including peak width) for a row; empty fields when unknown."""
    if record is None:
        return [""] * len(SIC_STATS_HEADERS)
    return [
        record.optimal_scan_number,
        record.peak_max_intensity,
        record.peak_signal_to_noise_ratio,
        record.fwhm_in_scans,
        record.peak_area,
        record.parent_ion_intensity,
        record.parent_ion_mz,
        record.stat_moments_area,
        record.peak_scan_start,
        record.peak_scan_end,
        f"{compute_peak_width(record, scan_index):.4f}",
    ]


def reporter_ion_columns(record: Optional[ScanStatsRecord], column_count: int) -> List[str]:
    """Collision mode plus reporter ion fields; empty fields when the mode is undefined."""
    if record is None or not record.collision_mode.strip():
        return [""] * column_count
    return [record.collision_mode, record.reporter_ion_data]


class StreamMerger:
    """
    Streams a tab-delimited peptide hit file once, appending the scan stats,
    SIC stats and reporter ion columns for each row's scan number.

    With collision mode separation enabled, rows are fanned out to one output
    file per collision mode.
    """

    def __init__(
        self,
        scan_number_column: int = DEFAULT_SCAN_NUMBER_COLUMN,
        separate_by_collision_mode: bool = False,
        delete_delay: float = EMPTY_FILE_DELETE_DELAY,
        partitioner: Optional[CollisionModePartitioner] = None,
    ):
        """
        Args:
            scan_number_column: 1-based column holding scan numbers; values below 1
                                fall back to the default
            separate_by_collision_mode: Write one output file per collision mode
            delete_delay: Seconds to wait before deleting an empty output file
            partitioner: Collision mode partitioner (default: CollisionModePartitioner())
        """
        if scan_number_column < 1:
            scan_number_column = DEFAULT_SCAN_NUMBER_COLUMN
        self.scan_number_column = scan_number_column
        self.separate_by_collision_mode = separate_by_collision_mode
        self.delete_delay = delete_delay
        self.partitioner = partitioner or CollisionModePartitioner()

    def merge(
        self,
        input_file: Path,
        output_dir: Path,
        scan_index: ScanStatsIndex,
        sic_index: SICStatsIndex,
        reporter_ion_headers: str = "",
    ) -> ProcessedDatasetRecord:
        """
        Merge MASIC data into a peptide hit file.

        Args:
            input_file: Tab-delimited peptide hit results file
            output_dir: Directory for the _PlusSICStats.txt file(s)
            scan_index: Scan stats index (with reporter ion data when available)
            sic_index: SIC stats index
            reporter_ion_headers: Tab-delimited reporter ion header text, "" if none

        Returns:
            ProcessedDatasetRecord listing the output files that were kept

        Raises:
            FileNotFoundError: If the input file does not exist
        """
        input_file = Path(input_file)
        if not input_file.is_file():
            raise FileNotFoundError(f"File not found: {input_file}")

        output_dir = Path(output_dir) if output_dir else input_file.parent
        output_dir.mkdir(parents=True, exist_ok=True)
        base_name = input_file.stem

        if self.separate_by_collision_mode:
            partition = self.partitioner.summarize_collision_modes(
                input_file, base_name, output_dir, scan_index, self.scan_number_column
            )
        else:
            partition = CollisionModePartition(
                buckets=[
                    CollisionModeBucket(label="", path=output_dir / f"{base_name}{RESULTS_SUFFIX}")
                ],
                scan_index=scan_index,
                scan_number_column=self.scan_number_column,
            )

        logger.info(f"Parsing {input_file.name} and writing {partition.buckets[0].path.name}")

        try:
            self._write_buckets(input_file, partition, sic_index, reporter_ion_headers or "")
        except Exception:
            # Partial output files are not left behind
            for bucket in partition.buckets:
                if bucket.path.exists():
                    bucket.path.unlink()
            logger.warning(f"Removed the partial output files of {input_file.name}")
            raise
        return self._cleanup_buckets(base_name, partition.buckets)

    def _write_buckets(
        self,
        input_file: Path,
        partition: CollisionModePartition,
        sic_index: SICStatsIndex,
        reporter_ion_headers: str,
    ) -> None:
        scan_index = partition.scan_index
        scan_column = partition.scan_number_column
        buckets = partition.buckets

        write_sic_stats = len(sic_index) > 0
        write_reporter_ions = len(reporter_ion_headers) > 0
        reporter_column_count = len(reporter_ion_headers.split("\t")) if write_reporter_ions else 0
        route_by_mode = self.separate_by_collision_mode and len(buckets) > 1

        with ExitStack() as stack:
            writers = [
                stack.enter_context(open(bucket.path, "w", encoding="utf-8"))
                for bucket in buckets
            ]
            reader = stack.enter_context(open_text(input_file))

            header_written = False
            for line in reader:
                if not line.strip():
                    continue
                data_line = line.rstrip("\r\n")
                fields = split_line(line)

                if not header_written:
                    header_written = True
                    if len(fields) >= scan_column and try_parse_int(fields[scan_column - 1]) is not None:
                        header_line = "\t".join(
                            f"{GENERIC_COLUMN_PREFIX}{i:02d}" for i in range(len(fields))
                        )
                    else:
                        header_line = data_line
                        scan_column = self._detect_scan_column(input_file, fields, scan_column)
                        fields = []

                    addon_headers = list(SCAN_STATS_HEADERS)
                    if write_sic_stats:
                        addon_headers += SIC_STATS_HEADERS
                    if write_reporter_ions:
                        addon_headers.append(reporter_ion_headers)

                    composed_header = header_line + "\t" + "\t".join(addon_headers) + "\n"
                    for writer in writers:
                        writer.write(composed_header)

                if len(fields) < scan_column:
                    continue
                scan_number = try_parse_int(fields[scan_column - 1])
                if scan_number is None:
                    continue

                scan_record = scan_index.get(scan_number)
                addon_columns = scan_stats_columns(scan_record)

                if write_sic_stats:
                    addon_columns += sic_stats_columns(sic_index.get(scan_number), scan_index)

                collision_mode = ""
                if write_reporter_ions:
                    addon_columns += reporter_ion_columns(scan_record, reporter_column_count)
                    if scan_record is not None and scan_record.collision_mode.strip():
                        collision_mode = scan_record.collision_mode
                elif scan_record is not None:
                    collision_mode = scan_record.collision_mode

                bucket_index = partition.bucket_index(collision_mode) if route_by_mode else 0
                writers[bucket_index].write(data_line + "\t" + "\t".join(addon_columns) + "\n")
                buckets[bucket_index].lines_written += 1

    def _detect_scan_column(self, input_file: Path, header_fields: List[str], scan_column: int) -> int:
        """Use a recognised scan number header (if any) in place of the configured column."""
        index = find_scan_number_column(header_fields)
        if index is None or index + 1 == scan_column:
            return scan_column
        logger.info(
            f"Note: Reading scan numbers from column {index + 1} "
            f"({header_fields[index]}) in file {input_file.name}"
        )
        return index + 1

    def _cleanup_buckets(
        self, base_name: str, buckets: List[CollisionModeBucket]
    ) -> ProcessedDatasetRecord:
        """Delete empty output files, always keeping at least the first one."""
        record = ProcessedDatasetRecord(base_name=base_name)

        if all(bucket.lines_written == 0 for bucket in buckets):
            keep = {0}
        else:
            keep = {i for i, bucket in enumerate(buckets) if bucket.lines_written > 0}

        for index, bucket in enumerate(buckets):
            if index in keep:
                record.add_output_file(bucket.label, bucket.path)
            else:
                remove_empty_file(bucket.path, delay=self.delete_delay)

        return record
