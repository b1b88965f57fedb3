"""
MageResultsMerger - merge MASIC data into a multi-job Mage Extractor results file.

Mage Extractor concatenates the peptide hits of several analysis jobs into one
file with a Job column.  A companion ``<name>_metadata.txt`` file maps each job
to its dataset name and dataset ID, which are used to find the MASIC files.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set


from masic_merger.config import (
    DEFAULT_SCAN_NUMBER_COLUMN,
    MAGE_DATASET_COLUMN,
    MAGE_DATASET_ID_COLUMN,
    MAGE_JOB_COLUMN,
    MAGE_METADATA_SUFFIX,
    MAX_INDIVIDUAL_WARNINGS,
    RESULTS_SUFFIX,
    SCAN_STATS_HEADERS,
    SIC_STATS_HEADERS,
)
from masic_merger.errors import (
    MalformedMetadataError,
    MergerError,
    MissingMetadataFileError,
    MissingStatisticsFilesError,
    RequiredColumnMissingError,
)
from masic_merger.merger.stream import (
    ProcessedDatasetRecord,
    reporter_ion_columns,
    scan_stats_columns,
    sic_stats_columns,
)
from masic_merger.psm.columns import find_column, find_scan_number_column
from masic_merger.stats.models import DatasetInfo, SICStatsIndex, ScanStatsIndex
from masic_merger.stats.reader import read_reporter_ions, read_scan_stats, read_sic_stats
from masic_merger.stats.resolver import find_masic_files
from masic_merger.utils.files import open_text, read_tab_delimited
from masic_merger.utils.text import split_line, try_parse_int

logger = logging.getLogger(__name__)


@dataclass
class MASICJobData:
    """Scan indices loaded for one Mage job."""

    job: int
    scan_index: ScanStatsIndex = field(default_factory=dict)
    sic_index: SICStatsIndex = field(default_factory=dict)
    reporter_ion_headers: str = ""


def metadata_file_for(input_file: Path) -> Path:
    """The Mage metadata file that accompanies a results file."""
    input_file = Path(input_file)
    return input_file.parent / f"{input_file.stem}{MAGE_METADATA_SUFFIX}"


def load_job_metadata(metadata_file: Path) -> Dict[int, DatasetInfo]:
    """
    Read the job to dataset mapping from a Mage metadata file.

    Args:
        metadata_file: Tab-delimited file with Job, Dataset and Dataset_ID columns

    Returns:
        Dictionary mapping job number to DatasetInfo

    Raises:
        MissingMetadataFileError: If the file does not exist
        MalformedMetadataError: If required columns are missing or no valid rows exist
    """
    metadata_file = Path(metadata_file)
    if not metadata_file.is_file():
        raise MissingMetadataFileError(f"Mage metadata file not found: {metadata_file}")

    table = read_tab_delimited(metadata_file)
    if table.empty:
        raise MalformedMetadataError(f"Mage metadata file is empty: {metadata_file}")

    table = table.fillna("")
    header = [str(h) for h in table.iloc[0].tolist()]
    df = table.iloc[1:]
    positions = {
        name: find_column(header, [name])
        for name in (MAGE_JOB_COLUMN, MAGE_DATASET_COLUMN, MAGE_DATASET_ID_COLUMN)
    }
    missing = [name for name, position in positions.items() if position is None]
    if missing:
        raise MalformedMetadataError(
            f"Mage metadata file {metadata_file.name} is missing column(s): {', '.join(missing)}"
        )

    jobs: Dict[int, DatasetInfo] = {}
    for row in df.itertuples(index=False, name=None):
        job = try_parse_int(row[positions[MAGE_JOB_COLUMN]])
        dataset_id = try_parse_int(row[positions[MAGE_DATASET_ID_COLUMN]])
        dataset_name = row[positions[MAGE_DATASET_COLUMN]].strip()
        if job is None or dataset_id is None or not dataset_name:
            logger.warning(f"Skipping invalid row in {metadata_file.name}: {list(row)}")
            continue
        jobs[job] = DatasetInfo(dataset_name=dataset_name, dataset_id=dataset_id)

    if not jobs:
        raise MalformedMetadataError(
            f"Mage metadata file {metadata_file.name} does not define any jobs"
        )

    logger.info(f"Loaded {len(jobs)} jobs from {metadata_file.name}")
    return jobs


class MageResultsMerger:
    """
    Appends MASIC statistics to a Mage Extractor results file.

    The file is streamed once.  Whenever the Job column changes, the MASIC
    files of that job's dataset are located and loaded.  The output always
    carries the scan stats and SIC stats columns; reporter ion columns are
    included when the first job loaded had reporter ion data.
    """

    def __init__(
        self,
        masic_results_dir: Path,
        scan_number_column: int = DEFAULT_SCAN_NUMBER_COLUMN,
    ):
        self.masic_results_dir = Path(masic_results_dir)
        if scan_number_column < 1:
            scan_number_column = DEFAULT_SCAN_NUMBER_COLUMN
        self.scan_number_column = scan_number_column

    def merge(self, input_file: Path, output_dir: Optional[Path] = None) -> ProcessedDatasetRecord:
        """
        Merge MASIC data into a Mage Extractor results file.

        Args:
            input_file: Multi-job results file with a Job column
            output_dir: Directory for the _PlusSICStats.txt file (default: beside the input)

        Returns:
            ProcessedDatasetRecord with the single output file

        Raises:
            FileNotFoundError: If the input file does not exist
            MissingMetadataFileError: If the metadata file does not exist
            MalformedMetadataError: If the metadata file is unusable
            RequiredColumnMissingError: If the input file has no Job column
            MergerError: If MASIC data could not be merged for any job
        """
        input_file = Path(input_file)
        if not input_file.is_file():
            raise FileNotFoundError(f"File not found: {input_file}")

        jobs = load_job_metadata(metadata_file_for(input_file))

        output_dir = Path(output_dir) if output_dir else input_file.parent
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / f"{input_file.stem}{RESULTS_SUFFIX}"

        logger.info(f"Parsing {input_file.name} and writing {output_path.name}")

        merged_jobs = self._write_output(input_file, output_path, jobs)
        if not merged_jobs:
            raise MergerError(f"MASIC data could not be merged for any job in {input_file.name}")

        logger.info(f"Merged MASIC data for {len(merged_jobs)} job(s)")

        record = ProcessedDatasetRecord(base_name=input_file.stem)
        record.add_output_file("", output_path)
        return record

    def _write_output(
        self, input_file: Path, output_path: Path, jobs: Dict[int, DatasetInfo]
    ) -> Set[int]:
        """Stream the input file; returns the jobs whose MASIC data was merged."""
        merged_jobs: Set[int] = set()
        current: Optional[MASICJobData] = None
        current_job: Optional[int] = None
        job_column: Optional[int] = None
        scan_column = self.scan_number_column
        header_line: Optional[str] = None
        reporter_column_count = -1
        unknown_jobs = 0

        with open_text(input_file) as reader, \
                open(output_path, "w", encoding="utf-8") as writer:
            for line in reader:
                if not line.strip():
                    continue
                data_line = line.rstrip("\r\n")
                fields = split_line(line)

                if header_line is None:
                    header_line = data_line
                    job_column = find_column(fields, [MAGE_JOB_COLUMN])
                    if job_column is None:
                        raise RequiredColumnMissingError([MAGE_JOB_COLUMN], source=input_file.name)
                    scan_index_in_header = find_scan_number_column(fields)
                    if scan_index_in_header is not None:
                        scan_column = scan_index_in_header + 1
                    continue

                job = try_parse_int(fields[job_column]) if len(fields) > job_column else None
                if job is not None and job != current_job:
                    current_job = job
                    current = self._load_job(job, jobs)
                    if current is None:
                        if unknown_jobs < MAX_INDIVIDUAL_WARNINGS:
                            logger.warning(f"No MASIC data available for job {job}")
                        unknown_jobs += 1
                    else:
                        merged_jobs.add(job)

                if reporter_column_count < 0:
                    reporter_headers = current.reporter_ion_headers if current else ""
                    reporter_column_count = (
                        len(reporter_headers.split("\t")) if reporter_headers else 0
                    )
                    addon_headers = SCAN_STATS_HEADERS + SIC_STATS_HEADERS
                    if reporter_column_count:
                        addon_headers = addon_headers + [reporter_headers]
                    writer.write(header_line + "\t" + "\t".join(addon_headers) + "\n")

                row_data = current if job is not None else None
                writer.write(
                    data_line + "\t" + "\t".join(
                        self._addon_columns(fields, scan_column, row_data, reporter_column_count)
                    ) + "\n"
                )

            if header_line is None:
                raise MergerError(f"File is empty: {input_file}")

            if reporter_column_count < 0:
                writer.write(
                    header_line + "\t" + "\t".join(SCAN_STATS_HEADERS + SIC_STATS_HEADERS) + "\n"
                )

        if unknown_jobs > MAX_INDIVIDUAL_WARNINGS:
            logger.warning(f"{unknown_jobs} jobs in total had no MASIC data")

        return merged_jobs

    @staticmethod
    def _addon_columns(
        fields: List[str],
        scan_column: int,
        job_data: Optional[MASICJobData],
        reporter_column_count: int,
    ) -> List[str]:
        scan_number = None
        if job_data is not None and len(fields) >= scan_column:
            scan_number = try_parse_int(fields[scan_column - 1])

        if scan_number is None:
            scan_record = None
            sic_record = None
            scan_index: ScanStatsIndex = {}
        else:
            scan_index = job_data.scan_index
            scan_record = scan_index.get(scan_number)
            sic_record = job_data.sic_index.get(scan_number)

        columns = scan_stats_columns(scan_record) + sic_stats_columns(sic_record, scan_index)
        if reporter_column_count:
            if job_data is not None and job_data.reporter_ion_headers:
                columns += reporter_ion_columns(scan_record, reporter_column_count)
            else:
                columns += [""] * reporter_column_count
        return columns

    def _load_job(self, job: int, jobs: Dict[int, DatasetInfo]) -> Optional[MASICJobData]:
        """Load the MASIC indices for a job; None when the job or its files are unknown."""
        dataset = jobs.get(job)
        if dataset is None:
            logger.warning(f"Job {job} is not defined in the metadata file")
            return None

        try:
            masic_files = find_masic_files(self.masic_results_dir, dataset)
        except MissingStatisticsFilesError as e:
            logger.warning(str(e))
            return None

        scan_index = read_scan_stats(masic_files.scan_stats_file)
        sic_index = read_sic_stats(masic_files.sic_stats_file)
        scan_index, reporter_ion_headers = read_reporter_ions(
            masic_files.reporter_ions_file, scan_index
        )

        return MASICJobData(
            job=job,
            scan_index=scan_index,
            sic_index=sic_index,
            reporter_ion_headers=reporter_ion_headers,
        )
