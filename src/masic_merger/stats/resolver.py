"""
Locate the MASIC result files that belong to a dataset.
"""

import logging
from pathlib import Path

from masic_merger.config import (
    REPORTER_IONS_FILE_SUFFIX,
    SCAN_STATS_FILE_SUFFIX,
    SIC_STATS_FILE_SUFFIX,
)
from masic_merger.errors import MissingStatisticsFilesError
from masic_merger.stats.models import DatasetInfo, MASICFileInfo
from masic_merger.utils.files import find_file_case_insensitive

logger = logging.getLogger(__name__)


def find_masic_files(directory: Path, dataset: DatasetInfo) -> MASICFileInfo:
    """
    Find the _ScanStats.txt, _SICstats.txt and _ReporterIons.txt files for a dataset.

    Name variants are tried in order: the full dataset name, then the name
    with its last underscore-delimited segment removed (repeatedly), then,
    if the dataset ID is known, ``{ID}_{DatasetName}`` (again trimming
    segments on failure).  The search stops at the first name for which the
    ScanStats or SICstats file exists.

    Args:
        directory: Directory containing the MASIC results
        dataset: Dataset name and ID

    Returns:
        MASICFileInfo with the files that were found

    Raises:
        MissingStatisticsFilesError: If neither the ScanStats nor the SICstats
            file exists for any name variant
    """
    directory = Path(directory)
    logger.info(f"Looking for MASIC data files that correspond to {dataset.dataset_name}")

    candidate_name = dataset.dataset_name
    tried_dataset_id = False

    while True:
        scan_stats = find_file_case_insensitive(directory, candidate_name + SCAN_STATS_FILE_SUFFIX)
        sic_stats = find_file_case_insensitive(directory, candidate_name + SIC_STATS_FILE_SUFFIX)

        if scan_stats or sic_stats:
            masic_files = MASICFileInfo(
                scan_stats_file=scan_stats,
                sic_stats_file=sic_stats,
                reporter_ions_file=find_file_case_insensitive(
                    directory, candidate_name + REPORTER_IONS_FILE_SUFFIX
                ),
            )
            break

        char_index = candidate_name.rfind("_")
        if char_index > 0:
            candidate_name = candidate_name[:char_index]
        elif not tried_dataset_id and dataset.dataset_id > 0:
            candidate_name = f"{dataset.dataset_id}_{dataset.dataset_name}"
            tried_dataset_id = True
        else:
            raise MissingStatisticsFilesError(dataset.dataset_name, directory)

    if candidate_name != dataset.dataset_name:
        logger.info(f"  Matched MASIC files using dataset name {candidate_name}")

    if masic_files.scan_stats_file is None:
        logger.warning(
            f"The SIC stats file was found, but the ScanStats file does not exist "
            f"for dataset {dataset.dataset_name} in {directory}"
        )
    elif masic_files.sic_stats_file is None:
        logger.warning(
            f"The ScanStats file was found, but the SIC stats file does not exist "
            f"for dataset {dataset.dataset_name} in {directory}"
        )

    return masic_files
