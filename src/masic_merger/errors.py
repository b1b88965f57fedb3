"""
Exceptions and result codes for the MASIC results merger.
"""

from enum import Enum
from typing import Iterable


class MergerErrorCode(Enum):
    """Outcome of processing one input file."""

    NO_ERROR = "no_error"
    MISSING_MASIC_FILES = "missing_masic_files"
    MISSING_MAGE_FILES = "missing_mage_files"
    REQUIRED_COLUMN_MISSING = "required_column_missing"
    FILE_ERROR = "file_error"
    UNSPECIFIED_ERROR = "unspecified_error"


class MergerError(Exception):
    """Base class for errors raised while merging MASIC results."""

    error_code = MergerErrorCode.UNSPECIFIED_ERROR


class MissingStatisticsFilesError(MergerError):
    """Neither the ScanStats nor the SICstats file could be found for a dataset."""

    error_code = MergerErrorCode.MISSING_MASIC_FILES

    def __init__(self, dataset_name: str, directory):
        self.dataset_name = dataset_name
        self.directory = directory
        super().__init__(
            f"Unable to find the MASIC data files for dataset {dataset_name} in {directory}"
        )


class MissingMetadataFileError(MergerError):
    """The Mage Extractor metadata file does not exist."""

    error_code = MergerErrorCode.MISSING_MAGE_FILES


class MalformedMetadataError(MergerError):
    """The Mage Extractor metadata file lacks required columns or data."""

    error_code = MergerErrorCode.MISSING_MAGE_FILES


class RequiredColumnMissingError(MergerError, ValueError):
    """One or more required columns are absent from a header line."""

    error_code = MergerErrorCode.REQUIRED_COLUMN_MISSING

    def __init__(self, missing: Iterable[str], source: str = ""):
        self.missing = list(missing)
        location = f" in {source}" if source else ""
        super().__init__(
            f"Missing required column(s){location}: {', '.join(self.missing)}"
        )
