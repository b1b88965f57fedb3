"""
Configuration constants and defaults for the MASIC results merger.

File layout
~~~~~~~~~~~
Every file read or written by this package is tab-delimited text with a
single header line.  MASIC writes three companion files per dataset:

* ``<Dataset>_ScanStats.txt``: one row per acquired spectrum
* ``<Dataset>_SICstats.txt``: one row per parent ion (selected ion chromatogram)
* ``<Dataset>_ReporterIons.txt``: reporter ion intensities (optional)

Suffixes are matched case-insensitively.  Columns of the MASIC files are read
by position; the indices below follow the MASIC output format.
"""

from typing import Dict, List

# =============================================================================
# File suffixes
# =============================================================================

SCAN_STATS_FILE_SUFFIX = "_ScanStats.txt"
SIC_STATS_FILE_SUFFIX = "_SICstats.txt"
REPORTER_IONS_FILE_SUFFIX = "_ReporterIons.txt"

RESULTS_SUFFIX = "_PlusSICStats.txt"
DART_ID_SUFFIX = "_ForDartID.txt"
MAGE_METADATA_SUFFIX = "_metadata.txt"
DATASET_MAP_SUFFIX = "_DatasetMap.txt"

MERGED_DATA_PREFIX = "MergedData_"

# =============================================================================
# General settings
# =============================================================================

# Column (1-based) holding the scan number in the peptide hit file
DEFAULT_SCAN_NUMBER_COLUMN = 2

# Seconds to wait before deleting an empty output file; the platform may not
# have released the handle at close time
EMPTY_FILE_DELETE_DELAY = 0.25

# Number of individual warnings to show before switching to a summary line
MAX_INDIVIDUAL_WARNINGS = 10

# Header names (case-insensitive) that identify the scan number column
SCAN_NUMBER_COLUMN_NAMES = [
    "Scan",
    "ScanNum",
    "Scan Num",
    "ScanNumber",
    "Scan Number",
    "Scan#",
    "Scan #",
]

# MS-GF+ results report the fragmentation method in this column
FRAG_METHOD_COLUMN = "FragMethod"

# Label used for output files whose collision mode is blank
COLLISION_MODE_NA = "na"

# Key used in processed-dataset records when collision modes were not separated
COLLISION_MODE_NOT_DEFINED = "Collision_Mode_Not_Defined"

# Prefix for generated column names when the input file has no header line
GENERIC_COLUMN_PREFIX = "Column"

# =============================================================================
# MASIC column positions (0-based)
# =============================================================================

SCAN_STATS_COLUMNS: Dict[str, int] = {
    "dataset": 0,
    "scan_number": 1,
    "scan_time": 2,
    "scan_type": 3,
    "total_ion_intensity": 4,
    "base_peak_intensity": 5,
    "base_peak_mz": 6,
}

SIC_STATS_COLUMNS: Dict[str, int] = {
    "dataset": 0,
    "parent_ion_index": 1,
    "mz": 2,
    "survey_scan_number": 3,
    "frag_scan_number": 4,
    "optimal_peak_apex_scan_number": 5,
    "peak_scan_start": 8,
    "peak_scan_end": 9,
    "peak_max_intensity": 11,
    "peak_signal_to_noise_ratio": 12,
    "fwhm_in_scans": 13,
    "peak_area": 14,
    "parent_ion_intensity": 15,
    "stat_moments_area": 19,
}

REPORTER_ION_COLUMNS: Dict[str, int] = {
    "dataset": 0,
    "scan_number": 1,
    "collision_mode": 2,
    "parent_ion_mz": 3,
    "base_peak_intensity": 4,
    "base_peak_mz": 5,
    "reporter_ion_intensity_max": 6,
}

# Fallback reporter ion header when the file header is too short
REPORTER_ION_FALLBACK_HEADERS = ["Collision Mode", "AdditionalReporterIonColumns"]

# =============================================================================
# Output columns
# =============================================================================

SCAN_STATS_ELUTION_TIME_COLUMN = "ElutionTime"
PEAK_WIDTH_MINUTES_COLUMN = "PeakWidthMinutes"

SCAN_STATS_HEADERS: List[str] = [
    SCAN_STATS_ELUTION_TIME_COLUMN,
    "ScanType",
    "TotalIonIntensity",
    "BasePeakIntensity",
    "BasePeakMZ",
]

SIC_STATS_HEADERS: List[str] = [
    "Optimal_Scan_Number",
    "PeakMaxIntensity",
    "PeakSignalToNoiseRatio",
    "FWHMInScans",
    "PeakArea",
    "ParentIonIntensity",
    "ParentIonMZ",
    "StatMomentsArea",
    "PeakScanStart",
    "PeakScanEnd",
    PEAK_WIDTH_MINUTES_COLUMN,
]

DART_ID_HEADERS: List[str] = [
    "Dataset",
    "Peptide",
    "MSGFDB_SpecEValue",
    "Charge",
    "LeadingProtein",
    "Proteins",
    "ElutionTime",
    "PeakWidthMinutes",
]

# Tool-name suffixes removed from file names when deriving the DART-ID dataset label
DART_ID_FILE_TYPE_SUFFIXES = ["_syn", "_fht"]
DART_ID_TOOL_SUFFIXES = ["_msgfplus", "_msgfdb"]

# =============================================================================
# Mage Extractor metadata
# =============================================================================

MAGE_JOB_COLUMN = "Job"
MAGE_DATASET_COLUMN = "Dataset"
MAGE_DATASET_ID_COLUMN = "Dataset_ID"

DATASET_ID_COLUMN = "DatasetID"
DATASET_NAME_COLUMN = "DatasetName"
