"""PSM file column schema and peptide helpers."""

from masic_merger.psm.columns import (
    DART_ID_FIELDS,
    PSMField,
    find_column,
    find_scan_number_column,
    resolve_columns,
)
from masic_merger.psm.sequence import get_primary_sequence

__all__ = [
    "DART_ID_FIELDS",
    "PSMField",
    "find_column",
    "find_scan_number_column",
    "get_primary_sequence",
    "resolve_columns",
]
