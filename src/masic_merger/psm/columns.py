"""
Fixed column schema for peptide hit (PSM) files.

A header line is resolved once into a mapping of logical field name to
column position.  Header names are compared case-insensitively and the first
alias of a field found in the header wins.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from masic_merger.config import (
    PEAK_WIDTH_MINUTES_COLUMN,
    SCAN_NUMBER_COLUMN_NAMES,
    SCAN_STATS_ELUTION_TIME_COLUMN,
)
from masic_merger.errors import RequiredColumnMissingError


@dataclass(frozen=True)
class PSMField:
    """A logical column of a PSM file and the header names that identify it."""

    name: str
    aliases: Tuple[str, ...]
    required: bool = False


SCAN = PSMField("scan", ("Scan", "ScanNum"))
PEPTIDE = PSMField("peptide", ("Peptide",), required=True)
SPEC_E_VALUE = PSMField("spec_e_value", ("MSGFDB_SpecEValue", "SpecEValue"), required=True)
CHARGE = PSMField("charge", ("Charge",), required=True)
PROTEIN = PSMField("protein", ("Protein",), required=True)
ELUTION_TIME = PSMField("elution_time", (SCAN_STATS_ELUTION_TIME_COLUMN,), required=True)
PEAK_WIDTH = PSMField("peak_width", (PEAK_WIDTH_MINUTES_COLUMN,), required=True)

# Fields read from a merged _PlusSICStats.txt file when building DART-ID input
DART_ID_FIELDS: Tuple[PSMField, ...] = (
    SCAN,
    PEPTIDE,
    SPEC_E_VALUE,
    CHARGE,
    PROTEIN,
    ELUTION_TIME,
    PEAK_WIDTH,
)


def find_column(header_fields: Sequence[str], names: Iterable[str]) -> Optional[int]:
    """
    Find the first header position matching any of the given names.

    Names are tried in order; comparison ignores case.

    Returns:
        Column index, or None if no name matches
    """
    lowered = [h.strip().lower() for h in header_fields]
    for name in names:
        try:
            return lowered.index(name.lower())
        except ValueError:
            continue
    return None


def find_scan_number_column(header_fields: Sequence[str]) -> Optional[int]:
    """
    Find the scan number column in a header line.

    Returns the position of the first header field (left to right) that is a
    recognised scan number column name.
    """
    names = {name.lower() for name in SCAN_NUMBER_COLUMN_NAMES}
    for index, header in enumerate(header_fields):
        if header.strip().lower() in names:
            return index
    return None


def resolve_columns(
    header_fields: Sequence[str],
    fields: Sequence[PSMField] = DART_ID_FIELDS,
    source: str = "",
) -> Dict[str, int]:
    """
    Resolve a header line into logical column positions.

    Args:
        header_fields: Header line split on tabs
        fields: Fields to resolve, in order
        source: File name used in error messages

    Returns:
        Mapping from field name to column index; optional fields that are
        absent are omitted

    Raises:
        RequiredColumnMissingError: If any required field is absent
    """
    positions: Dict[str, int] = {}
    missing: List[str] = []

    for field in fields:
        index = find_column(header_fields, field.aliases)
        if index is not None:
            positions[field.name] = index
        elif field.required:
            missing.append(field.aliases[0])

    if missing:
        raise RequiredColumnMissingError(missing, source)

    return positions
