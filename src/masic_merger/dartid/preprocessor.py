"""
DartIdPreprocessor - transform a _PlusSICStats.txt file into DART-ID input.

DART-ID expects one row per peptide per scan.  Peptide hit files list one row
per protein, so rows sharing scan number, charge and primary sequence are
collapsed into a single row whose Proteins column lists every protein.

DART-ID: PLoS Computational Biology. 2019 Jul 1;15(7):e1007082
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import pandas as pd

from masic_merger.config import (
    DART_ID_FILE_TYPE_SUFFIXES,
    DART_ID_HEADERS,
    DART_ID_SUFFIX,
    DART_ID_TOOL_SUFFIXES,
    RESULTS_SUFFIX,
)
from masic_merger.psm.columns import DART_ID_FIELDS, resolve_columns
from masic_merger.psm.sequence import get_primary_sequence
from masic_merger.utils.files import read_tab_delimited
from masic_merger.utils.text import try_parse_int

logger = logging.getLogger(__name__)


def _strip_suffix(name: str, suffixes: List[str]) -> str:
    for suffix in suffixes:
        if name.lower().endswith(suffix.lower()):
            return name[: -len(suffix)]
    return name


def dataset_name_from_file(psm_file: Path) -> str:
    """
    Derive the dataset name from a merged results file name.

    ``QC_Shew_msgfplus_syn_PlusSICStats.txt`` becomes ``QC_Shew``.
    """
    file_name = Path(psm_file).name
    if file_name.lower().endswith(RESULTS_SUFFIX.lower()):
        dataset_name = file_name[: -len(RESULTS_SUFFIX)]
    else:
        dataset_name = Path(psm_file).stem

    dataset_name = _strip_suffix(dataset_name, DART_ID_FILE_TYPE_SUFFIXES)
    return _strip_suffix(dataset_name, DART_ID_TOOL_SUFFIXES)


def _int_or_zero(value: str) -> int:
    parsed = try_parse_int(value)
    return parsed if parsed is not None else 0


@dataclass
class PSMGroup:
    """Rows of one peptide in one scan at one charge state."""

    scan_number: int
    charge: int
    primary_sequence: str
    peptide: str
    spec_e_value: str
    elution_time: str
    peak_width: str
    proteins: List[str] = field(default_factory=list)

    @property
    def leading_protein(self) -> str:
        return self.proteins[0] if self.proteins else ""


class DartIdPreprocessor:
    """
    Consolidates PSMs of a merged results file for DART-ID.
    """

    def consolidate_psms(self, psm_file: Path) -> Path:
        """
        Write the _ForDartID.txt file for a merged results file.

        Rows are grouped by (scan number, charge, primary sequence); groups are
        written in the order they first appear.  The first row of a group
        supplies the peptide, E-value, elution time and peak width; the
        proteins of all rows are listed once each, first-seen order, the
        first being the leading protein.

        Args:
            psm_file: A _PlusSICStats.txt file (or any file with the same columns)

        Returns:
            Path to the _ForDartID.txt file, written beside the input

        Raises:
            RequiredColumnMissingError: If the header lacks a required column
        """
        psm_file = Path(psm_file)
        output_path = psm_file.parent / f"{psm_file.stem}{DART_ID_SUFFIX}"
        dataset_name = dataset_name_from_file(psm_file)

        logger.info(f"Creating DART-ID input file {output_path.name}")

        table = read_tab_delimited(psm_file)
        groups: List[PSMGroup] = []

        if not table.empty:
            header = [str(h) for h in table.iloc[0].fillna("").tolist()]
            columns = resolve_columns(header, DART_ID_FIELDS, source=psm_file.name)
            groups = self._group_psms(table.iloc[1:].fillna(""), columns)

        with open(output_path, "w", encoding="utf-8") as f:
            f.write("\t".join(DART_ID_HEADERS) + "\n")
            for group in groups:
                values = [
                    dataset_name,
                    group.peptide,
                    group.spec_e_value,
                    str(group.charge),
                    group.leading_protein,
                    ";".join(group.proteins),
                    group.elution_time,
                    group.peak_width,
                ]
                f.write("\t".join(values) + "\n")

        logger.info(f"Wrote {len(groups)} consolidated PSMs to {output_path.name}")
        return output_path

    @staticmethod
    def _group_psms(data: pd.DataFrame, columns: Dict[str, int]) -> List[PSMGroup]:
        """Group rows by (scan, charge, primary sequence) in first-seen order."""
        if data.empty:
            return []

        if "scan" in columns:
            scans = data[columns["scan"]].map(_int_or_zero)
        else:
            scans = pd.Series(0, index=data.index)
        charges = data[columns["charge"]].map(_int_or_zero)
        primary_sequences = data[columns["peptide"]].map(get_primary_sequence)

        groups: List[PSMGroup] = []
        grouped = data.groupby([scans, charges, primary_sequences], sort=False)
        for (scan, charge, primary_sequence), rows in grouped:
            first = rows.iloc[0]
            groups.append(
                PSMGroup(
                    scan_number=int(scan),
                    charge=int(charge),
                    primary_sequence=primary_sequence,
                    peptide=first[columns["peptide"]],
                    spec_e_value=first[columns["spec_e_value"]],
                    elution_time=first[columns["elution_time"]],
                    peak_width=first[columns["peak_width"]],
                    proteins=list(dict.fromkeys(rows[columns["protein"]])),
                )
            )
        return groups
