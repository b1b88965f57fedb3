"""
MASIC Results Merger - Append MASIC scan and SIC statistics to peptide hit results.

Each row of a tab-delimited peptide hit file is joined, by scan number, with
the _ScanStats.txt, _SICstats.txt and _ReporterIons.txt files that MASIC
writes for the dataset.  Results can be split by collision mode, consolidated
for DART-ID, and combined across datasets.
"""

__version__ = "1.0.0"

from masic_merger.core.merger import MASICResultsMerger, MergeResult

__all__ = ["MASICResultsMerger", "MergeResult", "__version__"]
