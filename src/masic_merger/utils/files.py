"""File lookup, reading and removal helpers."""

import csv
import logging
import time
from pathlib import Path
from typing import Optional

import pandas as pd

logger = logging.getLogger(__name__)


def find_file_case_insensitive(directory: Path, file_name: str) -> Optional[Path]:
    """
    Find a file in a directory, ignoring case.

    An exact match is preferred; otherwise the directory listing is searched
    for a name that differs only by case.

    Args:
        directory: Directory to search
        file_name: File name to look for

    Returns:
        Path to the file, or None if no match exists
    """
    directory = Path(directory)
    candidate = directory / file_name
    if candidate.is_file():
        return candidate

    if not directory.is_dir():
        return None

    target = file_name.lower()
    for entry in sorted(directory.iterdir()):
        if entry.name.lower() == target and entry.is_file():
            return entry
    return None


def remove_empty_file(file_path: Path, delay: float = 0.0) -> bool:
    """
    Remove an output file that received no data.

    Failures are logged and ignored.

    Args:
        file_path: Path to the file to remove
        delay: Seconds to wait before removing, giving the platform time to
               release the file handle

    Returns:
        True if the file was removed
    """
    if delay > 0:
        time.sleep(delay)
    try:
        file_path = Path(file_path)
        if file_path.exists():
            file_path.unlink()
            logger.info(f"Deleted empty output file: {file_path.name}")
            return True
    except OSError as e:
        logger.warning(f"Could not remove {file_path}: {e}")
    return False


def open_text(file_path: Path):
    """Open a text input file; bytes that are not valid UTF-8 are replaced."""
    return open(file_path, "r", encoding="utf-8", errors="replace")


def read_tab_delimited(file_path: Path) -> pd.DataFrame:
    """
    Read a tab-delimited file as a headerless table of text values.

    The table is as wide as the longest line, so a row with more fields than
    the first line is kept rather than dropped.  Columns are labelled by
    position; the header line (if any) is an ordinary row.  Missing trailing
    fields are NaN and empty fields are empty strings.

    Args:
        file_path: Path to the file

    Returns:
        DataFrame of str values; empty if the file has no lines
    """
    with open_text(file_path) as f:
        width = max((line.count("\t") + 1 for line in f if line.strip("\r\n")), default=0)

    if width == 0:
        return pd.DataFrame()

    return pd.read_csv(
        file_path,
        sep="\t",
        header=None,
        names=list(range(width)),
        dtype=str,
        keep_default_na=False,
        quoting=csv.QUOTE_NONE,
        skip_blank_lines=True,
        encoding="utf-8",
        encoding_errors="replace",
    )
