"""Helpers for tab-delimited text lines."""

import re
from typing import List, Optional

_INTEGER = re.compile(r"^\s*[+-]?\d+\s*$")


def split_line(line: str) -> List[str]:
    """Split a tab-delimited line, dropping the trailing newline."""
    return line.rstrip("\r\n").split("\t")


def try_parse_int(value: Optional[str]) -> Optional[int]:
    """Parse an integer, returning None when the text is not an integer."""
    if value is None or not _INTEGER.match(value):
        return None
    return int(value)


def try_parse_float(value: Optional[str]) -> Optional[float]:
    """Parse a float, returning None when the text is not numeric."""
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None
