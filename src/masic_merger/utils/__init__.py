"""Utility functions."""

from masic_merger.utils.files import (
    find_file_case_insensitive,
    open_text,
    read_tab_delimited,
    remove_empty_file,
)
from masic_merger.utils.logging import setup_logging
from masic_merger.utils.text import split_line, try_parse_float, try_parse_int

__all__ = [
    "find_file_case_insensitive",
    "open_text",
    "read_tab_delimited",
    "remove_empty_file",
    "setup_logging",
    "split_line",
    "try_parse_float",
    "try_parse_int",
]
