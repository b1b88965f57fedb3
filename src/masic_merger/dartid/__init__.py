"""DART-ID input file preparation."""

from masic_merger.dartid.preprocessor import DartIdPreprocessor, PSMGroup, dataset_name_from_file

__all__ = ["DartIdPreprocessor", "PSMGroup", "dataset_name_from_file"]
