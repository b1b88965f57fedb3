"""
DatasetMerger - combine the merged results of several datasets into one table per collision mode.
"""

import logging
from contextlib import ExitStack
from pathlib import Path
from typing import Dict, List, Sequence

from masic_merger.config import (
    COLLISION_MODE_NOT_DEFINED,
    DATASET_ID_COLUMN,
    DATASET_MAP_SUFFIX,
    DATASET_NAME_COLUMN,
    MERGED_DATA_PREFIX,
    RESULTS_SUFFIX,
)
from masic_merger.merger.stream import ProcessedDatasetRecord
from masic_merger.utils.files import open_text

logger = logging.getLogger(__name__)


def common_base_name(names: Sequence[str]) -> str:
    """
    Find the name prefix shared by a series of dataset names.

    Each name is compared with the running prefix character by character,
    ignoring case.  When more than one character is shared, the prefix is
    shortened to the shared part and then trimmed back to its last underscore
    if that underscore is at position 4 or later.
    """
    base_name = ""
    for candidate in names:
        if not base_name:
            base_name = candidate
            continue

        chars_in_common = 0
        for base_char, candidate_char in zip(base_name.lower(), candidate.lower()):
            if base_char != candidate_char:
                break
            chars_in_common += 1

        if chars_in_common > 1:
            base_name = base_name[:chars_in_common]
            last_underscore = base_name.rfind("_")
            if last_underscore >= 4:
                base_name = base_name[:last_underscore]

    return base_name


def assign_dataset_ids(records: Sequence[ProcessedDatasetRecord]) -> Dict[str, int]:
    """Number the distinct dataset names 1, 2, 3, ... in first-seen order."""
    dataset_ids: Dict[str, int] = {}
    for record in records:
        if record.base_name not in dataset_ids:
            dataset_ids[record.base_name] = len(dataset_ids) + 1
    return dataset_ids


class DatasetMerger:
    """
    Appends the per-dataset _PlusSICStats.txt files into combined files.

    Each row is prefixed with a numeric DatasetID; a _DatasetMap.txt file maps
    the IDs back to dataset names.
    """

    def __init__(self, output_dir: Path):
        """
        Args:
            output_dir: Directory for the combined files
        """
        self.output_dir = Path(output_dir)

    def merge(self, records: Sequence[ProcessedDatasetRecord]) -> List[Path]:
        """
        Merge the output files of several processed datasets.

        Args:
            records: Processed datasets, in processing order

        Returns:
            Paths of the files written (combined files, then the dataset map);
            empty when there is nothing to merge
        """
        if len(records) < 2:
            logger.info("Only one dataset has been processed; nothing to merge")
            return []

        collision_modes = sorted({mode for record in records for mode in record.output_files})
        if not collision_modes:
            logger.error("None of the processed datasets had any output files")
            return []

        dataset_ids = assign_dataset_ids(records)
        base_name = MERGED_DATA_PREFIX + common_base_name([r.base_name for r in records])

        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_paths: Dict[str, Path] = {}
        for mode in collision_modes:
            if mode == COLLISION_MODE_NOT_DEFINED:
                file_name = f"{base_name}{RESULTS_SUFFIX}"
            else:
                file_name = f"{base_name}_{mode}{RESULTS_SUFFIX}"
            output_paths[mode] = self.output_dir / file_name

        map_path = self.output_dir / f"{base_name}{DATASET_MAP_SUFFIX}"
        self._write_dataset_map(map_path, dataset_ids)

        with ExitStack() as stack:
            writers = {
                mode: stack.enter_context(open(path, "w", encoding="utf-8"))
                for mode, path in output_paths.items()
            }
            header_written = {mode: False for mode in collision_modes}

            for record in records:
                dataset_id = dataset_ids[record.base_name]
                for mode, source_file in record.output_files.items():
                    if not Path(source_file).is_file():
                        logger.warning(f"Input file not found; skipping {source_file}")
                        continue

                    logger.info(f"Appending {Path(source_file).name} as dataset {dataset_id}")
                    header_written[mode] = self._append_file(
                        writers[mode], Path(source_file), dataset_id, header_written[mode]
                    )

        return list(output_paths.values()) + [map_path]

    @staticmethod
    def _write_dataset_map(map_path: Path, dataset_ids: Dict[str, int]) -> None:
        with open(map_path, "w", encoding="utf-8") as f:
            f.write(f"{DATASET_ID_COLUMN}\t{DATASET_NAME_COLUMN}\n")
            for name, dataset_id in dataset_ids.items():
                f.write(f"{dataset_id}\t{name}\n")

    @staticmethod
    def _append_file(writer, source_file: Path, dataset_id: int, header_written: bool) -> bool:
        """Copy one source file, writing its header only if none was written yet."""
        header_seen = False
        with open_text(source_file) as reader:
            for line in reader:
                if not line.strip():
                    continue
                data_line = line.rstrip("\r\n")
                if not header_seen:
                    header_seen = True
                    if not header_written:
                        writer.write(f"{DATASET_ID_COLUMN}\t{data_line}\n")
                        header_written = True
                    continue
                writer.write(f"{dataset_id}\t{data_line}\n")
        return header_written
