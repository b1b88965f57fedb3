"""
MASICResultsMerger - Main orchestration class for merging MASIC results.
"""

import logging
import traceback
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from masic_merger.config import DEFAULT_SCAN_NUMBER_COLUMN, EMPTY_FILE_DELETE_DELAY
from masic_merger.dartid.preprocessor import DartIdPreprocessor
from masic_merger.errors import MergerError, MergerErrorCode
from masic_merger.merger.datasets import DatasetMerger
from masic_merger.merger.mage import MageResultsMerger
from masic_merger.merger.stream import ProcessedDatasetRecord, StreamMerger
from masic_merger.stats.models import DatasetInfo
from masic_merger.stats.reader import read_reporter_ions, read_scan_stats, read_sic_stats
from masic_merger.stats.resolver import find_masic_files

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """Result of processing one input file (or of merging processed datasets)."""

    success: bool
    error_code: MergerErrorCode = MergerErrorCode.NO_ERROR
    error_message: Optional[str] = None
    output_files: List[Path] = field(default_factory=list)


class MASICResultsMerger:
    """
    Main class that merges MASIC results with peptide hit results.

    Workflow for each input file:
    1. Locate the MASIC files for the dataset
    2. Load the scan stats, SIC stats and reporter ion data
    3. Stream the input file, appending the MASIC columns
    4. Optionally write the DART-ID input file for each output file

    Datasets processed successfully are remembered so that their outputs can
    later be combined with merge_processed_datasets().
    """

    def __init__(
        self,
        masic_results_dir: Optional[Path] = None,
        output_dir: Optional[Path] = None,
        scan_number_column: int = DEFAULT_SCAN_NUMBER_COLUMN,
        separate_by_collision_mode: bool = False,
        create_dart_id_input_file: bool = False,
        mage_results: bool = False,
        delete_delay: float = EMPTY_FILE_DELETE_DELAY,
    ):
        """
        Initialize the merger.

        Args:
            masic_results_dir: Directory with the MASIC files (default: the input file's directory)
            output_dir: Directory for output files (default: the input file's directory)
            scan_number_column: 1-based scan number column in the input files
            separate_by_collision_mode: Write one output file per collision mode
            create_dart_id_input_file: Also write a _ForDartID.txt file per output file
            mage_results: Input files are Mage Extractor results with a Job column
            delete_delay: Seconds to wait before deleting an empty output file
        """
        self.masic_results_dir = Path(masic_results_dir) if masic_results_dir else None
        self.output_dir = Path(output_dir) if output_dir else None
        self.scan_number_column = scan_number_column
        self.separate_by_collision_mode = separate_by_collision_mode
        self.create_dart_id_input_file = create_dart_id_input_file
        self.mage_results = mage_results

        self.stream_merger = StreamMerger(
            scan_number_column=scan_number_column,
            separate_by_collision_mode=separate_by_collision_mode,
            delete_delay=delete_delay,
        )
        self.dart_id_preprocessor = DartIdPreprocessor()

        self._processed_datasets: List[ProcessedDatasetRecord] = []

    @property
    def processed_datasets(self) -> List[ProcessedDatasetRecord]:
        """Datasets processed successfully since creation (or the last reset)."""
        return list(self._processed_datasets)

    def reset(self) -> None:
        """Forget the datasets processed so far."""
        self._processed_datasets.clear()

    def process_file(self, input_path: Path) -> MergeResult:
        """
        Merge MASIC data into one peptide hit results file.

        Args:
            input_path: Tab-delimited peptide hit results file

        Returns:
            MergeResult with outcome, error code and output paths
        """
        try:
            return self._process_file(Path(input_path))
        except MergerError as e:
            logger.error(str(e))
            return MergeResult(success=False, error_code=e.error_code, error_message=str(e))
        except OSError as e:
            logger.error(f"File error while processing {input_path}: {e}")
            return MergeResult(
                success=False, error_code=MergerErrorCode.FILE_ERROR, error_message=str(e)
            )
        except Exception as e:
            logger.error(f"Error processing {input_path}: {e}")
            logger.debug(traceback.format_exc())
            return MergeResult(
                success=False, error_code=MergerErrorCode.UNSPECIFIED_ERROR, error_message=str(e)
            )

    def _process_file(self, input_file: Path) -> MergeResult:
        if not input_file.is_file():
            raise FileNotFoundError(f"File not found: {input_file}")

        masic_results_dir = self.masic_results_dir or input_file.parent
        output_dir = self.output_dir or input_file.parent
        output_dir.mkdir(parents=True, exist_ok=True)

        logger.info(f"Processing {input_file}")

        if self.mage_results:
            record = MageResultsMerger(
                masic_results_dir, scan_number_column=self.scan_number_column
            ).merge(input_file, output_dir)
            if self.create_dart_id_input_file:
                logger.warning("DART-ID input files are not created for Mage Extractor results")
            output_files = list(record.output_files.values())
        else:
            record = self._merge_dataset(input_file, masic_results_dir, output_dir)
            output_files = list(record.output_files.values())
            if self.create_dart_id_input_file:
                for output_file in list(output_files):
                    output_files.append(self.dart_id_preprocessor.consolidate_psms(output_file))

        self._processed_datasets.append(record)

        for output_file in output_files:
            logger.info(f"  Wrote {output_file}")

        return MergeResult(success=True, output_files=output_files)

    def _merge_dataset(
        self, input_file: Path, masic_results_dir: Path, output_dir: Path
    ) -> ProcessedDatasetRecord:
        dataset = DatasetInfo(dataset_name=input_file.stem)
        masic_files = find_masic_files(masic_results_dir, dataset)

        scan_index = read_scan_stats(masic_files.scan_stats_file)
        sic_index = read_sic_stats(masic_files.sic_stats_file)
        scan_index, reporter_ion_headers = read_reporter_ions(
            masic_files.reporter_ions_file, scan_index
        )

        logger.info(
            f"Loaded {len(scan_index)} scans and {len(sic_index)} parent ions "
            f"for {dataset.dataset_name}"
        )

        return self.stream_merger.merge(
            input_file, output_dir, scan_index, sic_index, reporter_ion_headers
        )

    def merge_processed_datasets(self) -> MergeResult:
        """
        Combine the outputs of all processed datasets into MergedData_ files.

        Returns:
            MergeResult listing the combined files and the dataset map; no
            files are written when fewer than two datasets were processed
        """
        records = self._processed_datasets
        if self.output_dir:
            output_dir = self.output_dir
        elif records and records[0].output_files:
            output_dir = next(iter(records[0].output_files.values())).parent
        else:
            output_dir = Path.cwd()

        try:
            output_files = DatasetMerger(output_dir).merge(records)
        except OSError as e:
            logger.error(f"File error while merging processed datasets: {e}")
            return MergeResult(
                success=False, error_code=MergerErrorCode.FILE_ERROR, error_message=str(e)
            )
        except Exception as e:
            logger.error(f"Error merging processed datasets: {e}")
            logger.debug(traceback.format_exc())
            return MergeResult(
                success=False, error_code=MergerErrorCode.UNSPECIFIED_ERROR, error_message=str(e)
            )

        return MergeResult(success=True, output_files=output_files)
