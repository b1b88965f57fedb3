#!/usr/bin/env python3
"""
MASIC Results Merger CLI - Command-line interface for appending MASIC
statistics to peptide hit results files.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import click

from masic_merger import __version__
from masic_merger.config import DART_ID_SUFFIX, DEFAULT_SCAN_NUMBER_COLUMN, RESULTS_SUFFIX
from masic_merger.utils.logging import setup_logging


def expand_input_path(input_path: str) -> List[Path]:
    """
    Expand a file name that may contain * or ? wildcards.

    Files written by this tool (_PlusSICStats.txt, _ForDartID.txt) are not
    matched by wildcards.
    """
    path = Path(input_path)
    if not any(c in path.name for c in "*?"):
        return [path]

    output_suffixes = (RESULTS_SUFFIX.lower(), DART_ID_SUFFIX.lower())
    return sorted(
        p for p in path.parent.glob(path.name)
        if p.is_file() and not p.name.lower().endswith(output_suffixes)
    )


@click.group()
@click.version_option(version=__version__, prog_name="masicmerger")
def cli():
    """MASIC Results Merger - Append MASIC statistics to peptide hit results."""
    pass


@cli.command("merge")
@click.argument("input_path", type=str)
@click.option(
    "--masic-dir",
    "-m",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory with the MASIC result files (default: the input file's directory)",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Output directory (default: the input file's directory)",
)
@click.option(
    "--scan-column",
    "-n",
    default=DEFAULT_SCAN_NUMBER_COLUMN,
    type=int,
    help=f"Column (1-based) with scan numbers in the input file (default: {DEFAULT_SCAN_NUMBER_COLUMN}). "
         "A recognised scan number header overrides this.",
)
@click.option(
    "--separate-collision-modes",
    "-c",
    is_flag=True,
    help="Write one output file per collision mode",
)
@click.option(
    "--mage",
    is_flag=True,
    help="Input files are Mage Extractor results with a Job column "
         "and a companion _metadata.txt file",
)
@click.option(
    "--append",
    is_flag=True,
    help="Combine the results of all processed files into MergedData_ files "
         "with a DatasetID column",
)
@click.option(
    "--dart-id",
    is_flag=True,
    help="Also write a _ForDartID.txt file with one row per peptide per scan",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG)",
)
@click.option(
    "--log-file",
    "-l",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write log messages to this file",
)
def merge(
    input_path: str,
    masic_dir: Optional[Path],
    output_dir: Optional[Path],
    scan_column: int,
    separate_collision_modes: bool,
    mage: bool,
    append: bool,
    dart_id: bool,
    verbose: int,
    log_file: Optional[Path],
):
    """
    Merge MASIC results into peptide hit results file(s).

    INPUT_PATH is a tab-delimited file; the file name may contain * or ?
    wildcards to process several files.

    \b
    Examples:
      masicmerger merge Dataset_msgfplus_syn.txt
      masicmerger merge Dataset_msgfplus_syn.txt -m /data/MASIC -c --dart-id
      masicmerger merge "results/*_syn.txt" --append -v
      masicmerger merge MageResults.txt --mage -m /data/MASIC
      masicmerger merge Dataset_msgfplus_syn.txt -l merge_log.txt
    """
    setup_logging(verbose, log_file)
    logger = logging.getLogger("masic_merger")

    input_files = expand_input_path(input_path)
    if not input_files:
        click.secho(f"No files match {input_path}", fg="red")
        sys.exit(1)

    from masic_merger.core.merger import MASICResultsMerger

    merger = MASICResultsMerger(
        masic_results_dir=masic_dir,
        output_dir=output_dir,
        scan_number_column=scan_column,
        separate_by_collision_mode=separate_collision_modes,
        create_dart_id_input_file=dart_id,
        mage_results=mage,
    )

    failures = 0
    for input_file in input_files:
        result = merger.process_file(input_file)
        if result.success:
            click.secho(f"Processed {input_file.name}", fg="green")
            for output_file in result.output_files:
                click.echo(f"  {output_file}")
        else:
            failures += 1
            click.secho(
                f"Failed to process {input_file.name} ({result.error_code.value}): "
                f"{result.error_message}",
                fg="red",
            )

    if append and len(merger.processed_datasets) > 1:
        result = merger.merge_processed_datasets()
        if result.success:
            click.secho("Merged the processed datasets", fg="green", bold=True)
            for output_file in result.output_files:
                click.echo(f"  {output_file}")
        else:
            failures += 1
            click.secho(f"Failed to merge the processed datasets: {result.error_message}", fg="red")
    elif append:
        logger.warning("Fewer than two datasets were processed; nothing to append")

    sys.exit(1 if failures else 0)


@cli.command("dartid")
@click.argument("psm_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity",
)
def dartid(psm_file: Path, verbose: int):
    """
    Consolidate an existing _PlusSICStats.txt file for DART-ID.

    \b
    Example:
      masicmerger dartid Dataset_msgfplus_syn_PlusSICStats.txt
    """
    setup_logging(verbose)

    from masic_merger.dartid.preprocessor import DartIdPreprocessor
    from masic_merger.errors import MergerError

    try:
        output_path = DartIdPreprocessor().consolidate_psms(psm_file)
    except (MergerError, OSError) as e:
        click.secho(f"Error: {e}", fg="red")
        sys.exit(1)

    click.secho(f"Wrote {output_path}", fg="green")
    sys.exit(0)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
