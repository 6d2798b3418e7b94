#!/usr/bin/env python3

"""
Command-line interface for the gene dataset pipeline.

Reads native FASTA datasets, applies the requested filters in order and
writes the remaining genes to a single output file.
"""

import argparse
import sys
import os
import logging
from typing import List, Optional

from gene_dataset_pipeline.core.config import load_config, CODE_TYPES
from gene_dataset_pipeline.core.exceptions import PipelineError
from gene_dataset_pipeline.core.options import (
    CancellingOptionProvider, IntronOptions, NameOptions, OptionProvider, split_values
)
from gene_dataset_pipeline.core.registry import FILTERS, EXPORTERS
from gene_dataset_pipeline.utils.performance_monitor import LoggingProgressObserver


def setup_logging(log_level: str = "INFO") -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def prompt_chromosomes() -> Optional[List[str]]:
    """Ask for chromosome identifiers on the console; empty input cancels."""
    try:
        answer = input("Chromosome(s) to keep, separated by ';' (empty to cancel): ")
    except EOFError:
        return None
    return split_values(answer) or None


def prompt_name_options() -> Optional[NameOptions]:
    """Ask for gene names and the filter action on the console; empty input cancels."""
    try:
        names = split_values(input("Gene name(s), separated by ';' (empty to cancel): "))
        if not names:
            return None
        action = input("Exclude or include these genes? [E/i]: ").strip().upper() or 'E'
    except EOFError:
        return None
    if action not in ('E', 'I'):
        return None
    return NameOptions(names=names, exclude=action == 'E')


def prompt_quality_level() -> Optional[int]:
    """Ask for the worst quality level to keep; empty or non-numeric input cancels."""
    try:
        answer = input("Keep genes with quality level up to (0 is best, empty to cancel): ").strip()
    except EOFError:
        return None
    return int(answer) if answer.isdigit() else None


def prompt_intron_options(populations: List[str]) -> Optional[IntronOptions]:
    """Ask for intron length bounds and populations; empty population input cancels."""
    try:
        print(f"Populations in the dataset: {', '.join(populations) or 'none'}")
        selected = split_values(input("Population(s) to measure, separated by ';' (empty to cancel): "))
        if not selected:
            return None
        min_length = input("Minimal intron length (empty for 0): ").strip()
        max_length = input("Maximal intron length (empty for no limit): ").strip()
    except EOFError:
        return None
    if not all(value.isdigit() for value in (min_length, max_length) if value):
        return None
    return IntronOptions(populations=selected,
                         min_length=int(min_length) if min_length else 0,
                         max_length=int(max_length) if max_length else None)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Filter comparative-genomics datasets and export them to native FASTA",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Keep genes on chromosome arms 2L and 2R that do not overlap other genes
  python pipeline_cli.py --input dataset.nfa --filter chromosome "chr='2L;2R'" --filter overlap --output filtered.nfa

  # Drop genes without any valid sequence
  python pipeline_cli.py --input a.nfa b.nfa --filter empty --output cleaned

  # Keep genes with an intron of at most 80 bp in every African strain
  python pipeline_cli.py --input dataset.nfa --filter introns "max='80' min='' pops='Africa'" --output short_introns
        """
    )

    parser.add_argument(
        '--input',
        nargs='+',
        help='Input dataset file(s) in native FASTA format'
    )
    parser.add_argument(
        '--output',
        help='Output file; the exporter extension is added when missing'
    )
    parser.add_argument(
        '--filter',
        nargs='+',
        action='append',
        default=[],
        metavar=('KEY', 'PARAMS'),
        help="Filter to apply, optionally followed by its option string (repeatable)"
    )
    parser.add_argument(
        '--config',
        help='Configuration file (JSON or YAML)'
    )
    parser.add_argument(
        '--code-type',
        choices=CODE_TYPES,
        help='Kind of sequence data in the dataset (default: simple)'
    )
    parser.add_argument(
        '--line-width',
        type=int,
        help='Sequence line width of the exported file (default: 60)'
    )
    parser.add_argument(
        '--non-interactive',
        action='store_true',
        help='Cancel instead of prompting when filter options are missing'
    )
    parser.add_argument(
        '--list',
        action='store_true',
        help='List the available filters and exporters and exit'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )

    return parser


def list_operations() -> None:
    """Print the registered filters and exporters."""
    print("Filters:")
    for key, filter_class in sorted(FILTERS.items()):
        params = f" {filter_class.param_string}" if filter_class.param_string else ""
        print(f"  {key}{params}: {filter_class.description}")
    print("Exporters:")
    for key, exporter_class in sorted(EXPORTERS.items()):
        print(f"  {key} (.{exporter_class.file_extension}): {exporter_class.description}")


def parse_filter_specs(raw_filters: List[List[str]]) -> List[tuple]:
    """Turn ``--filter KEY [PARAMS...]`` groups into (key, params) pairs."""
    return [(group[0], " ".join(group[1:])) for group in raw_filters]


def validate_input_files(input_files: List[str]) -> None:
    """Validate that input files exist."""
    for file_path in input_files:
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"Input file not found: {file_path}")


def main() -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args()

    if args.list:
        list_operations()
        return 0
    if not args.input or not args.output:
        parser.error("--input and --output are required")

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        validate_input_files(args.input)

        config = load_config(config_path=args.config, use_env=True)

        # Override config with command line arguments
        if args.code_type is not None:
            config.code_type = args.code_type
        if args.line_width is not None:
            config.line_width = args.line_width

        # Re-validate after CLI overrides.
        config.validate()

        if args.non_interactive:
            option_provider = CancellingOptionProvider()
        else:
            option_provider = OptionProvider(chromosomes=prompt_chromosomes,
                                             name_options=prompt_name_options,
                                             quality_level=prompt_quality_level,
                                             intron_options=prompt_intron_options)

        from gene_dataset_pipeline import DatasetFilterPipeline

        pipeline = DatasetFilterPipeline(config, option_provider=option_provider,
                                         observer=LoggingProgressObserver())
        success = pipeline.run(
            input_files=args.input,
            filter_specs=parse_filter_specs(args.filter),
            output_file=args.output
        )

        if success:
            logger.info("Pipeline completed successfully!")
            return 0
        else:
            logger.error("Pipeline failed!")
            return 1

    except FileNotFoundError as e:
        logger.error(f"File error: {e}")
        return 1
    except PipelineError as e:
        logger.error(f"Pipeline error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
