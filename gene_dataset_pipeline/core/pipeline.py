#!/usr/bin/env python3

"""
Main pipeline class for filtering and exporting gene datasets.

Reads one or more native FASTA files, applies a chain of filters and
writes the remaining genes with the configured exporter.
"""

import os
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .config import PipelineConfig
from .data_structures import Dataset
from .exceptions import (
    CapabilityError, ExportError, OperationCancelled, OptionParseError, PipelineError
)
from .filters import FilterResult
from .options import CancellingOptionProvider, OptionProvider
from .parsers import read_datasets
from .registry import create_exporter, create_filter
from ..utils.performance_monitor import (
    NullProgressObserver, PerformanceMonitor, WaitType, observing
)

FilterSpec = Tuple[str, str]


def check_capabilities(operation, code_type: str) -> None:
    """
    Make sure an operation can handle the configured kind of data.

    ``extended`` data may contain missing data and ``complete`` data
    ambiguous symbols; ``simple`` data is accepted by every operation.
    """
    if code_type == 'extended' and not operation.supports_missing_data:
        raise CapabilityError("missing data is not supported", operation.name, code_type)
    if code_type == 'complete' and not operation.supports_ambiguous_data:
        raise CapabilityError("ambiguous data is not supported", operation.name, code_type)


class DatasetFilterPipeline:
    """Main pipeline class that coordinates import, filtering and export."""

    def __init__(self, config: PipelineConfig,
                 option_provider: Optional[OptionProvider] = None,
                 observer=None):
        self.config = config
        self.option_provider = option_provider or CancellingOptionProvider()
        self.observer = observer or NullProgressObserver()
        self.monitor = PerformanceMonitor(memory_limit_mb=config.memory_limit_mb,
                                          enabled=config.enable_memory_monitoring)
        self.dataset: Optional[Dataset] = None
        self.filter_results: List[Tuple[str, FilterResult]] = []
        self.output_path: Optional[str] = None
        self.log_handler: Optional[logging.Handler] = None

    def run(self, input_files: Sequence[str], filter_specs: Sequence[FilterSpec],
            output_file: str) -> bool:
        """
        Run the complete pipeline.

        Args:
            input_files: Native FASTA files to read and merge
            filter_specs: (filter key, option string) pairs applied in order
            output_file: Destination file; the exporter's extension is added if missing

        Returns:
            True if the pipeline completed successfully
        """
        try:
            if self.config.write_log_file:
                self._setup_pipeline_logging(output_file)

            logging.info("Starting gene dataset pipeline")
            logging.info(f"Configuration: {self.config}")
            logging.info(f"Input files: {', '.join(input_files)}")

            self.dataset = self.load(input_files)
            filtered = self.apply_filters(self.dataset, filter_specs)
            self.output_path = self.export(filtered, output_file)

            logging.info(f"Pipeline completed: {len(filtered)}/{len(self.dataset)} genes written "
                         f"to {self.output_path}")
            self.monitor.log_performance_report()
            return True

        except PipelineError as e:
            logging.error(f"Pipeline failed: {e}")
            logging.debug("Full traceback:", exc_info=True)
            return False

        finally:
            self.close_log_file()

    def load(self, input_files: Sequence[str]) -> Dataset:
        """Read and merge the input files."""
        with self.monitor.phase_context("dataset_import") as metrics:
            with observing(self.observer, WaitType.IMPORT):
                dataset = read_datasets(input_files)
            metrics.operations_count = len(dataset)
        return dataset

    def apply_filters(self, dataset: Dataset, filter_specs: Sequence[FilterSpec]) -> Dataset:
        """Apply the filters in order, each one to the result of the previous."""
        self.filter_results = []

        for key, params in filter_specs:
            dataset_filter = create_filter(key, option_provider=self.option_provider,
                                           observer=self.observer)
            check_capabilities(dataset_filter, self.config.code_type)

            with self.monitor.phase_context(f"filter_{key}") as metrics:
                result = dataset_filter.filter(dataset, params)
                metrics.operations_count = len(dataset)
            self.filter_results.append((key, result))

            # Cancellation must be checked before the indices are used
            if result.cancelled:
                raise OperationCancelled(f"Filter '{key}': {dataset_filter.last_error}")
            if not result.ok:
                raise OptionParseError(result.message, params)

            dataset = dataset.subset(result.indices)
            self.monitor.check_memory_limit()

        return dataset

    def export(self, dataset: Dataset, output_file: str) -> str:
        """Write the dataset with the configured exporter and return the output path."""
        exporter = create_exporter(self.config.exporter, line_width=self.config.line_width,
                                   observer=self.observer)
        check_capabilities(exporter, self.config.code_type)

        output_path = self._with_extension(output_file, exporter.file_extension)
        with self.monitor.phase_context("export") as metrics:
            result = exporter.export(dataset, output_path)
            metrics.operations_count = len(dataset)

        if not result.ok:
            raise ExportError(exporter.last_error, output_path)
        return output_path

    @staticmethod
    def _with_extension(output_file: str, extension: str) -> str:
        """Append the exporter's file extension when the name has none."""
        if os.path.splitext(output_file)[1]:
            return output_file
        return f"{output_file}.{extension}"

    def _setup_pipeline_logging(self, output_file: str) -> None:
        """Set up pipeline-specific logging next to the output file."""
        output_dir = Path(output_file).resolve().parent
        output_dir.mkdir(parents=True, exist_ok=True)
        log_file = output_dir / 'gene_dataset_pipeline.log'

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s'
        ))

        root_logger = logging.getLogger()
        root_logger.addHandler(file_handler)
        self.log_handler = file_handler

        if self.config.debug_mode:
            root_logger.setLevel(logging.DEBUG)

    def close_log_file(self) -> None:
        """Detach and close the pipeline log file handler, if any."""
        if self.log_handler is None:
            return
        logging.getLogger().removeHandler(self.log_handler)
        self.log_handler.close()
        self.log_handler = None
