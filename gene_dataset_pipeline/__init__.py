#!/usr/bin/env python3

"""
Gene Dataset Filter & Export Pipeline

Filters comparative-genomics datasets (genes observed across strains)
and exports them to native FASTA.

This modular implementation provides:
- A read model for genes, strains, regions and populations
- Interchangeable filters: chromosome, empty sequences, overlapping genes,
  quality levels, short introns,
  gene names and splice variants
- A native FASTA exporter and reader
- Centralized configuration and specific exception types

Modules:
- core: Data structures, exceptions, configuration, filters and exporters
- utils: Progress observers and performance monitoring
- tests: Unit test suite
"""

__version__ = "1.0.0"
__author__ = "Gene Dataset Pipeline Team"

from .core.data_structures import Dataset, GeneEntry, StrainEntry, GeneRegion, GENOMIC_POSITION
from .core.exceptions import (
    PipelineError, ParseError, ConfigurationError, OptionParseError,
    OperationCancelled, CapabilityError, ExportError, MemoryLimitError
)
from .core.config import PipelineConfig, load_config
from .core.options import ErrorCode, OptionProvider, CANCELLED_INDICES
from .core.filters import FilterResult
from .core.exporters import ExportResult
from .core.registry import create_filter, create_exporter, list_filters, list_exporters
from .core.pipeline import DatasetFilterPipeline

__all__ = [
    # Main pipeline
    'DatasetFilterPipeline',
    # Data structures
    'Dataset', 'GeneEntry', 'StrainEntry', 'GeneRegion', 'GENOMIC_POSITION',
    # Exceptions
    'PipelineError', 'ParseError', 'ConfigurationError', 'OptionParseError',
    'OperationCancelled', 'CapabilityError', 'ExportError', 'MemoryLimitError',
    # Configuration
    'PipelineConfig', 'load_config',
    # Operations
    'ErrorCode', 'OptionProvider', 'CANCELLED_INDICES', 'FilterResult', 'ExportResult',
    'create_filter', 'create_exporter', 'list_filters', 'list_exporters'
]
