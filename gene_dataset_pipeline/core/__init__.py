#!/usr/bin/env python3

"""
Core module for the gene dataset pipeline.

Contains the dataset read model, exception types, configuration
management, option resolution, and the registered filters and exporters.
"""

from .exceptions import (
    PipelineError, ParseError, ConfigurationError, OptionParseError,
    OperationCancelled, CapabilityError, ExportError, MemoryLimitError
)
from .data_structures import (
    Dataset, GeneEntry, StrainEntry, GeneRegion, GENOMIC_POSITION, QUALITY_LEVEL
)
from .config import PipelineConfig, load_config
from .options import (
    ErrorCode, OptionProvider, CancellingOptionProvider, NameOptions, IntronOptions,
    CANCELLED_INDICES
)
from .registry import create_filter, create_exporter, list_filters, list_exporters
from .filters import (
    FilterResult, ChromosomeFilter, EmptySequenceFilter, OverlapFilter,
    GeneNameFilter, SpliceVariantFilter, QualityLevelFilter, ShortIntronFilter
)
from .exporters import ExportResult, NativeFastaExporter

__all__ = [
    'PipelineError', 'ParseError', 'ConfigurationError', 'OptionParseError',
    'OperationCancelled', 'CapabilityError', 'ExportError', 'MemoryLimitError',
    'Dataset', 'GeneEntry', 'StrainEntry', 'GeneRegion', 'GENOMIC_POSITION', 'QUALITY_LEVEL',
    'PipelineConfig', 'load_config',
    'ErrorCode', 'OptionProvider', 'CancellingOptionProvider', 'NameOptions', 'IntronOptions',
    'CANCELLED_INDICES',
    'create_filter', 'create_exporter', 'list_filters', 'list_exporters',
    'FilterResult', 'ChromosomeFilter', 'EmptySequenceFilter', 'OverlapFilter',
    'GeneNameFilter', 'SpliceVariantFilter', 'QualityLevelFilter', 'ShortIntronFilter',
    'ExportResult', 'NativeFastaExporter'
]
