#!/usr/bin/env python3

"""
Dataset filters selecting the gene indices to keep.

Every filter takes a dataset and an option string and returns a
FilterResult with the retained indices in ascending order. Filters only
remove genes, they never reorder them. Option collection may be
cancelled, in which case the result carries CANCELLED_INDICES.
"""

import re
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from intervaltree import IntervalTree

from .data_structures import Dataset, GeneEntry, GeneRegion, QUALITY_LEVEL
from .options import (
    CANCELLED_INDICES, CancellingOptionProvider, ErrorCode, IntronOptions, NameOptions,
    OptionProvider, parse_intron_options, parse_name_options, parse_option_list,
    parse_quality_level
)
from .registry import register_filter
from ..utils.performance_monitor import NullProgressObserver, WaitType, observing

CANCELLED_MESSAGE = "Cancelled by user"

# Sequences made only of unknown, ambiguous or gap symbols
_DEGENERATE_SEQUENCE = re.compile(r"[XNxn-]+")


@dataclass(frozen=True)
class FilterResult:
    """Indices retained by a filter, or the reason there are none."""
    indices: Tuple[int, ...]
    code: ErrorCode = ErrorCode.OK
    message: str = ""

    @property
    def cancelled(self) -> bool:
        return self.code is ErrorCode.CANCELLED_BY_USER

    @property
    def ok(self) -> bool:
        return self.code is ErrorCode.OK

    @classmethod
    def cancelled_by_user(cls) -> 'FilterResult':
        return cls(CANCELLED_INDICES, ErrorCode.CANCELLED_BY_USER, CANCELLED_MESSAGE)


def is_same_gene(name1: str, name2: str) -> bool:
    """
    Check whether two common names denote splice variants of one gene.

    Names are compared case-insensitively without their last character,
    so ``CG1234-RA`` and ``CG1234-RB`` match. Variant suffixes longer
    than one character, or names of different length, are not recognised.
    """
    return name1[:-1].lower() == name2[:-1].lower()


def is_degenerate_sequence(sequence: str) -> bool:
    """Check whether a sequence consists only of X, N or gap symbols."""
    return _DEGENERATE_SEQUENCE.fullmatch(sequence) is not None


@register_filter("chromosome")
class ChromosomeFilter:
    """Keeps the genes located on the requested chromosome(s)."""

    name = "Chromosomal location filter"
    menu_item_name = "Chromosome"
    description = "Keeps only the genes from the specified chromosome(s)"
    param_string = "chr='<CHR1>;<CHR2>'"
    supports_missing_data = True
    supports_ambiguous_data = True

    def __init__(self, option_provider: Optional[OptionProvider] = None, observer=None):
        self.option_provider = option_provider or CancellingOptionProvider()
        self.observer = observer or NullProgressObserver()
        self.last_error = ""

    def filter(self, dataset: Dataset, params: str = "") -> FilterResult:
        chromosomes = self._get_options(params)
        if chromosomes is None:
            self.last_error = CANCELLED_MESSAGE
            logging.info("Chromosome filter cancelled by user")
            return FilterResult.cancelled_by_user()

        with observing(self.observer, WaitType.FILTER):
            indices = tuple(i for i, gene in enumerate(dataset)
                            if self._is_on_chromosomes(gene, chromosomes))

        logging.info(f"Chromosome filter ({';'.join(chromosomes)}) kept {len(indices)}/{len(dataset)} genes")
        return FilterResult(indices)

    def _get_options(self, params: str) -> Optional[List[str]]:
        """Get the chromosome identifiers from the option string or the provider."""
        chromosomes = parse_option_list(params, 'chr')
        if chromosomes is None:
            logging.debug(f"No usable chromosome options in '{params}', asking provider")
            chromosomes = self.option_provider.resolve_chromosomes()
        return chromosomes

    @staticmethod
    def _is_on_chromosomes(gene: GeneEntry, chromosomes: List[str]) -> bool:
        """Check if any strain lies on a chromosome starting with one of the identifiers."""
        for strain in gene.strains:
            if any(strain.chromosome.startswith(chromosome) for chromosome in chromosomes):
                return True
        return False


@register_filter("empty")
class EmptySequenceFilter:
    """Drops the genes without a valid sequence in any strain."""

    name = "Empty genes filter"
    menu_item_name = "Empty genes"
    description = "Filters out the genes with an empty gene sequence"
    param_string = ""
    supports_missing_data = True
    supports_ambiguous_data = True

    def __init__(self, option_provider: Optional[OptionProvider] = None, observer=None):
        self.observer = observer or NullProgressObserver()
        self.last_error = ""

    def filter(self, dataset: Dataset, params: str = "") -> FilterResult:
        with observing(self.observer, WaitType.FILTER):
            indices = tuple(i for i, gene in enumerate(dataset) if not self._is_empty(gene))

        logging.info(f"Empty genes filter kept {len(indices)}/{len(dataset)} genes")
        return FilterResult(indices)

    @staticmethod
    def _is_empty(gene: GeneEntry) -> bool:
        """A gene is empty when every strain sequence is degenerate."""
        empty_strains = sum(1 for strain in gene.strains if is_degenerate_sequence(strain.sequence))
        return empty_strains == gene.strain_count


@register_filter("overlap")
class OverlapFilter:
    """
    Keeps only the genes which do not overlap with other genes.

    Requires the GENOMIC_POSITION property on the gene entries. Genes
    without it are kept and are ignored when checking the others. Two
    intervals overlap when an endpoint of one lies strictly inside the
    other; touching boundaries do not count. Splice variants of the same
    gene (see is_same_gene) never exclude each other.
    """

    name = "Overlapping genes filter"
    menu_item_name = "Overlapping genes"
    description = "Keeps only the genes which do not overlap with other genes"
    param_string = ""
    supports_missing_data = True
    supports_ambiguous_data = True

    def __init__(self, option_provider: Optional[OptionProvider] = None, observer=None):
        self.observer = observer or NullProgressObserver()
        self.last_error = ""

    def filter(self, dataset: Dataset, params: str = "") -> FilterResult:
        with observing(self.observer, WaitType.FILTER):
            endpoints = self._build_endpoint_tree(dataset)
            indices = tuple(i for i, gene in enumerate(dataset)
                            if not self._overlaps_other_gene(dataset, gene, endpoints))

        logging.info(f"Overlap filter kept {len(indices)}/{len(dataset)} genes")
        return FilterResult(indices)

    @staticmethod
    def _build_endpoint_tree(dataset: Dataset) -> IntervalTree:
        """Index the start and end position of every positioned gene."""
        endpoints = IntervalTree()
        for index, gene in enumerate(dataset):
            position = gene.genomic_position
            if position is None:
                continue
            for point in set(position):
                endpoints.addi(point, point + 1, index)
        return endpoints

    @staticmethod
    def _overlaps_other_gene(dataset: Dataset, gene: GeneEntry, endpoints: IntervalTree) -> bool:
        """Check whether another gene has an endpoint strictly inside this gene's interval."""
        position = gene.genomic_position
        if position is None:
            return False
        low, high = position
        if high - low < 2:
            return False
        for hit in endpoints.overlap(low + 1, high):
            other = dataset[hit.data]
            if not is_same_gene(gene.common_name, other.common_name):
                return True
        return False


@register_filter("name")
class GeneNameFilter:
    """Excludes, or keeps only, the genes with the given names."""

    name = "Gene name filter"
    menu_item_name = "Gene name"
    description = "Filters out the genes with the specified names"
    param_string = "names='<NAME1>;<NAME2>' action='<E/I>'"
    supports_missing_data = True
    supports_ambiguous_data = True

    def __init__(self, option_provider: Optional[OptionProvider] = None, observer=None):
        self.option_provider = option_provider or CancellingOptionProvider()
        self.observer = observer or NullProgressObserver()
        self.last_error = ""

    def filter(self, dataset: Dataset, params: str = "") -> FilterResult:
        options = parse_name_options(params)
        if options is None:
            options = self.option_provider.resolve_name_options()
        if options is None:
            self.last_error = CANCELLED_MESSAGE
            logging.info("Gene name filter cancelled by user")
            return FilterResult.cancelled_by_user()

        try:
            patterns = [self._to_regex(name) for name in options.names]
        except re.error as e:
            self.last_error = f"Invalid gene name pattern: {e}"
            logging.error(self.last_error)
            return FilterResult((), ErrorCode.INVALID_PARAMETER, self.last_error)

        with observing(self.observer, WaitType.FILTER):
            indices = tuple(i for i, gene in enumerate(dataset)
                            if self._matches(gene, patterns) != options.exclude)

        action = "excluded" if options.exclude else "selected"
        logging.info(f"Gene name filter ({action} {len(options.names)} names) kept {len(indices)}/{len(dataset)} genes")
        return FilterResult(indices)

    @staticmethod
    def _to_regex(name: str) -> re.Pattern:
        """Translate ``?`` and ``*`` wildcards into a regular expression."""
        return re.compile(name.replace('?', '.').replace('*', '.*'))

    @staticmethod
    def _matches(gene: GeneEntry, patterns: List[re.Pattern]) -> bool:
        return any(pattern.fullmatch(gene.common_name) for pattern in patterns)


@register_filter("splicing")
class SpliceVariantFilter:
    """
    Keeps only one splice variant of every gene.

    Splice variants are named by a trailing letter. A variant is dropped
    when the dataset holds the same gene with an earlier trailing letter,
    so variant A wins whenever present.
    """

    name = "Splice variants filter"
    menu_item_name = "Splice variants"
    description = "Keeps only one splice variant per gene"
    param_string = ""
    supports_missing_data = True
    supports_ambiguous_data = True

    def __init__(self, option_provider: Optional[OptionProvider] = None, observer=None):
        self.observer = observer or NullProgressObserver()
        self.last_error = ""

    def filter(self, dataset: Dataset, params: str = "") -> FilterResult:
        with observing(self.observer, WaitType.FILTER):
            indices = tuple(i for i, gene in enumerate(dataset)
                            if not self._has_earlier_variant(dataset, gene.common_name))

        logging.info(f"Splice variants filter kept {len(indices)}/{len(dataset)} genes")
        return FilterResult(indices)

    @staticmethod
    def _has_earlier_variant(dataset: Dataset, name: str) -> bool:
        if not name:
            return False
        suffix = name[-1]
        if not suffix.isalpha() or suffix == 'A':
            return False
        return any(dataset.has_gene(name[:-1] + chr(code))
                   for code in range(ord('A'), ord(suffix)))


@register_filter("quality")
class QualityLevelFilter:
    """
    Keeps the genes whose quality level is at or below the given level.

    Level 0 is the best quality. Genes without a QUALITY_LEVEL property
    are dropped.
    """

    name = "Quality level filter"
    menu_item_name = "Quality level"
    description = "Keeps only the genes which have quality level equal or above specified"
    param_string = "level='<LEVEL>'"
    supports_missing_data = True
    supports_ambiguous_data = True

    def __init__(self, option_provider: Optional[OptionProvider] = None, observer=None):
        self.option_provider = option_provider or CancellingOptionProvider()
        self.observer = observer or NullProgressObserver()
        self.last_error = ""

    def filter(self, dataset: Dataset, params: str = "") -> FilterResult:
        level = parse_quality_level(params)
        if level is None:
            level = self.option_provider.resolve_quality_level()
        if level is None:
            self.last_error = CANCELLED_MESSAGE
            logging.info("Quality level filter cancelled by user")
            return FilterResult.cancelled_by_user()

        with observing(self.observer, WaitType.FILTER):
            indices = tuple(i for i, gene in enumerate(dataset)
                            if self._has_quality(gene, level))

        logging.info(f"Quality level filter (level <= {level}) kept {len(indices)}/{len(dataset)} genes")
        return FilterResult(indices)

    @staticmethod
    def _has_quality(gene: GeneEntry, level: int) -> bool:
        quality = gene.get_property(QUALITY_LEVEL)
        return quality is not None and quality <= level


@register_filter("introns")
class ShortIntronFilter:
    """
    Keeps the genes with at least one intron of the requested length.

    Regions are assumed to be annotated identically in every strain, so the
    introns are taken from the first strain and looked up by position in the
    others. Only strains of the selected populations are measured, with gap
    symbols removed. An intron qualifies when every measured length lies
    within [min_length, max_length] and the last measured length is not 0.
    """

    name = "Short introns filter"
    menu_item_name = "Short introns"
    description = "Keeps only the genes with introns of specified length"
    param_string = "max='<MAX>' min='<MIN>' pops='<POP1>;<POP2>'"
    supports_missing_data = True
    supports_ambiguous_data = True

    def __init__(self, option_provider: Optional[OptionProvider] = None, observer=None):
        self.option_provider = option_provider or CancellingOptionProvider()
        self.observer = observer or NullProgressObserver()
        self.last_error = ""

    def filter(self, dataset: Dataset, params: str = "") -> FilterResult:
        options = parse_intron_options(params)
        if options is None:
            options = self.option_provider.resolve_intron_options(dataset.list_populations())
        if options is None:
            self.last_error = CANCELLED_MESSAGE
            logging.info("Short introns filter cancelled by user")
            return FilterResult.cancelled_by_user()

        with observing(self.observer, WaitType.FILTER):
            indices = tuple(i for i, gene in enumerate(dataset)
                            if self._has_matching_intron(gene, options))

        logging.info(f"Short introns filter ({options.min_length}-{options.max_length or 'max'} bp, "
                     f"{';'.join(options.populations)}) kept {len(indices)}/{len(dataset)} genes")
        return FilterResult(indices)

    def _has_matching_intron(self, gene: GeneEntry, options: IntronOptions) -> bool:
        if not gene.strains:
            return False
        for n, region in enumerate(gene.strains[0].regions):
            if not region.has_type(GeneRegion.INTRON):
                continue
            lengths = self._intron_lengths(gene, n, options.populations)
            if not lengths or lengths[-1] == 0:
                continue
            if min(lengths) < options.min_length:
                continue
            if options.max_length is not None and max(lengths) > options.max_length:
                continue
            return True
        return False

    @staticmethod
    def _intron_lengths(gene: GeneEntry, region_index: int, populations: List[str]) -> List[int]:
        """Gap-free lengths of one intron in the strains of the given populations."""
        lengths = []
        for strain in gene.strains:
            if not any(strain.belongs_to_population(p) for p in populations):
                continue
            if region_index >= strain.region_count:
                continue
            intron = strain.region_sequence(strain.regions[region_index])
            lengths.append(len(intron.replace('-', '')))
        return lengths
