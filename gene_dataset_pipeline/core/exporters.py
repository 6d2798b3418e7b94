#!/usr/bin/env python3

"""
Dataset exporters.

Writes a dataset to a single output file. The native FASTA format holds
one record per gene and strain: a header line describing the strain and
its annotated regions, followed by the sequence wrapped at a fixed width.
"""

import os
import logging
from dataclasses import dataclass
from typing import Iterator

from .data_structures import Dataset, GeneEntry, StrainEntry
from .options import ErrorCode
from .registry import register_exporter
from ..utils.performance_monitor import NullProgressObserver, WaitType, observing

IO_ERROR_MESSAGE = "An I/O error occurred while saving the file"


@dataclass(frozen=True)
class ExportResult:
    """Outcome of an export call."""
    code: ErrorCode = ErrorCode.OK
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.code is ErrorCode.OK


def format_sequence(sequence: str, line_width: int = 60) -> str:
    """Wrap a sequence into lines of at most ``line_width`` characters, each ending in a newline."""
    return "".join(f"{sequence[pos:pos + line_width]}\n"
                   for pos in range(0, len(sequence), line_width))


def format_header(gene: GeneEntry, strain: StrainEntry) -> str:
    """Build the native FASTA header line of one strain record."""
    regions = "".join(f"Reg:{region.type}={region.start}-{region.end}; "
                      for region in strain.regions)
    return (f">{strain.species_name}; {strain.strain_name}; {gene.common_name}; "
            f"{gene.alias}; {strain.chromosome}; "
            f"Population={', '.join(strain.populations)}; {regions}")


@register_exporter("nfa")
class NativeFastaExporter:
    """Saves the data in native FASTA format."""

    name = "Native FASTA exporter"
    menu_item_name = "Native FASTA"
    description = "Exports the data into native FASTA format"
    file_extension = "nfa"
    file_description = "Native FASTA"
    param_string = ""
    supports_missing_data = True
    supports_ambiguous_data = True

    def __init__(self, line_width: int = 60, observer=None):
        self.line_width = line_width
        self.observer = observer or NullProgressObserver()
        self.last_error = ""

    def export(self, dataset: Dataset, destination: str, params: str = "") -> ExportResult:
        """
        Write the whole dataset to ``destination``, overwriting it.

        On an I/O or encoding failure the partially written file is removed and an
        IO_ERROR result is returned; last_error holds the message.
        """
        with observing(self.observer, WaitType.EXPORT):
            try:
                with open(destination, 'w', encoding='utf-8') as f:
                    for record in self.iter_records(dataset):
                        f.write(record)
            except (OSError, UnicodeError) as e:
                logging.error(f"Failed to export dataset to {destination}: {e}")
                self._remove_partial_output(destination)
                self.last_error = IO_ERROR_MESSAGE
                return ExportResult(ErrorCode.IO_ERROR, self.last_error)

        logging.info(f"Exported {len(dataset)} genes to {destination}")
        return ExportResult()

    def iter_records(self, dataset: Dataset) -> Iterator[str]:
        """Yield one two-part record per gene and strain, in dataset order."""
        for gene in dataset:
            for strain in gene.strains:
                yield f"{format_header(gene, strain)}\n{format_sequence(strain.sequence, self.line_width)}"

    @staticmethod
    def _remove_partial_output(destination: str) -> None:
        try:
            if os.path.isfile(destination):
                os.remove(destination)
        except OSError as e:
            logging.warning(f"Could not remove partial output {destination}: {e}")
