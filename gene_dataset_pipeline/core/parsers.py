#!/usr/bin/env python3

"""
File parsers for gene datasets.

Reads datasets stored in native FASTA format (as written by
NativeFastaExporter) back into the read model.
"""

import re
import logging
from typing import List, Optional, Sequence

from .data_structures import Dataset, GeneEntry, GeneRegion, StrainEntry
from .exceptions import ParseError

_HEADER = re.compile(
    r">\s*([^;]+);\s*"                     # species
    r"([^;]+);\s*"                         # strain
    r"([^;]+);\s*"                         # common name
    r"([^;]*);\s*"                         # alias
    r"([^;]*);\s*"                         # chromosome
    r"Populations*=([^;]*);\s*"            # populations
    r"((?:Reg:\s*[^=]+=\d+-\d+;*\s*)*)"    # regions
)
_REGION = re.compile(r"Reg:\s*([^=]+)=(\d+)-(\d+)")
_POPULATION_SEPARATOR = re.compile(r",\s*")

UNKNOWN_GENE = "Unknown"


class NativeFastaReader:
    """Parse native FASTA files with O(n) complexity."""

    def __init__(self, file_path: str):
        self.file_path = file_path

    def parse(self) -> Dataset:
        """Parse the file into a dataset."""
        logging.info(f"Parsing native FASTA file: {self.file_path}")

        dataset = Dataset()
        gene: Optional[GeneEntry] = None
        header: Optional[str] = None
        sequence: List[str] = []
        line_num = 0

        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                for line_num, line in enumerate(f, 1):
                    line = line.strip()
                    if line.startswith('>'):
                        if header is not None:
                            gene = self._add_record(dataset, gene, header, ''.join(sequence))
                        header = line
                        sequence = []
                    elif line:
                        sequence.append(line)

            if header is not None:
                self._add_record(dataset, gene, header, ''.join(sequence))

        except FileNotFoundError:
            raise ParseError(f"Dataset file not found: {self.file_path}")
        except (OSError, UnicodeDecodeError) as e:
            raise ParseError(f"Failed to read native FASTA file: {e}", self.file_path, line_num)

        logging.info(f"Parsed {len(dataset)} genes from {self.file_path}")
        return dataset

    def _add_record(self, dataset: Dataset, gene: Optional[GeneEntry],
                    header: str, sequence: str) -> GeneEntry:
        """Add one record to the dataset and return the gene it was added to."""
        match = _HEADER.match(header)
        if not match:
            logging.warning(f"Malformed header in {self.file_path}: {header}")
            if gene is None:
                gene = self._get_or_add_gene(dataset, UNKNOWN_GENE, "")
            strain = StrainEntry(species_name="", strain_name="", sequence=sequence)
            strain.add_region(GeneRegion(GeneRegion.UNNAMED, 1, len(sequence)))
            gene.add_strain(strain)
            return gene

        species, strain_name, common_name, alias, chromosome, populations, regions = match.groups()
        if gene is None or gene.common_name.lower() != common_name.lower():
            gene = self._get_or_add_gene(dataset, common_name, alias)

        strain = StrainEntry(species_name=species, strain_name=strain_name,
                             chromosome=chromosome, sequence=sequence)
        strain.add_populations(*_POPULATION_SEPARATOR.split(populations.strip()))
        for region_type, start, end in _REGION.findall(regions):
            strain.add_region(GeneRegion(region_type, int(start), int(end)))

        gene.add_strain(strain)
        return gene

    @staticmethod
    def _get_or_add_gene(dataset: Dataset, common_name: str, alias: str) -> GeneEntry:
        """Get the gene with this name, adding a new entry when it is not yet present."""
        gene = dataset.get_gene(common_name)
        if gene is None:
            gene = GeneEntry(common_name=common_name, alias=alias)
            dataset.add_gene(gene)
        return gene


def read_datasets(file_paths: Sequence[str]) -> Dataset:
    """Read and merge several native FASTA files."""
    dataset = Dataset()
    for file_path in file_paths:
        dataset.merge(NativeFastaReader(file_path).parse())
    return dataset
