#!/usr/bin/env python3

"""
Core data structures for the gene dataset pipeline.

Defines the read model consumed by filters and exporters: datasets of
gene entries, each observed in one or more strains carrying a sequence,
a chromosomal location, annotated regions and population labels.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

# Property holding the [start, end] genomic interval of a gene entry
GENOMIC_POSITION = "Genomic position"

# Property holding the integer quality level (0 is best) assigned by quality checks
QUALITY_LEVEL = "QualityLevel"


@dataclass
class GeneRegion:
    """Represents an annotated region of a strain sequence (1-based, inclusive)."""
    type: str
    start: int
    end: int

    CDS = "CDS"
    EXON = "Exon"
    INTRON = "Intron"
    UTR5 = "5'UTR"
    UTR3 = "3'UTR"
    INTERGENIC = "Intergenic"
    MRNA = "mRNA"
    UNNAMED = "Unnamed"

    def __post_init__(self):
        """Validate region data after initialization."""
        if not self.type:
            raise ValueError("Region type cannot be empty")
        if self.start < 0 or self.end < 0:
            raise ValueError(f"Invalid region coordinates: {self.start}-{self.end}")

    @property
    def length(self) -> int:
        """Get region length."""
        return self.end - self.start + 1

    def has_type(self, region_type: str) -> bool:
        return self.type.lower() == region_type.lower()


@dataclass
class StrainEntry:
    """Represents one strain's version of a gene."""
    species_name: str
    strain_name: str
    chromosome: str = ""
    sequence: str = ""
    regions: List[GeneRegion] = field(default_factory=list)
    populations: List[str] = field(default_factory=list)

    def add_region(self, region: GeneRegion) -> None:
        """Add an annotated region."""
        self.regions.append(region)

    def add_populations(self, *populations: str) -> None:
        """Add population labels, skipping ones already present."""
        for population in populations:
            if population and population not in self.populations:
                self.populations.append(population)

    def belongs_to_population(self, population: str) -> bool:
        return population in self.populations

    @property
    def region_count(self) -> int:
        """Get number of annotated regions."""
        return len(self.regions)

    def region_sequence(self, region: GeneRegion) -> str:
        """Get the part of the strain sequence covered by a region."""
        return self.sequence[max(region.start - 1, 0):region.end]

    def same_strain_as(self, other: 'StrainEntry') -> bool:
        """Check whether both entries describe the same species and strain."""
        return (self.species_name.lower() == other.species_name.lower() and
                self.strain_name.lower() == other.strain_name.lower())


@dataclass
class GeneEntry:
    """Represents a gene observed across multiple strains."""
    common_name: str
    alias: str = ""
    strains: List[StrainEntry] = field(default_factory=list)
    properties: Dict[str, Any] = field(default_factory=dict)

    def add_strain(self, strain: StrainEntry) -> None:
        """Add a strain, merging regions into an existing entry for the same strain."""
        for existing in self.strains:
            if existing is strain:
                return
            if existing.same_strain_as(strain):
                for region in strain.regions:
                    existing.add_region(region)
                return
        self.strains.append(strain)

    def get_property(self, name: str, default: Any = None) -> Any:
        return self.properties.get(name, default)

    def set_property(self, name: str, value: Any) -> None:
        self.properties[name] = value

    @property
    def strain_count(self) -> int:
        """Get number of strains."""
        return len(self.strains)

    @property
    def genomic_position(self) -> Optional[Tuple[int, int]]:
        """Get the genomic interval as (low, high), or None when unknown."""
        position = self.properties.get(GENOMIC_POSITION)
        if position is None:
            return None
        start, end = position[0], position[1]
        if start > end:
            start, end = end, start
        return start, end

    def list_populations(self) -> List[str]:
        """Get the populations of all strains without duplicates."""
        populations: List[str] = []
        for strain in self.strains:
            for population in strain.populations:
                if population not in populations:
                    populations.append(population)
        return populations


class Dataset:
    """Ordered collection of gene entries with stable indices."""

    def __init__(self, genes: Optional[Sequence[GeneEntry]] = None):
        self.genes: List[GeneEntry] = []
        for gene in genes or ():
            self.add_gene(gene)

    def __len__(self) -> int:
        return len(self.genes)

    def __getitem__(self, index: int) -> GeneEntry:
        return self.genes[index]

    def __iter__(self) -> Iterator[GeneEntry]:
        return iter(self.genes)

    @property
    def gene_count(self) -> int:
        """Get number of genes."""
        return len(self.genes)

    def add_gene(self, gene: GeneEntry) -> None:
        """Add a gene, merging strains into an existing entry with the same name."""
        for existing in self.genes:
            if existing is gene:
                return
            if existing.common_name.lower() == gene.common_name.lower():
                for strain in gene.strains:
                    existing.add_strain(strain)
                return
        self.genes.append(gene)

    def get_gene(self, name: str) -> Optional[GeneEntry]:
        """Get gene by common name (case-insensitive)."""
        name = name.lower()
        for gene in self.genes:
            if gene.common_name.lower() == name:
                return gene
        return None

    def has_gene(self, name: str) -> bool:
        """Check whether a gene with the given common name is present (case-insensitive)."""
        return self.get_gene(name) is not None

    def merge(self, other: Optional['Dataset']) -> None:
        """Merge another dataset into this one."""
        if other is None:
            return
        for gene in other.genes:
            self.add_gene(gene)

    def subset(self, indices: Sequence[int]) -> 'Dataset':
        """Create a dataset holding the genes at the given indices."""
        subset = Dataset()
        subset.genes = [self.genes[i] for i in indices]
        return subset

    def list_populations(self) -> List[str]:
        """Get a sorted, non-redundant list of populations in the dataset."""
        populations = set()
        for gene in self.genes:
            populations.update(gene.list_populations())
        return sorted(populations)
