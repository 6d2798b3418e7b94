#!/usr/bin/env python3

"""
Unit tests for the native FASTA reader.
"""

import unittest
import tempfile
import shutil
import sys
import os

# Add the parent directory to the path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from gene_dataset_pipeline.core.data_structures import Dataset, GeneEntry, GeneRegion, StrainEntry
from gene_dataset_pipeline.core.exceptions import ParseError
from gene_dataset_pipeline.core.exporters import NativeFastaExporter
from gene_dataset_pipeline.core.parsers import NativeFastaReader, read_datasets, UNKNOWN_GENE


class TestNativeFastaReader(unittest.TestCase):
    """Test reading native FASTA files."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def write_file(self, name, content):
        path = os.path.join(self.temp_dir, name)
        with open(path, 'w') as f:
            f.write(content)
        return path

    def test_read_exported_dataset(self):
        sequence = "ACGT" * 20
        dataset = Dataset([
            GeneEntry("CG1234-RA", alias="Adh", strains=[
                StrainEntry("D. melanogaster", "ZI103", chromosome="2L", sequence=sequence,
                            regions=[GeneRegion(GeneRegion.EXON, 1, 40), GeneRegion(GeneRegion.INTRON, 41, 80)],
                            populations=["Zimbabwe", "Africa"]),
                StrainEntry("D. melanogaster", "FR14", chromosome="2L", sequence="NNNN"),
            ]),
            GeneEntry("CG5678-RA", strains=[StrainEntry("D. simulans", "MD63", chromosome="3R", sequence="ACGT")]),
        ])
        path = os.path.join(self.temp_dir, "dataset.nfa")
        NativeFastaExporter().export(dataset, path)

        parsed = NativeFastaReader(path).parse()

        self.assertEqual([g.common_name for g in parsed], ["CG1234-RA", "CG5678-RA"])
        self.assertEqual(parsed[0].alias, "Adh")
        self.assertEqual(parsed[1].alias, "")
        self.assertEqual(parsed[0].strain_count, 2)

        strain = parsed[0].strains[0]
        self.assertEqual(strain.species_name, "D. melanogaster")
        self.assertEqual(strain.strain_name, "ZI103")
        self.assertEqual(strain.chromosome, "2L")
        self.assertEqual(strain.sequence, sequence)
        self.assertEqual(strain.populations, ["Zimbabwe", "Africa"])
        self.assertEqual([(r.type, r.start, r.end) for r in strain.regions],
                         [("Exon", 1, 40), ("Intron", 41, 80)])

        self.assertEqual(parsed[0].strains[1].populations, [])
        self.assertEqual(parsed[0].strains[1].regions, [])
        self.assertEqual(parsed[1].strains[0].chromosome, "3R")

    def test_records_of_one_gene_need_not_be_adjacent(self):
        path = self.write_file("split.nfa",
                               ">D. mel; A1; CG1; ; 2L; Population=; \nACGT\n"
                               ">D. mel; A1; CG2; ; 2L; Population=; \nACGT\n"
                               ">D. mel; B1; cg1; ; 2L; Population=; \nTTTT\n")

        parsed = NativeFastaReader(path).parse()

        self.assertEqual(len(parsed), 2)
        self.assertEqual(parsed[0].strain_count, 2)

    def test_malformed_header(self):
        path = self.write_file("malformed.nfa", ">not a native header\nACGTACGT\n")

        parsed = NativeFastaReader(path).parse()

        self.assertEqual(parsed[0].common_name, UNKNOWN_GENE)
        region = parsed[0].strains[0].regions[0]
        self.assertEqual((region.type, region.start, region.end), (GeneRegion.UNNAMED, 1, 8))

    def test_malformed_header_joins_previous_gene(self):
        path = self.write_file("malformed.nfa",
                               ">D. mel; A1; CG1; ; 2L; Population=; \nACGT\n"
                               ">broken\nTTTT\n")

        parsed = NativeFastaReader(path).parse()

        self.assertEqual(len(parsed), 1)
        self.assertEqual(parsed[0].strain_count, 2)

    def test_read_utf8_names(self):
        path = os.path.join(self.temp_dir, "utf8.nfa")
        with open(path, 'w', encoding='utf-8') as f:
            f.write(">D. simé; S1; CG1; ; 2L; Population=Île-de-France; \nACGT\n")

        strain = NativeFastaReader(path).parse()[0].strains[0]

        self.assertEqual(strain.species_name, "D. simé")
        self.assertEqual(strain.populations, ["Île-de-France"])

    def test_empty_file(self):
        path = self.write_file("empty.nfa", "")
        self.assertEqual(len(NativeFastaReader(path).parse()), 0)

    def test_missing_file(self):
        with self.assertRaises(ParseError):
            NativeFastaReader(os.path.join(self.temp_dir, "missing.nfa")).parse()

    def test_read_datasets_merges_files(self):
        first = self.write_file("a.nfa", ">D. mel; A1; CG1; ; 2L; Population=; \nACGT\n")
        second = self.write_file("b.nfa",
                                 ">D. sim; S1; CG1; ; 2L; Population=; \nACGT\n"
                                 ">D. sim; S1; CG2; ; 3R; Population=; \nACGT\n")

        dataset = read_datasets([first, second])

        self.assertEqual([g.common_name for g in dataset], ["CG1", "CG2"])
        self.assertEqual(dataset[0].strain_count, 2)


if __name__ == '__main__':
    unittest.main()
