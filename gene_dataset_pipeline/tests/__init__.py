#!/usr/bin/env python3

"""
Test suite for the gene dataset pipeline.

Unit tests covering:
- The dataset read model and its merge rules
- Configuration management and validation
- Option parsing and the interactive fallback
- Every registered filter, including overlap edge cases
- Native FASTA export and import
- Pipeline orchestration and error handling
"""
