#!/usr/bin/env python3

"""
Utility module for the gene dataset pipeline: progress observers and
performance monitoring.
"""
