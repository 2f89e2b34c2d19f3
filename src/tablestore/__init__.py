"""
Table Store - schema-validated tabular record store

A single-process record store with named, schema-bound tables, a
reader-writer locked in-memory registry, full-snapshot persistence and
a REST API.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
