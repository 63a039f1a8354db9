"""Strata: cache-aside and write-through caching over a relational store."""

__version__ = "0.1.0"
