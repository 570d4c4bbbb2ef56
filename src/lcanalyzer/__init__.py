"""LCANALYZER

A small toolkit for analysing astronomical light curves.
It loads tabular photometry, computes per-band magnitude statistics,
and normalises light curves for comparison across filters.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
