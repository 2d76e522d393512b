"""shop_reports package.

Contains the record store for a print/copy shop's sales, expenses and
inventory, the reporting engine that filters and aggregates those records,
and utilities for serving a Streamlit dashboard and a small CLI.

Architecture:
- Records live behind a store (in-memory, or MongoDB via pymongo)
- Pydantic models validate every record and report output
- pandas does the grouping and day bucketing inside the reporting engine
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
