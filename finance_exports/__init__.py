"""
Personal Finance Exports - Source Package

The reporting/export engine of a personal-finance application.
Raw financial records go in; filtered, formatted and summarized
spreadsheets, CSV, JSON or XML documents come out.

DESIGN PRINCIPLES:
1. Filter → Project → Aggregate → Encode, always in that order
2. A run either fully succeeds or leaves no trace
3. Every config mutation and export run is auditable
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Personal Finance Exports Team"
