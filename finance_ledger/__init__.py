"""
Finance Ledger - Source Package

A personal finance ledger with a line command interface: record income
and expenses by category, set per-category budgets and query totals.

DESIGN PRINCIPLES:
1. Money is exact (Decimal, never float)
2. History is append-only
3. Validate first, then mutate; a rejected command changes nothing
4. Warnings and errors are returned as values and shown verbatim
5. Storage layer is swappable
"""

__version__ = "1.0.0"
