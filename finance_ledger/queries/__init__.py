"""Aggregation package."""

from finance_ledger.queries.aggregation import AggregationEngine

__all__ = ["AggregationEngine"]
