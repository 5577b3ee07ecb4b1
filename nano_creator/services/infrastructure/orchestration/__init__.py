"""Orchestration - windowed batch execution with partial-failure aggregation."""

from .batch import Success, Failure, Outcome, BatchResult, run_batch

__all__ = ["Success", "Failure", "Outcome", "BatchResult", "run_batch"]
