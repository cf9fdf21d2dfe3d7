"""Nested attributes: key parsing, reconciliation, error aggregation, autosave."""

from __future__ import annotations

from nested_params.nested.aggregator import aggregate_child_errors
from nested_params.nested.form import NestedFieldNamer
from nested_params.nested.keys import NEW_RECORD_PREFIX, Existing, New, parse_key
from nested_params.nested.reconciler import (
    ChildReconciler,
    ReconciliationPlan,
    plan_reconciliation,
)

__all__ = [
    "NEW_RECORD_PREFIX",
    "Existing",
    "New",
    "parse_key",
    "ReconciliationPlan",
    "plan_reconciliation",
    "ChildReconciler",
    "aggregate_child_errors",
    "NestedFieldNamer",
]
