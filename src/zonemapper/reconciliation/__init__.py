"""Claim reconciliation against the master directory."""

from .reconciler import ZoneReconciler, ReconciliationResult, reconcile

__all__ = [
    "ZoneReconciler",
    "ReconciliationResult",
    "reconcile",
]
