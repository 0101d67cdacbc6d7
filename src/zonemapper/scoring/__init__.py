"""Compliance scoring."""

from .compliance import ComplianceScorer, compliance_bin, score
from .models import ComplianceResult

__all__ = [
    "ComplianceScorer",
    "ComplianceResult",
    "compliance_bin",
    "score",
]
