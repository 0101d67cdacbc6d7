# zonemapper/src/zonemapper/classification/__init__.py
"""Zone coverage classification."""

from .classifier import CoverageClassifier, CoverageDecision, classify

__all__ = [
    "CoverageClassifier",
    "CoverageDecision",
    "classify",
]
