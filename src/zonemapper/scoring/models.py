"""Data models for compliance scoring."""

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Any

@dataclass(frozen=True)
class ComplianceResult:
    score: float              # 0..1, 4 decimals
    bin: str                  # "healthy" | "fair" | "degraded" | "critical"
    forced_exceptions: int    # master pincodes missing from claimed zones
    total_considered: int     # master pincodes of every claimed zone
    zones_considered: int

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)
