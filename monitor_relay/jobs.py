from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Job:
    """
    One monitor workflow managed by the relay.

    file:  workflow file name the Actions API expects.
    label: human-readable name used in chat replies.
    """
    file: str
    label: str


# Static configuration, never mutated at runtime.
MONITOR_WORKFLOWS: Tuple[Job, ...] = (
    Job(file="monitor-instocktrades.yml", label="InStockTrades"),
    Job(file="monitor-ebay.yml", label="eBay"),
)


@dataclass(frozen=True)
class WorkflowRun:
    """Read-only projection of the latest run of a workflow."""
    status: str
    event: str
    created_at: str
    conclusion: Optional[str] = None

    @property
    def state(self) -> str:
        # Terminal outcome wins over lifecycle state.
        return self.conclusion or self.status

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "WorkflowRun":
        conclusion = raw.get("conclusion")
        return cls(
            status=str(raw.get("status") or "unknown"),
            event=str(raw.get("event") or "unknown"),
            created_at=str(raw.get("created_at") or ""),
            conclusion=str(conclusion) if conclusion else None,
        )
