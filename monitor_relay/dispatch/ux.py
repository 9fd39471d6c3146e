# monitor_relay/dispatch/ux.py
from __future__ import annotations

from html import escape
from typing import Optional, Sequence, Tuple

from monitor_relay.jobs import Job, WorkflowRun
from monitor_relay.utils.time import format_utc

# Operator-facing texts. Transport detail never ends up in here.
LIVENESS_POLLING = "✅ Bot is alive and running."
LIVENESS_WEBHOOK = "✅ Bot is alive and running (webhook mode)."

TRIGGER_STARTED = "⚡ Triggering monitor workflows..."
TRIGGER_SUCCEEDED = "✅ Monitor workflows dispatched."
TRIGGER_FAILED = "❌ Failed to trigger monitor workflows."

STATUS_HEADER = "📊 Monitor status"
STATUS_FAILED = "❌ Failed to fetch workflow status."

NO_RUNS = "no runs yet"


def format_run_status(run: Optional[WorkflowRun]) -> str:
    if run is None:
        return NO_RUNS
    return f"{run.state} ({run.event}, {format_utc(run.created_at)})"


def format_status_report(rows: Sequence[Tuple[Job, Optional[WorkflowRun]]]) -> str:
    """
    Build the /status reply: a header, then one line per job in the
    order given.
    """
    lines = [STATUS_HEADER]
    for job, run in rows:
        lines.append(f"• <b>{escape(job.label)}</b>: {escape(format_run_status(run))}")
    return "\n".join(lines)
