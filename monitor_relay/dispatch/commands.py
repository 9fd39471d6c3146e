# monitor_relay/dispatch/commands.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

import requests

from monitor_relay.dispatch import ux
from monitor_relay.dispatch.admission import admit_update
from monitor_relay.dispatch.fanout import fan_out
from monitor_relay.errors import RelayError
from monitor_relay.jobs import MONITOR_WORKFLOWS, Job

# Failures that end a command with one coarse chat message.
COMMAND_FAILURES = (RelayError, requests.RequestException)

Notify = Callable[[str], bool]


@dataclass
class DispatchContext:
    """
    Everything a command needs, wired by the poller or the webhook.

    notify:  sends one message to the operator; returns False on failure
             and never raises.
    gateway: object with dispatch(workflow_file) and
             latest_run(workflow_file) -> Optional[WorkflowRun].
    """
    notify: Notify
    gateway: Any
    operator_chat_id: str
    jobs: Sequence[Job] = MONITOR_WORKFLOWS
    liveness_text: str = ux.LIVENESS_POLLING


def send_liveness(ctx: DispatchContext) -> bool:
    return ctx.notify(ctx.liveness_text)


def trigger_all(ctx: DispatchContext) -> bool:
    """
    Dispatch every job one after another, in list order.

    The first failure stops the batch: the remaining jobs are not
    attempted and the operator gets a single failure message, without
    detail on which job failed. Jobs dispatched before the failure stay
    dispatched.
    """
    ctx.notify(ux.TRIGGER_STARTED)
    try:
        for job in ctx.jobs:
            ctx.gateway.dispatch(job.file)
    except COMMAND_FAILURES as e:
        logging.error("[TRIGGER ERROR] %s", e)
        ctx.notify(ux.TRIGGER_FAILED)
        return False

    ctx.notify(ux.TRIGGER_SUCCEEDED)
    return True


def report_status(ctx: DispatchContext) -> bool:
    """
    Query the latest run of every job concurrently and send one report.

    All-or-nothing: if any lookup fails the operator gets the failure
    message instead of a partial report.
    """
    jobs = list(ctx.jobs)
    try:
        runs = fan_out(lambda job: ctx.gateway.latest_run(job.file), jobs)
    except COMMAND_FAILURES as e:
        logging.error("[STATUS ERROR] %s", e)
        ctx.notify(ux.STATUS_FAILED)
        return False

    ctx.notify(ux.format_status_report(list(zip(jobs, runs))))
    return True


COMMANDS = {
    "/test": send_liveness,
    "/trigger": trigger_all,
    "/status": report_status,
}


def handle_update(update: Any, ctx: DispatchContext) -> Optional[str]:
    """
    Run the command carried by one update, if any.

    Returns the command that was handled, or None when the update was
    dropped by admission or its text is not a known command. Matching is
    exact; anything else is ordinary chat traffic and stays silent.
    """
    text = admit_update(update, ctx.operator_chat_id)
    if text is None:
        return None

    handler = COMMANDS.get(text)
    if handler is None:
        return None

    logging.info("[COMMAND] %s (update %s)", text, update.get("update_id"))
    handler(ctx)
    return text
