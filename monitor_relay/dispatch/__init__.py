"""
Dispatch Core

Shared by the poller and the webhook server: decides whether an inbound
update is actionable and runs the matching command.

Nothing in this package reads the environment or talks HTTP directly;
the notifier and the gateway are handed in through DispatchContext.
"""

from .admission import admit_update
from .commands import DispatchContext, handle_update

__all__ = [
    "DispatchContext",
    "admit_update",
    "handle_update",
]
