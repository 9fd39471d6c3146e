"""
Monitor Relay

Bridges a Telegram chat and GitHub Actions: the operator sends /test,
/trigger or /status and the relay dispatches the monitor workflows or
reports their latest run.
"""

__version__ = "0.1.0"
