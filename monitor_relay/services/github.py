# monitor_relay/services/github.py
from __future__ import annotations

from typing import Dict, Optional

import requests

from monitor_relay.config import Settings
from monitor_relay.errors import GitHubError
from monitor_relay.jobs import WorkflowRun

GITHUB_API_ROOT = "https://api.github.com"
USER_AGENT = "monitor-relay"


class GitHubActions:
    """
    Thin client over the two Actions endpoints the relay needs:
    workflow dispatch and the latest run of a workflow.

    Credentials are resolved per call, so a missing token surfaces as
    ConfigError at the command that needs it rather than at startup.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def _headers(self, token: str) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }

    def _workflow_url(self, repo: str, workflow_file: str, suffix: str) -> str:
        return f"{GITHUB_API_ROOT}/repos/{repo}/actions/workflows/{workflow_file}/{suffix}"

    def dispatch(self, workflow_file: str) -> None:
        token, repo, ref = self.settings.github_context()
        resp = requests.post(
            self._workflow_url(repo, workflow_file, "dispatches"),
            headers=self._headers(token),
            json={"ref": ref},
            timeout=self.settings.http_timeout,
        )
        if not resp.ok:
            raise GitHubError(f"Dispatch failed for {workflow_file}", resp.status_code, resp.text)

    def latest_run(self, workflow_file: str) -> Optional[WorkflowRun]:
        """
        Return the most recent run of a workflow, or None if it never ran.
        """
        token, repo, _ = self.settings.github_context()
        resp = requests.get(
            self._workflow_url(repo, workflow_file, "runs"),
            headers=self._headers(token),
            params={"per_page": 1},
            timeout=self.settings.http_timeout,
        )
        if not resp.ok:
            raise GitHubError(f"Status lookup failed for {workflow_file}", resp.status_code, resp.text)

        try:
            data = resp.json()
        except ValueError as e:
            raise GitHubError(
                f"Status lookup returned invalid JSON for {workflow_file}", resp.status_code, resp.text
            ) from e

        runs = data.get("workflow_runs") if isinstance(data, dict) else None
        if not isinstance(runs, list) or (runs and not isinstance(runs[0], dict)):
            raise GitHubError(
                f"Status lookup returned unexpected payload for {workflow_file}", resp.status_code, resp.text
            )
        if not runs:
            return None
        return WorkflowRun.from_api(runs[0])
