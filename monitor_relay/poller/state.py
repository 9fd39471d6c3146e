# monitor_relay/poller/state.py
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

StateMap = Dict[str, Any]


class StateStore:
    """
    Flat string-to-string JSON file shared with other writers.

    The relay only owns one key in it. Every write re-reads the file
    first so keys written by someone else since our last read survive.
    """

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)

    def load(self) -> StateMap:
        """Return the whole mapping; {} when the file is missing or unreadable."""
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logging.warning("[STATE] ignoring unreadable state file %s: %s", self.path, e)
            return {}
        if not isinstance(raw, dict):
            logging.warning("[STATE] state file %s is not an object, ignoring", self.path)
            return {}
        return raw

    def get(self, key: str, default: Optional[Any] = None) -> Optional[Any]:
        return self.load().get(key, default)

    def set(self, key: str, value: str) -> None:
        state = self.load()
        state[key] = str(value)
        self._write(state)

    def _write(self, state: StateMap) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=self.path.name + ".", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(json.dumps(state, ensure_ascii=False, indent=2) + "\n")
            os.replace(tmp, self.path)
        finally:
            if os.path.exists(tmp):
                os.unlink(tmp)
