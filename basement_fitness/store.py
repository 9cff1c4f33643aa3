from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

KEYS = {
    "profile": "bf:profile",
    "goal": "bf:goal",
    "secondary_goal": "bf:secondaryGoal",
    "habits": "bf:habits",
    "plan": "bf:plan",
    "routines": "bf:routines",
    "sessions": "bf:sessions",
    "active": "bf:activeSessionId",
}


class JsonStore:
    """Key/value persistence over a single JSON document.

    ``load`` never raises for absent or unreadable data; it hands back the
    caller's default instead. With ``path=None`` the document lives in memory.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path
        self._memory: Dict[str, Any] = {}
        # save rewrites the whole document
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, Any]:
        if self.path is None:
            return self._memory
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Store at %s is unreadable, using defaults: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self, key: str, default: Any = None) -> Any:
        value = self._read().get(key)
        if value is None:
            return copy.deepcopy(default)
        return copy.deepcopy(value)

    def save(self, key: str, value: Any) -> None:
        with self._lock:
            self._write(key, value)

    def _write(self, key: str, value: Any) -> None:
        if self.path is None:
            self._memory[key] = copy.deepcopy(value)
            return
        data = self._read()
        data[key] = value
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except OSError:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise
