from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from extcontrol.services.paths import default_action_log_path


class ActionLogService:
    """Append-only structured log of parameter and script-generation events."""

    def __init__(self, log_path: Path | None = None, *, enabled: bool = True) -> None:
        if log_path is None:
            log_path = default_action_log_path()
        self.log_path = log_path.expanduser()
        self.enabled = enabled

    @classmethod
    def disabled(cls) -> "ActionLogService":
        return cls(Path("actions.log"), enabled=False)

    def log_event(self, action: str, **fields: Any) -> None:
        if not self.enabled:
            return
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "action": action,
        }
        payload.update(fields)
        self._append_json_line(payload)

    def read_events(self) -> list[dict[str, Any]]:
        if not self.log_path.exists():
            return []
        events: list[dict[str, Any]] = []
        try:
            lines = self.log_path.read_text(encoding="utf-8").splitlines()
        except OSError:
            return []
        for line in lines:
            if not line.strip():
                continue
            try:
                payload = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(payload, dict):
                events.append(payload)
        return events

    def _append_json_line(self, payload: dict[str, Any]) -> None:
        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with self.log_path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(payload, sort_keys=True, default=str) + "\n")
        except OSError:
            # Logging must never break user workflows.
            return
