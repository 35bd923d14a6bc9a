# core/events.py
import os, sys, json, datetime as dt
from collections import deque
from typing import Any, Dict, List, Optional

UTC = dt.timezone.utc


def _now_iso() -> str:
    return dt.datetime.now(tz=UTC).isoformat().replace("+00:00", "Z")


class EventLog:
    """
    Structured event sink handed to every component.

    Each event is one JSON object: {"type": ..., <fields>, "timestamp": ...}.
    Events are printed as JSON lines (stderr for level="error"), optionally
    mirrored to a file, and the most recent ones are kept in memory.
    """

    def __init__(self, path: Optional[str] = None, echo: bool = True, keep: int = 200):
        self.path = path or None
        self.echo = echo
        self._recent = deque(maxlen=keep)

    def emit(self, event_type: str, level: str = "info", **fields: Any) -> Dict[str, Any]:
        event = {"type": event_type, **fields, "timestamp": _now_iso()}
        self._recent.append(event)
        line = json.dumps(event, ensure_ascii=False, default=str)
        if self.echo:
            stream = sys.stderr if level == "error" else sys.stdout
            stream.write(line + "\n"); stream.flush()
        if self.path:
            parent = os.path.dirname(self.path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        return event

    def error(self, event_type: str, **fields: Any) -> Dict[str, Any]:
        return self.emit(event_type, level="error", **fields)

    @property
    def recent(self) -> List[Dict[str, Any]]:
        return list(self._recent)

    def of_type(self, event_type: str) -> List[Dict[str, Any]]:
        return [e for e in self._recent if e["type"] == event_type]
