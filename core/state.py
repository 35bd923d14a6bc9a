# core/state.py
import json, os
from typing import Any, Dict, Optional

import redis

# Every store answers with result dicts instead of raising:
#   get(key) -> {"ok": bool, "value": Any | None, "error"?: str}
#   set(key, value) -> {"ok": bool, "error"?: str}


class JsonFileStore:
    def __init__(self, path: str = ".state/watermark.json"):
        self.path = path

    def _load(self) -> Dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            obj = json.load(f)
        if not isinstance(obj, dict):
            raise ValueError("state file is not an object")
        return obj

    def _save(self, obj: Dict) -> None:
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        tmp = self.path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(obj, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self.path)

    def get(self, key: str) -> Dict:
        try:
            return {"ok": True, "value": self._load().get(key)}
        except (OSError, ValueError) as ex:
            return {"ok": False, "value": None, "error": f"{type(ex).__name__}: {ex}"}

    def set(self, key: str, value: Any) -> Dict:
        try:
            db = self._load()
            db[key] = value
            self._save(db)
            return {"ok": True}
        except (OSError, ValueError) as ex:
            return {"ok": False, "error": f"{type(ex).__name__}: {ex}"}


class RedisStore:
    def __init__(self, url: str = "redis://localhost:6379/0", client: Optional[redis.Redis] = None, timeout: float = 5.0):
        self.client = client if client is not None else redis.Redis.from_url(
            url, decode_responses=True, socket_timeout=timeout
        )

    def get(self, key: str) -> Dict:
        try:
            return {"ok": True, "value": self.client.get(key)}
        except redis.RedisError as ex:
            return {"ok": False, "value": None, "error": f"{type(ex).__name__}: {ex}"}

    def set(self, key: str, value: Any) -> Dict:
        try:
            self.client.set(key, value)
            return {"ok": True}
        except redis.RedisError as ex:
            return {"ok": False, "error": f"{type(ex).__name__}: {ex}"}


class MemoryStore:
    """Process-local store; forgets everything on a cold start."""

    def __init__(self, initial: Optional[Dict] = None):
        self.data = dict(initial or {})

    def get(self, key: str) -> Dict:
        return {"ok": True, "value": self.data.get(key)}

    def set(self, key: str, value: Any) -> Dict:
        self.data[key] = value
        return {"ok": True}


def make_store(backend: str = "json", path: str = ".state/watermark.json", redis_url: str = "redis://localhost:6379/0"):
    backend = (backend or "json").lower()
    if backend == "json":
        return JsonFileStore(path)
    if backend == "redis":
        return RedisStore(redis_url)
    if backend == "memory":
        return MemoryStore()
    raise ValueError(f"Unknown STATE_BACKEND: {backend!r} (expected json, redis or memory)")


def load_watermark(store, key: str, seed: int) -> Dict:
    """
    Read the watermark, falling back to `seed` (not zero) when nothing is stored.
    Returns {"ok", "value", "seeded"} or {"ok": False, "error"} when the store fails
    or holds something that is not an integer.
    """
    res = store.get(key)
    if not res.get("ok"):
        return {"ok": False, "value": None, "seeded": False, "error": res.get("error", "unknown")}
    raw = res.get("value")
    if raw is None or raw == "":
        return {"ok": True, "value": int(seed), "seeded": True}
    if isinstance(raw, bool):
        return {"ok": False, "value": None, "seeded": False, "error": f"non-integer watermark: {raw!r}"}
    try:
        return {"ok": True, "value": int(raw), "seeded": False}
    except (TypeError, ValueError):
        return {"ok": False, "value": None, "seeded": False, "error": f"non-integer watermark: {raw!r}"}


def save_watermark(store, key: str, value: int) -> Dict:
    return store.set(key, int(value))
