"""Shared fixtures: fake chain node, fake webhook, quiet event log."""
import pytest

from core.events import EventLog
from core.state import MemoryStore


def make_project(pid, **overrides):
    project = {
        "id": pid,
        "creator": f"creator{pid}",
        "project_name": f"Project {pid}",
        "nft_name": f"NFT{pid}",
        "nft_img": f"https://img.example/{pid}.png",
        "desc": "",
        "init_nft_number": 100,
        "init_nft_price": "1.0000 DFS",
        "create_time": "2024-01-01T00:00:00",
        "last_round": "2024-01-01T00:00:00",
        "sec_per_round": 600,
    }
    project.update(overrides)
    return project


class FakeChain:
    def __init__(self, projects=None, likes=None, balances=None, ok=True):
        self.projects = projects or []
        self.likes = likes or []
        self.balances = balances or {"ok": True, "primary": [], "secondary": []}
        self.ok = ok
        self.balance_calls = []

    def fetch_projects(self):
        if not self.ok:
            return {"ok": False, "rows": [], "error": "ConnectionError: down"}
        return {"ok": True, "rows": list(self.projects)}

    def fetch_liked_projects(self, account):
        return {"ok": True, "rows": list(self.likes)}

    def fetch_balance_snapshot(self, account, primary, secondary=None):
        self.balance_calls.append((account, primary, secondary))
        return self.balances


class FakeSender:
    def __init__(self, fail_ids=(), configured=True):
        self.sent = []
        self.fail_ids = set(fail_ids)
        self.configured = configured

    def send(self, payload):
        self.sent.append(payload)
        body = payload.get("text", {}).get("content") or payload.get("markdown", {}).get("text", "")
        for pid in self.fail_ids:
            if f"Project {pid}" in body:
                return {"ok": False, "status": 500, "error": "DingTalk API error: 500"}
        return {"ok": True, "status": 200}


class BrokenStore:
    def __init__(self, fail_get=True, fail_set=True):
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.data = {}

    def get(self, key):
        if self.fail_get:
            return {"ok": False, "value": None, "error": "ConnectionError: redis down"}
        return {"ok": True, "value": self.data.get(key)}

    def set(self, key, value):
        if self.fail_set:
            return {"ok": False, "error": "ConnectionError: redis down"}
        self.data[key] = value
        return {"ok": True}


@pytest.fixture
def events():
    return EventLog(echo=False)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def sender():
    return FakeSender()
