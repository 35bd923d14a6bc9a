"""Structured event log."""
import json

from core.events import EventLog


def test_emit_shape_and_stdout(capsys):
    log = EventLog()
    ev = log.emit("projects_fetched", count=3)
    assert ev["type"] == "projects_fetched"
    assert ev["count"] == 3
    assert ev["timestamp"].endswith("Z")
    out = capsys.readouterr().out.strip()
    assert json.loads(out) == ev


def test_errors_go_to_stderr(capsys):
    EventLog().error("fetch_error", error="down")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert json.loads(captured.err)["type"] == "fetch_error"


def test_file_mirror(tmp_path):
    path = tmp_path / "logs" / "events.jsonl"
    log = EventLog(path=str(path), echo=False)
    log.emit("a", n=1)
    log.emit("b", n=2)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(l)["type"] for l in lines] == ["a", "b"]


def test_recent_is_bounded():
    log = EventLog(echo=False, keep=2)
    for i in range(5):
        log.emit("tick", i=i)
    assert [e["i"] for e in log.recent] == [3, 4]
    assert len(log.of_type("tick")) == 2
