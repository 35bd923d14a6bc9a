"""Countdown threshold checks."""
import datetime as dt

from probes.countdown_probe import (
    check_countdown,
    format_countdown_message,
    liked_projects,
    minutes_left,
    next_round_time,
)
from tests.conftest import make_project

UTC = dt.timezone.utc
T = dt.datetime(2024, 1, 1, 0, 0, 0, tzinfo=UTC)


def test_next_round_time():
    p = make_project(1, last_round="2024-01-01T00:00:00", sec_per_round=1200)
    assert next_round_time(p) == T + dt.timedelta(seconds=1200)


def test_below_one_minute_is_zero_and_silent():
    p = make_project(1, sec_per_round=600)
    chk = check_countdown(p, now=T + dt.timedelta(seconds=590))
    assert chk["minutes_left"] == 0
    assert chk["should_notify"] is False


def test_fires_at_ten_minutes():
    p = make_project(1, sec_per_round=1200)
    chk = check_countdown(p, now=T + dt.timedelta(seconds=600))
    assert chk["minutes_left"] == 10
    assert chk["should_notify"] is True


def test_fires_at_three_minutes_with_seconds_to_spare():
    p = make_project(1, sec_per_round=600)
    # 3m59s left floors to 3
    chk = check_countdown(p, now=T + dt.timedelta(seconds=361))
    assert chk["minutes_left"] == 3
    assert chk["should_notify"] is True


def test_between_thresholds_is_silent():
    p = make_project(1, sec_per_round=1200)
    assert check_countdown(p, now=T + dt.timedelta(seconds=900))["should_notify"] is False


def test_overdue_round_floors_negative():
    p = make_project(1, sec_per_round=60)
    assert minutes_left(p, now=T + dt.timedelta(seconds=90)) == -1


def test_custom_thresholds():
    p = make_project(1, sec_per_round=1200)
    assert check_countdown(p, now=T + dt.timedelta(seconds=900), thresholds=(5,))["should_notify"] is True


def test_bad_last_round():
    chk = check_countdown(make_project(1, last_round=""), now=T)
    assert chk == {"should_notify": False, "minutes_left": None, "next_round": None}


def test_liked_projects_filter():
    projects = [make_project(i) for i in (5, 4, 3)]
    likes = [{"pid": 3, "time": "2024-01-01T00:00:00"}, {"pid": 5, "time": "2024-01-01T00:00:00"}]
    assert [p["id"] for p in liked_projects(projects, likes)] == [5, 3]


def test_format_countdown_message():
    p = make_project(9, sec_per_round=1200)
    payload = format_countdown_message(p, 10)
    assert payload["msgtype"] == "markdown"
    assert payload["markdown"]["title"] == "DFS项目倒计时提醒"
    text = payload["markdown"]["text"]
    assert "- 项目名称：Project 9" in text
    assert "- 项目ID：9" in text
    assert "- 下一轮开始时间：2024-01-01 08:20:00" in text
    assert "还有10分钟" in text
