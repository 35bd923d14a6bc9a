# probes/countdown_probe.py
from __future__ import annotations
import math, datetime as dt
from typing import Any, Dict, Iterable, List, Optional, Sequence

from dingtalk_client import markdown_payload
from probes.new_projects_probe import parse_chain_time, LOCAL_TZ, LOCAL_FMT

UTC = dt.timezone.utc
DEFAULT_THRESHOLDS = (10, 3)


def _now() -> dt.datetime:
    return dt.datetime.now(UTC)


def next_round_time(project: Dict[str, Any]) -> Optional[dt.datetime]:
    last = parse_chain_time(project.get("last_round", ""))
    if last is None:
        return None
    return last + dt.timedelta(seconds=int(project.get("sec_per_round") or 0))


def minutes_left(project: Dict[str, Any], now: Optional[dt.datetime] = None) -> Optional[int]:
    nxt = next_round_time(project)
    if nxt is None:
        return None
    now = now or _now()
    return math.floor((nxt - now).total_seconds() / 60)


def check_countdown(project: Dict[str, Any], now: Optional[dt.datetime] = None,
                    thresholds: Sequence[int] = DEFAULT_THRESHOLDS) -> Dict[str, Any]:
    # Whole-minute match only: a poll that misses the minute misses the reminder.
    left = minutes_left(project, now)
    return {
        "should_notify": left is not None and left in thresholds,
        "minutes_left": left,
        "next_round": next_round_time(project),
    }


def liked_projects(projects: Iterable[Dict[str, Any]], likes: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    pids = {int(lp["pid"]) for lp in likes if lp.get("pid") is not None}
    return [p for p in projects if int(p["id"]) in pids]


def format_countdown_message(project: Dict[str, Any], left: int) -> dict:
    nxt = next_round_time(project)
    when = nxt.astimezone(LOCAL_TZ).strftime(LOCAL_FMT) if nxt else "?"
    text = (
        "### 项目倒计时提醒\n"
        f"- 项目名称：{project.get('project_name', '')}\n"
        f"- 项目ID：{project.get('id')}\n"
        f"- 下一轮开始时间：{when}\n"
        f"- ⏰ 距离下一轮开始还有{left}分钟，请做好准备！"
    )
    return markdown_payload("DFS项目倒计时提醒", text)
