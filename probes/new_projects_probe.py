# probes/new_projects_probe.py
from __future__ import annotations
import re, datetime as dt
from typing import Any, Dict, List, Optional, Tuple

UTC = dt.timezone.utc
LOCAL_TZ = dt.timezone(dt.timedelta(hours=8))  # Beijing time, fixed offset
LOCAL_FMT = "%Y-%m-%d %H:%M:%S"

PRIMARY_ZERO = "0.0000 DFS"


def parse_chain_time(ts: str) -> Optional[dt.datetime]:
    """Chain timestamps look like 2024-01-01T00:00:00[.500][Z]; naive means UTC."""
    if not ts or not isinstance(ts, str):
        return None
    s = ts.strip()
    if s.endswith("Z"):
        s = s[:-1]
    s = re.sub(r"\.\d+", "", s)  # sub-second precision is irrelevant here
    try:
        t = dt.datetime.fromisoformat(s)
    except ValueError:
        return None
    if t.tzinfo is None:
        t = t.replace(tzinfo=UTC)
    return t.astimezone(UTC)


def to_local_time(ts: str) -> str:
    t = parse_chain_time(ts)
    if t is None:
        return ts
    return t.astimezone(LOCAL_TZ).strftime(LOCAL_FMT)


def diff_new_projects(rows: List[Dict[str, Any]], watermark: int) -> Tuple[List[Dict[str, Any]], int]:
    """
    rows must be ordered by id, descending (row 0 is the newest).
    Returns (projects with id > watermark in list order, next watermark).
    The watermark moves to the newest observed id whether or not anything was new,
    and never moves backwards.
    """
    if not rows:
        return [], watermark
    latest = int(rows[0]["id"])
    if latest <= watermark:
        return [], watermark
    fresh = [p for p in rows if int(p["id"]) > watermark]
    return fresh, max(watermark, latest)


def _fmt_balances(rows: List[str], default: List[str]) -> str:
    rows = rows or default
    return ", ".join(rows) if rows else "-"


def format_new_project_message(project: Dict[str, Any], balances: Optional[Dict[str, List[str]]] = None) -> str:
    lines = [
        "🆕 新项目创建提醒!",
        "",
        f"📝 项目名称: {project.get('project_name', '')}",
        f"🎨 NFT名称: {project.get('nft_name', '')}",
        f"👤 创建者: {project.get('creator', '')}",
        f"💰 初始价格: {project.get('init_nft_price', '')}",
        f"🔢 初始NFT数量: {project.get('init_nft_number', '')}",
        f"📅 创建时间: {to_local_time(project.get('create_time', ''))}",
    ]
    if balances is not None:
        lines += [
            "",
            "💼 创建者余额:",
            f"• 主代币: {_fmt_balances(balances.get('primary') or [], [PRIMARY_ZERO])}",
            f"• 其他代币: {_fmt_balances(balances.get('secondary') or [], [])}",
        ]
    return "\n".join(lines)
