# core/jobs.py
import datetime as dt
from typing import Dict, Optional, Sequence, Tuple

from chain_client import ChainClient
from dingtalk_client import DingTalkClient, text_payload
from core.events import EventLog
from core.state import load_watermark, save_watermark, make_store
from probes.new_projects_probe import diff_new_projects, format_new_project_message
from probes.countdown_probe import check_countdown, liked_projects, format_countdown_message, DEFAULT_THRESHOLDS

UTC = dt.timezone.utc


def _now_iso() -> str:
    return dt.datetime.now(tz=UTC).isoformat().replace("+00:00", "Z")


def _deliver(sender: DingTalkClient, payload: dict, dry: bool) -> dict:
    if dry:
        print(payload.get("text", {}).get("content") or payload.get("markdown", {}).get("text", ""))
        return {"ok": True, "dry": True}
    return sender.send(payload)


def run_new_projects_job(chain: ChainClient, sender: DingTalkClient, store, events: EventLog, *,
                         seed: int, key: str = "last_project_id",
                         balance_tokens: Optional[Tuple[Tuple[str, str], Tuple[str, str]]] = None,
                         dry: bool = False) -> Dict:
    """
    fetch projects -> load watermark -> diff -> notify each new project -> persist watermark.

    Notifications go out newest first (the table is read in reverse). A failed send
    is logged and the batch continues; the watermark still advances, so a project
    whose notification failed is not retried on the next trigger.
    """
    fetched = chain.fetch_projects()
    rows = fetched["rows"]
    events.emit("projects_fetched", ok=fetched["ok"], count=len(rows))

    wm = load_watermark(store, key, seed)
    if not wm["ok"]:
        # Unknown watermark: notifying from the seed could flood the chat, so skip this run.
        events.error("state_error", op="get", key=key, error=wm.get("error"))
        return {"success": True, "lastProjectId": None, "newProjects": 0, "skipped": "state_unavailable"}
    watermark = wm["value"]
    if wm["seeded"]:
        events.emit("watermark_seeded", key=key, value=watermark)

    fresh, next_wm = diff_new_projects(rows, watermark)
    failed = 0
    for project in fresh:
        balances = None
        if balance_tokens:
            primary, secondary = balance_tokens
            balances = chain.fetch_balance_snapshot(project.get("creator", ""), primary, secondary)
        msg = format_new_project_message(project, balances)
        res = _deliver(sender, text_payload(msg), dry)
        if res.get("ok"):
            events.emit("notification_sent", kind="new_project", project_id=project.get("id"),
                        project_name=project.get("project_name"))
        else:
            failed += 1
            events.error("notification_failed", kind="new_project", project_id=project.get("id"),
                         error=res.get("error"))

    if next_wm != watermark and not dry:
        saved = save_watermark(store, key, next_wm)
        if saved.get("ok"):
            events.emit("watermark_advanced", key=key, previous=watermark, value=next_wm)
        else:
            events.error("state_error", op="set", key=key, value=next_wm, error=saved.get("error"))

    return {"success": True, "lastProjectId": next_wm, "newProjects": len(fresh), "failed": failed}


def run_countdown_job(chain: ChainClient, sender: DingTalkClient, events: EventLog, *,
                      account: str, thresholds: Sequence[int] = DEFAULT_THRESHOLDS,
                      now: Optional[dt.datetime] = None, dry: bool = False) -> Dict:
    """Remind about liked projects whose next round starts in exactly one of `thresholds` minutes."""
    projects = chain.fetch_projects()["rows"]
    events.emit("projects_fetched", count=len(projects))
    likes = chain.fetch_liked_projects(account)["rows"]
    events.emit("liked_projects_fetched", account=account, count=len(likes))

    notified = 0
    for project in liked_projects(projects, likes):
        chk = check_countdown(project, now=now, thresholds=thresholds)
        events.emit("project_countdown_check", project_id=project.get("id"),
                    project_name=project.get("project_name"),
                    should_notify=chk["should_notify"], minutes_left=chk["minutes_left"])
        if not chk["should_notify"]:
            continue
        res = _deliver(sender, format_countdown_message(project, chk["minutes_left"]), dry)
        if res.get("ok"):
            notified += 1
            events.emit("notification_sent", kind="countdown", project_id=project.get("id"),
                        project_name=project.get("project_name"), minutes_left=chk["minutes_left"])
        else:
            events.error("notification_failed", kind="countdown", project_id=project.get("id"),
                         error=res.get("error"))

    return {"success": True, "message": "Cron job executed successfully",
            "notified": notified, "timestamp": _now_iso()}


class Runtime:
    """Collaborators for both jobs, wired from config."""

    def __init__(self, chain, sender, store, events, settings):
        self.chain = chain
        self.sender = sender
        self.store = store
        self.events = events
        self.settings = settings

    def new_projects(self, dry: bool = False) -> Dict:
        s = self.settings
        tokens = (s.PRIMARY_TOKEN, s.SECONDARY_TOKEN) if s.BALANCE_ENABLED else None
        return run_new_projects_job(self.chain, self.sender, self.store, self.events,
                                    seed=s.WATERMARK_SEED, key=s.WATERMARK_KEY,
                                    balance_tokens=tokens, dry=dry)

    def countdown(self, dry: bool = False) -> Dict:
        s = self.settings
        return run_countdown_job(self.chain, self.sender, self.events,
                                 account=s.LIKES_ACCOUNT, thresholds=s.COUNTDOWN_THRESHOLDS, dry=dry)


def build_runtime(settings=None) -> Runtime:
    if settings is None:
        import config as settings
    events = EventLog(path=settings.EVENT_LOG_PATH or None)
    chain = ChainClient(settings.CHAIN_API_URL, contract=settings.CHAIN_CONTRACT,
                        timeout=settings.HTTP_TIMEOUT, verify=settings.CHAIN_VERIFY_TLS, events=events)
    sender = DingTalkClient(settings.DINGTALK_WEBHOOK_URL, timeout=settings.HTTP_TIMEOUT, events=events)
    store = make_store(settings.STATE_BACKEND, path=settings.STATE_PATH, redis_url=settings.REDIS_URL)
    return Runtime(chain, sender, store, events, settings)
