# run_status.py
from dotenv import load_dotenv

from core.events import EventLog
from core.jobs import build_runtime
from core.state import load_watermark

def brief(name, res, extra=""):
    ok = res.get("ok")
    cnt = len(res.get("rows", []))
    err = f" error={res['error']}" if res.get("error") else ""
    return f"[{name}] ok={ok} count={cnt}{extra}{err}"

def main():
    load_dotenv()
    rt = build_runtime()
    rt.chain.events = EventLog(echo=False)  # status output only
    s = rt.settings

    projects = rt.chain.fetch_projects()
    latest = projects["rows"][0].get("id") if projects["rows"] else None
    likes = rt.chain.fetch_liked_projects(s.LIKES_ACCOUNT)
    wm = load_watermark(rt.store, s.WATERMARK_KEY, s.WATERMARK_SEED)

    lines = [
        brief("projects", projects, f" latest_id={latest}"),
        brief("likes", likes, f" account={s.LIKES_ACCOUNT}"),
        f"[watermark] ok={wm['ok']} backend={s.STATE_BACKEND} value={wm.get('value')} seeded={wm.get('seeded')}",
        f"[dingtalk] configured={rt.sender.configured}",
    ]
    print("\n".join(lines))

if __name__ == "__main__":
    main()
