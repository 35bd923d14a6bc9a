# run_countdown.py
import argparse, json
from dotenv import load_dotenv
from core.jobs import build_runtime

def main():
    load_dotenv(override=True)
    ap = argparse.ArgumentParser()
    ap.add_argument("--dry", action="store_true", help="print reminders instead of sending them")
    args = ap.parse_args()

    rt = build_runtime()
    try:
        res = rt.countdown(dry=args.dry)
    except Exception as ex:
        rt.events.error("error", job="countdown", error=f"{type(ex).__name__}: {ex}")
        raise SystemExit("countdown job failed.")

    print(json.dumps(res, indent=2, ensure_ascii=False))
    print(f"[countdown] done. notified={res.get('notified', 0)}")

if __name__ == "__main__":
    main()
