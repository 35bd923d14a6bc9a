# run_new_projects.py
import argparse, json
from dotenv import load_dotenv
from core.jobs import build_runtime

def main():
    load_dotenv(override=True)
    ap = argparse.ArgumentParser()
    ap.add_argument("--dry", action="store_true", help="print messages, do not send or persist the watermark")
    args = ap.parse_args()

    rt = build_runtime()
    try:
        res = rt.new_projects(dry=args.dry)
    except Exception as ex:
        rt.events.error("error", job="new_projects", error=f"{type(ex).__name__}: {ex}")
        raise SystemExit("new projects job failed.")

    print(json.dumps(res, indent=2, ensure_ascii=False))
    if res.get("newProjects", 0) == 0:
        print("[new_projects] nothing new.")
    else:
        print(f"[new_projects] done. failed={res.get('failed', 0)}")

if __name__ == "__main__":
    main()
