# app.py
"""
HTTP trigger for the scheduled jobs.

An external scheduler calls:
  GET /api/cron          -> new project notifier
  GET /api/ppp-notifier  -> liked project countdown notifier
Each request runs its job once, synchronously.
"""
import datetime as dt

from flask import Flask, jsonify

from core.jobs import build_runtime


def _now_iso() -> str:
    return dt.datetime.now(tz=dt.timezone.utc).isoformat().replace("+00:00", "Z")


def create_app(runtime=None) -> Flask:
    app = Flask(__name__)
    rt = runtime or build_runtime()

    def _run(job_name, job):
        try:
            return jsonify(job()), 200
        except Exception as ex:
            rt.events.error("error", job=job_name, error=f"{type(ex).__name__}: {ex}")
            return jsonify({"success": False, "error": "Internal server error", "timestamp": _now_iso()}), 500

    @app.route("/api/cron", methods=["GET"])
    def new_projects():
        return _run("new_projects", rt.new_projects)

    @app.route("/api/ppp-notifier", methods=["GET"])
    @app.route("/api/ppp-notifer", methods=["GET"])  # old path still hit by existing schedules
    def countdown():
        return _run("countdown", rt.countdown)

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"ok": True, "webhook_configured": rt.sender.configured, "timestamp": _now_iso()})

    return app


if __name__ == "__main__":
    import config
    create_app().run(host="0.0.0.0", port=config.PORT)
