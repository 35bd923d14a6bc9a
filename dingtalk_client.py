# dingtalk_client.py
from __future__ import annotations
import json, sys
import requests

from core.events import EventLog


def text_payload(content: str, at_all: bool = False) -> dict:
    return {"msgtype": "text", "text": {"content": content}, "at": {"isAtAll": at_all}}


def markdown_payload(title: str, text: str, at_all: bool = False) -> dict:
    return {"msgtype": "markdown", "markdown": {"title": title, "text": text}, "at": {"isAtAll": at_all}}


class DingTalkClient:
    def __init__(self, webhook_url: str | None, timeout: float = 20, events: EventLog | None = None):
        """
        webhook_url: robot webhook incl. access_token; empty means sending is skipped
        """
        self.webhook_url = (webhook_url or "").strip()
        self.timeout = timeout
        self.events = events or EventLog()

    @property
    def configured(self) -> bool:
        return bool(self.webhook_url)

    def send(self, payload: dict) -> dict:
        """
        One POST, no retry. Returns {"ok": bool, ...}; never raises.
        Non-2xx, network errors and a non-zero DingTalk errcode are failures.
        """
        if not self.webhook_url:
            self.events.error("send_error", error="DingTalk webhook URL is missing")
            return {"ok": False, "error": "missing_webhook"}
        try:
            r = requests.post(self.webhook_url, json=payload, timeout=self.timeout)
        except requests.RequestException as ex:
            err = f"{type(ex).__name__}: {ex}"
            self.events.error("send_error", error=err)
            return {"ok": False, "error": err}

        if not r.ok:
            err = f"DingTalk API error: {r.status_code}"
            self.events.error("send_error", status=r.status_code, error=err, resp=r.text[:300])
            return {"ok": False, "status": r.status_code, "error": err}

        try:
            body = r.json()
        except ValueError:
            body = {}
        errcode = body.get("errcode", 0) if isinstance(body, dict) else 0
        if errcode:
            err = f"DingTalk errcode {errcode}: {body.get('errmsg', '')}"
            self.events.error("send_error", status=r.status_code, error=err)
            return {"ok": False, "status": r.status_code, "error": err}
        return {"ok": True, "status": r.status_code}

    def send_text(self, content: str, at_all: bool = False) -> dict:
        return self.send(text_payload(content, at_all=at_all))

    def send_markdown(self, title: str, text: str, at_all: bool = False) -> dict:
        return self.send(markdown_payload(title, text, at_all=at_all))


# --------- CLI test ----------
if __name__ == "__main__":
    if len(sys.argv) < 3:
        print("Usage: python dingtalk_client.py <WEBHOOK_URL> <MESSAGE>")
        sys.exit(1)
    client = DingTalkClient(sys.argv[1])
    print(json.dumps(client.send_text(" ".join(sys.argv[2:])), indent=2, ensure_ascii=False))
