# chain_client.py
from __future__ import annotations
from typing import Any, Dict, List, Optional, Tuple
import requests

from core.events import EventLog


class ChainClient:
    def __init__(self, base_url: str, contract: str = "dfs3protocol", timeout: float = 20,
                 verify: bool = True, events: EventLog | None = None):
        """
        base_url: chain node root, e.g. https://8.138.81.44
        contract: code account holding the projects/likes tables
        verify: TLS verification (nodes addressed by bare IP often need False)
        """
        self.base = base_url.rstrip("/")
        self.contract = contract
        self.timeout = timeout
        self.verify = verify
        self.events = events or EventLog()

    # ---------- internal helpers ----------
    def _post(self, path: str, body: dict) -> Tuple[bool, Any, str]:
        url = f"{self.base}{path}"
        try:
            r = requests.post(url, json=body, timeout=self.timeout, verify=self.verify)
            r.raise_for_status()
            return True, r.json(), ""
        except (requests.RequestException, ValueError) as ex:
            return False, None, f"{type(ex).__name__}: {ex}"

    # ---------- public methods ----------
    def get_table_rows(self, code: str, scope: str, table: str, *, lower_bound: str = "",
                       upper_bound: str = "", index_position: int = 1, key_type: str = "",
                       limit: int = -1, reverse: bool = True, show_payer: bool = False) -> Dict:
        """Single read of a contract table. Never raises; failures come back with ok=False and rows=[]."""
        body = {
            "json": True,
            "code": code,
            "scope": scope,
            "table": table,
            "lower_bound": lower_bound,
            "upper_bound": upper_bound,
            "index_position": index_position,
            "key_type": key_type,
            "limit": limit,
            "reverse": reverse,
            "show_payer": show_payer,
        }
        ok, data, err = self._post("/v1/chain/get_table_rows", body)
        if ok and not (isinstance(data, dict) and isinstance(data.get("rows"), list)):
            ok, err = False, "malformed response: missing rows"
        if not ok:
            self.events.error("fetch_error", table=table, scope=scope, error=err)
            return {"ok": False, "rows": [], "error": err}
        return {"ok": True, "rows": data["rows"]}

    def fetch_projects(self) -> Dict:
        # reverse scan on the primary index: newest project first
        return self.get_table_rows(self.contract, self.contract, "projects", reverse=True)

    def fetch_liked_projects(self, account: str) -> Dict:
        return self.get_table_rows(self.contract, account, "likes", reverse=False)

    def get_currency_balance(self, code: str, account: str, symbol: str) -> Dict:
        ok, data, err = self._post("/v1/chain/get_currency_balance",
                                   {"code": code, "account": account, "symbol": symbol})
        if ok and not isinstance(data, list):
            ok, err = False, "malformed response: expected a list"
        if not ok:
            self.events.error("balance_error", code=code, account=account, symbol=symbol, error=err)
            return {"ok": False, "balances": [], "error": err}
        return {"ok": True, "balances": [str(b) for b in data]}

    def fetch_balance_snapshot(self, account: str, primary: Tuple[str, str],
                               secondary: Optional[Tuple[str, str]] = None) -> Dict:
        """Balances of `account` in the primary and (optionally) secondary token."""
        p = self.get_currency_balance(primary[0], account, primary[1])
        s = self.get_currency_balance(secondary[0], account, secondary[1]) if secondary else {"ok": True, "balances": []}
        primary_rows: List[str] = p["balances"]
        secondary_rows: List[str] = s["balances"]
        return {"ok": p["ok"] and s["ok"], "primary": primary_rows, "secondary": secondary_rows}
