# config.py
import os
from typing import List, Tuple
from dotenv import load_dotenv

# Load .env from the project root
load_dotenv()

def _env_bool(key: str, default: bool) -> bool:
    v = (os.getenv(key) or "").strip().lower()
    if v in ("1","true","yes","y","on"): return True
    if v in ("0","false","no","n","off"): return False
    return default

def _env_int(key: str, default: int) -> int:
    v = os.getenv(key)
    try: return int(v)
    except (TypeError, ValueError): return default

def _env_list(key: str, default: List[str]) -> List[str]:
    v = os.getenv(key) or ""
    items = [x.strip() for x in v.split(",") if x.strip()]
    return items or default

def _env_token(key: str, default: str) -> Tuple[str, str]:
    """'contract:SYMBOL' -> (contract, SYMBOL)"""
    raw = (os.getenv(key) or default).strip()
    code, _, symbol = raw.partition(":")
    if not code or not symbol:
        code, _, symbol = default.partition(":")
    return code.strip(), symbol.strip().upper()

APP_NAME = os.getenv("APP_NAME", "DFS Project Watcher")
ENV = os.getenv("ENV", "dev")

# Missing webhook is not fatal: jobs log and skip sending.
DINGTALK_WEBHOOK_URL = os.getenv("DINGTALK_WEBHOOK_URL", "").strip()

CHAIN_API_URL = os.getenv("CHAIN_API_URL", "https://8.138.81.44").strip().rstrip("/")
CHAIN_VERIFY_TLS = _env_bool("CHAIN_VERIFY_TLS", True)
CHAIN_CONTRACT = os.getenv("CHAIN_CONTRACT", "dfs3protocol").strip()
HTTP_TIMEOUT = _env_int("HTTP_TIMEOUT", 20)

LIKES_ACCOUNT = os.getenv("LIKES_ACCOUNT", "zhaoyunhello").strip()
COUNTDOWN_THRESHOLDS = tuple(int(x) for x in _env_list("COUNTDOWN_THRESHOLDS", ["10", "3"]) if x.lstrip("-").isdigit())

WATERMARK_SEED = _env_int("WATERMARK_SEED", 112)
WATERMARK_KEY = os.getenv("WATERMARK_KEY", "last_project_id").strip()
STATE_BACKEND = os.getenv("STATE_BACKEND", "json").strip().lower()
STATE_PATH = os.getenv("STATE_PATH", ".state/watermark.json")
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

BALANCE_ENABLED = _env_bool("BALANCE_ENABLED", True)
PRIMARY_TOKEN = _env_token("PRIMARY_TOKEN", "eosio.token:DFS")
SECONDARY_TOKEN = _env_token("SECONDARY_TOKEN", "dfs3protocol:DFSM")

EVENT_LOG_PATH = os.getenv("EVENT_LOG_PATH", "").strip()
PORT = _env_int("PORT", 8080)
