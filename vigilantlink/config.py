"""Environment-driven settings. Values are read once at import from the
process environment, with a local .env file loaded first if present."""

import os
from typing import Dict

from dotenv import load_dotenv

load_dotenv()

SERVICE_NAME: str = "VigilantLink API"
VERSION: str = "1.0.0"

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# "key1:user1,key2:user2"
API_KEYS_RAW: str = os.getenv("API_KEYS", "")

# Empty -> in-memory store
REPORT_STORE_PATH: str = os.getenv("REPORT_STORE_PATH", "")

HISTORY_LIMIT: int = int(os.getenv("HISTORY_LIMIT", "20"))
STATS_WINDOW: int = int(os.getenv("STATS_WINDOW", "100"))


def parse_api_keys(raw: str) -> Dict[str, str]:
    """Parse 'key:user' pairs. Entries without a user id are skipped."""
    keys: Dict[str, str] = {}
    for entry in raw.split(","):
        key, sep, user_id = entry.strip().partition(":")
        if sep and key.strip() and user_id.strip():
            keys[key.strip()] = user_id.strip()
    return keys


API_KEYS: Dict[str, str] = parse_api_keys(API_KEYS_RAW)
