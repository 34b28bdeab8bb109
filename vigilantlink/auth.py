"""Optional identity via the x-api-key header.

A known key resolves to its user id. A missing or unknown key resolves to
None so the caller is treated as anonymous rather than rejected.
"""

import logging
from typing import Dict, Optional

from fastapi import Security
from fastapi.security import APIKeyHeader

from vigilantlink import config

logger = logging.getLogger(__name__)

API_KEY_NAME = "x-api-key"
api_key_header = APIKeyHeader(name=API_KEY_NAME, auto_error=False)


def resolve_user(api_key: Optional[str], keys: Optional[Dict[str, str]] = None) -> Optional[str]:
    """Map an API key to a user id, or None for anonymous."""
    if not api_key:
        return None
    keys = config.API_KEYS if keys is None else keys
    user_id = keys.get(api_key)
    if user_id is None:
        logger.warning("Unknown API key presented; continuing as anonymous")
    return user_id


async def current_user(api_key: Optional[str] = Security(api_key_header)) -> Optional[str]:
    """FastAPI dependency returning the caller's user id or None."""
    return resolve_user(api_key)
