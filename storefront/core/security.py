from __future__ import annotations

import hmac
from typing import Optional

from fastapi import HTTPException, status

from storefront.config import get_settings


def _load_api_keys() -> set[str]:
    settings = get_settings()
    keys = set()
    if settings.API_KEYS:
        for value in settings.API_KEYS.split(","):
            value = value.strip()
            if value:
                keys.add(value)
    return keys


def _matches_any(candidate: str, keys: set[str]) -> bool:
    return any(hmac.compare_digest(candidate, key) for key in keys)


def authenticate_request(
    api_key: Optional[str],
    *,
    require_auth: bool = False,
) -> Optional[dict]:
    """Check an API key against the configured keys.

    When no keys are configured the service runs open (local development),
    mirroring how the storefront front-end talks to the backend directly.
    """
    keys = _load_api_keys()

    if api_key and keys and _matches_any(api_key.strip(), keys):
        return {"auth_type": "api_key"}

    if keys and (require_auth or api_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return None
