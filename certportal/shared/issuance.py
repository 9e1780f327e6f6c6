"""Advisory per-client issuance counter.

The key is derived from the caller's apparent network address, so the cap is
trivially bypassed by changing address or clearing the table. It is a courtesy
limit, not a security boundary; real enforcement would need an atomic
increment-and-check on a trusted server-side identity.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import requests

from ..app import db
from ..constants import CLIENT_KEY_PREFIX, GENERIC_CLIENT_KEY, ISSUANCE_CAP
from ..models import IssuanceStat

logger = logging.getLogger("certportal.issuance")


class IssuanceLimitReached(RuntimeError):
    """Raised when a client key has already used up its certificates."""

    def __init__(self, key: str, count: int, cap: int):
        super().__init__(f"issuance cap reached key={key} count={count} cap={cap}")
        self.key = key
        self.count = count
        self.cap = cap


def client_storage_key(address: str | None) -> str:
    cleaned = (address or "").strip()
    if not cleaned:
        return GENERIC_CLIENT_KEY
    return f"{CLIENT_KEY_PREFIX}{cleaned}"


def lookup_public_address(
    url: str, session: requests.Session | None = None
) -> str | None:
    """Ask an ``{"ip": ...}`` echo service for our public address."""
    http = session or requests.Session()
    try:
        response = http.get(url)
        response.raise_for_status()
        address = response.json().get("ip")
    except (requests.RequestException, ValueError, AttributeError) as exc:
        logger.warning("[ISSUE] address lookup failed url=%s error=%s", url, exc)
        return None
    if not isinstance(address, str) or not address.strip():
        logger.warning("[ISSUE] address lookup returned no ip url=%s", url)
        return None
    return address.strip()


def remaining_issues(count: int, cap: int = ISSUANCE_CAP) -> int:
    return max(0, cap - count)


def is_blocked(count: int, cap: int = ISSUANCE_CAP) -> bool:
    return count >= cap


def get_stat(key: str) -> IssuanceStat | None:
    return db.session.get(IssuanceStat, key)


def current_count(key: str) -> int:
    stat = get_stat(key)
    return stat.count if stat and stat.count else 0


def ensure_can_issue(key: str, cap: int = ISSUANCE_CAP) -> int:
    count = current_count(key)
    if is_blocked(count, cap):
        logger.info("[ISSUE-BLOCKED] key=%s count=%s cap=%s", key, count, cap)
        raise IssuanceLimitReached(key, count, cap)
    return count


def record_issue(key: str) -> IssuanceStat:
    """Increment the counter for ``key``. Read-then-write; not atomic."""
    stat = get_stat(key)
    if stat is None:
        stat = IssuanceStat(storage_key=key, count=0)
        db.session.add(stat)
    stat.count = (stat.count or 0) + 1
    stat.last_generated = datetime.now(timezone.utc)
    db.session.commit()
    logger.info("[ISSUE] key=%s count=%s", key, stat.count)
    return stat
