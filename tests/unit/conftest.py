"""Shared fixtures: in-memory stores honoring the DAO contracts.

Both stores keep expiry as absolute UTC datetimes so tests can move time with
freezegun, and serialize every operation with a lock so concurrent tests
exercise the same "first writer wins" semantics as Redis.
"""

import threading
from datetime import datetime, timedelta, UTC

import pytest

from slugshortener.models import ShortLinkModel, QuotaModel
from slugshortener.dao.base import ShortLinkBaseDAO, QuotaBaseDAO
from slugshortener.dao.exceptions import ShortLinkAlreadyExistsError, ShortLinkNotFoundError
from slugshortener.utils.config import clear_appconfig_cache


class InMemoryShortLinkDAO(ShortLinkBaseDAO):
    def __init__(self):
        self.entries: dict[str, tuple[str, datetime]] = {}
        self.insert_calls = 0
        self._lock = threading.Lock()

    def _live(self, slug: str) -> tuple[str, datetime] | None:
        entry = self.entries.get(slug)
        if entry is not None and entry[1] <= datetime.now(UTC):
            del self.entries[slug]
            return None
        return entry

    def insert(self, link: ShortLinkModel, **kwargs) -> 'InMemoryShortLinkDAO':
        with self._lock:
            self.insert_calls += 1
            if self._live(link.slug) is not None:
                raise ShortLinkAlreadyExistsError(f"Short link with slug '{link.slug}' already exists.")
            self.entries[link.slug] = (link.target, datetime.now(UTC) + timedelta(seconds=link.ttl))
        return self

    def get(self, slug: str, **kwargs) -> ShortLinkModel:
        with self._lock:
            entry = self._live(slug)
            if entry is None:
                raise ShortLinkNotFoundError(f"Short link with slug '{slug}' not found.")
            target, expires_at = entry
            ttl = int((expires_at - datetime.now(UTC)).total_seconds())
            return ShortLinkModel(target=target, slug=slug, ttl=ttl, expires_at=expires_at)


class InMemoryQuotaDAO(QuotaBaseDAO):
    def __init__(self):
        self.records: dict[str, tuple[int, datetime]] = {}
        self._lock = threading.Lock()

    def consume(self, caller: str, quota: int, window: int, **kwargs) -> QuotaModel:
        with self._lock:
            now = datetime.now(UTC)
            record = self.records.get(caller)
            if record is None or record[1] <= now:
                self.records[caller] = (quota - 1, now + timedelta(seconds=window))
                return QuotaModel(caller=caller, allowed=True, remaining=quota - 1, reset_after=window)

            remaining, expires_at = record
            reset_after = int((expires_at - now).total_seconds())
            if remaining <= 0:
                return QuotaModel(caller=caller, allowed=False, remaining=0, reset_after=reset_after)

            self.records[caller] = (remaining - 1, expires_at)
            return QuotaModel(caller=caller, allowed=True, remaining=remaining - 1, reset_after=reset_after)


@pytest.fixture
def short_link_store() -> InMemoryShortLinkDAO:
    return InMemoryShortLinkDAO()


@pytest.fixture
def quota_store() -> InMemoryQuotaDAO:
    return InMemoryQuotaDAO()


@pytest.fixture(autouse=True)
def _fresh_appconfig_cache():
    """Every test starts and ends with a cold configuration cache"""
    clear_appconfig_cache()
    yield
    clear_appconfig_cache()
