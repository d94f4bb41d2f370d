"""Unit tests for the QuotaRedisDAO

Test coverage includes:

1. Script registration
   - The decrement-with-floor script is registered once per DAO.

2. Consume behavior
   - Script results are mapped onto QuotaModel.
   - Keys and arguments are passed to the script.
   - Invalid types raise TypeError or BeartypeCallHintParamViolation.
   - Redis connection errors raise DataStoreError.

3. Quota script against an in-memory Redis
   - The first attempt opens a window of quota - 1 attempts.
   - Exhausted quotas are refused without the counter dropping below zero.
   - Counters that lost their TTL are given a fresh window.
   - A new quota is granted once the window expires.
"""

from unittest.mock import MagicMock

import time

import pytest
import redis
import fakeredis
from beartype.roar import BeartypeCallHintParamViolation

from slugshortener.models import QuotaModel
from slugshortener.dao.exceptions import DataStoreError
from slugshortener.dao.redis import QuotaRedisDAO
from slugshortener.dao.redis.quota_redis_dao import CONSUME_QUOTA_SCRIPT


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def consume_script(redis_client):
    """Mock the registered Lua script object."""
    script = MagicMock()
    redis_client.register_script.return_value = script
    return script


@pytest.fixture
def dao(redis_client, consume_script, app_prefix):
    return QuotaRedisDAO(redis_client=redis_client, prefix=app_prefix, healthcheck=False)


# -------------------------------
# 1. Script registration
# -------------------------------


def test_registers_consume_script(dao, redis_client):
    redis_client.register_script.assert_called_once_with(CONSUME_QUOTA_SCRIPT)


# -------------------------------
# 2. Consume behavior
# -------------------------------


def test_consume_first_attempt(dao, consume_script):
    consume_script.return_value = [1, 9, 1800]

    result = dao.consume('203.0.113.7', quota=10, window=1800)

    assert result == QuotaModel(caller='203.0.113.7', allowed=True, remaining=9, reset_after=1800)
    consume_script.assert_called_once_with(keys=['testapp:test:quotas:203.0.113.7'], args=[10, 1800])


def test_consume_exhausted_quota(dao, consume_script):
    consume_script.return_value = [0, 0, 1234]

    result = dao.consume('203.0.113.7', quota=10, window=1800)

    assert result == QuotaModel(caller='203.0.113.7', allowed=False, remaining=0, reset_after=1234)


def test_consume_with_string_replies(dao, consume_script):
    """Script replies may come back as strings depending on client decoding."""
    consume_script.return_value = ['1', '4', '60']

    result = dao.consume('203.0.113.7', quota=5, window=60)

    assert result.allowed is True
    assert result.remaining == 4
    assert result.reset_after == 60


@pytest.mark.parametrize(
    'caller, quota, window',
    [
        (12345, 10, 1800),
        ('203.0.113.7', '10', 1800),
        ('203.0.113.7', 10, 18.5),
    ],
)
def test_consume_with_invalid_types(dao, caller, quota, window):
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        dao.consume(caller, quota=quota, window=window)


def test_consume_with_redis_connection_error(dao, consume_script):
    consume_script.side_effect = redis.exceptions.ConnectionError('Connection refused')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at redis.test:6379/0."):
        dao.consume('203.0.113.7', quota=10, window=1800)


# -------------------------------
# 3. Quota script against an in-memory Redis
# -------------------------------


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)


@pytest.fixture
def live_dao(fake_redis, app_prefix):
    return QuotaRedisDAO(redis_client=fake_redis, prefix=app_prefix, healthcheck=False)


CALLER_KEY = 'testapp:test:quotas:203.0.113.7'


def test_script_first_attempt_opens_window(live_dao, fake_redis):
    result = live_dao.consume('203.0.113.7', quota=3, window=1800)

    assert result == QuotaModel(caller='203.0.113.7', allowed=True, remaining=2, reset_after=1800)
    assert fake_redis.get(CALLER_KEY) == '2'
    assert fake_redis.ttl(CALLER_KEY) == 1800


def test_script_refuses_exhausted_quota(live_dao, fake_redis):
    results = [live_dao.consume('203.0.113.7', quota=3, window=1800) for _ in range(5)]

    assert [r.allowed for r in results] == [True, True, True, False, False]
    assert [r.remaining for r in results] == [2, 1, 0, 0, 0]
    assert fake_redis.get(CALLER_KEY) == '0'
    assert 0 < fake_redis.ttl(CALLER_KEY) <= 1800


def test_script_keeps_callers_apart(live_dao):
    live_dao.consume('203.0.113.7', quota=1, window=1800)

    assert live_dao.consume('203.0.113.7', quota=1, window=1800).allowed is False
    assert live_dao.consume('198.51.100.1', quota=1, window=1800).allowed is True


def test_script_rearms_counter_without_ttl(live_dao, fake_redis):
    fake_redis.set(CALLER_KEY, 3)
    assert fake_redis.ttl(CALLER_KEY) == -1

    result = live_dao.consume('203.0.113.7', quota=10, window=60)

    assert result == QuotaModel(caller='203.0.113.7', allowed=True, remaining=2, reset_after=60)
    assert fake_redis.ttl(CALLER_KEY) == 60


def test_script_rearms_exhausted_counter_without_ttl(live_dao, fake_redis):
    fake_redis.set(CALLER_KEY, 0)

    result = live_dao.consume('203.0.113.7', quota=10, window=60)

    assert result == QuotaModel(caller='203.0.113.7', allowed=False, remaining=0, reset_after=60)
    assert fake_redis.get(CALLER_KEY) == '0'
    assert fake_redis.ttl(CALLER_KEY) == 60


def test_script_grants_fresh_quota_after_window(live_dao, fake_redis):
    assert live_dao.consume('203.0.113.7', quota=1, window=1).allowed is True
    assert live_dao.consume('203.0.113.7', quota=1, window=1).allowed is False

    time.sleep(1.1)

    result = live_dao.consume('203.0.113.7', quota=1, window=1)
    assert result == QuotaModel(caller='203.0.113.7', allowed=True, remaining=0, reset_after=1)
