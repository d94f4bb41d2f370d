"""Data Access Object (DAO) implementation for caller quotas in Redis

Quota records are plain integer keys (`<prefix>:quotas:<caller>`) holding the
attempts left in the current window; the key's TTL is the window.

The check and the decrement run server-side in a single Lua script, so two
concurrent attempts can never both consume the last unit of quota and the
stored value never drops below zero.

Classes:
    QuotaRedisDAO:
        DAO charging link generation attempts against per-caller quotas.

Example:
    >>> dao = QuotaRedisDAO(prefix="app:dev")
    >>> dao.consume('203.0.113.7', quota=10, window=1800)
    QuotaModel(caller='203.0.113.7', allowed=True, remaining=9, reset_after=1800)
"""

from beartype import beartype

from slugshortener.models import QuotaModel
from slugshortener.dao.base import QuotaBaseDAO
from slugshortener.dao.redis.mixins import RedisClientMixin
from slugshortener.dao.redis.helpers import handle_redis_connection_error


# KEYS[1] = caller quota key
# ARGV[1] = quota per window, ARGV[2] = window in seconds
# Returns {allowed (0|1), remaining, seconds until reset}
CONSUME_QUOTA_SCRIPT = """
local quota = tonumber(ARGV[1])
local window = tonumber(ARGV[2])

local current = redis.call('GET', KEYS[1])
if not current then
    redis.call('SET', KEYS[1], quota - 1, 'EX', window)
    return {1, quota - 1, window}
end

local ttl = redis.call('TTL', KEYS[1])
if ttl < 0 then
    redis.call('EXPIRE', KEYS[1], window)
    ttl = window
end

if tonumber(current) <= 0 then
    return {0, 0, ttl}
end
return {1, redis.call('DECR', KEYS[1]), ttl}
"""


class QuotaRedisDAO(RedisClientMixin, QuotaBaseDAO):
    """Redis-based Data Access Object (DAO) for per-caller link generation quotas

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        consume(caller: str, quota: int, window: int, **kwargs) -> QuotaModel:
            Atomically charge one attempt (decrement-with-floor).
            Raises DataStoreError on connectivity issues with Redis.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Script objects load lazily (EVALSHA, falling back to EVAL on NOSCRIPT)
        self._consume_script = self.redis.register_script(CONSUME_QUOTA_SCRIPT)

    @handle_redis_connection_error
    @beartype
    def consume(self, caller: str, quota: int, window: int, **kwargs) -> QuotaModel:
        """Charge one link generation attempt to a caller

        Args:
            caller (str):
                Caller identity (e.g., network address).
            quota (int):
                Attempts granted per window.
            window (int):
                Window length in seconds.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            QuotaModel:
                Whether the attempt is allowed, the attempts left and the
                seconds until the window resets.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.consume('203.0.113.7', quota=1, window=1800)
            QuotaModel(caller='203.0.113.7', allowed=True, remaining=0, reset_after=1800)
            >>> dao.consume('203.0.113.7', quota=1, window=1800)
            QuotaModel(caller='203.0.113.7', allowed=False, remaining=0, reset_after=1799)
        """
        caller_quota_key = self.keys.caller_quota_key(caller)
        allowed, remaining, reset_after = self._consume_script(keys=[caller_quota_key], args=[quota, window])
        return QuotaModel(
            caller=caller,
            allowed=bool(int(allowed)),
            remaining=int(remaining),
            reset_after=int(reset_after),
        )
