from slugshortener.dao.redis.redis_key_schema import RedisKeySchema
from slugshortener.dao.redis.mixins import RedisClientMixin
from slugshortener.dao.redis.short_link_redis_dao import ShortLinkRedisDAO
from slugshortener.dao.redis.quota_redis_dao import QuotaRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'ShortLinkRedisDAO',
    'QuotaRedisDAO',
]
