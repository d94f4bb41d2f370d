"""Data Access Object (DAO) implementation for managing short links in Redis

This module provides the Redis-based slug registry.

Responsibilities:
    - Register slug -> target URL mappings with `SET NX EX` (atomic set-if-absent);
    - Retrieve mappings with a pure read (no counters, no TTL refresh);
    - Raise appropriate DAO exceptions.

Classes:
    ShortLinkRedisDAO:
        DAO for storing and retrieving ShortLinkModel in a Redis datastore.

Example:
    >>> from slugshortener.models import ShortLinkModel
    >>> from slugshortener.dao.redis import ShortLinkRedisDAO

    >>> dao = ShortLinkRedisDAO(prefix="app:dev")
    >>> dao.insert(ShortLinkModel(target="https://example.com/page", slug="promo", ttl=86400))
    <ShortLinkRedisDAO>

    >>> retrieved = dao.get("promo")
    >>> retrieved.target
    'https://example.com/page'
"""

from datetime import datetime, timedelta, UTC

from beartype import beartype

from slugshortener.models import ShortLinkModel
from slugshortener.dao.base import ShortLinkBaseDAO
from slugshortener.dao.redis.mixins import RedisClientMixin
from slugshortener.dao.redis.helpers import handle_redis_connection_error
from slugshortener.dao.exceptions import ShortLinkAlreadyExistsError, ShortLinkNotFoundError


class ShortLinkRedisDAO(RedisClientMixin, ShortLinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short link mappings

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(link: ShortLinkModel, **kwargs) -> ShortLinkRedisDAO:
            Store a mapping unless its slug is already live.
            Raises ShortLinkAlreadyExistsError when the slug is taken.
            Raises DataStoreError on connectivity issues with Redis.

        get(slug: str, **kwargs) -> ShortLinkModel:
            Retrieve a mapping and its remaining lifetime by slug.
            Raises ShortLinkNotFoundError when the slug doesn't exist.
            Raises DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, link: ShortLinkModel, **kwargs) -> 'ShortLinkRedisDAO':
        """Insert a short link mapping into Redis if its slug is free

        NOTE: Existence check and write are a single `SET ... NX EX` command.
              An EXISTS followed by SET would let two concurrent writers of the
              same slug both observe absence:

              (lambda 1): EXISTS <app>:links:<slug>:url  => 0
              (lambda 2): EXISTS <app>:links:<slug>:url  => 0
              (lambda 1): SET <app>:links:<slug>:url <url 1> EX <ttl>
              (lambda 2): SET <app>:links:<slug>:url <url 2> EX <ttl>  => url 1 is lost

              With NX, Redis serializes both writes and the first one wins.

        Args:
            link (ShortLinkModel):
                Mapping to store; `link.ttl` is its lifetime in seconds.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortLinkRedisDAO: self (for method chaining)

        Raises:
            ShortLinkAlreadyExistsError:
                If a live mapping with the same slug already exists.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        link_url_key = self.keys.link_url_key(link.slug)
        created = self.redis.set(link_url_key, link.target, nx=True, ex=link.ttl)
        if not created:
            raise ShortLinkAlreadyExistsError(f"Short link with slug '{link.slug}' already exists.")
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, slug: str, **kwargs) -> ShortLinkModel:
        """Retrieve a stored short link mapping by slug

        GET and TTL are sent in one pipeline (single network round trip).

        Args:
            slug (str):
                The slug identifier of the short link.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortLinkModel:
                The stored mapping. `ttl` holds the remaining lifetime in seconds.

        Raises:
            ShortLinkNotFoundError:
                If the slug does not exist in Redis (never written or expired).
            DataStoreError:
                If Redis connectivity issues occur.
        """
        link_url_key = self.keys.link_url_key(slug)

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.get(link_url_key)
            pipe.ttl(link_url_key)
            target, ttl = pipe.execute()

        if target is None:
            raise ShortLinkNotFoundError(f"Short link with slug '{slug}' not found.")

        # TTL is -1 for keys without expiry; those are never written by insert()
        if ttl is None or ttl < 0:
            return ShortLinkModel(target=target, slug=slug, ttl=0, expires_at=None)

        return ShortLinkModel(
            target=target,
            slug=slug,
            ttl=ttl,
            expires_at=datetime.now(UTC) + timedelta(seconds=ttl),
        )
