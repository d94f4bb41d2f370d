import functools
import redis
from typing import Any
from collections.abc import Callable

from slugshortener.dao.exceptions import DataStoreError


__all__ = []


def handle_redis_connection_error[F: Callable[..., Any]](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors, timeouts and out-of-memory refusals

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise
            redis.exceptions.ConnectionError or redis.exceptions.TimeoutError
            or redis.exceptions.OutOfMemoryError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues or
            memory exhaustion with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... def get_target(self, slug):
        ...     return self.redis.get(slug)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.exceptions.OutOfMemoryError as e:
            raise DataStoreError(f'Redis at {_describe(self.redis)} is out of memory.') from e
        except redis.exceptions.TimeoutError as e:
            raise DataStoreError(f'Redis at {_describe(self.redis)} timed out.') from e
        except redis.exceptions.ConnectionError as e:
            raise DataStoreError(f"Can't connect to Redis at {_describe(self.redis)}.") from e

    return wrapper


def _describe(client: redis.Redis) -> str:
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"
