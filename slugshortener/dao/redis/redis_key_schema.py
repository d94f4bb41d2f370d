import functools
from collections.abc import Callable


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing data models.

    Short links and caller quotas live in separate namespaces (`links:` and
    `quotas:`) so a slug can never collide with a caller identity.

    An optional prefix can be provided to namespace all generated keys,
    e.g. "slugshortener:prod" or "slugshortener:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    @prefix_key
    def link_url_key(self, slug: str) -> str:
        return f'links:{slug}:url'

    @prefix_key
    def caller_quota_key(self, caller: str) -> str:
        return f'quotas:{caller}'
