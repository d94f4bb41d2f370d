from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from slugshortener.utils.constants import DEFAULT_EXPIRY_HOURS, ONE_HOUR_SECONDS


@dataclass(frozen=True)
class ShortLinkModel:
    """Represent a slug to target URL mapping.

    Attributes:
        target (str):
            The original long URL that the slug redirects to.
        slug (str):
            The unique short identifier of the mapping.
        ttl (int):
            Time-To-Live in seconds requested when the mapping is stored.
        expires_at (Optional[datetime]):
            Moment after which the mapping is no longer persisted. Only known
            for mappings read back from the data store.

    Example:
        >>> link = ShortLinkModel(target='https://example.com/article/123', slug='promo')
        >>> link.ttl
        86400
        >>> link.expiry_hours
        24
    """

    target: str
    slug: str
    ttl: int = DEFAULT_EXPIRY_HOURS * ONE_HOUR_SECONDS
    expires_at: Optional[datetime] = None

    @property
    def expiry_hours(self) -> int:
        return self.ttl // ONE_HOUR_SECONDS
