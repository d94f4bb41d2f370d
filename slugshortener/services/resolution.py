"""Short link resolution.

The redirect path is the dominant traffic shape (about 100 reads per write),
so resolution is one pure GET against the slug registry: no hit counters and
no TTL refresh.
"""

import logging

from slugshortener.models import ShortLinkModel
from slugshortener.dao.base import ShortLinkBaseDAO
from slugshortener.dao.exceptions import ShortLinkNotFoundError
from slugshortener.utils.shortener import is_valid_slug


logger = logging.getLogger(__name__)


class ResolutionService:
    def __init__(self, links: ShortLinkBaseDAO):
        self.links = links

    def resolve(self, slug: str) -> ShortLinkModel:
        """Look up the live mapping for `slug`

        Slugs that could never have been registered are reported as missing
        without a store round trip.

        Raises:
            ShortLinkNotFoundError:
                If the slug was never registered or has expired.
            DataStoreError:
                If the slug registry is unreachable.
        """
        if not is_valid_slug(slug):
            raise ShortLinkNotFoundError(f"Short link with slug '{slug}' not found.")
        return self.links.get(slug)
