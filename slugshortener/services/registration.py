"""Short link registration.

RegistrationService follows this procedure for every request:
    - Step 1: Validate the target URL, the custom slug and the expiry
    - Step 2: Charge the caller's link generation quota
    - Step 3: Pick a slug (the caller's custom slug, or a random Base62 one)
    - Step 4: Atomically store the mapping unless the slug is taken
              (generated slugs are redrawn a bounded number of times)

No store access happens before all input is validated.

Example:
    >>> service = RegistrationService(links=ShortLinkRedisDAO(...), quota_tracker=QuotaTracker(QuotaRedisDAO(...)))
    >>> result = service.register('https://example.com/a', caller='203.0.113.7')
    >>> result.link.slug
    'kF3a9Qb'
    >>> result.link.expiry_hours
    24
"""

import logging
import secrets
import urllib.parse
from dataclasses import dataclass
from random import Random
from typing import Optional

from slugshortener.exceptions import (
    GenerationExhaustedError,
    InvalidExpiryError,
    InvalidSlugError,
    InvalidURLError,
    RateLimitedError,
    SlugConflictError,
)
from slugshortener.models import ShortLinkModel
from slugshortener.dao.base import ShortLinkBaseDAO
from slugshortener.dao.exceptions import ShortLinkAlreadyExistsError
from slugshortener.services.quota_tracker import QuotaTracker
from slugshortener.utils.config import ShortenerSettings
from slugshortener.utils.shortener import generate_slug, is_valid_slug
from slugshortener.utils.constants import MAX_EXPIRY_HOURS, MAX_TARGET_URL_LENGTH, ONE_HOUR_SECONDS


logger = logging.getLogger(__name__)

# Log event names
SHORT_LINK_CREATED = 'SHORT_LINK_CREATED'
SLUG_COLLISION = 'SLUG_COLLISION'
SLUG_CONFLICT = 'SLUG_CONFLICT'
GENERATION_EXHAUSTED = 'GENERATION_EXHAUSTED'
RATE_LIMITED = 'RATE_LIMITED'


@dataclass(frozen=True)
class RegistrationResult:
    link: ShortLinkModel
    rate_limit: Optional[int]  # attempts left in the caller's window
    rate_limit_reset: Optional[int]  # seconds until the caller's quota resets
    custom: bool = False


def _bare_host(host: str) -> str:
    host = host.lower().rstrip('.')
    return host[4:] if host.startswith('www.') else host


def validate_target_url(url: object, own_domain: Optional[str] = None) -> str:
    """Ensure `url` is an absolute HTTPS URL that may be shortened

    Args:
        url (object):
            Candidate target URL as received from the client.
        own_domain (Optional[str]):
            Public host of this service. Links pointing back at it are refused
            so short links can't redirect into each other.

    Returns:
        str: The validated URL, unchanged.

    Raises:
        InvalidURLError: If the URL is missing, malformed, too long, not HTTPS
                         or points at this service.
    """
    if not isinstance(url, str) or not url:
        raise InvalidURLError(str(url), 'missing URL')
    if len(url) > MAX_TARGET_URL_LENGTH:
        raise InvalidURLError(f'{url[:64]}...', f'longer than {MAX_TARGET_URL_LENGTH} characters')
    if any(character.isspace() for character in url):
        raise InvalidURLError(url, 'contains whitespace')

    try:
        components = urllib.parse.urlsplit(url)
        hostname = components.hostname
    except ValueError as e:
        raise InvalidURLError(url, 'malformed URL') from e

    if components.scheme.lower() != 'https':
        raise InvalidURLError(url, 'only absolute https URLs can be shortened')
    if not hostname:
        raise InvalidURLError(url, 'missing host')
    if own_domain and _bare_host(hostname) == _bare_host(own_domain):
        raise InvalidURLError(url, 'links to this service cannot be shortened')
    return url


def _resolve_expiry_hours(expiry_hours: object, default: int) -> int:
    if expiry_hours is None:
        return default
    if not isinstance(expiry_hours, int) or isinstance(expiry_hours, bool):
        raise InvalidExpiryError(expiry_hours)
    if expiry_hours < 0 or expiry_hours > MAX_EXPIRY_HOURS:
        raise InvalidExpiryError(expiry_hours)
    return expiry_hours or default


class RegistrationService:
    """Register short links against the slug registry

    Attributes:
        links (ShortLinkBaseDAO):
            Slug registry providing the atomic set-if-absent write.
        quota_tracker (QuotaTracker):
            Per-caller link generation quota.
        settings (ShortenerSettings):
            Expiry defaults, identifier space and retry cap.
        rng (Random):
            Source of generated identifiers (``secrets.SystemRandom`` by default).
    """

    def __init__(
        self,
        links: ShortLinkBaseDAO,
        quota_tracker: QuotaTracker,
        settings: Optional[ShortenerSettings] = None,
        rng: Optional[Random] = None,
    ):
        self.links = links
        self.quota_tracker = quota_tracker
        self.settings = settings or ShortenerSettings()
        self.rng = rng or secrets.SystemRandom()

    def register(
        self,
        target_url: str,
        caller: str,
        custom_slug: Optional[str] = None,
        expiry_hours: Optional[int] = None,
    ) -> RegistrationResult:
        """Shorten `target_url` for `caller`

        Args:
            target_url (str):
                Absolute HTTPS URL to shorten.
            caller (str):
                Caller identity charged for the attempt.
            custom_slug (Optional[str]):
                Requested slug. Empty or None generates one.
            expiry_hours (Optional[int]):
                Lifetime in hours. None or 0 applies the default (24h).

        Returns:
            RegistrationResult: The stored link and the caller's quota state.

        Raises:
            InvalidURLError, InvalidSlugError, InvalidExpiryError:
                On invalid input (nothing is charged or written).
            RateLimitedError:
                If the caller's quota for the current window is used up.
            SlugConflictError:
                If the custom slug is already registered.
            GenerationExhaustedError:
                If every generated candidate collided.
            DataStoreError:
                If the slug registry is unreachable.
        """
        validate_target_url(target_url, own_domain=self.settings.domain)
        if custom_slug and not is_valid_slug(custom_slug):
            raise InvalidSlugError(custom_slug)
        hours = _resolve_expiry_hours(expiry_hours, self.settings.default_expiry_hours)
        ttl = hours * ONE_HOUR_SECONDS

        quota = self.quota_tracker.check_and_consume(caller)
        if not quota.allowed:
            logger.info(
                'Link generation quota exhausted.',
                extra={'caller': caller, 'retry_after': quota.reset_after, 'event': RATE_LIMITED},
            )
            raise RateLimitedError(caller, retry_after=quota.reset_after)

        if custom_slug:
            link = self._insert_custom(target_url, custom_slug, ttl)
        else:
            link = self._insert_generated(target_url, ttl)

        logger.info(
            'Registered short link.',
            extra={'slug': link.slug, 'caller': caller, 'ttl': ttl, 'custom': bool(custom_slug), 'event': SHORT_LINK_CREATED},
        )
        return RegistrationResult(
            link=link,
            rate_limit=quota.remaining,
            rate_limit_reset=quota.reset_after,
            custom=bool(custom_slug),
        )

    def _insert_custom(self, target_url: str, slug: str, ttl: int) -> ShortLinkModel:
        link = ShortLinkModel(target=target_url, slug=slug, ttl=ttl)
        try:
            self.links.insert(link)
        except ShortLinkAlreadyExistsError as e:
            # The caller asked for this exact slug; they must pick another one
            logger.info('Custom slug already in use.', extra={'slug': slug, 'event': SLUG_CONFLICT})
            raise SlugConflictError(slug) from e
        return link

    def _insert_generated(self, target_url: str, ttl: int) -> ShortLinkModel:
        attempts = self.settings.max_generation_attempts
        for attempt in range(1, attempts + 1):
            link = ShortLinkModel(target=target_url, slug=generate_slug(self.rng, self.settings.id_space), ttl=ttl)
            try:
                self.links.insert(link)
            except ShortLinkAlreadyExistsError:
                logger.debug('Generated slug collided.', extra={'slug': link.slug, 'attempt': attempt, 'event': SLUG_COLLISION})
                continue
            return link

        logger.error(
            'Could not generate a free slug. Consider raising the identifier space.',
            extra={'attempts': attempts, 'id_space': self.settings.id_space, 'event': GENERATION_EXHAUSTED},
        )
        raise GenerationExhaustedError(attempts)
