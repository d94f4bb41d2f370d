"""Per-caller link generation quota policy.

The tracker wraps a QuotaBaseDAO with the configured quota, window and the
outage policy. It is injected into RegistrationService so tests and stricter
deployments can swap it.

Outage policy:
    By default the tracker fails OPEN: when the quota store is unreachable the
    attempt is admitted and a WARNING is logged, so a rate limiting outage
    does not take link generation down with it. The result then carries
    `remaining=None` and `reset_after=None`. Deployments that prefer strictness
    over availability set `fail_open=False`, in which case DataStoreError
    propagates and the request fails with a server error.
"""

import logging

from slugshortener.models import QuotaModel
from slugshortener.dao.base import QuotaBaseDAO
from slugshortener.dao.exceptions import DataStoreError
from slugshortener.utils.constants import DEFAULT_LINK_GENERATION_QUOTA, DEFAULT_QUOTA_WINDOW_SECONDS


logger = logging.getLogger(__name__)

QUOTA_STORE_BYPASSED = 'QUOTA_STORE_BYPASSED'


class QuotaTracker:
    def __init__(
        self,
        dao: QuotaBaseDAO,
        quota: int = DEFAULT_LINK_GENERATION_QUOTA,
        window: int = DEFAULT_QUOTA_WINDOW_SECONDS,
        fail_open: bool = True,
    ):
        self.dao = dao
        self.quota = quota
        self.window = window
        self.fail_open = fail_open

    def check_and_consume(self, caller: str) -> QuotaModel:
        """Charge one attempt to `caller` and report whether it is allowed

        Raises:
            DataStoreError:
                If the quota store is unreachable and the tracker fails closed.
        """
        try:
            return self.dao.consume(caller, quota=self.quota, window=self.window)
        except DataStoreError:
            if not self.fail_open:
                raise
            logger.warning(
                'Quota store unavailable. Admitting request without rate limiting (fail-open).',
                exc_info=True,
                extra={'caller': caller, 'event': QUOTA_STORE_BYPASSED},
            )
            return QuotaModel(caller=caller, allowed=True, remaining=None, reset_after=None)
