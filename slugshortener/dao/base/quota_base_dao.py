"""Abstract base class for caller quota data access objects (DAOs).

This interface defines how link generation quotas are charged per caller
across different storage systems.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from slugshortener.dao.redis import QuotaRedisDAO
        >>> dao = QuotaRedisDAO(...)

        >>> dao.consume('203.0.113.7', quota=10, window=1800)
        QuotaModel(caller='203.0.113.7', allowed=True, remaining=9, reset_after=1800)
"""

from abc import ABC, abstractmethod

from slugshortener.models import QuotaModel


class QuotaBaseDAO(ABC):
    """Interface for per-caller link generation quota data access objects (DAOs)

    Methods:
        consume(caller: str, quota: int, window: int, **kwargs) -> QuotaModel:
            Charge one attempt against the caller's quota.
            Raises DataStoreError on read or write failure.

    NOTE:
        - Implementations must perform the check and the decrement as one
          atomic step (decrement-with-floor or compare-and-swap). Two
          concurrent attempts must never both observe the last unit of quota.
        - Quota records expire with their window; a fresh quota is granted
          on the first attempt after expiry.
    """

    @abstractmethod
    def consume(self, caller: str, quota: int, window: int, **kwargs) -> QuotaModel:
        """Charge one link generation attempt to a caller.

        Behavior:
            - No record: create one holding `quota - 1` which expires after
              `window` seconds. The attempt is allowed.
            - Record with remaining quota: decrement it. The attempt is allowed.
            - Record with no quota left: leave it untouched. The attempt is
              denied and `reset_after` tells when the window expires.

        Args:
            caller (str):
                Caller identity (e.g., network address).

            quota (int):
                Attempts granted per window.

            window (int):
                Window length in seconds.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            QuotaModel:
                Outcome of the attempt and the caller's quota state after it.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
