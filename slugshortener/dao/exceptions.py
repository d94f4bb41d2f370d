"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortLinkNotFoundError:
        Raised when a ShortLinkModel is not found in the data store.

    ShortLinkAlreadyExistsError:
        Raised when attempting to insert a ShortLinkModel whose slug is taken.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

Example:
    >>> from slugshortener.dao.exceptions import ShortLinkNotFoundError
    >>> raise ShortLinkNotFoundError("Short link with slug 'abc123' not found.")
    Traceback (most recent call last):
        ...
    slugshortener.dao.exceptions.ShortLinkNotFoundError: Short link with slug 'abc123' not found.
"""

from slugshortener.exceptions import SlugShortenerError


class DAOError(SlugShortenerError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortLinkNotFoundError(DAOError):
    """Raised when a ShortLinkModel is not found in the data store (never written or expired)."""

    error_code = 'dao:short_link_not_found_error'


class ShortLinkAlreadyExistsError(DAOError):
    """Raised when inserting a ShortLinkModel whose slug already exists in the data store."""

    error_code = 'dao:short_link_already_exists_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, and out-of-memory failures.
    """

    error_code = 'dao:data_store_error'
