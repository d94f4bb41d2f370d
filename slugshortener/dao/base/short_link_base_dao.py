"""Abstract base class for ShortLink data access objects (DAOs).

This class is the slug registry contract. Any storage backend (Redis,
DynamoDB, PostgreSQL, an in-memory double in tests) must honor it.

Responsibilities:
    - Store slug -> target URL mappings with a per-entry TTL.
    - Provide an atomic set-if-absent write. A read followed by a write is a
      race: two concurrent registrations of the same slug could both observe
      absence and the second would clobber the first.
    - Standardize error handling across data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from slugshortener.models import ShortLinkModel
        >>> from slugshortener.dao.redis import ShortLinkRedisDAO

        >>> dao = ShortLinkRedisDAO(...)
        >>> dao.insert(ShortLinkModel(target='https://example.com/a', slug='promo', ttl=3600))

        >>> dao.get('promo').target
        'https://example.com/a'
"""

from abc import ABC, abstractmethod

from slugshortener.models import ShortLinkModel


class ShortLinkBaseDAO(ABC):
    """Interface for ShortLink data access objects (DAOs).

    Methods:
        insert(link: ShortLinkModel, **kwargs) -> ShortLinkBaseDAO:
            Atomically insert a mapping if its slug is absent.
            Raises ShortLinkAlreadyExistsError if the slug is taken.
            Raises DataStoreError on connection or write failure.

        get(slug: str, **kwargs) -> ShortLinkModel:
            Retrieve a mapping by slug without mutating anything.
            Raises ShortLinkNotFoundError if the entry does not exist or expired.
            Raises DataStoreError on connection or read failure.

    NOTE:
        - Mappings expire automatically once their TTL elapses. The DAO does
          not provide an interface to delete or update entries.
    """

    @abstractmethod
    def insert(self, link: ShortLinkModel, **kwargs) -> 'ShortLinkBaseDAO':
        """Insert a new ShortLinkModel if no live entry holds its slug.

        Args:
            link (ShortLinkModel):
                The mapping to store; `link.ttl` is its lifetime in seconds.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkBaseDAO: self (for method chaining)

        Raises:
            ShortLinkAlreadyExistsError:
                If a live mapping with the same slug already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, slug: str, **kwargs) -> ShortLinkModel:
        """Retrieve a ShortLinkModel from the data store by its slug.

        Args:
            slug (str):
                The slug of the mapping to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkModel: The stored mapping.

        Raises:
            ShortLinkNotFoundError:
                If no live mapping with the given slug exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
