import typing as t
from abc import ABC, abstractmethod


ALL_KEYS = "*"


class BaseKeyValueStore(ABC):
    """
    Abstract base class for the key-value substrate an :class:`~objectdb.persistence.object_store.ObjectStore` persists
    objects to. Keys are strings, values are bytes. Implementations only need to make each single-key operation atomic;
    no cross-key guarantees are expected.

    Parameters
    ----------
    read_only : bool
        Whether the store is read only. Inheriting classes must call the :meth:`assert_can_edit` method in each
        mutating method in order for read only checks to be enforced.
    """

    def __init__(self, read_only: bool):
        self._read_only = read_only

    @abstractmethod
    def set(self, key: str, value: bytes):
        """Writes ``value`` under ``key``, replacing whatever was there."""
        pass

    @abstractmethod
    def get(self, key: str) -> t.Optional[bytes]:
        """Retrieves the value stored under ``key``, returning ``None`` if it doesn't exist."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Deletes ``key``, returning ``True`` if it existed, and ``False`` if it didn't."""
        pass

    @abstractmethod
    def scan_prefix(self, prefix: str) -> t.Iterable[str]:
        """
        Lazily yields every key starting with ``prefix``. An empty prefix or ``"*"`` yields all keys. The scan is not an
        atomic snapshot: keys written or deleted while it is in progress may or may not be yielded. Each call starts a
        fresh scan.
        """
        pass

    @property
    def read_only(self) -> bool:
        return self._read_only

    def assert_can_edit(self):
        """Raises an assertion error if this store is read only."""
        if self._read_only:
            raise AssertionError("key-value store is read only")

    @staticmethod
    def is_all_keys(prefix: str) -> bool:
        return prefix in ("", ALL_KEYS)
