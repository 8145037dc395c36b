import typing as t

from objectdb.persistence.kv_store.base import BaseKeyValueStore


class InMemoryKeyValueStore(BaseKeyValueStore):
    r"""
    A simple in-memory key-value store. Useful for testing or other lightweight needs. Keeps no sorted index of keys, so
    prefix scans are :math:`\mathcal{O}(n)`.
    """

    def __init__(self, read_only=False, data: t.Optional[t.Dict[str, bytes]] = None):
        super().__init__(read_only)
        self._db: t.Dict[str, bytes] = dict(data) if data is not None else {}

    def set(self, key: str, value: bytes):
        self.assert_can_edit()
        self._db[key] = bytes(value)

    def get(self, key: str) -> t.Optional[bytes]:
        return self._db.get(key)

    def delete(self, key: str) -> bool:
        self.assert_can_edit()
        return self._db.pop(key, None) is not None

    def scan_prefix(self, prefix: str) -> t.Iterable[str]:
        match_all = self.is_all_keys(prefix)
        # Iterate over a copy, so writes made while the scan is being consumed don't break the iteration.
        for key in list(self._db):
            if match_all or key.startswith(prefix):
                yield key

    def __len__(self) -> int:
        return len(self._db)
