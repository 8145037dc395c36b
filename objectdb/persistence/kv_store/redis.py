import os
import re
import typing as t
from contextlib import contextmanager

from objectdb.persistence.errors import Cancelled
from objectdb.utils import ImportExtraError


try:
    import redis
except ImportError:
    raise ImportExtraError("redis", __name__)

from objectdb.persistence.kv_store.base import BaseKeyValueStore


DEFAULT_REDIS_URL = "redis://localhost:6379/0"


def escape_glob(prefix: str) -> str:
    """Escapes the characters Redis treats specially in ``MATCH`` patterns."""
    return re.sub(r"([*?\[\]\\])", r"\\\1", prefix)


def raw_key(key: str) -> bytes:
    """
    Encodes ``key`` for the client. Scanned keys that are not valid UTF-8 are decoded with ``surrogateescape``, so this
    restores their original bytes.
    """
    return key.encode("utf-8", "surrogateescape")


class RedisKeyValueStore(BaseKeyValueStore):
    """
    A Redis key-value store. Values are stored as plain Redis strings with no expiry. Prefix scans use the incremental
    ``SCAN`` command, so they never block the server, but may yield a key more than once if the keyspace is rehashed
    while the scan is in progress.

    Parameters
    ----------
    client : redis.Redis, optional
        A preconfigured client. If not given, one is created from ``url``.
    url : str, optional
        Connection URL used when ``client`` is not given. Defaults to the ``REDIS_URL`` environment variable, or
        ``redis://localhost:6379/0``.
    scan_count : int, optional
        Hint to the server for how many keys each ``SCAN`` round trip should examine.
    """

    def __init__(
        self,
        client: t.Optional["redis.Redis"] = None,
        *,
        url: t.Optional[str] = None,
        read_only=False,
        scan_count: int = 100,
    ):
        super().__init__(read_only)
        if client is None:
            client = redis.Redis.from_url(url or os.getenv("REDIS_URL", DEFAULT_REDIS_URL))
        self._client = client
        self._scan_count = scan_count

    def set(self, key: str, value: bytes):
        self.assert_can_edit()
        with self._timeout_cancels("set", key):
            self._client.set(raw_key(key), value)

    def get(self, key: str) -> t.Optional[bytes]:
        with self._timeout_cancels("get", key):
            return self._client.get(raw_key(key))

    def delete(self, key: str) -> bool:
        self.assert_can_edit()
        with self._timeout_cancels("delete", key):
            return self._client.delete(raw_key(key)) > 0

    def scan_prefix(self, prefix: str) -> t.Iterable[str]:
        pattern = "*" if self.is_all_keys(prefix) else escape_glob(prefix) + "*"
        with self._timeout_cancels("scan", prefix):
            for key in self._client.scan_iter(match=raw_key(pattern), count=self._scan_count):
                yield key.decode("utf-8", "surrogateescape") if isinstance(key, bytes) else key

    @staticmethod
    @contextmanager
    def _timeout_cancels(operation: str, key: str):
        """Translates client timeouts into :class:`~objectdb.persistence.errors.Cancelled`."""
        try:
            yield
        except redis.exceptions.TimeoutError as exc:
            raise Cancelled(operation, key, "timed out") from exc
