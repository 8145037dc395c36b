"""
Contains the :class:`ObjectStore`, which persists heterogeneous :class:`~objectdb.types.data.StoredObject` models to a
single key-value back-end. Supports storing (create or full overwrite), retrieving by ID or by name, listing by kind,
and deleting by ID.

Objects are stored under ``"<kind>:<id>"`` with their JSON payload as the value. The kind is recovered from the key,
never from the payload, and the :class:`~objectdb.persistence.registry.KindRegistry` maps it back to the concrete class
the payload is decoded into.
"""
import threading
import typing as t
from contextlib import contextmanager
from operator import methodcaller

from loguru import logger

from objectdb.persistence.errors import (
    BackendError,
    Cancelled,
    DecodeError,
    EncodeError,
    Malformed,
    NotFound,
    NotRegistered,
    ObjectStoreError,
)
from objectdb.persistence.keys import decode_key, encode_key, kind_prefix
from objectdb.persistence.kv_store.base import ALL_KEYS, BaseKeyValueStore
from objectdb.persistence.registry import KindRegistry, default_registry
from objectdb.types.data import StoredObject


_UNDECODABLE = (Malformed, NotRegistered, DecodeError)


@contextmanager
def _backend_errors(operation: str, key: t.Optional[str]):
    """
    Re-raises any exception coming out of the key-value back-end as a :class:`BackendError` naming ``operation`` and
    ``key``. Errors that are already classified, and read only assertions, pass through untouched.
    """
    try:
        yield
    except (ObjectStoreError, AssertionError):
        raise
    except Exception as exc:
        raise BackendError(operation, key, str(exc)) from exc


def _check_cancelled(cancel: t.Optional[threading.Event], operation: str, key: t.Optional[str]):
    if cancel is not None and cancel.is_set():
        raise Cancelled(operation, key, "cancelled by caller")


class ObjectStore:
    r"""
    A polymorphic object store on top of a key-value back-end. The store holds no state of its own and does no
    locking; consistency is whatever the back-end provides for single-key operations.

    Lookups by ID and by name scan the whole keyspace, decoding every record until one matches, so they are
    :math:`\mathcal{O}(n)` in the number of stored objects. When the caller knows the kind of the object,
    ``get_object_by_id(id_, kind=...)`` does a single direct read instead.

    Every operation takes an optional ``cancel`` event. Once it is set, the operation stops before its next back-end
    call and raises :class:`~objectdb.persistence.errors.Cancelled`.

    Parameters
    ----------
    kv_store : BaseKeyValueStore
        The back-end objects are persisted to.
    registry : KindRegistry, optional
        Maps kind tags to object classes. Defaults to a registry of the built-in variants.
    skip_undecodable : bool
        What scans do with a record that can't be decoded (a malformed key, an unregistered kind, or a payload that
        doesn't match its kind's shape). If ``False`` (the default), the scan stops and the error is raised. If
        ``True``, the record is logged and skipped.
    """

    def __init__(
        self,
        kv_store: BaseKeyValueStore,
        registry: t.Optional[KindRegistry] = None,
        *,
        skip_undecodable: bool = False,
    ):
        self._kv = kv_store
        self._registry = registry if registry is not None else default_registry()
        self._skip_undecodable = skip_undecodable

    @property
    def registry(self) -> KindRegistry:
        return self._registry

    def store(self, obj: StoredObject, *, cancel: t.Optional[threading.Event] = None):
        """Saves ``obj``, replacing any object already stored under the same kind and ID."""
        kind, id_ = obj.get_kind(), obj.get_id()
        if not id_:
            raise EncodeError(f"cannot store {kind} object with an empty ID")
        # An object of an unknown kind, or of a class other than the one registered for its kind, could never be read
        # back.
        object_cls = self._registry.resolve(kind)
        if type(obj) is not object_cls:
            raise EncodeError(
                f"cannot store {type(obj).__name__} object: kind {kind!r} is registered to {object_cls.__name__}"
            )
        payload = obj.encode()
        key = encode_key(kind, id_)
        _check_cancelled(cancel, "set", key)
        with _backend_errors("set", key):
            self._kv.set(key, payload)
        logger.debug("stored object {}", key)

    def get_object_by_id(
        self, id_: str, kind: t.Optional[str] = None, *, cancel: t.Optional[threading.Event] = None
    ) -> StoredObject:
        """
        Retrieves the object with ID ``id_``. If ``kind`` is not given, every record in the store is scanned until one
        matches. Raises :class:`~objectdb.persistence.errors.NotFound` if there is no such object.
        """
        if kind is not None:
            obj = self._load(encode_key(kind, id_), cancel)
            if obj is None or obj.get_id() != id_:
                raise NotFound("ID", id_)
            return obj
        return self._find("ID", id_, cancel)[1]

    def get_object_by_name(self, name: str, *, cancel: t.Optional[threading.Event] = None) -> StoredObject:
        """
        Retrieves an object named ``name``. Names are not unique: if several objects share the name, which one is
        returned depends on the back-end's scan order. Raises :class:`~objectdb.persistence.errors.NotFound` if there is
        no such object.
        """
        return self._find("name", name, cancel)[1]

    def list_objects(self, kind: str, *, cancel: t.Optional[threading.Event] = None) -> t.List[StoredObject]:
        """Retrieves every object of ``kind``, in back-end scan order. Returns an empty list if there are none."""
        return list(self.iter_objects(kind, cancel=cancel))

    def iter_objects(
        self, kind: t.Optional[str] = None, *, cancel: t.Optional[threading.Event] = None
    ) -> t.Iterator[StoredObject]:
        """Lazily yields every object of ``kind``, or every object in the store if ``kind`` is ``None``."""
        for _, obj in self._iter_records(ALL_KEYS if kind is None else kind_prefix(kind), cancel):
            yield obj

    def delete_object(self, id_: str, *, cancel: t.Optional[threading.Event] = None):
        """
        Deletes the object with ID ``id_``. The object is first looked up with a full scan, since its kind is needed to
        build its key. Raises :class:`~objectdb.persistence.errors.NotFound` if there is no such object.
        """
        key, _ = self._find("ID", id_, cancel)
        _check_cancelled(cancel, "delete", key)
        with _backend_errors("delete", key):
            existed = self._kv.delete(key)
        if existed:
            logger.debug("deleted object {}", key)
        else:
            logger.debug("object {} was already deleted by the time it was removed", key)

    def _find(self, field: str, value: str, cancel: t.Optional[threading.Event]) -> t.Tuple[str, StoredObject]:
        getter = methodcaller("get_id" if field == "ID" else "get_name")
        for key, obj in self._iter_records(ALL_KEYS, cancel):
            if getter(obj) == value:
                return key, obj
        raise NotFound(field, value)

    def _iter_records(
        self, prefix: str, cancel: t.Optional[threading.Event]
    ) -> t.Iterator[t.Tuple[str, StoredObject]]:
        n_scanned = 0
        with _backend_errors("scan", prefix):
            keys = self._kv.scan_prefix(prefix)
        for key in self._scan(keys, prefix, cancel):
            n_scanned += 1
            try:
                obj = self._load(key, cancel)
            except _UNDECODABLE as exc:
                if not self._skip_undecodable:
                    raise
                logger.warning("skipping undecodable record {!r}: {}", key, exc)
                continue
            if obj is None:
                # Deleted between being scanned and being read.
                logger.debug("record {!r} vanished during scan", key)
                continue
            yield key, obj
        logger.debug("scanned {} records with prefix {!r}", n_scanned, prefix)

    @staticmethod
    def _scan(keys: t.Iterable[str], prefix: str, cancel: t.Optional[threading.Event]) -> t.Iterator[str]:
        _check_cancelled(cancel, "scan", prefix)
        with _backend_errors("scan", prefix):
            for key in keys:
                _check_cancelled(cancel, "scan", prefix)
                yield key

    def _load(self, key: str, cancel: t.Optional[threading.Event]) -> t.Optional[StoredObject]:
        """
        Reads and decodes the record at ``key``, returning ``None`` if it doesn't exist. The key is decoded first, and
        the payload is decoded into the class registered for the key's kind.
        """
        kind, _ = decode_key(key)
        object_cls = self._registry.resolve(kind)
        _check_cancelled(cancel, "get", key)
        with _backend_errors("get", key):
            payload = self._kv.get(key)
        if payload is None:
            return None
        try:
            return object_cls.decode(payload)
        except DecodeError as exc:
            raise DecodeError(f"record {key!r}: {exc}") from exc
