"""
A polymorphic object store. Objects of different kinds (see :mod:`~objectdb.types.entities`) are persisted side by
side in a single key-value namespace, and can be retrieved by ID, by name, or listed by kind (see
:class:`~objectdb.persistence.object_store.ObjectStore`).
"""
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
from objectdb.persistence.kv_store.memory import InMemoryKeyValueStore
from objectdb.persistence.object_store import ObjectStore
from objectdb.persistence.registry import KindRegistry, default_registry
from objectdb.types.data import StoredObject
from objectdb.types.entities import Animal, Person
