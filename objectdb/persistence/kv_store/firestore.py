import hashlib
import os
import typing as t

from objectdb.utils import ImportExtraError


try:
    from google.auth.credentials import AnonymousCredentials, Credentials
    from google.cloud import firestore
    from google.cloud.firestore_v1.base_query import FieldFilter
except ImportError:
    raise ImportExtraError("gcp", __name__)

from objectdb.persistence.keys import prefix_upper_bound
from objectdb.persistence.kv_store.base import BaseKeyValueStore


def document_id(key: str) -> str:
    """
    Firestore document IDs cannot contain ``/`` and have length limits, so documents are named by a digest of their key.
    """
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


class FirestoreKeyValueStore(BaseKeyValueStore):
    """
    A Firestore key-value store. Each key is one document in ``collection_name``, holding the key itself (so it can be
    range-queried) and the value as a bytes field.
    """

    def __init__(
        self,
        collection_name: str,
        *,
        read_only=False,
        project: t.Optional[str] = None,
        credentials: t.Optional[Credentials] = None,
    ):
        super().__init__(read_only)
        if os.getenv("FIRESTORE_EMULATOR_HOST") is not None:
            # We are in a testing context. Make sure the client's default args
            # work in this emulator scenario.
            if credentials is None:
                credentials = AnonymousCredentials()
            if project is None:
                project = "test"
        self.collection = firestore.Client(project=project, credentials=credentials).collection(collection_name)

    def set(self, key: str, value: bytes):
        self.assert_can_edit()
        self.collection.document(document_id(key)).set({"key": key, "value": bytes(value)})

    def get(self, key: str) -> t.Optional[bytes]:
        doc = self.collection.document(document_id(key)).get()
        if not doc.exists:
            return None
        return doc.get("value")

    def delete(self, key: str) -> bool:
        self.assert_can_edit()
        doc = self.collection.document(document_id(key)).get()
        if not doc.exists:
            return False
        doc.reference.delete()
        return True

    def scan_prefix(self, prefix: str) -> t.Iterable[str]:
        query = self.collection
        if not self.is_all_keys(prefix):
            query = query.where(filter=FieldFilter("key", ">=", prefix))
            upper_bound = prefix_upper_bound(prefix)
            if upper_bound is not None:
                query = query.where(filter=FieldFilter("key", "<", upper_bound))
        for doc in query.select(["key"]).stream():
            yield doc.get("key")
