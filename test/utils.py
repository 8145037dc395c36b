import os
import typing as t
from uuid import uuid4

from objectdb.persistence.kv_store.base import BaseKeyValueStore
from objectdb.persistence.kv_store.memory import InMemoryKeyValueStore
from test.config import AWS_ENDPOINT, FIRESTORE_EMULATOR_HOST, REDIS_URL


class FlakyKeyValueStore(InMemoryKeyValueStore):
    """An in-memory store whose operations can be made to fail on demand."""

    def __init__(self, fail_on: t.Iterable[str] = (), exc: t.Optional[Exception] = None, **kwargs):
        super().__init__(**kwargs)
        self.fail_on = set(fail_on)
        self.exc = exc if exc is not None else ConnectionError("connection reset by peer")
        self.calls: t.List[t.Tuple[str, str]] = []

    def _maybe_fail(self, operation: str, key: str):
        self.calls.append((operation, key))
        if operation in self.fail_on:
            raise self.exc

    def set(self, key: str, value: bytes):
        self._maybe_fail("set", key)
        super().set(key, value)

    def get(self, key: str) -> t.Optional[bytes]:
        self._maybe_fail("get", key)
        return super().get(key)

    def delete(self, key: str) -> bool:
        self._maybe_fail("delete", key)
        return super().delete(key)

    def scan_prefix(self, prefix: str) -> t.Iterable[str]:
        self._maybe_fail("scan", prefix)
        yield from super().scan_prefix(prefix)


def clear_firestore():
    # Clear the test database.
    # Source: https://firebase.google.com/docs/emulator-suite/connect_firestore#clear_your_database_between_tests
    import requests

    res = requests.delete(f"http://{FIRESTORE_EMULATOR_HOST}/emulator/v1/projects/test/databases/(default)/documents")
    res.raise_for_status()


def create_dynamodb_table(table_name: str, *, pk_field="key"):
    import boto3
    from botocore.config import Config

    dynamodb = boto3.resource(
        "dynamodb", endpoint_url=os.getenv("AWS_ENDPOINT"), config=Config(region_name=os.getenv("AWS_REGION"))
    )
    table = dynamodb.create_table(
        TableName=table_name,
        KeySchema=[{"AttributeName": pk_field, "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": pk_field, "AttributeType": "S"}],
        ProvisionedThroughput={"ReadCapacityUnits": 5, "WriteCapacityUnits": 5},
    )
    table.meta.client.get_waiter("table_exists").wait(TableName=table_name)
    return table


class KeyValueStoreFixtures:
    """
    Builds one fresh, empty instance of every configured key-value back-end. The in-memory back-end is always included;
    the others only when their endpoint environment variables are set. Call :meth:`teardown` to release them.
    """

    def __init__(self):
        self._cleanups: t.List[t.Callable[[], t.Any]] = []
        self.stores: t.List[BaseKeyValueStore] = [InMemoryKeyValueStore()]
        if REDIS_URL is not None:
            from objectdb.persistence.kv_store.redis import RedisKeyValueStore

            store = RedisKeyValueStore(url=REDIS_URL)
            store._client.flushdb()
            self._cleanups.append(store._client.flushdb)
            self.stores.append(store)
        if AWS_ENDPOINT is not None:
            from objectdb.persistence.kv_store.dynamodb import DynamoDBKeyValueStore

            table_name = f"objects-{uuid4().hex[:8]}"
            table = create_dynamodb_table(table_name)
            self._cleanups.append(table.delete)
            self.stores.append(DynamoDBKeyValueStore(table_name))
        if FIRESTORE_EMULATOR_HOST is not None:
            from objectdb.persistence.kv_store.firestore import FirestoreKeyValueStore

            clear_firestore()
            self.stores.append(FirestoreKeyValueStore("objects"))

    def teardown(self):
        for cleanup in self._cleanups:
            cleanup()
