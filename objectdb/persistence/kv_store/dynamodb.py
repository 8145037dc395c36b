import os
import typing as t

from objectdb.utils import ImportExtraError


try:
    import boto3
    from boto3.dynamodb.conditions import Attr
    from botocore.config import Config
except ImportError:
    raise ImportExtraError("aws", __name__)

from objectdb.persistence.kv_store.base import BaseKeyValueStore


class DynamoDBKeyValueStore(BaseKeyValueStore):
    """
    A DynamoDB key-value store. Each key is one item in the table: the key lives in the table's hash key attribute, and
    the value in a binary attribute. The table must already exist, with a string hash key and no sort key. The client
    endpoint and region are read from the ``AWS_ENDPOINT`` and ``AWS_REGION`` environment variables. **Note**: prefix
    scans use the DynamoDB scan method under the hood, so they read the whole table.
    """

    def __init__(
        self,
        table_name: str,
        *,
        read_only=False,
        key_field_name="key",
        value_field_name="value",
    ):
        super().__init__(read_only)
        self._table = boto3.resource(
            "dynamodb", endpoint_url=os.getenv("AWS_ENDPOINT"), config=Config(region_name=os.getenv("AWS_REGION"))
        ).Table(table_name)
        self._pk = key_field_name
        self._value = value_field_name

    def set(self, key: str, value: bytes):
        self.assert_can_edit()
        self._table.put_item(Item={self._pk: key, self._value: bytes(value)})

    def get(self, key: str) -> t.Optional[bytes]:
        res = self._table.get_item(Key={self._pk: key}, ConsistentRead=True)
        if "Item" not in res:
            return None
        # boto3 wraps binary attributes in a `Binary` object.
        return bytes(res["Item"][self._value])

    def delete(self, key: str) -> bool:
        self.assert_can_edit()
        res = self._table.delete_item(Key={self._pk: key}, ReturnValues="ALL_OLD")
        return "Attributes" in res

    def scan_prefix(self, prefix: str) -> t.Iterable[str]:
        """Paginates over the table's keys, yielding the ones that start with ``prefix``."""
        scan_kwargs = {"ProjectionExpression": "#k", "ExpressionAttributeNames": {"#k": self._pk}}
        if not self.is_all_keys(prefix):
            scan_kwargs["FilterExpression"] = Attr(self._pk).begins_with(prefix)
        done, start_key = False, None
        while not done:
            if start_key:
                res = self._table.scan(ExclusiveStartKey=start_key, **scan_kwargs)
            else:
                res = self._table.scan(**scan_kwargs)
            start_key = res.get("LastEvaluatedKey")
            done = start_key is None
            for item in res.get("Items", []):
                yield item[self._pk]
