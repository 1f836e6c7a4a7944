from __future__ import annotations

from typing import Any

from .calls import RetryPolicy, ddb_call
from .client import dynamodb_resource


class DynamoTable:
    """Thin wrapper over a boto3 `Table` that routes every call through `ddb_call`."""

    def __init__(self, *, table_name: str, resource=None, retry_policy: RetryPolicy | None = None):
        self.table_name = str(table_name)
        self._resource = resource if resource is not None else dynamodb_resource()
        self._table = self._resource.Table(self.table_name)
        self._retry_policy = retry_policy

    # --- basic operations ---

    def get_item(self, *, key: dict[str, Any]) -> dict[str, Any] | None:
        def _op():
            resp = self._table.get_item(Key=key)
            return (resp or {}).get("Item")

        return ddb_call(
            "GetItem",
            _op,
            table_name=self.table_name,
            key=key,
            retry_policy=self._retry_policy,
        )

    def put_item(self, *, item: dict[str, Any]) -> dict[str, Any]:
        def _op():
            return self._table.put_item(Item=item)

        return ddb_call("PutItem", _op, table_name=self.table_name, retry_policy=self._retry_policy)

    def delete_item(self, *, key: dict[str, Any]) -> dict[str, Any]:
        def _op():
            return self._table.delete_item(Key=key)

        return ddb_call(
            "DeleteItem",
            _op,
            table_name=self.table_name,
            key=key,
            retry_policy=self._retry_policy,
        )

    # --- provisioning ---

    def create_table(
        self,
        *,
        partition_key_name: str,
        read_capacity_units: int = 5,
        write_capacity_units: int = 5,
    ) -> Any:
        """
        Request creation of this table with a single string HASH key.

        This only submits the request; the table is typically still CREATING
        when it returns. Use `describe_status()` to poll for ACTIVE.
        """

        def _op():
            return self._resource.create_table(
                TableName=self.table_name,
                KeySchema=[{"AttributeName": partition_key_name, "KeyType": "HASH"}],
                AttributeDefinitions=[{"AttributeName": partition_key_name, "AttributeType": "S"}],
                ProvisionedThroughput={
                    "ReadCapacityUnits": int(read_capacity_units),
                    "WriteCapacityUnits": int(write_capacity_units),
                },
            )

        # Never retried: a second CreateTable would fail with ResourceInUseException.
        return ddb_call("CreateTable", _op, table_name=self.table_name)

    def describe_status(self) -> str:
        def _op():
            self._table.reload()
            return str(self._table.table_status)

        return ddb_call("DescribeTable", _op, table_name=self.table_name, retry_policy=self._retry_policy)
