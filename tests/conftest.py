from __future__ import annotations

import copy
import sys
from pathlib import Path
from typing import Any

import pytest
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import ClientError

# Ensure the repo root is on sys.path so `import ddb_persistence` works uninstalled.
ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def client_error(code: str, message: str, operation: str) -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": message},
            "ResponseMetadata": {"RequestId": "req-123", "HTTPStatusCode": 400},
        },
        operation,
    )


class FakeTable:
    """
    Minimal in-memory stand-in for a boto3 `Table` resource.

    Items are stored the way DynamoDB would return them: written values go through
    boto3's TypeSerializer and come back through TypeDeserializer (numbers as
    Decimal, floats rejected). Item calls against an unknown table, or one that is
    still CREATING, fail with ResourceNotFoundException.
    """

    def __init__(self, resource: "FakeDynamoResource", name: str):
        self._resource = resource
        self.name = name
        self.table_status: str | None = None

    def _items(self, operation: str) -> dict[Any, dict[str, Any]]:
        self._resource.calls.append((operation, self.name))
        t = self._resource.tables.get(self.name)
        if t is None or t["status"] != "ACTIVE":
            raise client_error("ResourceNotFoundException", "Requested resource not found", operation)
        return t["items"]

    def _hash_key(self, key: dict[str, Any]) -> Any:
        pk_name = self._resource.tables[self.name]["partition_key_name"]
        return key[pk_name]

    def get_item(self, *, Key: dict[str, Any]) -> dict[str, Any]:
        items = self._items("GetItem")
        it = items.get(self._hash_key(Key))
        return {"Item": copy.deepcopy(it)} if it is not None else {}

    def put_item(self, *, Item: dict[str, Any]) -> dict[str, Any]:
        items = self._items("PutItem")
        items[self._hash_key(Item)] = _deserializer.deserialize(_serializer.serialize(Item))
        return {}

    def delete_item(self, *, Key: dict[str, Any]) -> dict[str, Any]:
        items = self._items("DeleteItem")
        items.pop(self._hash_key(Key), None)
        return {}

    def reload(self) -> None:
        t = self._resource.tables.get(self.name)
        if t is None:
            raise client_error("ResourceNotFoundException", "Requested resource not found", "DescribeTable")
        self.table_status = t["status"]


class FakeDynamoResource:
    """Stand-in for `boto3.resource("dynamodb")` with just what the adapter touches."""

    def __init__(self, *, creatable: set[str] | None = None):
        self.tables: dict[str, dict[str, Any]] = {}
        self.creatable = set(creatable or ())
        self.calls: list[tuple[str, str]] = []
        self.create_requests: list[dict[str, Any]] = []

    def add_table(self, name: str, *, partition_key_name: str = "id", status: str = "ACTIVE") -> None:
        self.tables[name] = {"partition_key_name": partition_key_name, "items": {}, "status": status}

    def Table(self, name: str) -> FakeTable:
        return FakeTable(self, name)

    def create_table(self, **kwargs) -> FakeTable:
        name = kwargs["TableName"]
        self.calls.append(("CreateTable", name))
        self.create_requests.append(kwargs)
        if name in self.tables:
            raise client_error("ResourceInUseException", f"Table already exists: {name}", "CreateTable")
        if name not in self.creatable:
            raise client_error("LimitExceededException", "Unable to create table", "CreateTable")
        pk_name = kwargs["KeySchema"][0]["AttributeName"]
        self.add_table(name, partition_key_name=pk_name, status="CREATING")
        return self.Table(name)


def make_envelope(*, user_id: str | None = "userId", device_id: str | None = "deviceId") -> dict[str, Any]:
    system: dict[str, Any] = {"application": {"applicationId": "amzn1.ask.skill.test"}}
    if user_id is not None:
        system["user"] = {"userId": user_id}
    if device_id is not None:
        system["device"] = {"deviceId": device_id, "supportedInterfaces": {}}
    return {
        "version": "1.0",
        "session": {"new": True, "sessionId": "session-1"},
        "context": {"System": system},
        "request": {"type": "LaunchRequest", "requestId": "request-1"},
    }


@pytest.fixture()
def ddb():
    r = FakeDynamoResource(creatable={"CreateNewTable"})
    r.add_table("mockTableName")
    return r


@pytest.fixture()
def envelope():
    return make_envelope()


@pytest.fixture()
def envelope_factory():
    return make_envelope
