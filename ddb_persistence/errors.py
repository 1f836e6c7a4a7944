from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PersistenceErrorKind(str, Enum):
    READ_FAILURE = "read_failure"
    WRITE_FAILURE = "write_failure"
    DELETE_FAILURE = "delete_failure"
    TABLE_CREATION_FAILURE = "table_creation_failure"


class DdbPersistenceError(Exception):
    """Base class for errors raised by this package's public API."""

    name = "AskSdk Error"


class InvalidRequestError(DdbPersistenceError):
    """The request envelope lacks the identifier needed to derive a partition key."""

    name = "AskSdk.PartitionKeyGenerators Error"


@dataclass(slots=True)
class PersistenceError(DdbPersistenceError):
    """A store call failed; `message` embeds the operation, key, table and cause."""

    message: str
    kind: PersistenceErrorKind
    table_name: str
    partition_key: str | None = None
    cause: Exception | None = None

    name = "AskSdk.DynamoDbPersistenceAdapter Error"

    def __str__(self) -> str:
        return self.message
