"""
ddb-persistence-adapter: store per-user or per-device attribute maps in DynamoDB.

    adapter = DynamoDbPersistenceAdapter.create(table_name="skill-state", create_table=True)
    attrs = adapter.get_attributes(request_envelope)
    adapter.save_attributes(request_envelope, {**attrs, "visits": attrs.get("visits", 0) + 1})
"""

from .adapter import AdapterConfig, DynamoDbPersistenceAdapter, PersistenceAdapter
from .db.dynamodb.calls import RetryPolicy
from .errors import (
    DdbPersistenceError,
    InvalidRequestError,
    PersistenceError,
    PersistenceErrorKind,
)
from .partition_keys import (
    PartitionKeyGenerator,
    PartitionKeyGenerators,
    PartitionKeyStrategy,
    resolve_partition_key_generator,
)
from .request_envelope import RequestEnvelope

__all__ = [
    "AdapterConfig",
    "DdbPersistenceError",
    "DynamoDbPersistenceAdapter",
    "InvalidRequestError",
    "PartitionKeyGenerator",
    "PartitionKeyGenerators",
    "PartitionKeyStrategy",
    "PersistenceAdapter",
    "PersistenceError",
    "PersistenceErrorKind",
    "RequestEnvelope",
    "RetryPolicy",
    "resolve_partition_key_generator",
]
