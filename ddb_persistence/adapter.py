from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from .db.dynamodb.calls import RetryPolicy
from .db.dynamodb.errors import DdbError, DdbResourceInUse, DdbTableNotFound
from .db.dynamodb.serialization import from_dynamodb, to_dynamodb
from .db.dynamodb.table import DynamoTable
from .errors import PersistenceError, PersistenceErrorKind
from .observability.logging import configure_logging, get_logger
from .partition_keys import PartitionKeyGenerator, resolve_partition_key_generator, user_id
from .settings import Settings, get_settings

log = get_logger("ddb_persistence.adapter")


class PersistenceAdapter(ABC):
    """Loads and stores the attribute map that belongs to one request."""

    @abstractmethod
    def get_attributes(self, request: Any) -> dict[str, Any]: ...

    @abstractmethod
    def save_attributes(self, request: Any, attributes: dict[str, Any]) -> None: ...

    @abstractmethod
    def delete_attributes(self, request: Any) -> None: ...


@dataclass(frozen=True, slots=True)
class AdapterConfig:
    table_name: str
    partition_key_name: str = "id"
    attributes_name: str = "attributes"
    partition_key_generator: PartitionKeyGenerator = field(default=user_id)
    create_table: bool = False
    retry_policy: RetryPolicy | None = None

    def __post_init__(self) -> None:
        if not str(self.table_name or "").strip():
            raise ValueError("table_name is required")
        if not str(self.partition_key_name or "").strip():
            raise ValueError("partition_key_name must not be empty")
        if not str(self.attributes_name or "").strip():
            raise ValueError("attributes_name must not be empty")
        if not callable(self.partition_key_generator):
            raise TypeError("partition_key_generator must be callable")


class DynamoDbPersistenceAdapter(PersistenceAdapter):
    """
    Persists a per-user (or per-device) attribute map in a DynamoDB table.

    Each item looks like `{<partition_key_name>: <key>, <attributes_name>: {...}}`
    and only the attributes column is ever handed back to callers.
    """

    def __init__(self, config: AdapterConfig, *, dynamodb_resource=None):
        self.config = config
        self._table = DynamoTable(
            table_name=config.table_name,
            resource=dynamodb_resource,
            retry_policy=config.retry_policy,
        )

    @classmethod
    def create(
        cls,
        *,
        table_name: str,
        partition_key_name: str = "id",
        attributes_name: str = "attributes",
        partition_key_generator: Any = None,
        create_table: bool = False,
        retry_policy: RetryPolicy | None = None,
        dynamodb_resource=None,
    ) -> "DynamoDbPersistenceAdapter":
        config = AdapterConfig(
            table_name=table_name,
            partition_key_name=partition_key_name,
            attributes_name=attributes_name,
            partition_key_generator=resolve_partition_key_generator(partition_key_generator),
            create_table=bool(create_table),
            retry_policy=retry_policy,
        )
        return cls(config, dynamodb_resource=dynamodb_resource)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        dynamodb_resource=None,
    ) -> "DynamoDbPersistenceAdapter":
        s = settings or get_settings()
        configure_logging(level=s.log_level)
        log.debug("ddb_persistence_settings", settings=s.to_log_safe_dict())
        if not (s.ddb_table_name and s.ddb_table_name.strip()):
            raise ValueError("DDB_TABLE_NAME is not set")
        return cls.create(
            table_name=s.ddb_table_name.strip(),
            partition_key_name=s.ddb_partition_key_name,
            attributes_name=s.ddb_attributes_name,
            partition_key_generator=s.ddb_partition_key_strategy,
            create_table=s.ddb_create_table,
            dynamodb_resource=dynamodb_resource,
        )

    @property
    def table_name(self) -> str:
        return self.config.table_name

    def _key(self, partition_key: str) -> dict[str, Any]:
        return {self.config.partition_key_name: partition_key}

    def _fail(
        self,
        kind: PersistenceErrorKind,
        message: str,
        *,
        partition_key: str | None,
        cause: Exception,
    ) -> PersistenceError:
        log.warning(
            "ddb_persistence_failed",
            kind=kind.value,
            table_name=self.table_name,
            partition_key=partition_key,
            error=str(cause),
        )
        return PersistenceError(
            message=message,
            kind=kind,
            table_name=self.table_name,
            partition_key=partition_key,
            cause=cause,
        )

    # --- public API ---

    def get_attributes(self, request: Any) -> dict[str, Any]:
        pk = self.config.partition_key_generator(request)

        try:
            item = self._table.get_item(key=self._key(pk))
        except DdbTableNotFound as e:
            if not self.config.create_table:
                raise self._fail(
                    PersistenceErrorKind.READ_FAILURE,
                    f"Could not read item ({pk}) from table ({self.table_name}): {e}",
                    partition_key=pk,
                    cause=e,
                ) from e
            log.info("ddb_persistence_table_missing", table_name=self.table_name, partition_key=pk)
            self._create_table()
            # A table that was just requested cannot hold any data yet.
            return {}
        except DdbError as e:
            raise self._fail(
                PersistenceErrorKind.READ_FAILURE,
                f"Could not read item ({pk}) from table ({self.table_name}): {e}",
                partition_key=pk,
                cause=e,
            ) from e

        if not item:
            return {}
        attributes = item.get(self.config.attributes_name)
        if not isinstance(attributes, dict):
            return {}
        out = from_dynamodb(attributes)
        out.pop(self.config.partition_key_name, None)
        return out

    def save_attributes(self, request: Any, attributes: dict[str, Any]) -> None:
        pk = self.config.partition_key_generator(request)

        try:
            item = {
                self.config.partition_key_name: pk,
                self.config.attributes_name: to_dynamodb(dict(attributes or {})),
            }
            self._table.put_item(item=item)
        except (DdbError, TypeError, ValueError) as e:
            raise self._fail(
                PersistenceErrorKind.WRITE_FAILURE,
                f"Could not save item ({pk}) to table ({self.table_name}): {e}",
                partition_key=pk,
                cause=e,
            ) from e

    def delete_attributes(self, request: Any) -> None:
        pk = self.config.partition_key_generator(request)

        try:
            self._table.delete_item(key=self._key(pk))
        except DdbError as e:
            raise self._fail(
                PersistenceErrorKind.DELETE_FAILURE,
                f"Could not delete item ({pk}) from table ({self.table_name}): {e}",
                partition_key=pk,
                cause=e,
            ) from e

    def _create_table(self) -> None:
        try:
            self._table.create_table(partition_key_name=self.config.partition_key_name)
        except DdbResourceInUse:
            # An earlier request is still provisioning this table.
            log.info("ddb_persistence_table_already_creating", table_name=self.table_name)
            return
        except DdbError as e:
            raise self._fail(
                PersistenceErrorKind.TABLE_CREATION_FAILURE,
                f"Could not create table ({self.table_name}): {e}",
                partition_key=None,
                cause=e,
            ) from e
        log.info("ddb_persistence_table_create_requested", table_name=self.table_name)
