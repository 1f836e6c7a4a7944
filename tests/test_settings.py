from __future__ import annotations

import pytest

from ddb_persistence import DynamoDbPersistenceAdapter
from ddb_persistence.partition_keys import device_id
from ddb_persistence.settings import Settings


def test_settings_read_env_aliases(monkeypatch):
    monkeypatch.setenv("DDB_TABLE_NAME", "skill-state")
    monkeypatch.setenv("DDB_PARTITION_KEY_NAME", "pk")
    monkeypatch.setenv("DDB_ATTRIBUTES_NAME", "state")
    monkeypatch.setenv("DDB_PARTITION_KEY_STRATEGY", "device_id")
    monkeypatch.setenv("DDB_CREATE_TABLE", "true")
    monkeypatch.setenv("DDB_ENDPOINT_URL", "http://localhost:8000")

    s = Settings()
    assert s.ddb_table_name == "skill-state"
    assert s.ddb_create_table is True

    safe = s.to_log_safe_dict()
    assert safe["aws"]["ddb_endpoint_url_configured"] is True
    assert safe["adapter"]["partition_key_strategy"] == "device_id"


def test_from_settings_builds_configured_adapter(monkeypatch, ddb, envelope):
    monkeypatch.setenv("DDB_TABLE_NAME", "CreateNewTable")
    monkeypatch.setenv("DDB_PARTITION_KEY_NAME", "pk")
    monkeypatch.setenv("DDB_ATTRIBUTES_NAME", "state")
    monkeypatch.setenv("DDB_PARTITION_KEY_STRATEGY", "device_id")
    monkeypatch.setenv("DDB_CREATE_TABLE", "1")

    adapter = DynamoDbPersistenceAdapter.from_settings(Settings(), dynamodb_resource=ddb)
    cfg = adapter.config
    assert cfg.table_name == "CreateNewTable"
    assert cfg.partition_key_name == "pk"
    assert cfg.attributes_name == "state"
    assert cfg.partition_key_generator is device_id
    assert cfg.create_table is True

    assert adapter.get_attributes(envelope) == {}
    ddb.tables["CreateNewTable"]["status"] = "ACTIVE"
    adapter.save_attributes(envelope, {"n": 1})
    assert ddb.tables["CreateNewTable"]["items"]["deviceId"] == {"pk": "deviceId", "state": {"n": 1}}


def test_from_settings_requires_table_name(monkeypatch):
    monkeypatch.delenv("DDB_TABLE_NAME", raising=False)
    with pytest.raises(ValueError):
        DynamoDbPersistenceAdapter.from_settings(Settings())


def test_from_settings_rejects_unknown_strategy(monkeypatch, ddb):
    monkeypatch.setenv("DDB_TABLE_NAME", "mockTableName")
    monkeypatch.setenv("DDB_PARTITION_KEY_STRATEGY", "session")
    with pytest.raises(ValueError):
        DynamoDbPersistenceAdapter.from_settings(Settings(), dynamodb_resource=ddb)


def test_from_settings_logs_redacted_settings_once(monkeypatch, ddb):
    import ddb_persistence.adapter as adapter_module

    events: list[tuple[str, dict]] = []

    class _RecordingLog:
        def debug(self, event, **kw):
            events.append((event, kw))

    monkeypatch.setattr(adapter_module, "log", _RecordingLog())
    monkeypatch.setenv("DDB_TABLE_NAME", "mockTableName")
    monkeypatch.setenv("DDB_ENDPOINT_URL", "http://localhost:8000")

    DynamoDbPersistenceAdapter.from_settings(Settings(), dynamodb_resource=ddb)

    assert [e for e, _ in events] == ["ddb_persistence_settings"]
    logged = events[0][1]["settings"]
    assert logged["aws"]["ddb_table_name"] == "mockTableName"
    assert logged["aws"]["ddb_endpoint_url_configured"] is True
    assert "http://localhost:8000" not in repr(logged)
