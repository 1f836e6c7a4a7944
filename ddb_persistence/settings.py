from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=None, extra="ignore")

    # AWS / data
    aws_region: str = Field(default="us-east-1", validation_alias="AWS_REGION")
    # Point at DynamoDB Local (e.g. http://localhost:8000) for development.
    ddb_endpoint_url: str | None = Field(default=None, validation_alias="DDB_ENDPOINT_URL")
    ddb_table_name: str | None = Field(default=None, validation_alias="DDB_TABLE_NAME")

    # Adapter layout
    ddb_partition_key_name: str = Field(default="id", validation_alias="DDB_PARTITION_KEY_NAME")
    ddb_attributes_name: str = Field(default="attributes", validation_alias="DDB_ATTRIBUTES_NAME")
    # One of: user_id, device_id
    ddb_partition_key_strategy: str = Field(
        default="user_id", validation_alias="DDB_PARTITION_KEY_STRATEGY"
    )
    ddb_create_table: bool = Field(default=False, validation_alias="DDB_CREATE_TABLE")

    # botocore client tuning
    ddb_connect_timeout_s: float = Field(default=2, validation_alias="DDB_CONNECT_TIMEOUT_S")
    ddb_read_timeout_s: float = Field(default=10, validation_alias="DDB_READ_TIMEOUT_S")
    ddb_max_botocore_attempts: int = Field(default=3, validation_alias="DDB_MAX_BOTOCORE_ATTEMPTS")

    # Observability
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    def to_log_safe_dict(self) -> dict[str, object]:
        """
        A redacted representation safe for structured logs / diagnostics.
        """
        return {
            "aws": {
                "aws_region": self.aws_region,
                "ddb_endpoint_url_configured": bool((self.ddb_endpoint_url or "").strip()),
                "ddb_table_name": self.ddb_table_name,
            },
            "adapter": {
                "partition_key_name": self.ddb_partition_key_name,
                "attributes_name": self.ddb_attributes_name,
                "partition_key_strategy": self.ddb_partition_key_strategy,
                "create_table": bool(self.ddb_create_table),
            },
            "log_level": self.log_level,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
