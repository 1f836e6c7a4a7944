from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Only the parts of the inbound envelope the partition key generators read.
# Everything else is accepted and ignored.


class _EnvelopeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class User(_EnvelopeModel):
    user_id: str | None = Field(default=None, alias="userId")


class Device(_EnvelopeModel):
    device_id: str | None = Field(default=None, alias="deviceId")


class SystemState(_EnvelopeModel):
    user: User | None = None
    device: Device | None = None


class Context(_EnvelopeModel):
    system: SystemState | None = Field(default=None, alias="System")


class RequestEnvelope(_EnvelopeModel):
    version: str | None = None
    context: Context | None = None

    @classmethod
    def coerce(cls, value: Any) -> "RequestEnvelope":
        """Accept either a `RequestEnvelope` or the raw JSON dict form."""
        if isinstance(value, cls):
            return value
        return cls.model_validate(value or {})
