from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from pydantic import ValidationError

from .errors import InvalidRequestError
from .request_envelope import RequestEnvelope

# Any callable taking the inbound envelope and returning the partition key.
PartitionKeyGenerator = Callable[[Any], str]


def _envelope(request: Any) -> RequestEnvelope:
    try:
        return RequestEnvelope.coerce(request)
    except ValidationError as e:
        raise InvalidRequestError(f"Malformed request envelope: {e}") from e


def user_id(request: Any) -> str:
    env = _envelope(request)
    system = env.context.system if env.context else None
    uid = system.user.user_id if system and system.user else None
    if not uid:
        raise InvalidRequestError("Cannot retrieve user id from request envelope!")
    return uid


def device_id(request: Any) -> str:
    env = _envelope(request)
    system = env.context.system if env.context else None
    did = system.device.device_id if system and system.device else None
    if not did:
        raise InvalidRequestError("Cannot retrieve device id from request envelope!")
    return did


class PartitionKeyStrategy(str, Enum):
    USER_ID = "user_id"
    DEVICE_ID = "device_id"

    @property
    def generator(self) -> PartitionKeyGenerator:
        return _GENERATORS[self]


_GENERATORS: dict[PartitionKeyStrategy, PartitionKeyGenerator] = {
    PartitionKeyStrategy.USER_ID: user_id,
    PartitionKeyStrategy.DEVICE_ID: device_id,
}


class PartitionKeyGenerators:
    """Namespace of the built-in generators, e.g. `PartitionKeyGenerators.device_id`."""

    user_id = staticmethod(user_id)
    device_id = staticmethod(device_id)


def resolve_partition_key_generator(
    value: PartitionKeyStrategy | str | PartitionKeyGenerator | None,
) -> PartitionKeyGenerator:
    if value is None:
        return user_id
    if isinstance(value, PartitionKeyStrategy):
        return value.generator
    if isinstance(value, str):
        try:
            return PartitionKeyStrategy(value.strip().lower()).generator
        except ValueError:
            allowed = ", ".join(s.value for s in PartitionKeyStrategy)
            raise ValueError(f"Unknown partition key strategy {value!r} (expected one of: {allowed})") from None
    if callable(value):
        return value
    raise TypeError(f"partition key generator must be callable, got {type(value).__name__}")
