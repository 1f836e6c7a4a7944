from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class DdbErrorKind(str, Enum):
    TABLE_NOT_FOUND = "table_not_found"
    RESOURCE_IN_USE = "resource_in_use"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    UNAVAILABLE = "unavailable"
    THROTTLED = "throttled"
    INTERNAL = "internal"


_THROTTLED_CODES = {
    "ProvisionedThroughputExceededException",
    "ThrottlingException",
    "RequestLimitExceeded",
    "InternalServerError",
    "ServiceUnavailable",
}


def classify_error_code(code: str | None) -> DdbErrorKind:
    """Map an opaque DynamoDB error code onto a closed set of error kinds."""
    c = str(code or "").strip()
    if c == "ResourceNotFoundException":
        return DdbErrorKind.TABLE_NOT_FOUND
    if c == "ResourceInUseException":
        return DdbErrorKind.RESOURCE_IN_USE
    if c == "ConditionalCheckFailedException":
        return DdbErrorKind.CONFLICT
    if c in ("ValidationException", "ParamValidationError"):
        return DdbErrorKind.VALIDATION
    if c in ("AccessDeniedException", "UnrecognizedClientException"):
        return DdbErrorKind.UNAVAILABLE
    if c in _THROTTLED_CODES:
        return DdbErrorKind.THROTTLED
    return DdbErrorKind.INTERNAL


@dataclass(slots=True)
class DdbError(Exception):
    """Base error for DynamoDB operations.

    `message` carries the store's own error message where one is available so
    callers can embed it as the underlying cause.
    """

    message: str
    operation: str | None = None
    table_name: str | None = None
    key: dict[str, Any] | None = None
    code: str | None = None
    aws_request_id: str | None = None
    retryable: bool = False
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class DdbTableNotFound(DdbError):
    pass


@dataclass(slots=True)
class DdbResourceInUse(DdbError):
    pass


@dataclass(slots=True)
class DdbConflict(DdbError):
    pass


@dataclass(slots=True)
class DdbValidation(DdbError):
    pass


@dataclass(slots=True)
class DdbThrottled(DdbError):
    pass


@dataclass(slots=True)
class DdbUnavailable(DdbError):
    pass


@dataclass(slots=True)
class DdbInternal(DdbError):
    pass


ERROR_CLASS_BY_KIND: dict[DdbErrorKind, type[DdbError]] = {
    DdbErrorKind.TABLE_NOT_FOUND: DdbTableNotFound,
    DdbErrorKind.RESOURCE_IN_USE: DdbResourceInUse,
    DdbErrorKind.CONFLICT: DdbConflict,
    DdbErrorKind.VALIDATION: DdbValidation,
    DdbErrorKind.UNAVAILABLE: DdbUnavailable,
    DdbErrorKind.THROTTLED: DdbThrottled,
    DdbErrorKind.INTERNAL: DdbInternal,
}
