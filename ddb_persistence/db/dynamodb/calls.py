from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

from .errors import (
    ERROR_CLASS_BY_KIND,
    DdbError,
    DdbErrorKind,
    DdbInternal,
    DdbUnavailable,
    classify_error_code,
)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay_s: float = 0.05
    max_delay_s: float = 1.5


# One attempt, no app-layer retries.
SINGLE_ATTEMPT = RetryPolicy(max_attempts=1)


def _sleep_backoff(policy: RetryPolicy, attempt: int) -> None:
    # Full jitter exponential backoff.
    cap = policy.max_delay_s
    base = policy.base_delay_s
    exp = min(cap, base * (2 ** max(0, attempt - 1)))
    time.sleep(random.random() * exp)


def _aws_request_id_from_client_error(e: ClientError) -> str | None:
    return ((e.response or {}).get("ResponseMetadata") or {}).get("RequestId")


def _err_code_from_client_error(e: ClientError) -> str | None:
    return ((e.response or {}).get("Error") or {}).get("Code")


def _err_message_from_client_error(e: ClientError) -> str:
    msg = ((e.response or {}).get("Error") or {}).get("Message")
    return str(msg) if msg else str(e)


def map_botocore_error(
    *,
    operation: str,
    table_name: str | None,
    key: dict[str, Any] | None,
    exc: Exception,
) -> DdbError:
    if isinstance(exc, DdbError):
        return exc

    if isinstance(exc, ClientError):
        code = _err_code_from_client_error(exc) or ""
        kind = classify_error_code(code)
        return ERROR_CLASS_BY_KIND[kind](
            message=_err_message_from_client_error(exc),
            operation=operation,
            table_name=table_name,
            key=key,
            code=code or None,
            aws_request_id=_aws_request_id_from_client_error(exc),
            retryable=kind is DdbErrorKind.THROTTLED,
            cause=exc,
        )

    if isinstance(exc, BotoCoreError):
        return DdbUnavailable(
            message=str(exc) or "DynamoDB client error",
            operation=operation,
            table_name=table_name,
            key=key,
            retryable=True,
            cause=exc,
        )

    return DdbInternal(
        message=str(exc) or "Unexpected DynamoDB error",
        operation=operation,
        table_name=table_name,
        key=key,
        retryable=False,
        cause=exc,
    )


def ddb_call(
    operation: str,
    fn: Callable[[], T],
    *,
    table_name: str | None = None,
    key: dict[str, Any] | None = None,
    retry_policy: RetryPolicy | None = None,
) -> T:
    """Run one DynamoDB call, mapping any failure onto a `DdbError`.

    Without a retry policy the call is attempted exactly once.
    """
    policy = retry_policy or SINGLE_ATTEMPT
    attempts = max(1, int(policy.max_attempts))

    for attempt in range(1, attempts + 1):
        try:
            return fn()
        except Exception as e:  # noqa: BLE001
            mapped = map_botocore_error(
                operation=operation,
                table_name=table_name,
                key=key,
                exc=e,
            )

            if not mapped.retryable or attempt >= attempts:
                if mapped is e:
                    raise
                raise mapped from e

            _sleep_backoff(policy, attempt)

    raise DdbInternal(message="DynamoDB request failed", operation=operation, table_name=table_name, key=key)
