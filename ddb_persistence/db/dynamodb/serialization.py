from __future__ import annotations

import math
from decimal import Decimal
from typing import Any


def to_dynamodb(value: Any) -> Any:
    """Convert a Python value into something the boto3 resource layer accepts."""
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("Infinity and NaN not supported")
        # boto3 refuses floats; str() keeps the shortest repr so 0.1 stays 0.1.
        return Decimal(str(value))
    if isinstance(value, dict):
        return {str(k): to_dynamodb(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamodb(v) for v in value]
    return value


def from_dynamodb(value: Any) -> Any:
    """Convert boto3 resource values (notably `Decimal`) back into plain Python."""
    if isinstance(value, Decimal):
        # A non-negative exponent means no fractional digits were stored, so the
        # value came from an int. "2.0" keeps its exponent of -1 and stays a float.
        exponent = value.as_tuple().exponent
        if isinstance(exponent, int) and exponent >= 0:
            return int(value)
        return float(value)
    if isinstance(value, dict):
        return {k: from_dynamodb(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamodb(v) for v in value]
    if isinstance(value, set):
        return {from_dynamodb(v) for v in value}
    return value
