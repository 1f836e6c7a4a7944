from __future__ import annotations

from functools import lru_cache

import boto3
from botocore.config import Config

from ...settings import get_settings


@lru_cache(maxsize=1)
def botocore_config() -> Config:
    s = get_settings()
    # botocore handles low-level transport retries; the adapter itself makes a
    # single logical call per operation unless a RetryPolicy is configured.
    return Config(
        retries={"max_attempts": max(1, int(s.ddb_max_botocore_attempts)), "mode": "standard"},
        connect_timeout=s.ddb_connect_timeout_s,
        read_timeout=s.ddb_read_timeout_s,
    )


def _endpoint_url() -> str | None:
    url = (get_settings().ddb_endpoint_url or "").strip()
    return url or None


@lru_cache(maxsize=1)
def dynamodb_resource():
    return boto3.resource(
        "dynamodb",
        region_name=get_settings().aws_region,
        endpoint_url=_endpoint_url(),
        config=botocore_config(),
    )
