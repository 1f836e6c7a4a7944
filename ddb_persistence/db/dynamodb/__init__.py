"""Shared DynamoDB utilities.

This package centralizes:
- boto3 client/resource configuration
- error-code classification into typed, expressive errors
- the single-call wrapper (with optional retry/backoff)
- Python <-> DynamoDB value conversion
- the table wrapper used by the persistence adapter

"""
