"""
Async wrapper around the boto3 CloudWatch Logs client.

boto3 is synchronous; each call runs in a worker thread via
``asyncio.to_thread`` so flushing never blocks the event loop. Protocol,
credentials, retries and throttling stay inside botocore.
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping, Sequence

import boto3
from botocore.exceptions import ClientError

ALREADY_EXISTS = "ResourceAlreadyExistsException"


def error_code(exc: BaseException) -> str:
    """Return the service error code for ``exc``.

    botocore puts it under ``response["Error"]["Code"]``; anything else is
    identified by its class name.
    """
    if isinstance(exc, ClientError):
        code = exc.response.get("Error", {}).get("Code")
        if code:
            return str(code)
    return type(exc).__name__


class CloudWatchLogsClient:
    """The three CloudWatch Logs operations a shipper uses."""

    def __init__(self, **client_options: Any) -> None:
        self._options = dict(client_options)
        self._client: Any = None

    async def _get_client(self) -> Any:
        if self._client is None:
            self._client = await asyncio.to_thread(
                boto3.client, "logs", **self._options
            )
        return self._client

    async def create_log_group(self, log_group_name: str) -> dict[str, Any]:
        client = await self._get_client()
        return await asyncio.to_thread(
            client.create_log_group, logGroupName=log_group_name
        )

    async def create_log_stream(
        self, log_group_name: str, log_stream_name: str
    ) -> dict[str, Any]:
        client = await self._get_client()
        return await asyncio.to_thread(
            client.create_log_stream,
            logGroupName=log_group_name,
            logStreamName=log_stream_name,
        )

    async def put_log_events(
        self,
        log_group_name: str,
        log_stream_name: str,
        log_events: Sequence[Mapping[str, Any]],
    ) -> dict[str, Any]:
        client = await self._get_client()
        return await asyncio.to_thread(
            client.put_log_events,
            logGroupName=log_group_name,
            logStreamName=log_stream_name,
            logEvents=list(log_events),
        )
