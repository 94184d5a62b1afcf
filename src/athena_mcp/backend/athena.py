"""Athena implementation of the query backend.

Wraps a synchronous boto3 Athena client and runs each call in a worker thread so
that the event loop stays free for other tool invocations.
"""

from __future__ import annotations

import asyncio
from typing import Any, Final

import boto3
from botocore.exceptions import ClientError
from fastmcp.utilities.logging import get_logger

from athena_mcp.backend.base import (
    BackendRejectedError,
    BackendStatus,
    ColumnDescriptor,
    RawResultPage,
)

_logger = get_logger(__name__)

# Athena refuses GetQueryResults requests with MaxResults above this.
ATHENA_MAX_RESULTS_PER_CALL: Final[int] = 1000

_REJECTED_ERROR_CODES: Final[frozenset[str]] = frozenset({"InvalidRequestException"})


def _rejected(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") in _REJECTED_ERROR_CODES


def _error_message(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Message") or str(exc)


class AthenaBackend:
    """`QueryBackend` backed by AWS Athena query executions."""

    def __init__(
        self,
        *,
        region: str | None = None,
        profile: str | None = None,
        workgroup: str | None = None,
        client: Any | None = None,
    ) -> None:
        """Create the backend.

        Args:
            region: AWS region; boto3 resolves a default when None
            profile: Named credential profile; the default chain is used when None
            workgroup: Optional Athena workgroup for submissions
            client: Pre-built Athena client (mainly for tests)
        """
        if client is None:
            session = boto3.Session(profile_name=profile, region_name=region)
            client = session.client("athena")
        self._client = client
        self._workgroup = workgroup

    async def submit(self, query: str, database: str, output_location: str) -> str | None:
        return await asyncio.to_thread(self._start_query_execution, query, database, output_location)

    async def status(self, execution_handle: str) -> BackendStatus | None:
        return await asyncio.to_thread(self._get_query_execution, execution_handle)

    async def fetch_page(self, execution_handle: str, max_rows: int) -> RawResultPage | None:
        return await asyncio.to_thread(self._get_query_results, execution_handle, max_rows)

    # -- synchronous boto3 calls -------------------------------------------------

    def _start_query_execution(self, query: str, database: str, output_location: str) -> str | None:
        kwargs: dict[str, Any] = {
            "QueryString": query,
            "QueryExecutionContext": {"Database": database},
            "ResultConfiguration": {"OutputLocation": output_location},
        }
        if self._workgroup:
            kwargs["WorkGroup"] = self._workgroup
        try:
            response = self._client.start_query_execution(**kwargs)
        except ClientError as exc:
            if _rejected(exc):
                raise BackendRejectedError(_error_message(exc)) from exc
            raise
        return response.get("QueryExecutionId")

    def _get_query_execution(self, execution_handle: str) -> BackendStatus | None:
        try:
            response = self._client.get_query_execution(QueryExecutionId=execution_handle)
        except ClientError as exc:
            if _rejected(exc):
                raise BackendRejectedError(_error_message(exc)) from exc
            raise

        execution = response.get("QueryExecution")
        if not execution:
            return None
        status = execution.get("Status") or {}
        stats = execution.get("Statistics") or {}
        return BackendStatus(
            state=status.get("State"),
            state_change_reason=status.get("StateChangeReason"),
            bytes_scanned=stats.get("DataScannedInBytes"),
            engine_execution_time_millis=stats.get("EngineExecutionTimeInMillis"),
        )

    def _get_query_results(self, execution_handle: str, max_rows: int) -> RawResultPage | None:
        # One extra row for the header, which Athena returns as the first row.
        wanted = max_rows + 1
        columns: list[ColumnDescriptor] | None = None
        rows: list[list[str | None]] = []
        next_token: str | None = None

        while len(rows) < wanted:
            kwargs: dict[str, Any] = {
                "QueryExecutionId": execution_handle,
                "MaxResults": min(wanted - len(rows), ATHENA_MAX_RESULTS_PER_CALL),
            }
            if next_token:
                kwargs["NextToken"] = next_token
            try:
                response = self._client.get_query_results(**kwargs)
            except ClientError as exc:
                if _rejected(exc):
                    raise BackendRejectedError(_error_message(exc)) from exc
                raise

            result_set = response.get("ResultSet")
            if result_set is None:
                if columns is None:
                    return None
                break
            if columns is None:
                info = (result_set.get("ResultSetMetadata") or {}).get("ColumnInfo") or []
                columns = [ColumnDescriptor(name=col.get("Name"), type=col.get("Type")) for col in info]
            for row in result_set.get("Rows") or []:
                rows.append([datum.get("VarCharValue") for datum in row.get("Data") or []])

            next_token = response.get("NextToken")
            if not next_token:
                break

        _logger.debug("Fetched %d raw rows for %s", len(rows), execution_handle)
        return RawResultPage(columns=columns or [], rows=rows[:wanted])
