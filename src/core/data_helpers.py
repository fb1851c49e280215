"""Error-handling wrappers for common remote table operations.

Reads raise (callers decide how to report), writes return a
``MutationResult`` so forms can show the outcome inline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .remote_client import RemoteError, RemoteQuery, RemoteStoreClient

__all__ = [
    "MutationResult",
    "load_data",
    "insert_data",
    "update_data",
    "delete_data",
    "count_records",
    "record_exists",
]

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MutationResult:
    success: bool
    message: Optional[str] = None
    error: Optional[RemoteError] = None


def load_data(query: RemoteQuery, error_message: str = "Error loading data") -> Any:
    """Execute a read query; ``[]`` when the backend returns no body."""
    try:
        data = query.execute().data
    except RemoteError as e:
        _log.error("%s: %s", error_message, e)
        raise RemoteError(
            f"{error_message}: {e.message}", status=e.status, code=e.code, details=e.details
        ) from e
    return data if data is not None else []


def insert_data(
    client: RemoteStoreClient,
    table: str,
    data: Mapping[str, Any],
    success_message: str = "Data saved",
) -> MutationResult:
    try:
        client.table(table).insert(data)
    except RemoteError as e:
        _log.error("Insert into %s failed: %s", table, e)
        return MutationResult(success=False, error=e)
    return MutationResult(success=True, message=success_message)


def update_data(
    client: RemoteStoreClient,
    table: str,
    record_id: Any,
    data: Mapping[str, Any],
    success_message: str = "Data updated",
) -> MutationResult:
    try:
        client.table(table).eq("id", record_id).update(data)
    except RemoteError as e:
        _log.error("Update of %s/%s failed: %s", table, record_id, e)
        return MutationResult(success=False, error=e)
    return MutationResult(success=True, message=success_message)


def delete_data(
    client: RemoteStoreClient,
    table: str,
    record_id: Any,
    success_message: str = "Data deleted",
) -> MutationResult:
    try:
        client.table(table).eq("id", record_id).delete()
    except RemoteError as e:
        _log.error("Delete of %s/%s failed: %s", table, record_id, e)
        return MutationResult(success=False, error=e)
    return MutationResult(success=True, message=success_message)


def count_records(
    client: RemoteStoreClient, table: str, filters: Mapping[str, Any] | None = None
) -> int:
    """Exact row count for ``table`` matching equality filters; 0 on failure."""
    query = client.table(table)
    for column, value in (filters or {}).items():
        query = query.eq(column, value)
    try:
        return query.count()
    except RemoteError as e:
        _log.error("Count on %s failed: %s", table, e)
        return 0


def record_exists(client: RemoteStoreClient, table: str, filters: Mapping[str, Any]) -> bool:
    return count_records(client, table, filters) > 0
