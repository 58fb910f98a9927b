"""Remote store clients used to replay the offline queue.

The production backend is Supabase, reached through its PostgREST endpoint
(``<project>/rest/v1/<table>``). Any failure talking to it surfaces as a
``RemoteStoreError`` so the sync coordinator can treat it as retryable.
"""

import copy
import logging
from typing import Protocol

import httpx

from rindang.config import Config
from rindang.sync.entities import spec_for
from rindang.utils.constants import LOCAL_ONLY_FIELDS

logger = logging.getLogger(__name__)


class SyncError(Exception):
    """Base exception for sync operations."""


class RemoteStoreError(SyncError):
    """A remote insert/update/delete did not go through."""


def strip_local_fields(payload: dict) -> dict:
    """Drop cache bookkeeping keys before a payload leaves the device."""
    return {k: v for k, v in (payload or {}).items()
            if k not in LOCAL_ONLY_FIELDS}


class RemoteStore(Protocol):
    def insert(self, kind, payload: dict) -> dict: ...

    def update(self, kind, record_id: str, payload: dict) -> None: ...

    def delete(self, kind, record_id: str) -> None: ...

    def is_reachable(self) -> bool: ...


class SupabaseRemoteStore:
    """PostgREST client for the Supabase project configured in Config."""

    def __init__(self, base_url: str = None, api_key: str = None,
                 timeout: float = None, transport=None):
        base_url = (base_url or Config.SUPABASE_URL).rstrip("/")
        api_key = api_key or Config.SUPABASE_ANON_KEY
        if not base_url or not api_key:
            raise SyncError(
                "Remote store is not configured. Set SUPABASE_URL and "
                "SUPABASE_ANON_KEY."
            )
        timeout = Config.REMOTE_TIMEOUT if timeout is None else timeout
        self.base_url = base_url
        self.client = httpx.Client(
            base_url=f"{base_url}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(timeout, connect=min(timeout, 10.0)),
            transport=transport,
        )

    def close(self):
        self.client.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self.client.request(method, path, **kwargs)
            response.raise_for_status()
            return response
        except httpx.TimeoutException as e:
            raise RemoteStoreError(f"{method} {path} timed out") from e
        except httpx.HTTPStatusError as e:
            raise RemoteStoreError(
                f"{method} {path} failed with {e.response.status_code}: "
                f"{_error_message(e.response)}"
            ) from e
        except httpx.HTTPError as e:
            raise RemoteStoreError(f"{method} {path} failed: {e}") from e

    def insert(self, kind, payload: dict) -> dict:
        table = spec_for(kind).remote_table
        response = self._request(
            "POST", f"/{table}",
            json=strip_local_fields(payload),
            headers={"Prefer": "return=representation"},
        )
        if not response.content:
            return {}
        try:
            rows = response.json()
        except ValueError as e:
            raise RemoteStoreError(
                f"POST /{table} returned a non-JSON body"
            ) from e
        if isinstance(rows, dict):
            return rows
        return rows[0] if rows else {}

    def update(self, kind, record_id: str, payload: dict) -> None:
        table = spec_for(kind).remote_table
        self._request(
            "PATCH", f"/{table}",
            params={"id": f"eq.{record_id}"},
            json=strip_local_fields(payload),
        )

    def delete(self, kind, record_id: str) -> None:
        table = spec_for(kind).remote_table
        self._request(
            "DELETE", f"/{table}", params={"id": f"eq.{record_id}"},
        )

    def is_reachable(self) -> bool:
        """Cheap probe used to refresh the connectivity signal."""
        try:
            response = self.client.get("/", timeout=5.0)
            return response.status_code < 500
        except httpx.HTTPError:
            return False


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or str(body)
    return str(body)


class InMemoryRemoteStore:
    """Dict-backed remote store for offline demos and tests."""

    def __init__(self):
        self.tables: dict[str, dict[str, dict]] = {}
        self.reachable = True

    def _table(self, kind) -> dict:
        return self.tables.setdefault(spec_for(kind).remote_table, {})

    def insert(self, kind, payload: dict) -> dict:
        row = strip_local_fields(copy.deepcopy(payload))
        record_id = row.get("id")
        if not record_id:
            raise RemoteStoreError("insert requires an id")
        table = self._table(kind)
        if record_id in table:
            raise RemoteStoreError(f"duplicate key {record_id}")
        table[record_id] = row
        return dict(row)

    def update(self, kind, record_id: str, payload: dict) -> None:
        table = self._table(kind)
        if record_id in table:
            table[record_id].update(strip_local_fields(payload))

    def delete(self, kind, record_id: str) -> None:
        self._table(kind).pop(record_id, None)

    def is_reachable(self) -> bool:
        return self.reachable
