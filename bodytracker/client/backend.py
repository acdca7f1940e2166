# -*- coding: utf-8 -*-
"""Client — entry store backends (direct SQLite or the HTTP API)."""

from __future__ import annotations

import asyncio
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel

from ..entries import storage
from ..entries.models import EntriesResponse, Entry, EntryFields
from ..identity import USER_HEADER

ModelT = TypeVar("ModelT", bound=BaseModel)


class StoreError(RuntimeError):
    """A read or write against the entry store did not complete."""


class EntryBackend(ABC):
    user_id: str

    @abstractmethod
    async def list_entries(self) -> List[Entry]: ...

    @abstractmethod
    async def create(self, fields: EntryFields) -> Entry: ...

    @abstractmethod
    async def update(self, entry_id: str, fields: EntryFields) -> Entry: ...

    @abstractmethod
    async def delete(self, entry_id: str) -> None: ...

    async def aclose(self) -> None:
        return None


class SqliteEntryBackend(EntryBackend):
    """Talks to the SQLite store in-process, off the event loop thread."""

    def __init__(self, user_id: str, db_path: Path | None = None) -> None:
        self.user_id = user_id
        self.db_path = db_path

    async def _call(self, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return await asyncio.to_thread(fn, self.user_id, *args, db_path=self.db_path)
        except sqlite3.Error as exc:
            raise StoreError(f"SQLite store failure: {exc}") from exc

    async def list_entries(self) -> List[Entry]:
        return await self._call(storage.list_entries)

    async def create(self, fields: EntryFields) -> Entry:
        return await self._call(storage.create_entry, fields)

    async def update(self, entry_id: str, fields: EntryFields) -> Entry:
        entry = await self._call(storage.update_entry, entry_id, fields)
        if entry is None:
            raise StoreError(f"Entry not found: {entry_id}")
        return entry

    async def delete(self, entry_id: str) -> None:
        if not await self._call(storage.delete_entry, entry_id):
            raise StoreError(f"Entry not found: {entry_id}")


class HttpEntryBackend(EntryBackend):
    """Talks to ``/api/entries`` over HTTP."""

    def __init__(
        self,
        base_url: str,
        user_id: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.user_id = user_id
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={USER_HEADER: user_id},
            timeout=timeout,
            transport=transport,
            follow_redirects=True,
        )

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            resp = await self._client.request(method, path, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text[:200]
            raise StoreError(f"{method} {path} failed ({exc.response.status_code}): {detail}") from exc
        except httpx.HTTPError as exc:
            raise StoreError(f"{method} {path} unreachable: {exc}") from exc
        return resp

    def _decode(self, resp: httpx.Response, model: Type[ModelT]) -> ModelT:
        # JSONDecodeError and pydantic.ValidationError are both ValueErrors.
        try:
            return model.model_validate(resp.json())
        except ValueError as exc:
            request = resp.request
            raise StoreError(f"{request.method} {request.url.path} returned an unreadable body: {exc}") from exc

    async def list_entries(self) -> List[Entry]:
        resp = await self._request("GET", "/api/entries")
        return self._decode(resp, EntriesResponse).entries

    async def create(self, fields: EntryFields) -> Entry:
        resp = await self._request("POST", "/api/entries", json=fields.model_dump(mode="json"))
        return self._decode(resp, Entry)

    async def update(self, entry_id: str, fields: EntryFields) -> Entry:
        resp = await self._request("PUT", f"/api/entries/{entry_id}", json=fields.model_dump(mode="json"))
        return self._decode(resp, Entry)

    async def delete(self, entry_id: str) -> None:
        await self._request("DELETE", f"/api/entries/{entry_id}")

    async def aclose(self) -> None:
        await self._client.aclose()
