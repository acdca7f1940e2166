# -*- coding: utf-8 -*-

from __future__ import annotations

import asyncio
import os
import shutil
import sys
import tempfile
import unittest
from datetime import date
from pathlib import Path
from typing import Callable

import httpx


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.01)


class TestHttpBackend(unittest.IsolatedAsyncioTestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls._tmp = Path(tempfile.mkdtemp(prefix="bodytracker-test-"))
        data_root = cls._tmp / "data"
        os.environ["BODYTRACKER_DATA_ROOT"] = str(data_root)
        os.environ["BODYTRACKER_DB_PATH"] = str(data_root / "bodytracker.db")
        os.environ.pop("LLM_API_KEY", None)

        for name in list(sys.modules.keys()):
            if name == "bodytracker" or name.startswith("bodytracker."):
                sys.modules.pop(name, None)

        from bodytracker.api import app  # noqa: WPS433 (import inside test for env control)
        from bodytracker.client.context import ClientContext  # noqa: WPS433
        from bodytracker.entries.models import EntryFields  # noqa: WPS433

        cls.app = app
        cls.ClientContext = ClientContext
        cls.EntryFields = EntryFields

    @classmethod
    def tearDownClass(cls) -> None:
        shutil.rmtree(cls._tmp, ignore_errors=True)

    def _context(self, user_id: str):
        return self.ClientContext.for_http(
            "http://testserver",
            user_id,
            transport=httpx.ASGITransport(app=self.app),
            grace_seconds=1.0,
        )

    async def test_writes_sync_through_http(self) -> None:
        async with self._context("http-user") as ctx:
            seen = []
            ctx.coordinator.subscribe(seen.append)
            await wait_until(lambda: bool(seen))

            result = await ctx.coordinator.create(
                self.EntryFields(kind="weight", value=70, occurred_on="2024-01-01")
            )
            self.assertTrue(result.ok, result.error)
            await ctx.coordinator.create(self.EntryFields(kind="food", value=500, occurred_on="2024-01-01"))
            await wait_until(lambda: len(ctx.coordinator.entries) == 2)
            self.assertTrue(all(e.recorded_at is not None for e in ctx.coordinator.entries))

            (bucket,) = ctx.chart("week", date(2024, 1, 1))
            self.assertEqual((bucket.weight, bucket.calories_total), (70, 500))

            deleted = await ctx.undo.delete(result.entry_id)
            self.assertTrue(deleted.ok)
            await wait_until(lambda: len(ctx.coordinator.entries) == 1)
            restored = await ctx.undo.undo()
            self.assertTrue(restored.ok)
            await wait_until(lambda: len(ctx.coordinator.entries) == 2)

    async def test_http_errors_become_failed_results(self) -> None:
        async with self._context("http-missing") as ctx:
            ctx.coordinator.subscribe(lambda entries: None)
            result = await ctx.coordinator.update(
                "no-such-entry", self.EntryFields(kind="food", value=1, occurred_on="2024-01-01")
            )
            self.assertFalse(result.ok)
            self.assertIn("404", result.error)

    async def test_unreachable_server_fails_subscription(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        ctx = self.ClientContext.for_http("http://testserver", "offline", transport=httpx.MockTransport(refuse))
        failures = []
        ctx.coordinator.subscribe(lambda entries: None, failures.append)
        await wait_until(lambda: bool(failures))
        self.assertIn("unreachable", failures[0].message)
        self.assertFalse(ctx.coordinator.subscribed)
        await ctx.aclose()

    async def test_unreadable_write_response_is_a_failed_write(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json={"user_id": "proxied", "count": 0, "entries": []})
            return httpx.Response(200, text="<html>proxy error</html>")

        ctx = self.ClientContext.for_http("http://testserver", "proxied", transport=httpx.MockTransport(handler))
        self.addAsyncCleanup(ctx.aclose)
        seen = []
        ctx.coordinator.subscribe(seen.append)
        await wait_until(lambda: bool(seen))

        result = await ctx.coordinator.create(
            self.EntryFields(kind="food", value=450, label="Breakfast Bowl", occurred_on="2024-11-15")
        )
        self.assertFalse(result.ok)
        self.assertIn("unreadable body", result.error)
        await asyncio.sleep(0.05)
        self.assertFalse(ctx.collection.has_pending_writes)
        self.assertEqual(ctx.coordinator.entries, ())

    async def test_unreadable_listing_fails_subscription(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"unexpected": True})

        ctx = self.ClientContext.for_http("http://testserver", "garbled", transport=httpx.MockTransport(handler))
        self.addAsyncCleanup(ctx.aclose)
        failures = []
        ctx.coordinator.subscribe(lambda entries: None, failures.append)
        await wait_until(lambda: bool(failures))
        self.assertIn("unreadable body", failures[0].message)
        self.assertFalse(ctx.coordinator.subscribed)


if __name__ == "__main__":
    unittest.main()
