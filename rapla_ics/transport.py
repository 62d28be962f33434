from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import APIRequestContext, Error, Playwright, async_playwright


class TransportError(Exception):
    pass


class PlaywrightTransport:
    """Plain HTTP GETs through Playwright's request API; no browser is launched."""

    def __init__(self, timeout_ms: float = 30_000, user_agent: Optional[str] = None):
        self.timeout_ms = timeout_ms
        self.user_agent = user_agent
        self._playwright: Optional[Playwright] = None
        self._context: Optional[APIRequestContext] = None

    async def __aenter__(self) -> "PlaywrightTransport":
        self._playwright = await async_playwright().start()
        self._context = await self._playwright.request.new_context(
            timeout=self.timeout_ms,
            user_agent=self.user_agent,
        )
        return self

    async def __aexit__(self, *exc_info) -> None:
        if self._context is not None:
            await self._context.dispose()
            self._context = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def fetch(self, url: str) -> str:
        if self._context is None:
            raise RuntimeError("Transport used outside of 'async with'")
        logging.debug("GET %s", url)
        try:
            resp = await self._context.get(url)
        except Error as exc:
            raise TransportError(f"Request to {url} failed: {exc}") from exc
        if not resp.ok:
            raise TransportError(f"Request to {url} returned HTTP {resp.status}")
        return await resp.text()
