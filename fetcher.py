"""
Page fetcher - one GET per source, failures returned as data.

fetch_page() never raises for network or HTTP problems; the orchestrator
decides what to do with a failed source (skip it and try the next one).
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

import aiohttp

import config


NETWORK_ERROR = "network"
HTTP_ERROR    = "http"


@dataclass(frozen=True)
class FetchResult:
    """Either markup (ok) or an error kind + detail - never both."""
    url: str
    markup: Optional[str] = None
    error_kind: Optional[str] = None    # NETWORK_ERROR | HTTP_ERROR
    detail: str = ""
    status: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    @classmethod
    def success(cls, url: str, markup: str, status: int = 200) -> FetchResult:
        return cls(url=url, markup=markup, status=status)

    @classmethod
    def failure(
        cls, url: str, kind: str, detail: str, status: Optional[int] = None,
    ) -> FetchResult:
        return cls(url=url, error_kind=kind, detail=detail, status=status)


def default_headers() -> dict[str, str]:
    return {"User-Agent": config.USER_AGENT}


async def fetch_page(session: aiohttp.ClientSession, url: str) -> FetchResult:
    """
    GET url with the browser identity header and return the body as text.

    Any content type is accepted and decoded leniently; the extractor treats
    whatever comes back as HTML. No retries here.
    """
    try:
        async with session.get(url, headers=default_headers()) as resp:
            if not 200 <= resp.status < 300:
                text = await resp.text(errors="replace")
                return FetchResult.failure(
                    url, HTTP_ERROR, f"HTTP {resp.status}: {text[:200]}", status=resp.status,
                )
            markup = await resp.text(errors="replace")
            return FetchResult.success(url, markup, status=resp.status)
    except asyncio.TimeoutError:
        return FetchResult.failure(url, NETWORK_ERROR, "timed out")
    except (aiohttp.ClientError, UnicodeDecodeError, LookupError) as exc:
        # LookupError: server declared a charset Python doesn't know
        return FetchResult.failure(url, NETWORK_ERROR, f"{type(exc).__name__}: {exc}")
