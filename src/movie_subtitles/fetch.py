"""Outbound HTTP for the movie page (through the relay) and the archives."""

from __future__ import annotations

import logging
import urllib.parse
from typing import Dict, Optional

import httpx

from .errors import UpstreamNotFound, UpstreamUnavailable
from .settings import Settings, settings as default_settings

log = logging.getLogger("movie_subtitles.fetch")


def _is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


def _status_error(response: httpx.Response) -> UpstreamUnavailable:
    message = f"Failed to fetch data: {response.status_code} {response.reason_phrase}".rstrip()
    if response.status_code == 404:
        return UpstreamNotFound(message)
    return UpstreamUnavailable(message, retryable=_is_retryable_status(response.status_code))


class RelayFetcher:
    """Fetches upstream pages, optionally through a relay.

    The relay receives the percent-encoded target URL appended to
    ``relay_url``. Pass ``client`` to reuse a shared ``httpx.AsyncClient``
    (tests hand in one backed by ``httpx.MockTransport``); otherwise a client
    is opened per call.
    """

    def __init__(self, cfg: Optional[Settings] = None, client: Optional[httpx.AsyncClient] = None) -> None:
        self.cfg = cfg or default_settings
        self._client = client

    def _headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.cfg.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        }

    def _open_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            follow_redirects=True,
            timeout=self.cfg.request_timeout,
            headers=self._headers(),
        )

    def build_target_url(self, movie_id: str) -> str:
        return self.cfg.origin + self.cfg.movie_path_template.format(movie_id=movie_id)

    def build_request_url(self, target: str) -> str:
        if not self.cfg.use_relay:
            return target
        return self.cfg.relay_url + urllib.parse.quote(target, safe="")

    async def _get(self, url: str) -> httpx.Response:
        try:
            if self._client is not None:
                return await self._client.get(url, headers=self._headers())
            async with self._open_client() as client:
                return await client.get(url)
        except httpx.TimeoutException as exc:
            raise UpstreamUnavailable(f"Timed out fetching {url}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailable(f"Failed to fetch data: {exc}") from exc

    async def fetch_movie_page(self, movie_id: str) -> str:
        target = self.build_target_url(movie_id)
        url = self.build_request_url(target)
        response = await self._get(url)
        log.info("Upstream %s -> %s", target, response.status_code)
        if not response.is_success:
            raise _status_error(response)
        return response.text

    async def download_archive(self, url: str) -> bytes:
        """Download ``url`` into memory, refusing bodies over ``max_archive_bytes``."""
        limit = self.cfg.max_archive_bytes
        try:
            if self._client is not None:
                return await self._read_limited(self._client, url, limit)
            async with self._open_client() as client:
                return await self._read_limited(client, url, limit)
        except httpx.TimeoutException as exc:
            raise UpstreamUnavailable(f"Timed out downloading {url}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailable(f"Failed to download archive: {exc}") from exc

    async def _read_limited(self, client: httpx.AsyncClient, url: str, limit: int) -> bytes:
        async with client.stream("GET", url, headers=self._headers()) as response:
            log.info("Archive %s -> %s", url, response.status_code)
            if not response.is_success:
                raise _status_error(response)
            chunks = bytearray()
            async for chunk in response.aiter_bytes():
                chunks.extend(chunk)
                if len(chunks) > limit:
                    raise UpstreamUnavailable(f"Archive exceeds {limit} bytes", retryable=False)
            return bytes(chunks)
