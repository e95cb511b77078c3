"""
Content-addressed cache for Notion-hosted assets.

Notion file URLs are pre-signed and expire after about an hour. At build time
each hosted image is downloaded once into `CacheConfig.cache_dir` under a name
derived from its canonical URL (query string stripped, since the expiring
token lives there), and the page references the stable public path instead.

The URL → filename mapping is a pure function; only the existence check and
the download touch the network or disk. Entries are never evicted.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import os
import posixpath
import tempfile
from pathlib import Path
from typing import Optional
from urllib.parse import urlsplit

import httpx

from .options import CacheConfig

LOGGER = logging.getLogger(__name__)


def canonical_url(url: str) -> str:
    return url.split("?", 1)[0]


def _store(target: Path, data: bytes) -> None:
    """Write `data` to `target` atomically; a failed write leaves no file behind."""
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
    os.close(fd)
    tmp = Path(tmp_name)
    try:
        tmp.write_bytes(data)
        # Racing writers for the same key write identical bytes
        os.replace(tmp, target)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


class AssetCache:
    """Resolve remote asset URLs to durable local public paths."""

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or CacheConfig()
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=60.0, follow_redirects=True)

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # ----- pure mapping -----

    def extension_for(self, url: str) -> str:
        try:
            path = urlsplit(url).path
        except ValueError:
            return self.config.default_extension
        ext = posixpath.splitext(path)[1].lstrip(".").lower()
        if ext in self.config.extensions:
            return ext
        return self.config.default_extension

    def key_for(self, url: str) -> str:
        return hashlib.md5(canonical_url(url).encode("utf-8")).hexdigest()[:12]

    def filename_for(self, url: str) -> str:
        return f"{self.key_for(url)}.{self.extension_for(url)}"

    def local_path_for(self, url: str) -> Path:
        return self.config.directory / self.filename_for(url)

    # ----- I/O -----

    async def resolve(self, url: str) -> str:
        """Return the public path of the cached copy of `url`.

        Downloads on first use. Never raises: on any failure the original URL
        is returned so the page still renders.
        """
        if url.startswith("/"):
            return url

        fname = self.filename_for(url)
        target = self.config.directory / fname
        public = self.config.public_path(fname)

        if await asyncio.to_thread(target.exists):
            LOGGER.debug("[AssetCache] Using cached: %s", fname)
            return public

        try:
            LOGGER.info("[AssetCache] Downloading: %s", fname)
            resp = await self._http.get(url)
            if not resp.is_success:
                LOGGER.error(
                    "[AssetCache] Failed to download %s: %d", fname, resp.status_code
                )
                return url
            await asyncio.to_thread(_store, target, resp.content)
        except Exception as exc:
            LOGGER.error("[AssetCache] Error downloading %s: %s", fname, exc)
            return url

        LOGGER.info("[AssetCache] Saved: %s", fname)
        return public
