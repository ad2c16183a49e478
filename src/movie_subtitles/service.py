"""Scrape and unpack pipelines behind the two public endpoints."""

from __future__ import annotations

import logging
import urllib.parse
from typing import Optional

from .archive import unpack_archive
from .fetch import RelayFetcher
from .models import ArchiveResult, MovieRecord, ScrapedPage, SubtitleRecord
from .settings import Settings, settings as default_settings
from .sources import MarkupExtractor, get_extractor
from .validation import validate_movie_id, validate_zip_url

log = logging.getLogger("movie_subtitles.service")

EXTRACT_PATH = "/extract-zip"
# Rows without a download anchor still get a link; it carries this literal
MISSING_ARCHIVE_URL = "null"


def build_extract_link(base_url: str, archive_url: Optional[str]) -> str:
    """Link back to our own extract endpoint carrying ``archive_url``."""
    query = urllib.parse.urlencode({"zipUrl": archive_url or MISSING_ARCHIVE_URL})
    return f"{base_url.rstrip('/')}{EXTRACT_PATH}?{query}"


def build_movie_record(movie_id: str, page: ScrapedPage, base_url: str) -> MovieRecord:
    subtitles = [
        SubtitleRecord(names=row.names, language=row.language, link=build_extract_link(base_url, row.archive_url))
        for row in page.rows
        if row.language
    ]
    return MovieRecord(id=movie_id, title=page.title, poster=page.poster, subtitles=subtitles)


async def get_movie(
    movie_id: str,
    base_url: str,
    *,
    cfg: Optional[Settings] = None,
    fetcher: Optional[RelayFetcher] = None,
    extractor: Optional[MarkupExtractor] = None,
) -> MovieRecord:
    """Validate ``movie_id``, fetch its page and return the scraped record.

    Validation happens before any network access. ``base_url`` is the
    origin the subtitle links should point back at.
    """
    cfg = cfg or default_settings
    movie_id = validate_movie_id(movie_id)
    fetcher = fetcher or RelayFetcher(cfg)
    extractor = extractor or get_extractor(cfg)

    html = await fetcher.fetch_movie_page(movie_id)
    page = extractor.extract(html)
    record = build_movie_record(movie_id, page, cfg.public_base_url or base_url)
    log.info("Movie %s: %r with %d subtitles", movie_id, record.title, len(record.subtitles))
    return record


async def extract_subtitle(
    zip_url: Optional[str],
    *,
    cfg: Optional[Settings] = None,
    fetcher: Optional[RelayFetcher] = None,
) -> ArchiveResult:
    cfg = cfg or default_settings
    zip_url = validate_zip_url(zip_url)
    fetcher = fetcher or RelayFetcher(cfg)

    payload = await fetcher.download_archive(zip_url)
    return await unpack_archive(payload, zip_url, cfg)


async def extract_subtitle_text(zip_url: Optional[str], **kwargs) -> str:
    result = await extract_subtitle(zip_url, **kwargs)
    return result.text
