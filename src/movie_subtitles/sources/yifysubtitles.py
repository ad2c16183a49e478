# -*- coding: utf-8 -*-
"""
Markup extractor for yifysubtitles movie pages (/movie-imdb/<id>).
"""

from __future__ import annotations

import logging
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from ..errors import ParseShapeChanged
from ..models import UNKNOWN_NAME, ScrapedPage, SubtitleRow
from .base import MarkupExtractor
from .rewrite import YIFY_ARCHIVE_REWRITE, LinkRewrite

log = logging.getLogger("movie_subtitles.sources.yifysubtitles")

TITLE_SELECTOR = "h2.movie-main-title"
POSTER_SELECTOR = ".img-responsive"
TABLE_SELECTOR = ".table.other-subs"
ROW_SELECTOR = ".table.other-subs tbody tr"
LANGUAGE_SELECTOR = ".sub-lang"
ANCHOR_SELECTOR = 'td a[href*="/subtitles/"]'


def _split_names(raw: str) -> List[str]:
    return [name.strip() for name in raw.split("\n") if name.strip()]


class YifySubtitlesExtractor(MarkupExtractor):
    name = "yifysubtitles"

    def __init__(self, origin: str, rewrite: LinkRewrite = YIFY_ARCHIVE_REWRITE) -> None:
        self.origin = origin.rstrip("/")
        self.rewrite = rewrite

    def extract(self, html: str) -> ScrapedPage:
        soup = BeautifulSoup(html, "html.parser")

        title_el = soup.select_one(TITLE_SELECTOR)
        if title_el is None and soup.select_one(TABLE_SELECTOR) is None:
            raise ParseShapeChanged(
                f"Page has neither '{TITLE_SELECTOR}' nor '{TABLE_SELECTOR}'; upstream layout changed?"
            )

        title = title_el.get_text().strip() if title_el is not None else ""
        poster_el = soup.select_one(POSTER_SELECTOR)
        poster = poster_el.get("src") if poster_el is not None else None

        rows = [row for row in map(self._parse_row, soup.select(ROW_SELECTOR)) if row]
        log.debug("Parsed %d subtitle rows for %r", len(rows), title)
        return ScrapedPage(title=title, poster=poster, rows=rows)

    def _parse_row(self, row: Tag) -> Optional[SubtitleRow]:
        lang_el = row.select_one(LANGUAGE_SELECTOR)
        language = lang_el.get_text().strip() if lang_el is not None else ""
        if not language:
            return None

        anchor = row.select_one(ANCHOR_SELECTOR)
        if anchor is None:
            return SubtitleRow(language=language, names=[UNKNOWN_NAME], archive_url=None)

        page_url = f"{self.origin}{anchor.get('href')}"
        names = _split_names(anchor.get_text().strip()) or [UNKNOWN_NAME]
        return SubtitleRow(language=language, names=names, archive_url=self.rewrite.apply(page_url))
