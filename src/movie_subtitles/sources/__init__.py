from __future__ import annotations

from typing import Callable, Dict

from ..settings import Settings
from .base import MarkupExtractor
from .rewrite import YIFY_ARCHIVE_REWRITE, LinkRewrite
from .yifysubtitles import YifySubtitlesExtractor

# One factory per known upstream page shape
EXTRACTORS: Dict[str, Callable[[Settings], MarkupExtractor]] = {
    YifySubtitlesExtractor.name: lambda cfg: YifySubtitlesExtractor(cfg.origin),
}


def get_extractor(cfg: Settings) -> MarkupExtractor:
    try:
        factory = EXTRACTORS[cfg.extractor]
    except KeyError:
        raise ValueError(f"Unknown markup extractor: {cfg.extractor}") from None
    return factory(cfg)


__all__ = [
    "EXTRACTORS",
    "LinkRewrite",
    "MarkupExtractor",
    "YIFY_ARCHIVE_REWRITE",
    "YifySubtitlesExtractor",
    "get_extractor",
]
