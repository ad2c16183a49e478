from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import ScrapedPage


class MarkupExtractor(ABC):
    """Turns one known upstream page shape into a :class:`ScrapedPage`.

    Implementations raise :class:`~movie_subtitles.errors.ParseShapeChanged`
    when the markup no longer matches the shape they know.
    """

    name: str = ""

    @abstractmethod
    def extract(self, html: str) -> ScrapedPage:
        raise NotImplementedError
