from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

UNKNOWN_NAME = "Unknown"


@dataclass
class SubtitleRow:
    """One subtitle listing as scraped, before links point back at us."""

    language: str
    names: List[str]
    archive_url: Optional[str]


@dataclass
class ScrapedPage:
    title: str
    poster: Optional[str]
    rows: List[SubtitleRow] = field(default_factory=list)


@dataclass
class SubtitleRecord:
    names: List[str]
    language: str
    link: str

    def to_dict(self) -> dict:
        return {"names": list(self.names), "language": self.language, "link": self.link}


@dataclass
class MovieRecord:
    id: str
    title: str
    poster: Optional[str]
    subtitles: List[SubtitleRecord] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "poster": self.poster,
            "subtitles": [sub.to_dict() for sub in self.subtitles],
        }


@dataclass
class ArchiveJob:
    """A single extraction request; lives for one handler invocation."""

    source_url: str
    local_archive_name: str
    extracted_entry_names: List[str] = field(default_factory=list)
    work_dir: Optional[str] = None
    size: int = 0


@dataclass
class ArchiveResult:
    job: ArchiveJob
    entry_name: str
    text: str
    encoding: str
