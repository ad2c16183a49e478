from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LinkRewrite:
    """Path-segment rewrite followed by a suffix.

    Turns a subtitle detail-page URL into the direct archive URL of the same
    release. Only the first occurrence of ``find`` is replaced.
    """

    find: str
    replace: str
    suffix: str

    def apply(self, url: str) -> str:
        return url.replace(self.find, self.replace, 1) + self.suffix


# https://yifysubtitles.ch/subtitles/foo -> https://yifysubtitles.ch/subtitle/foo.zip
YIFY_ARCHIVE_REWRITE = LinkRewrite(find="/subtitles/", replace="/subtitle/", suffix=".zip")
