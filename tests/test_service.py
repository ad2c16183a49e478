import asyncio
import urllib.parse

import pytest

from conftest import make_zip
from movie_subtitles import service
from movie_subtitles.errors import InvalidInput, ParseShapeChanged, UpstreamUnavailable
from movie_subtitles.models import ScrapedPage, SubtitleRow


class StubFetcher:
    def __init__(self, html="", archive=b"", error=None):
        self.html = html
        self.archive = archive
        self.error = error
        self.page_calls = []
        self.archive_calls = []

    async def fetch_movie_page(self, movie_id):
        self.page_calls.append(movie_id)
        if self.error:
            raise self.error
        return self.html

    async def download_archive(self, url):
        self.archive_calls.append(url)
        if self.error:
            raise self.error
        return self.archive


def _zip_url(link):
    query = urllib.parse.urlsplit(link).query
    return urllib.parse.parse_qs(query)["zipUrl"][0]


def test_build_extract_link_embeds_archive_url():
    link = service.build_extract_link("http://localhost:3000/", "https://yifysubtitles.ch/subtitle/a.zip")
    assert link.startswith("http://localhost:3000/extract-zip?zipUrl=")
    assert _zip_url(link) == "https://yifysubtitles.ch/subtitle/a.zip"


def test_build_extract_link_without_archive():
    link = service.build_extract_link("http://localhost:3000", None)
    assert link == "http://localhost:3000/extract-zip?zipUrl=null"


def test_build_movie_record_skips_blank_language():
    page = ScrapedPage(
        title="T",
        poster=None,
        rows=[
            SubtitleRow(language="English", names=["a"], archive_url="https://x.test/subtitle/a.zip"),
            SubtitleRow(language="", names=["b"], archive_url=None),
        ],
    )
    record = service.build_movie_record("tt1", page, "http://svc")
    assert [s.language for s in record.subtitles] == ["English"]


def test_get_movie_builds_record(cfg, movie_html):
    fetcher = StubFetcher(html=movie_html)
    record = asyncio.run(service.get_movie("tt0133093", "http://testserver", cfg=cfg, fetcher=fetcher))

    assert fetcher.page_calls == ["tt0133093"]
    data = record.to_dict()
    assert data["id"] == "tt0133093"
    assert data["title"] == "The Matrix"
    assert data["poster"].endswith("medium-cover.jpg")
    assert [s["language"] for s in data["subtitles"]] == ["English", "French", "Spanish"]
    assert _zip_url(data["subtitles"][0]["link"]) == "https://yifysubtitles.ch/subtitle/the-matrix-yify-1111.zip"
    assert data["subtitles"][1]["names"] == ["Unknown"]
    assert _zip_url(data["subtitles"][1]["link"]) == "null"


def test_get_movie_uses_public_base_url(cfg, movie_html):
    cfg.public_base_url = "https://subs.example.org"
    record = asyncio.run(service.get_movie("tt0133093", "http://internal:3000", cfg=cfg, fetcher=StubFetcher(movie_html)))
    assert all(s.link.startswith("https://subs.example.org/extract-zip?") for s in record.subtitles)


def test_get_movie_invalid_id_never_fetches(cfg):
    fetcher = StubFetcher()
    with pytest.raises(InvalidInput):
        asyncio.run(service.get_movie("0133093", "http://testserver", cfg=cfg, fetcher=fetcher))
    assert fetcher.page_calls == []


def test_get_movie_propagates_upstream_failure(cfg):
    fetcher = StubFetcher(error=UpstreamUnavailable("Failed to fetch data: 502 Bad Gateway"))
    with pytest.raises(UpstreamUnavailable):
        asyncio.run(service.get_movie("tt1", "http://testserver", cfg=cfg, fetcher=fetcher))


def test_get_movie_shape_changed(cfg):
    fetcher = StubFetcher(html="<html><body>Attention Required!</body></html>")
    with pytest.raises(ParseShapeChanged):
        asyncio.run(service.get_movie("tt1", "http://testserver", cfg=cfg, fetcher=fetcher))


def test_extract_subtitle_text(cfg):
    fetcher = StubFetcher(archive=make_zip({"movie.srt": "hello\n"}))
    url = "https://yifysubtitles.ch/subtitle/a.zip"
    text = asyncio.run(service.extract_subtitle_text(url, cfg=cfg, fetcher=fetcher))
    assert text == "hello\n"
    assert fetcher.archive_calls == [url]


@pytest.mark.parametrize("url", [None, "", "http://example.com/file.txt"])
def test_extract_subtitle_invalid_url_never_downloads(cfg, url):
    fetcher = StubFetcher()
    with pytest.raises(InvalidInput):
        asyncio.run(service.extract_subtitle(url, cfg=cfg, fetcher=fetcher))
    assert fetcher.archive_calls == []
