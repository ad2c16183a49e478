import pytest

from movie_subtitles.errors import ErrorKind, InvalidInput
from movie_subtitles.validation import (
    INVALID_MOVIE_ID,
    INVALID_ZIP_URL,
    MISSING_ZIP_URL,
    is_movie_id,
    is_zip_url,
    validate_movie_id,
    validate_zip_url,
)


@pytest.mark.parametrize("value", ["tt0", "tt0133093", "tt1234567890"])
def test_movie_id_accepts_catalog_ids(value):
    assert is_movie_id(value)
    assert validate_movie_id(value) == value


@pytest.mark.parametrize("value", ["", "tt", "0133093", "TT0133093", "tt0133093x", " tt1", "tt12\n", "nm0000206", "tt\u0661\u0662\u0663", "tt\uff11\uff12", None])
def test_movie_id_rejects_everything_else(value):
    assert not is_movie_id(value)
    with pytest.raises(InvalidInput) as excinfo:
        validate_movie_id(value)
    assert excinfo.value.message == INVALID_MOVIE_ID
    assert excinfo.value.kind is ErrorKind.INVALID_INPUT
    assert excinfo.value.status_code == 400


@pytest.mark.parametrize(
    "value",
    [
        "http://example.com/file.zip",
        "https://yifysubtitles.ch/subtitle/the-matrix-yify-1111.zip",
    ],
)
def test_zip_url_accepts_http_zip_links(value):
    assert is_zip_url(value)
    assert validate_zip_url(value) == value


@pytest.mark.parametrize(
    "value",
    [
        "http://example.com/file.txt",
        "ftp://example.com/file.zip",
        "https://example.com/file.ZIP",
        "https://example.com/file.zip?x=1",
        "example.com/file.zip",
        "null",
    ],
)
def test_zip_url_rejects_malformed(value):
    assert not is_zip_url(value)
    with pytest.raises(InvalidInput) as excinfo:
        validate_zip_url(value)
    assert excinfo.value.message == INVALID_ZIP_URL


@pytest.mark.parametrize("value", [None, ""])
def test_zip_url_missing(value):
    with pytest.raises(InvalidInput) as excinfo:
        validate_zip_url(value)
    assert excinfo.value.message == MISSING_ZIP_URL
