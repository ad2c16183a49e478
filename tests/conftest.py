import io
import sys
import zipfile
from pathlib import Path

import pytest

# Import the package from src/ without requiring an install
SRC_DIR = str((Path(__file__).resolve().parents[1] / "src").resolve())
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from movie_subtitles.settings import Settings  # noqa: E402

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def make_zip(files):
    bio = io.BytesIO()
    with zipfile.ZipFile(bio, mode="w") as z:
        for name, content in files.items():
            z.writestr(name, content)
    return bio.getvalue()


def mangled_deflate_zip():
    """A zip with valid headers whose deflate stream is overwritten with 0xFF."""
    body = "".join(f"{i}\n00:00:{i % 60:02d},000 --> 00:00:{i % 60:02d},500\nLine number {i * 7919}\n\n" for i in range(200))
    bio = io.BytesIO()
    with zipfile.ZipFile(bio, mode="w", compression=zipfile.ZIP_DEFLATED) as z:
        z.writestr("movie.srt", body)
    data = bytearray(bio.getvalue())
    # compressed data starts after the 30 byte local header and the file name
    start = 30 + len("movie.srt") + 10
    data[start:start + 20] = b"\xff" * 20
    return bytes(data)


@pytest.fixture
def movie_html() -> str:
    return (FIXTURES / "movie_page.html").read_text(encoding="utf-8")


@pytest.fixture
def cfg(tmp_path) -> Settings:
    return Settings(work_dir=str(tmp_path / "jobs"), _env_file=None)
