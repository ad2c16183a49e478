import sys
from pathlib import Path

import uvicorn

# Allow running from a checkout without installing the package
SRC_DIR = str(Path(__file__).resolve().parent / "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from movie_subtitles.settings import settings  # noqa: E402

if __name__ == "__main__":
    uvicorn.run("movie_subtitles.app:app", host=settings.host, port=settings.port, reload=True)
