from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

from . import __version__
from .errors import SubtitleServiceError
from .logger import REQUEST_ID, setup_logging
from .service import extract_subtitle, get_movie
from .settings import settings

setup_logging(settings)
log = logging.getLogger("movie_subtitles.app")

# ---------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------
REQUEST_COUNT = Counter("movie_subs_requests_total", "Requests by route and outcome", ["route", "outcome"])
REQ_LATENCY = Histogram("movie_subs_request_seconds", "Request latency seconds", ["route"])
ARCHIVE_BYTES = Histogram(
    "movie_subs_archive_bytes",
    "Size of downloaded subtitle archives in bytes",
    buckets=(1_000, 10_000, 50_000, 100_000, 250_000, 500_000, 1_000_000),
)


def _observe(route: str, outcome: str, started: float) -> None:
    REQUEST_COUNT.labels(route=route, outcome=outcome).inc()
    REQ_LATENCY.labels(route=route).observe(time.perf_counter() - started)


def _log_failure(route: str, exc: SubtitleServiceError) -> None:
    if exc.status_code < 500:
        log.warning("%s rejected: %s", route, exc.message)
    else:
        log.error("%s failed [%s]: %s", route, exc.kind.value, exc.message)


# ---------------------------------------------------------------------
# App + middleware
# ---------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("Movie subtitles service v%s listening on %s:%s", __version__, settings.host, settings.port)
    yield
    log.info("Shutdown")


app = FastAPI(title="Movie Subtitles", version=__version__, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:16]
    token = REQUEST_ID.set(rid)
    try:
        response = await call_next(request)
    finally:
        REQUEST_ID.reset(token)
    response.headers["X-Request-ID"] = rid
    return response


def _base_url(request: Request) -> str:
    return str(request.base_url).rstrip("/")


# ---------------------------------------------------------------------
# Usage guide + health
# ---------------------------------------------------------------------
WELCOME_HTML = """
<h1>Welcome to the Movie Subtitles Service!</h1>
<p>Look up subtitles for a movie and read a subtitle archive as plain text.</p>
<h3>Available Routes:</h3>
<ul>
    <li><strong>/movie/:id</strong> - Movie details and subtitles for an IMDb movie ID (e.g., tt1234567).</li>
    <li><strong>/extract-zip?zipUrl=URL</strong> - Download a subtitle zip file and return the subtitle text.</li>
</ul>
<p>Every subtitle returned by <code>/movie/:id</code> links to <code>/extract-zip</code> for its text.</p>
"""


@app.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    return HTMLResponse(WELCOME_HTML)


@app.get("/healthz")
async def healthz() -> JSONResponse:
    return JSONResponse({"status": "ok", "version": __version__})


@app.get("/metrics")
async def metrics() -> Response:
    if not settings.metrics_enabled:
        return Response(content="# metrics disabled\n", media_type="text/plain; version=0.0.4")
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


# ---------------------------------------------------------------------
# Movie lookup
# ---------------------------------------------------------------------
@app.get("/movie/{movie_id}")
async def movie(movie_id: str, request: Request) -> JSONResponse:
    started = time.perf_counter()
    try:
        record = await get_movie(movie_id, _base_url(request), cfg=settings)
    except SubtitleServiceError as exc:
        _log_failure("movie", exc)
        _observe("movie", exc.kind.value, started)
        return JSONResponse(exc.to_dict(), status_code=exc.status_code)
    except Exception as exc:  # noqa: BLE001
        log.exception("Error fetching movie data for %s", movie_id)
        _observe("movie", "error", started)
        return JSONResponse({"error": str(exc)}, status_code=500)

    _observe("movie", "ok", started)
    return JSONResponse(record.to_dict())


# ---------------------------------------------------------------------
# Archive extraction
# ---------------------------------------------------------------------
@app.get("/extract-zip")
async def extract_zip(zip_url: Optional[str] = Query(None, alias="zipUrl")) -> Response:
    started = time.perf_counter()
    try:
        result = await extract_subtitle(zip_url, cfg=settings)
    except SubtitleServiceError as exc:
        _log_failure("extract-zip", exc)
        _observe("extract-zip", exc.kind.value, started)
        body = exc.message if exc.status_code < 500 else f"Error during zip extraction: {exc.message}"
        return PlainTextResponse(body, status_code=exc.status_code, headers={"X-Error-Kind": exc.kind.value})
    except Exception as exc:  # noqa: BLE001
        log.exception("Error during zip extraction of %s", zip_url)
        _observe("extract-zip", "error", started)
        return PlainTextResponse(f"Error during zip extraction: {exc}", status_code=500)

    _observe("extract-zip", "ok", started)
    ARCHIVE_BYTES.observe(result.job.size)
    return PlainTextResponse(result.text)
