from __future__ import annotations

import asyncio
import logging
import os
import posixpath
import tempfile
import urllib.parse
import zipfile
import zlib
from typing import Dict, List, Optional, Tuple

from charset_normalizer import from_bytes

from .errors import ArchiveContentsUnexpected, ArchiveCorrupt, StorageFailure
from .models import ArchiveJob, ArchiveResult
from .settings import Settings, settings as default_settings

log = logging.getLogger("movie_subtitles.archive")

FALLBACK_ARCHIVE_NAME = "subtitle.zip"
IGNORED_NAMES = {".ds_store", "thumbs.db"}


def archive_name_from_url(url: str) -> str:
    """Last path segment of ``url``, used as the local archive file name."""
    name = posixpath.basename(urllib.parse.urlsplit(url).path)
    if not name or name in {".", ".."}:
        return FALLBACK_ARCHIVE_NAME
    return name


def _is_ignored_entry(name: str) -> bool:
    parts = [p for p in name.replace("\\", "/").split("/") if p]
    if not parts:
        return True
    if parts[0].lower() == "__macosx":
        return True
    leaf = parts[-1]
    return leaf.lower() in IGNORED_NAMES or leaf.startswith(".")


def meaningful_entries(names: List[str]) -> List[str]:
    return [name for name in names if not name.endswith("/") and not _is_ignored_entry(name)]


def decode_subtitle(data: bytes) -> Tuple[str, str]:
    """Decode subtitle bytes, detecting the encoding when it is not UTF-8."""
    try:
        return data.decode("utf-8-sig"), "utf-8"
    except UnicodeDecodeError:
        pass
    match = from_bytes(data).best()
    if match is not None:
        return str(match), match.encoding
    return data.decode("utf-8", errors="replace"), "utf-8"


def _extract_all(archive_path: str, extract_dir: str, archive_name: str, max_bytes: int) -> Dict[str, str]:
    """Check the entry list and sizes, then extract every entry.

    Nothing is written when the archive does not hold exactly one meaningful
    entry or would expand past ``max_bytes``.
    """
    try:
        with zipfile.ZipFile(archive_path) as archive:
            infos = archive.infolist()
            candidates = meaningful_entries([info.filename for info in infos])
            if len(candidates) != 1:
                raise ArchiveContentsUnexpected(
                    f"Expected exactly one subtitle file in {archive_name}, "
                    f"found {len(candidates)}: {candidates}"
                )
            expanded = sum(info.file_size for info in infos)
            if expanded > max_bytes:
                raise ArchiveContentsUnexpected(
                    f"{archive_name} expands to {expanded} bytes, over the {max_bytes} byte limit"
                )
            return {info.filename: archive.extract(info, extract_dir) for info in infos}
    except (zipfile.BadZipFile, EOFError) as exc:
        raise ArchiveCorrupt(f"Not a valid zip archive: {exc}") from exc
    except zlib.error as exc:
        raise ArchiveCorrupt(f"Corrupt compressed data: {exc}") from exc
    except (NotImplementedError, RuntimeError) as exc:
        # unsupported compression method or an encrypted entry
        raise ArchiveCorrupt(f"Cannot extract archive: {exc}") from exc


def _unpack_sync(payload: bytes, job: ArchiveJob, parent_dir: Optional[str], max_bytes: int) -> ArchiveResult:
    if parent_dir:
        os.makedirs(parent_dir, exist_ok=True)

    with tempfile.TemporaryDirectory(prefix="movie-subs-", dir=parent_dir) as tmp:
        job.work_dir = tmp
        archive_path = os.path.join(tmp, job.local_archive_name)
        extract_dir = os.path.join(tmp, "extracted")

        with open(archive_path, "wb") as fh:
            fh.write(payload)

        log.debug("Extracting %s to %s", job.local_archive_name, extract_dir)
        extracted = _extract_all(archive_path, extract_dir, job.local_archive_name, max_bytes)
        os.remove(archive_path)

        job.extracted_entry_names = list(extracted)
        entry = meaningful_entries(job.extracted_entry_names)[0]
        with open(extracted[entry], "rb") as fh:
            data = fh.read()

    text, encoding = decode_subtitle(data)
    log.info("Extracted %s from %s (%d bytes, %s)", entry, job.source_url, len(data), encoding)
    return ArchiveResult(job=job, entry_name=entry, text=text, encoding=encoding)


def unpack_sync(payload: bytes, source_url: str, cfg: Optional[Settings] = None) -> ArchiveResult:
    """Unpack ``payload`` in a private temporary directory and return its one text file.

    The directory, the archive written into it and every extracted entry are
    removed before this returns, whether it succeeds or fails.
    """
    cfg = cfg or default_settings
    job = ArchiveJob(
        source_url=source_url,
        local_archive_name=archive_name_from_url(source_url),
        size=len(payload),
    )
    try:
        return _unpack_sync(payload, job, cfg.work_dir, cfg.max_extracted_bytes)
    except OSError as exc:
        raise StorageFailure(f"Filesystem error while unpacking {job.local_archive_name}: {exc}") from exc


async def unpack_archive(payload: bytes, source_url: str, cfg: Optional[Settings] = None) -> ArchiveResult:
    return await asyncio.to_thread(unpack_sync, payload, source_url, cfg)
