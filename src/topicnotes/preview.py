"""Link previews and attachment display helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass

import httpx

_YOUTUBE_RE = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([a-zA-Z0-9_-]+)")
_VIMEO_RE = re.compile(r"vimeo\.com/(\d+)")

VIMEO_API_URL = "https://vimeo.com/api/v2/video/{video_id}.json"

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


@dataclass(frozen=True)
class VideoLink:
    provider: str  # "youtube" or "vimeo"
    video_id: str


def detect_video(link: str | None) -> VideoLink | None:
    """Recognise YouTube and Vimeo links; anything else returns ``None``."""
    if not link:
        return None
    m = _YOUTUBE_RE.search(link)
    if m:
        return VideoLink("youtube", m.group(1))
    m = _VIMEO_RE.search(link)
    if m:
        return VideoLink("vimeo", m.group(1))
    return None


def youtube_thumbnail(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"


async def fetch_video_thumbnail(
    link: str | None, client: httpx.AsyncClient | None = None
) -> str | None:
    """Return a thumbnail URL for *link*, or ``None`` when there is none.

    YouTube thumbnails are derived from the video id; Vimeo needs a lookup
    against its public v2 video API.  Lookup failures are not errors for
    the caller: the note simply gets no preview.
    """
    video = detect_video(link)
    if video is None:
        return None
    if video.provider == "youtube":
        return youtube_thumbnail(video.video_id)

    owns_client = client is None
    http = client or httpx.AsyncClient(timeout=5.0)
    try:
        r = await http.get(VIMEO_API_URL.format(video_id=video.video_id))
        r.raise_for_status()
        data = r.json()
    except (httpx.HTTPError, ValueError):
        return None
    finally:
        if owns_client:
            await http.aclose()

    if isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0].get("thumbnail_large")
    return None


def format_file_size(size: int) -> str:
    """Human-readable size: ``0 Bytes``, ``1.5 KB``, ``2 MB``…"""
    if size <= 0:
        return "0 Bytes"
    i = 0
    while i < len(_SIZE_UNITS) - 1 and size >= 1024 ** (i + 1):
        i += 1
    value = round(size / 1024**i, 2)
    return f"{value:g} {_SIZE_UNITS[i]}" if value < 1e6 else f"{value:.2f} {_SIZE_UNITS[i]}"


def file_kind(content_type: str) -> str:
    """Classify a MIME type into the icon families the UI knows."""
    t = content_type.lower()
    if t.startswith("image/"):
        return "image"
    if t.startswith("video/"):
        return "video"
    if "pdf" in t:
        return "pdf"
    if "word" in t or "document" in t:
        return "document"
    if "spreadsheet" in t or "excel" in t:
        return "spreadsheet"
    if "zip" in t or "rar" in t or "archive" in t:
        return "archive"
    return "file"
