"""Import of auxiliary display items (clips, images) from JSON or CSV.

These items sit beside the leaderboard and never enter a ``Dataset``.

JSON: ``[{"type": "youtube", "title": "..", "url": "..", "thumb": ".."}]`` or
an object carrying that list under ``items`` or ``data``.
CSV: ``type,title,url,thumb`` with an optional header line.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Union
from urllib.parse import parse_qs, urlsplit

from .errors import ImportFileError

MEDIA_TYPES = ("youtube", "mp4", "image")
_LINE_SPLIT_RE = re.compile(r"\r?\n")


@dataclass(frozen=True)
class MediaItem:
    id: int
    title: str
    type: str
    url: str
    thumb: Optional[str] = None

    @property
    def embed_url(self) -> str:
        return youtube_embed_url(self.url) if self.type == "youtube" else self.url

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "url": self.url,
            "thumb": self.thumb,
            "embed_url": self.embed_url,
        }


def youtube_embed_url(url: str) -> str:
    """Turn watch, shorts and youtu.be links into embed links."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    host = parts.hostname or ""
    if "youtube.com" in host:
        if parts.path.startswith("/shorts/"):
            segments = [s for s in parts.path.split("/") if s]
            video_id = segments[1] if len(segments) > 1 else segments[0]
            return f"https://www.youtube.com/embed/{video_id}"
        v = parse_qs(parts.query).get("v")
        if v and v[0]:
            return f"https://www.youtube.com/embed/{v[0]}"
    if "youtu.be" in host:
        video_id = parts.path.lstrip("/")
        if video_id:
            return f"https://www.youtube.com/embed/{video_id}"
    return url


def _media_type(value: Any) -> str:
    return value if value in MEDIA_TYPES else "image"


def _text_or(value: Any, default: Optional[str]) -> Optional[str]:
    return value if isinstance(value, str) else default


def parse_media_json(text: str) -> List[MediaItem]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ImportFileError(f"Invalid media JSON: {exc}") from exc
    if isinstance(payload, list):
        entries = payload
    elif isinstance(payload, dict):
        entries = payload.get("items") or payload.get("data") or []
    else:
        entries = []
    if not isinstance(entries, list):
        entries = []
    items = []
    for i, obj in enumerate(entries, start=1):
        if not isinstance(obj, dict):
            continue
        items.append(
            MediaItem(
                id=i,
                title=_text_or(obj.get("title"), f"Item {i}"),
                type=_media_type(obj.get("type")),
                url=_text_or(obj.get("url"), ""),
                thumb=_text_or(obj.get("thumb"), None),
            )
        )
    return [item for item in items if item.url]


def parse_media_csv(text: str) -> List[MediaItem]:
    lines = [ln for ln in _LINE_SPLIT_RE.split(text) if ln]
    if lines and "type" in lines[0].lower():
        lines = lines[1:]
    items = []
    for i, line in enumerate(lines, start=1):
        parts = [p.strip() for p in line.split(",")]
        parts += [""] * (4 - len(parts))
        items.append(
            MediaItem(
                id=i,
                title=parts[1] or f"Item {i}",
                type=_media_type(parts[0]),
                url=parts[2],
                thumb=parts[3] or None,
            )
        )
    return [item for item in items if item.url]


def import_media_text(text: str, filename: str) -> List[MediaItem]:
    if filename.lower().endswith(".json"):
        return parse_media_json(text)
    return parse_media_csv(text)


def import_media_file(path: Union[str, Path]) -> List[MediaItem]:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise ImportFileError(f"Could not read {path}: {exc}") from exc
    return import_media_text(text, path.name)
