from __future__ import annotations

import re
from urllib.parse import parse_qs, urlencode, urlsplit

SHEETS_HOST = "docs.google.com"

_DOC_ID_RE = re.compile(r"/spreadsheets/d/([^/]+)")
_GID_FRAGMENT_RE = re.compile(r"gid=([0-9]+)")


def _first_param(query: str, name: str) -> str | None:
    values = parse_qs(query).get(name)
    if values and values[0]:
        return values[0]
    return None


def normalize_sheet_url(url: str) -> str:
    """Rewrite a spreadsheet share/edit link into its CSV export URL.

    Anything that does not look like a spreadsheet link comes back
    unchanged. The tab id is taken from the ``gid`` query parameter first
    and from the ``#gid=`` fragment second.
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if parts.scheme not in ("http", "https") or not parts.hostname:
        return url
    if "google" not in parts.hostname or "/spreadsheets" not in parts.path:
        return url

    match = _DOC_ID_RE.search(parts.path)
    doc_id = match.group(1) if match else _first_param(parts.query, "id")
    if not doc_id:
        return url

    gid = _first_param(parts.query, "gid")
    if gid is None:
        frag = _GID_FRAGMENT_RE.search(parts.fragment)
        gid = frag.group(1) if frag else None

    params = {"format": "csv"}
    if gid is not None:
        params["gid"] = gid
    return f"https://{SHEETS_HOST}/spreadsheets/d/{doc_id}/export?{urlencode(params)}"
