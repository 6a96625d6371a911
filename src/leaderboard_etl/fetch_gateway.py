from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence
from urllib.parse import quote

import httpx

from .errors import ContentError, NetworkError

CandidateBuilder = Callable[[str], str]

DEFAULT_TIMEOUT_SECONDS = 8.0
DEFAULT_PROXY_TEMPLATES = [
    "https://cors.isomorphic-git.org/{url}",
    "https://api.allorigins.win/raw?url={url_encoded}",
    "https://thingproxy.freeboard.io/fetch/{url}",
]
MARKUP_PREFIXES = ("<!doctype html", "<html", "<head", "<body")
_SNIFF_BYTES = 64


@dataclass
class FetchConfig:
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    proxies: List[str] = field(default_factory=lambda: list(DEFAULT_PROXY_TEMPLATES))


@dataclass(frozen=True)
class FetchResult:
    text: str
    url: str
    proxied: bool


def direct(url: str) -> str:
    return url


def template_builder(template: str) -> CandidateBuilder:
    """Wrap the target URL into a relay endpoint described by ``template``.

    ``{url}`` is replaced by the raw target and ``{url_encoded}`` by its
    percent-encoded form.
    """

    def build(url: str) -> str:
        return template.replace("{url_encoded}", quote(url, safe="")).replace("{url}", url)

    return build


def build_candidates(proxies: Sequence[str]) -> List[CandidateBuilder]:
    return [direct] + [template_builder(t) for t in proxies]


def looks_like_markup(text: str) -> bool:
    head = text.strip()[:_SNIFF_BYTES].lower()
    return head.startswith(MARKUP_PREFIXES)


class FetchGateway:
    """Fetch CSV text through the direct URL and then each relay, in order.

    One deadline covers the whole call. The first candidate that answers
    2xx with a non-markup body wins; otherwise ``NetworkError`` carries the
    last failure seen.
    """

    def __init__(self, cfg: FetchConfig, client: Optional[httpx.AsyncClient] = None) -> None:
        self.cfg = cfg
        self._candidates = build_candidates(cfg.proxies)
        self._client = client or httpx.AsyncClient(
            follow_redirects=True,
            headers={"Cache-Control": "no-cache", "Accept": "text/csv, text/plain, */*"},
        )
        self._logger = None

    def set_logger(self, logger) -> None:
        self._logger = logger

    def _log(self, msg: str, **fields) -> None:
        if self._logger:
            self._logger.info(msg, extra={"extra": fields})

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch_text(self, url: str) -> FetchResult:
        failures: List[BaseException] = []
        try:
            return await asyncio.wait_for(self._try_candidates(url, failures), timeout=self.cfg.timeout_seconds)
        except asyncio.TimeoutError as exc:
            self._log("fetch_failed", url=url, attempts=len(failures), error="deadline elapsed")
            last = failures[-1] if failures else exc
            raise NetworkError(
                f"Fetch deadline of {self.cfg.timeout_seconds}s elapsed for {url}", reason=last
            ) from exc

    async def _try_candidates(self, url: str, failures: List[BaseException]) -> FetchResult:
        for index, build in enumerate(self._candidates):
            target = build(url)
            self._log("fetch_candidate_start", candidate=index, url=target)
            try:
                resp = await self._client.get(target)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                failures.append(exc)
                self._log("fetch_candidate_rejected", candidate=index, error=str(exc) or type(exc).__name__)
                continue
            if not resp.is_success:
                failures.append(
                    httpx.HTTPStatusError(f"HTTP {resp.status_code}", request=resp.request, response=resp)
                )
                self._log("fetch_candidate_rejected", candidate=index, status=resp.status_code)
                continue
            text = resp.text
            if looks_like_markup(text):
                failures.append(ContentError("HTML payload (not CSV)"))
                self._log("fetch_candidate_rejected", candidate=index, error="markup payload")
                continue
            self._log("fetch_success", candidate=index, bytes=len(text))
            return FetchResult(text=text, url=target, proxied=index > 0)

        last = failures[-1] if failures else None
        self._log("fetch_failed", url=url, attempts=len(failures), error=str(last))
        raise NetworkError(f"All fetch attempts failed for {url}: {last}", reason=last) from last
