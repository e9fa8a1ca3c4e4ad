from __future__ import annotations
import time
from dataclasses import dataclass
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import DeadlineExceeded, FetchError
from .logger import Logger

log = Logger.bind(__name__)


@dataclass
class SautoClientConfig:
    timeout: float = 15.0
    max_retries: int = 3
    backoff_factor: float = 0.5
    user_agent: str = ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
                       "(KHTML, like Gecko) Chrome/127.0.0.0 Safari/537.36")
    accept_language: str = "cs,en-US;q=0.9,en;q=0.8"


@dataclass
class FetchedPage:
    url: str  # final URL after redirects, base for relative links
    html: str


class SautoClient:
    """Plain HTTP GET client with retry on transient status codes.

    One instance per category crawl. No JavaScript rendering: pages must
    carry their listings in the served HTML.
    """

    def __init__(self, config: Optional[SautoClientConfig] = None):
        self.config = config or SautoClientConfig()
        self.session = requests.Session()
        retries = Retry(
            total=self.config.max_retries,
            backoff_factor=self.config.backoff_factor,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=("GET", ),
        )
        adapter = HTTPAdapter(max_retries=retries)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)
        self.session.headers.update({
            "User-Agent": self.config.user_agent,
            "Accept-Language": self.config.accept_language,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
            "Connection": "keep-alive",
        })

    def fetch(self, url: str) -> FetchedPage:
        start = time.time()
        log.debug(f"http get start url={url}")
        try:
            resp = self.session.get(url, timeout=self.config.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e
        elapsed = time.time() - start
        log.debug(f"http get done url={url} final={resp.url} elapsed={elapsed:.2f}s status={resp.status_code}")
        # site is UTF-8; avoid charset guessing on responses without a header
        resp.encoding = 'utf-8'
        return FetchedPage(url=resp.url or url, html=resp.text)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class Deadline:
    """Overall crawl budget shared by every fetch of a run."""

    def __init__(self, seconds: Optional[float] = None, clock=time.monotonic):
        self._clock = clock
        self.seconds = seconds
        self._expires = None if seconds is None else clock() + seconds

    @property
    def expired(self) -> bool:
        return self._expires is not None and self._clock() >= self._expires

    def check(self, url: str) -> None:
        if self.expired:
            raise DeadlineExceeded(url, f"crawl deadline of {self.seconds}s exceeded")
