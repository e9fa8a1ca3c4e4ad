from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Optional, Protocol, Set

from .client import Deadline, FetchedPage
from .errors import DeadlineExceeded, FetchError
from .logger import Logger
from .models import CarRecord
from .parser import parse_list_page

log = Logger.bind(__name__)


class PageFetcher(Protocol):

    def fetch(self, url: str) -> FetchedPage:
        ...


@dataclass
class DiscoveredListing:
    """A summary record found on a list page plus where to enrich it from."""
    link: str
    record: CarRecord
    detail_url: str


class ListPageWalker:
    """Follow a category's result pages and yield every organic listing.

    The walk ends when a page has no next link, the next link was already
    visited in this walk, or a page cannot be fetched. Store writes and
    detail fetches are left to the caller.
    """

    def __init__(self, client: PageFetcher, deadline: Optional[Deadline] = None):
        self.client = client
        self.deadline = deadline or Deadline(None)
        self.pages = 0
        self.promoted = 0
        self.errors: List[str] = []

    def walk(self, start_url: str) -> Iterator[DiscoveredListing]:
        visited: Set[str] = set()
        url: Optional[str] = start_url
        while url:
            if url in visited:
                log.warn(f"next page already visited, stop url={url}")
                break
            visited.add(url)
            self.deadline.check(url)
            page_number = self.pages + 1
            log.info(f"page start page={page_number} url={url}")
            try:
                fetched = self.client.fetch(url)
            except DeadlineExceeded:
                raise
            except FetchError as e:
                log.warn(f"page fetch fail page={page_number} url={url} error={e.reason}")
                self.errors.append(str(e))
                break
            page = parse_list_page(fetched.html, fetched.url)
            visited.add(fetched.url)
            self.pages += 1
            self.promoted += len(page.promoted)
            for record in page.listings:
                yield DiscoveredListing(link=record.link, record=record, detail_url=record.link)
            log.info(f"page done page={page_number} listings={len(page.listings)} promoted={len(page.promoted)}")
            if page.next_url:
                log.info(f"next page url={page.next_url}")
            url = page.next_url
