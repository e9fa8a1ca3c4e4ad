from __future__ import annotations
from typing import Dict, Optional

from .client import Deadline
from .errors import DeadlineExceeded, FetchError, LookupFault
from .logger import Logger
from .parser import DetailProperties, parse_detail_page
from .store import Store
from .walker import PageFetcher

log = Logger.bind(__name__)


def apply_details(store: Store, link: str, details: DetailProperties) -> bool:
    """Write power/bodywork into the stored record at ``link``.

    Only fields present on the detail page are touched. A link the store
    does not hold is logged and skipped.
    """
    fields = {}
    if details.power is not None:
        fields['power'] = details.power
    if details.bodywork is not None:
        fields['bodywork'] = details.bodywork
    if store.update(link, **fields) is None:
        log.warn(f"enrich skip error={LookupFault(link)}")
        return False
    if fields:
        log.debug(f"enriched link={link} fields={fields}")
    return True


class Enricher:
    """Fetch detail pages and merge their properties into the store.

    Parsed details are kept per instance, so a listing sighted again within
    the same category is re-enriched without a second fetch.
    """

    def __init__(self, client: PageFetcher, store: Store, deadline: Optional[Deadline] = None):
        self.client = client
        self.store = store
        self.deadline = deadline or Deadline(None)
        self._seen: Dict[str, DetailProperties] = {}
        self.errors = []

    def enrich(self, link: str, detail_url: Optional[str] = None) -> bool:
        url = detail_url or link
        details = self._seen.get(url)
        if details is None:
            self.deadline.check(url)
            try:
                fetched = self.client.fetch(url)
            except DeadlineExceeded:
                raise
            except FetchError as e:
                log.warn(f"detail fetch fail link={link} error={e.reason}")
                self.errors.append(str(e))
                return False
            details = parse_detail_page(fetched.html, link)
            self._seen[url] = details
        return apply_details(self.store, link, details)
