from __future__ import annotations
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from .client import Deadline, SautoClient
from .enricher import Enricher
from .errors import SautoError, StoreSaveError
from .logger import Logger
from .store import Store
from .walker import ListPageWalker

log = Logger.bind(__name__)


@dataclass
class CategoryResult:
    token: str
    url: str
    pages: int = 0
    listings: int = 0
    new: int = 0
    updated: int = 0
    promoted: int = 0
    enriched: int = 0
    errors: List[str] = field(default_factory=list)
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class CrawlReport:
    categories: List[CategoryResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(c.ok for c in self.categories)

    @property
    def listings(self) -> int:
        return sum(c.listings for c in self.categories)

    @property
    def errors(self) -> List[str]:
        return [e for c in self.categories for e in c.errors]


class Scrape:
    """Crawl orchestrator.

    For every category token: substitute it into the blueprint URL, walk the
    result pages with a fresh client, upsert each listing's summary, then
    enrich it from its detail page. Categories run one after another and a
    failing category never stops the rest.
    """

    def __init__(
        self,
        store: Store,
        blueprint: str,
        client_factory: Callable[[], SautoClient] = SautoClient,
        deadline: Optional[Deadline] = None,
        checkpoint: Optional[Union[str, Path]] = None,
    ):
        self.store = store
        self.blueprint = blueprint
        self.client_factory = client_factory
        self.deadline = deadline or Deadline(None)
        self.checkpoint = checkpoint

    def category_url(self, token: str) -> str:
        if '%s' in self.blueprint:
            return self.blueprint.replace('%s', token, 1)
        if '{}' in self.blueprint:
            return self.blueprint.replace('{}', token, 1)
        raise ValueError(f"blueprint has no placeholder: {self.blueprint}")

    # ---- Public API ----
    def run(self, tokens: Sequence[str]) -> CrawlReport:
        report = CrawlReport()
        t_start = time.perf_counter()
        for token in tokens:
            result = self.crawl_category(token)
            report.categories.append(result)
            if self.checkpoint:
                self._save_checkpoint()
        elapsed_ms = (time.perf_counter() - t_start) * 1000.0
        log.info(f"all done categories={len(report.categories)} listings={report.listings} "
                 f"errors={len(report.errors)} records={len(self.store)} {elapsed_ms:.1f}ms")
        return report

    def crawl_category(self, token: str) -> CategoryResult:
        done = log.time_block(f"category {token}")
        try:
            url = self.category_url(token)
        except ValueError as e:
            log.error(f"category skip token={token} error={e}")
            return CategoryResult(token=token, url=self.blueprint, errors=[str(e)])
        result = CategoryResult(token=token, url=url)
        log.info(f"category start token={token} url={url}")
        walker = None
        enricher = None
        try:
            with self.client_factory() as client:
                walker = ListPageWalker(client, self.deadline)
                enricher = Enricher(client, self.store, self.deadline)
                for found in walker.walk(url):
                    result.listings += 1
                    if self.store.upsert(found.record):
                        result.new += 1
                        log.info(f"new car link={found.link}")
                    else:
                        result.updated += 1
                        log.info(f"updating car link={found.link}")
                    if enricher.enrich(found.link, found.detail_url):
                        result.enriched += 1
        except SautoError as e:
            log.error(f"category fail token={token} error={e}")
            result.errors.append(str(e))
        except Exception as e:  # noqa: BLE001
            log.exception(f"category crash token={token} error={e}")
            result.errors.append(f"{type(e).__name__}: {e}")
        finally:
            if walker is not None:
                result.pages = walker.pages
                result.promoted = walker.promoted
                result.errors[:0] = walker.errors
            if enricher is not None:
                result.errors.extend(enricher.errors)
        result.elapsed_ms = done()
        log.info(f"category done token={token} pages={result.pages} listings={result.listings} "
                 f"new={result.new} updated={result.updated} promoted={result.promoted} "
                 f"enriched={result.enriched} errors={len(result.errors)} {result.elapsed_ms:.1f}ms")
        return result

    def _save_checkpoint(self) -> None:
        try:
            self.store.save(self.checkpoint)
        except StoreSaveError as e:
            log.warn(f"checkpoint fail error={e}")
