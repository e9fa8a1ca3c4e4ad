"""Command line entry point.

Behavior:
    1. Initialize logging (INFO, DEBUG with -v)
    2. Resolve config: defaults < sauto.config.json < flags
    3. Load the cache (fatal on a broken file, before any network access)
    4. --csv: export the cache to <cache>.csv and stop
    5. Otherwise crawl every category and save the cache once
"""
from __future__ import annotations
import argparse
import logging
from typing import List, Optional

from .client import Deadline, SautoClient
from .config import CrawlConfig, load_config
from .errors import ExportError, StoreLoadError, StoreSaveError
from .export import export_csv, export_path
from .logger import Logger, setup_logging
from .scrape import Scrape
from .store import Store

log = Logger.bind(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog='sauto-scrape', description='Crawl sauto.cz listings into a JSON cache')
    ap.add_argument('--config', help='JSON config file (default: ./sauto.config.json)')
    ap.add_argument('--blueprint', help='sauto url format with one %%s for the category token')
    ap.add_argument('--cache', help='cache json filepath')
    ap.add_argument('--args', help='pipe separated list of args to iterate over in blueprint')
    ap.add_argument('--csv', action='store_true', default=None, help='export cache to <cache>.csv instead of crawling')
    ap.add_argument('--timeout', type=float, help='per request timeout in seconds')
    ap.add_argument('--deadline', type=float, help='overall crawl budget in seconds')
    ap.add_argument('--checkpoint', action='store_true', default=None, help='save the cache after every category')
    ap.add_argument('--verbose', '-v', action='store_true', default=None, help='debug logging')
    return ap


class App:

    def __init__(self, config: CrawlConfig):
        self.config = config

    def client(self) -> SautoClient:
        return SautoClient(self.config.client_config())

    def export(self, store: Store) -> int:
        target = export_path(self.config.cache)
        log.info(f"exporting to csv path={target}")
        try:
            export_csv(store, target)
        except ExportError as e:
            log.error(str(e))
            return 1
        return 0

    def crawl(self, store: Store) -> int:
        cfg = self.config
        if not cfg.args:
            log.warn("no category args given, nothing to crawl")
        scraper = Scrape(
            store,
            cfg.blueprint,
            client_factory=self.client,
            deadline=Deadline(cfg.deadline),
            checkpoint=cfg.cache if cfg.checkpoint else None,
        )
        report = scraper.run(cfg.args)
        for result in report.categories:
            if not result.ok:
                log.warn(f"category errors token={result.token} count={len(result.errors)}")
        try:
            store.save(cfg.cache)
        except StoreSaveError as e:
            log.error(str(e))
            return 1
        return 0

    def run(self) -> int:
        try:
            store = Store.load(self.config.cache)
        except StoreLoadError as e:
            log.error(str(e))
            return 1
        if self.config.csv:
            return self.export(store)
        return self.crawl(store)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)
    config = load_config(args.config)
    config.apply({k: v for k, v in vars(args).items() if k != 'config'})
    return App(config).run()


if __name__ == "__main__":
    raise SystemExit(main())
