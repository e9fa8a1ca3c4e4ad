"""sauto.cz used-car crawler.

Walks category search pages, enriches each listing from its detail page and
keeps the results in a link-keyed JSON cache that can be exported to CSV.
Submodules are imported lazily; prefer explicit imports such as::

    from sauto_scrape.scrape import Scrape
"""

__all__ = ["Scrape", "Store", "CarRecord", "SautoClient", "export_csv"]

_LOCATIONS = {
    "Scrape": "sauto_scrape.scrape",
    "Store": "sauto_scrape.store",
    "CarRecord": "sauto_scrape.models",
    "SautoClient": "sauto_scrape.client",
    "export_csv": "sauto_scrape.export",
}


def __getattr__(name: str):
    if name in _LOCATIONS:
        from importlib import import_module
        return getattr(import_module(_LOCATIONS[name]), name)
    raise AttributeError(name)
