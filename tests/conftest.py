from __future__ import annotations
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pytest

from sauto_scrape.client import FetchedPage
from sauto_scrape.errors import FetchError

BASE = 'https://www.sauto.cz'

# (href, name, info, price, seller, locality)
Item = Tuple[str, str, str, str, str, str]


def item_html(item: Item) -> str:
    href, name, info, price, seller, locality = item
    return f'''
    <li class="c-item">
      <a class="c-item__link" href="{href}">detail</a>
      <h3 class="c-item__name">{name}</h3>
      <div class="c-item__info">{info}</div>
      <div class="c-item__price">{price}</div>
      <div class="c-item__seller">{seller}</div>
      <div class="c-item__locality">{locality}</div>
    </li>'''


def list_html(items: Sequence[Item] = (), promoted: Sequence[Item] = (), next_href: Optional[str] = None) -> str:
    ads = ''.join(item_html(i) for i in promoted)
    organic = ''.join(item_html(i) for i in items)
    paging = f'<a class="c-paging__btn-next" href="{next_href}">Další</a>' if next_href else ''
    return f'''<html><body>
    <div class="c-item-list__list">
      <ul class="c-preferred-list__list">{ads}</ul>
      <ul>{organic}</ul>
    </div>
    <div class="c-paging">{paging}</div>
    </body></html>'''


def detail_html(power: Optional[str] = None, bodywork: Optional[str] = None, extra: Iterable[Tuple[str, str]] = ()) -> str:
    rows: List[Tuple[str, str]] = list(extra)
    if power is not None:
        rows.append(('Výkon', power))
    if bodywork is not None:
        rows.append(('Karoserie', bodywork))
    lis = ''.join(f'<li><div class="c-car-properties__tile-label">{label}</div>'
                  f'<div class="c-car-properties__tile-value">{value}</div></li>' for label, value in rows)
    return f'<html><body><ul class="c-car-properties">{lis}</ul></body></html>'


class FakeSite:
    """URL -> HTML map standing in for the site; records every fetch."""

    def __init__(self, pages: Optional[Dict[str, str]] = None, fail: Iterable[str] = ()):
        self.pages: Dict[str, str] = dict(pages or {})
        self.fail = set(fail)
        self.calls: List[str] = []
        self.clients = 0

    def fetch(self, url: str) -> FetchedPage:
        self.calls.append(url)
        if url in self.fail or url not in self.pages:
            raise FetchError(url, '404 Client Error: Not Found')
        return FetchedPage(url=url, html=self.pages[url])

    def client(self, *_args, **_kwargs) -> "FakeClient":
        self.clients += 1
        return FakeClient(self)


class FakeClient:

    def __init__(self, site: FakeSite):
        self.site = site
        self.closed = False

    def fetch(self, url: str) -> FetchedPage:
        return self.site.fetch(url)

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()
