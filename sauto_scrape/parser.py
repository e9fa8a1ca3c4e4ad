from __future__ import annotations
"""sauto.cz list and detail page parsers.

Design:
- Dependencies: BeautifulSoup (lxml backend) for CSS selection, lxml XPath
  for next page fallbacks
- list items: `.c-item-list__list .c-item`; items nested in
  `.c-preferred-list__list` are promoted ads and never become records
- summary block `.c-item__info` is "year, driven, ..." (comma + space)
- numbers go through normalize.extract_number; a failure leaves the field 0
  and is logged, the listing is still kept
- detail page: `.c-car-properties li` label/value tiles
"""
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from lxml import etree
from lxml import html as lhtml

from .errors import ParseError
from .logger import Logger
from .models import CarRecord
from .normalize import clean_text, extract_number, strip_suffix

log = Logger.bind(__name__)

LIST_ITEM_SELECTOR = '.c-item-list__list .c-item'
PROMOTED_LIST_CLASS = 'c-preferred-list__list'
NEXT_PAGE_SELECTOR = '.c-paging__btn-next'
PROPERTY_ROW_SELECTOR = '.c-car-properties li'

LABEL_POWER = 'Výkon'
LABEL_BODYWORK = 'Karoserie'
POWER_SUFFIX = ' kW'
INFO_SEPARATOR = ', '


@dataclass
class ListPage:
    url: str
    listings: List[CarRecord] = field(default_factory=list)
    promoted: List[str] = field(default_factory=list)  # skipped ad links
    next_url: Optional[str] = None


@dataclass
class DetailProperties:
    power: Optional[int] = None
    bodywork: Optional[str] = None

    @property
    def empty(self) -> bool:
        return self.power is None and self.bodywork is None


def _child_text(node: Tag, selector: str) -> str:
    el = node.select_one(selector)
    return clean_text(el.get_text()) if el else ''


def _number_or_zero(text: str, field_name: str, link: str) -> int:
    try:
        return extract_number(text)
    except ParseError as e:
        log.warn(f"number parse fail field={field_name} link={link} error={e}")
        return 0


def _is_promoted(item: Tag) -> bool:
    return item.find_parent(class_=PROMOTED_LIST_CLASS) is not None


def _parse_item(item: Tag, link: str) -> CarRecord:
    infos = _child_text(item, '.c-item__info').split(INFO_SEPARATOR)
    year_text = infos[0] if len(infos) > 0 else ''
    driven_text = infos[1] if len(infos) > 1 else ''
    if len(infos) < 2:
        log.warn(f"summary block incomplete link={link} info={infos!r}")
    return CarRecord(
        link=link,
        title=_child_text(item, '.c-item__name'),
        price=_number_or_zero(_child_text(item, '.c-item__price'), 'price', link),
        driven=_number_or_zero(driven_text, 'driven', link) if driven_text else 0,
        year=_number_or_zero(year_text, 'year', link) if year_text else 0,
        seller=_child_text(item, '.c-item__seller'),
        locality=_child_text(item, '.c-item__locality'),
    )


def get_next_page_url(html: str, page_url: str) -> Optional[str]:
    """Next page link, absolute.

    Strategies in order:
      1. `.c-paging__btn-next[href]`
      2. `a[rel=next]` (XPath)
    """
    soup = BeautifulSoup(html, 'lxml')
    btn = soup.select_one(f'{NEXT_PAGE_SELECTOR}[href]')
    if btn and btn.get('href'):
        return urljoin(page_url, btn['href'])
    try:
        tree = lhtml.fromstring(html)
    except (ValueError, etree.ParserError) as e:
        log.debug(f"next page xpath parse fail url={page_url} error={e}")
        return None
    rel_next = tree.xpath('//a[@rel="next" and @href]')
    if rel_next:
        url = urljoin(page_url, rel_next[0].get('href'))
        log.debug(f"next page strategy=rel_next url={url}")
        return url
    return None


def parse_list_page(html: str, page_url: str) -> ListPage:
    """Extract one summary record per organic listing plus the next page link."""
    soup = BeautifulSoup(html, 'lxml')
    page = ListPage(url=page_url)
    for item in soup.select(LIST_ITEM_SELECTOR):
        anchor = item.select_one('.c-item__link[href]')
        href = anchor.get('href') if anchor else None
        if not href:
            log.warn(f"listing without link skipped page={page_url}")
            continue
        link = urljoin(page_url, href.strip())
        if _is_promoted(item):
            log.info(f"skip ad link={link}")
            page.promoted.append(link)
            continue
        page.listings.append(_parse_item(item, link))
    page.next_url = get_next_page_url(html, page_url)
    log.debug(f"parse_list_page url={page_url} listings={len(page.listings)} promoted={len(page.promoted)} next={page.next_url}")
    return page


def parse_detail_page(html: str, link: str = '') -> DetailProperties:
    """Read power (kW) and bodywork from the property tiles of a detail page."""
    soup = BeautifulSoup(html, 'lxml')
    details = DetailProperties()
    for row in soup.select(PROPERTY_ROW_SELECTOR):
        label = _child_text(row, '.c-car-properties__tile-label')
        value = _child_text(row, '.c-car-properties__tile-value')
        if label == LABEL_POWER:
            try:
                details.power = extract_number(strip_suffix(value, POWER_SUFFIX))
            except ParseError as e:
                log.warn(f"power parse fail link={link} value={value!r} error={e}")
        elif label == LABEL_BODYWORK:
            details.bodywork = value
    return details
