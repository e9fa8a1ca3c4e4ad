import pytest

from sauto_scrape.errors import ExportError
from sauto_scrape.export import HEADER, export_csv, export_path
from sauto_scrape.models import CarRecord
from sauto_scrape.store import Store

HEADER_LINE = 'link,nadpis,cena (tis. kč),najeto (tis. km),výkon (kW),rok výroby,karoserie,prodejce,lokalita'


def test_header_columns():
    assert ','.join(HEADER) == HEADER_LINE
    assert len(HEADER) == 9


def test_export_single_record(tmp_path):
    store = Store()
    store.upsert(CarRecord(link='https://x/1', title='Car A', price=250, driven=50, power=90, year=2018,
                           bodywork='Hatchback', seller='Dealer', locality='Prague'))
    path = tmp_path / 'sauto.json.csv'
    assert export_csv(store, path) == 1
    lines = path.read_text(encoding='utf-8').splitlines()
    assert lines[0] == HEADER_LINE
    assert lines[1] == 'https://x/1,Car A,250,50,90,2018,Hatchback,Dealer,Prague'


def test_export_sorted_by_link_and_quoted(tmp_path):
    store = Store()
    store.upsert(CarRecord(link='https://x/2', title='Mazda 3, 2.0'))
    store.upsert(CarRecord(link='https://x/1', title='Škoda'))
    path = tmp_path / 'out.csv'
    export_csv(store, path)
    lines = path.read_text(encoding='utf-8').splitlines()
    assert lines[1].startswith('https://x/1,Škoda,')
    assert lines[2].startswith('https://x/2,"Mazda 3, 2.0",')


def test_export_empty_store_writes_header_only(tmp_path):
    path = tmp_path / 'out.csv'
    assert export_csv(Store(), path) == 0
    assert path.read_text(encoding='utf-8') == HEADER_LINE + '\n'


def test_export_path():
    assert str(export_path('data/sauto.json')).replace('\\', '/') == 'data/sauto.json.csv'


def test_export_failure(tmp_path):
    with pytest.raises(ExportError):
        export_csv(Store(), tmp_path / 'missing-dir' / 'out.csv')
