import pytest

from sauto_scrape.models import CarRecord


def _record(**kw):
    base = dict(link='https://x/1', title='Car A', price=250, driven=50, power=90, year=2018,
                bodywork='Hatchback', seller='Dealer', locality='Prague')
    base.update(kw)
    return CarRecord(**base)


def test_to_cache_row_keys():
    row = _record().to_cache_row()
    assert list(row) == ['link', 'info', 'price', 'driven', 'power', 'year', 'bodywork', 'seller', 'locality']
    assert row['info'] == 'Car A'
    assert row['power'] == 90


def test_from_cache_row_reads_prior_format():
    row = {
        'link': 'https://www.sauto.cz/osobni/detail/mazda/3/1',
        'info': 'Mazda 3 2.0 Skyactiv-G',
        'price': 329,
        'driven': 61,
        'power': 0,
        'year': 2017,
        'bodywork': '',
        'seller': 'Autobazar',
        'locality': 'Brno',
    }
    rec = CarRecord.from_cache_row(row)
    assert rec.title == 'Mazda 3 2.0 Skyactiv-G'
    assert rec.to_cache_row() == row


def test_from_cache_row_defaults_and_unknown_keys():
    rec = CarRecord.from_cache_row({'link': 'https://x/2', 'price': 100, 'extra': 'ignored'})
    assert rec == CarRecord(link='https://x/2', price=100)


@pytest.mark.parametrize('row', [
    {'link': 'https://x/3', 'price': '100'},
    {'link': 'https://x/3', 'price': -1},
    {'link': 'https://x/3', 'year': True},
    {'link': 'https://x/3', 'info': 5},
    {'price': 1},
    ['not', 'a', 'row'],
])
def test_from_cache_row_rejects_bad_rows(row):
    with pytest.raises(ValueError):
        CarRecord.from_cache_row(row)


def test_to_csv_row():
    assert _record().to_csv_row() == ['https://x/1', 'Car A', '250', '50', '90', '2018', 'Hatchback', 'Dealer', 'Prague']
