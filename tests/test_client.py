import pytest
import requests
from urllib3.util.retry import Retry

from sauto_scrape.client import Deadline, SautoClient, SautoClientConfig
from sauto_scrape.errors import DeadlineExceeded, FetchError


def _response(status: int, body: bytes, url: str) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp._content = body
    resp.url = url
    return resp


def test_fetch_returns_final_url_and_text(monkeypatch):
    client = SautoClient()
    seen = {}

    def fake_get(url, timeout):
        seen['timeout'] = timeout
        return _response(200, 'Karoserie: hatchback'.encode('utf-8'), 'https://www.sauto.cz/final')

    monkeypatch.setattr(client.session, 'get', fake_get)
    page = client.fetch('https://www.sauto.cz/start')
    assert page.url == 'https://www.sauto.cz/final'
    assert page.html == 'Karoserie: hatchback'
    assert seen['timeout'] == 15.0


def test_fetch_http_error(monkeypatch):
    client = SautoClient()
    monkeypatch.setattr(client.session, 'get', lambda url, timeout: _response(404, b'', url))
    with pytest.raises(FetchError) as exc:
        client.fetch('https://www.sauto.cz/gone')
    assert exc.value.url == 'https://www.sauto.cz/gone'


def test_fetch_connection_error(monkeypatch):
    client = SautoClient(SautoClientConfig(timeout=1.0))

    def boom(url, timeout):
        raise requests.ConnectionError('connection refused')

    monkeypatch.setattr(client.session, 'get', boom)
    with pytest.raises(FetchError, match='connection refused'):
        client.fetch('https://www.sauto.cz/')


def test_client_headers_and_context_manager():
    with SautoClient() as client:
        assert client.session.headers['Accept-Language'].startswith('cs')
        assert 'Mozilla' in client.session.headers['User-Agent']


def test_deadline():
    now = [100.0]
    deadline = Deadline(5, clock=lambda: now[0])
    deadline.check('https://x/1')
    now[0] = 105.0
    assert deadline.expired
    with pytest.raises(DeadlineExceeded):
        deadline.check('https://x/1')


def test_unlimited_deadline_never_expires():
    assert not Deadline(None).expired


def test_retry_policy_mounted_on_session():
    client = SautoClient(SautoClientConfig(max_retries=5))
    retries = client.session.get_adapter('https://www.sauto.cz/').max_retries
    assert isinstance(retries, Retry)
    assert retries.total == 5
    assert 503 in retries.status_forcelist
