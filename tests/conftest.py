"""
Shared fixtures: temporary SQLite store, fake rate provider and API client.
"""
import httpx
import pytest
from fastapi.testclient import TestClient

from app.api.cotacao import get_http_client, get_session_factory
from app.core.config import Settings, get_settings
from app.core.database import build_session_factory, init_db
from app.models.exchange import Exchange
from main import app

PROVIDER_URL = "https://provider.test/json/last/USD-BRL"

USDBRL_PAYLOAD = {
    "USDBRL": {
        "code": "USD",
        "codein": "BRL",
        "name": "Dólar Americano/Real Brasileiro",
        "high": "5.4521",
        "low": "5.4012",
        "varBid": "0.0123",
        "pctChange": "0.23",
        "bid": "5.43",
        "ask": "5.4335",
        "timestamp": "1718900000",
        "create_date": "2024-06-20 13:33:20",
    }
}


@pytest.fixture
def settings(tmp_path):
    s = Settings()
    s.EXCHANGE_API_URL = PROVIDER_URL
    s.DATABASE_PATH = str(tmp_path / "db" / "exchanges.db")
    # Folga para o insert real nos testes; o caso de 10ms tem teste próprio
    s.DATABASE_TIMEOUT = 1.0
    s.COTACAO_URL = "http://testserver/cotacao"
    s.COTACAO_FILE_PATH = str(tmp_path / "client" / "cotacao.txt")
    return s


@pytest.fixture
def session_factory(settings):
    engine = init_db(settings.DATABASE_PATH)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def provider():
    """Holds the handler used by the fake provider; tests replace `handler`."""

    class FakeProvider:
        calls = 0

        def handler(self, request):
            return httpx.Response(200, json=USDBRL_PAYLOAD)

        def __call__(self, request):
            self.calls += 1
            return self.handler(request)

    return FakeProvider()


@pytest.fixture
def api_client(settings, session_factory, provider):
    async def _http_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(provider)) as client:
            yield client

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_http_client] = _http_client
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def count_exchanges(session_factory):
    def _count() -> int:
        with session_factory() as db:
            return db.query(Exchange).count()

    return _count
