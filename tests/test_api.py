"""
HTTP 엔드포인트 테스트

pytest tests/test_api.py -v
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from price_sync.config import Settings
from price_sync.dependencies import get_price_sync_service
from price_sync.itick_client import ITickClient
from price_sync.main import app
from price_sync.models import PriceUpdate, SyncResponse
from price_sync.store import StoreError
from price_sync.sync_service import PriceSyncService


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def override_service(service):
    app.dependency_overrides[get_price_sync_service] = lambda: service


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "price-sync"}


class TestFetchMarketPrices:
    """가격 동기화 엔드포인트 테스트"""

    def test_success_response(self, client):
        service = MagicMock()
        service.run = AsyncMock(return_value=SyncResponse(
            prices_updated=[PriceUpdate(symbol="AAPL", price=189.5, marketType="stock")],
            orders_processed=[{"id": 1, "status": "filled"}],
        ))
        override_service(service)

        response = client.post("/", json={"ignored": True})

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {
            "success": True,
            "prices_updated": [{"symbol": "AAPL", "price": 189.5, "marketType": "stock"}],
            "orders_processed": [{"id": 1, "status": "filled"}],
        }

    @pytest.mark.parametrize("method", ["GET", "POST", "PUT", "PATCH", "DELETE"])
    def test_any_method_accepted(self, client, method):
        service = MagicMock()
        service.run = AsyncMock(return_value=SyncResponse())
        override_service(service)

        response = client.request(method, "/fetch_market_prices")

        assert response.status_code == 200
        assert response.json() == {"success": True, "prices_updated": [], "orders_processed": None}

    def test_fatal_error_returns_500(self, client):
        service = MagicMock()
        service.run = AsyncMock(side_effect=StoreError("db down"))
        override_service(service)

        response = client.get("/")

        assert response.status_code == 500
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {"success": False, "error": "db down"}


class TestEndToEnd:
    """실제 PriceSyncService + ITickClient (MockTransport) + store mock"""

    def test_example_symbols(self, client):
        requests = []
        quotes = {
            "BTCUSDT": {"ld": 67000.5},
            "AAPL": {"price": 189.5},
            "EUR/GBP": {"c": 0.8571},
        }

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            code = request.url.params["code"]
            return httpx.Response(200, json={"code": 0, "data": quotes[code]})

        settings = Settings(ITICK_API_KEY="test-token")
        quote_client = ITickClient(
            settings,
            client=httpx.AsyncClient(base_url=settings.ITICK_BASE_URL, transport=httpx.MockTransport(handler)),
        )

        store = MagicMock()
        store.fetch_pending_symbols.return_value = ["BTCUSDT", "AAPL", "EUR/GBP", "AAPL"]
        store.process_pending_orders.return_value = None

        override_service(PriceSyncService(store=store, quote_provider=quote_client))

        response = client.post("/")

        assert response.status_code == 200
        assert response.json()["prices_updated"] == [
            {"symbol": "BTCUSDT", "price": 67000.5, "marketType": "crypto"},
            {"symbol": "AAPL", "price": 189.5, "marketType": "stock"},
            {"symbol": "EUR/GBP", "price": 0.8571, "marketType": "forex"},
        ]
        assert [(r.url.path, r.url.params["code"], r.url.params["region"]) for r in requests] == [
            ("/crypto/quote", "BTCUSDT", "ba"),
            ("/stock/quote", "AAPL", "us"),
            ("/forex/quote", "EUR/GBP", "gb"),
        ]
        assert all(r.headers["token"] == "test-token" for r in requests)
        store.process_pending_orders.assert_called_once_with()

    def test_non_finite_quote_still_returns_json(self, client):
        """NaN 시세가 섞여도 나머지 심볼 결과는 JSON으로 반환"""
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params["code"] == "AAPL":
                return httpx.Response(
                    200,
                    content=b'{"code": 0, "data": {"ld": NaN}}',
                    headers={"content-type": "application/json"},
                )
            return httpx.Response(200, json={"code": 0, "data": {"ld": 410.0}})

        settings = Settings(ITICK_API_KEY="test-token")
        quote_client = ITickClient(
            settings,
            client=httpx.AsyncClient(base_url=settings.ITICK_BASE_URL, transport=httpx.MockTransport(handler)),
        )

        store = MagicMock()
        store.fetch_pending_symbols.return_value = ["AAPL", "MSFT"]
        store.process_pending_orders.return_value = {"processed": 1}

        override_service(PriceSyncService(store=store, quote_provider=quote_client))

        response = client.post("/")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        assert response.json() == {
            "success": True,
            "prices_updated": [{"symbol": "MSFT", "price": 410.0, "marketType": "stock"}],
            "orders_processed": {"processed": 1},
        }
        store.update_price.assert_called_once_with("MSFT", 410.0)


class TestServiceWiring:
    """실제 의존성 주입 (store만 mock)"""

    def test_quote_client_closed_after_request(self, client):
        created = []

        def make_quote_client(settings):
            quote_client = ITickClient(settings)
            created.append(quote_client)
            return quote_client

        with patch("price_sync.dependencies.SupabaseStore") as mock_store_cls, \
                patch("price_sync.dependencies.ITickClient", side_effect=make_quote_client):
            mock_store_cls.return_value.fetch_pending_symbols.return_value = []

            response = client.post("/")

        assert response.status_code == 200
        assert response.json() == {"success": True, "prices_updated": [], "orders_processed": None}
        mock_store_cls.assert_called_once()
        assert len(created) == 1
        assert created[0].client.is_closed

    def test_store_failure_through_real_wiring(self, client):
        with patch("price_sync.dependencies.SupabaseStore") as mock_store_cls:
            mock_store_cls.return_value.fetch_pending_symbols.side_effect = StoreError("db down")

            response = client.get("/")

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "db down"}
