"""Unit tests for DashboardAPIClient using httpx.MockTransport."""

import json

import httpx
import pytest

from botdash.data.client import DashboardAPIClient
from botdash.data.exceptions import FetchError, PayloadError
from botdash.data.mock import MockDataGenerator

BASE_URL = "http://bot.test"


def make_client(handler) -> DashboardAPIClient:
    return DashboardAPIClient(BASE_URL, transport=httpx.MockTransport(handler))


@pytest.fixture
def generator() -> MockDataGenerator:
    return MockDataGenerator(seed=3, feature_points=4, market_points=5)


class TestGetEndpoints:
    """Tests for the GET endpoints."""

    @pytest.mark.asyncio
    async def test_get_features(self, generator: MockDataGenerator) -> None:
        """Test /api/features is parsed into FeatureDataPoint lists."""
        features = generator.features(["CPU Usage"])
        payload = {name: [p.to_dict() for p in points] for name, points in features.items()}
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, request.url.path))
            return httpx.Response(200, json=payload)

        async with make_client(handler) as client:
            result = await client.get_features()

        assert seen == [("GET", "/api/features")]
        assert result == features

    @pytest.mark.asyncio
    async def test_get_position_none(self) -> None:
        """Test a null body means no open position."""
        async with make_client(lambda request: httpx.Response(200, json=None)) as client:
            assert await client.get_position() is None

    @pytest.mark.asyncio
    async def test_get_orders_requires_list(self) -> None:
        async with make_client(lambda request: httpx.Response(200, json={"orders": []})) as client:
            with pytest.raises(PayloadError, match="expected a list"):
                await client.get_orders()

    @pytest.mark.asyncio
    async def test_strategy_config_endpoint(self, generator: MockDataGenerator) -> None:
        strategy = generator.strategy()
        paths = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json=strategy.to_dict())

        async with make_client(handler) as client:
            result = await client.get_strategy_config()

        assert paths == ["/api/strategy-config"]
        assert result == strategy

    @pytest.mark.asyncio
    async def test_get_wallet_and_market(self, generator: MockDataGenerator) -> None:
        wallet = generator.wallet()
        market = generator.market()

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/api/wallet":
                return httpx.Response(200, json=wallet.to_dict())
            return httpx.Response(200, json=[p.to_dict() for p in market])

        async with make_client(handler) as client:
            assert await client.get_wallet() == wallet
            assert await client.get_market() == market


class TestUpdateStrategy:
    """Tests for PUT /api/strategy."""

    @pytest.mark.asyncio
    async def test_put_sends_strategy_json(self, generator: MockDataGenerator) -> None:
        """Test the strategy is sent as camelCase JSON and the reply parsed."""
        strategy = generator.strategy()
        received = {}

        def handler(request: httpx.Request) -> httpx.Response:
            received["method"] = request.method
            received["path"] = request.url.path
            received["body"] = json.loads(request.content)
            return httpx.Response(200, json=received["body"])

        async with make_client(handler) as client:
            updated = await client.update_strategy(strategy)

        assert received["method"] == "PUT"
        assert received["path"] == "/api/strategy"
        assert received["body"]["lastUpdated"] == strategy.last_updated
        assert updated == strategy


class TestErrors:
    """Tests for error mapping."""

    @pytest.mark.asyncio
    async def test_error_status(self) -> None:
        """Test non-2xx responses raise FetchError with the status code."""
        async with make_client(lambda request: httpx.Response(503)) as client:
            with pytest.raises(FetchError) as exc_info:
                await client.get_wallet()

        assert exc_info.value.status_code == 503
        assert exc_info.value.endpoint == "/api/wallet"
        assert "API error: 503" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        """Test connection failures raise FetchError without a status."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(FetchError) as exc_info:
                await client.get_orders()

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        async with make_client(lambda request: httpx.Response(200, text="<html>")) as client:
            with pytest.raises(PayloadError, match="not valid JSON"):
                await client.get_market()


class TestProbe:
    """Tests for probe()."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status,expected", [(200, True), (404, False), (500, False)])
    async def test_probe_status(self, status: int, expected: bool) -> None:
        async with make_client(lambda request: httpx.Response(status, json={})) as client:
            assert await client.probe() is expected

    @pytest.mark.asyncio
    async def test_probe_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        async with make_client(handler) as client:
            assert await client.probe() is False
