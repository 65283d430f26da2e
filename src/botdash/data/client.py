"""Async HTTP client for the trading bot REST API."""

from typing import Any, List, Optional

import httpx
from loguru import logger

from botdash.data.exceptions import FetchError, PayloadError
from botdash.data.models import (
    FeatureData,
    MarketDataPoint,
    Order,
    Position,
    StrategyConfig,
    Wallet,
    parse_feature_data,
)

FEATURES_ENDPOINT = "/api/features"
POSITION_ENDPOINT = "/api/position"
ORDERS_ENDPOINT = "/api/orders"
STRATEGY_CONFIG_ENDPOINT = "/api/strategy-config"
STRATEGY_ENDPOINT = "/api/strategy"
WALLET_ENDPOINT = "/api/wallet"
MARKET_ENDPOINT = "/api/market"


class DashboardAPIClient:
    """
    Thin async wrapper around the bot's JSON endpoints.

    Every method raises FetchError on transport failures and non-2xx
    responses, and PayloadError when the body has the wrong shape. The
    caller decides what to fall back to.

    Args:
        base_url: API root (e.g., "http://localhost:8000")
        timeout_seconds: Per-request timeout
        transport: Optional httpx transport (tests inject httpx.MockTransport)

    Example:
        >>> async with DashboardAPIClient("http://localhost:8000") as client:
        ...     features = await client.get_features()
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout_seconds,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> "DashboardAPIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def _request(self, method: str, endpoint: str, json: Any = None) -> Any:
        try:
            response = await self._client.request(method, endpoint, json=json)
        except httpx.HTTPError as e:
            raise FetchError(endpoint, f"request failed: {e}") from e

        if response.is_error:
            raise FetchError(
                endpoint,
                f"API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise PayloadError(f"{endpoint}: response is not valid JSON") from e

    async def probe(self, endpoint: str = FEATURES_ENDPOINT) -> bool:
        """
        Check whether an endpoint answers with a 2xx status.

        Returns:
            True if reachable, False on any transport error or error status
        """
        try:
            response = await self._client.get(endpoint)
        except httpx.HTTPError as e:
            logger.debug(f"Probe of {self.base_url}{endpoint} failed: {e}")
            return False
        return response.is_success

    async def get_features(self) -> FeatureData:
        return parse_feature_data(await self._request("GET", FEATURES_ENDPOINT))

    async def get_position(self) -> Optional[Position]:
        payload = await self._request("GET", POSITION_ENDPOINT)
        if payload is None:
            return None
        return Position.from_dict(payload)

    async def get_orders(self) -> List[Order]:
        payload = await self._request("GET", ORDERS_ENDPOINT)
        if not isinstance(payload, list):
            raise PayloadError(f"{ORDERS_ENDPOINT}: expected a list of orders")
        return [Order.from_dict(item) for item in payload]

    async def get_strategy_config(self) -> StrategyConfig:
        return StrategyConfig.from_dict(await self._request("GET", STRATEGY_CONFIG_ENDPOINT))

    async def update_strategy(self, strategy: StrategyConfig) -> StrategyConfig:
        payload = await self._request("PUT", STRATEGY_ENDPOINT, json=strategy.to_dict())
        return StrategyConfig.from_dict(payload)

    async def get_wallet(self) -> Wallet:
        return Wallet.from_dict(await self._request("GET", WALLET_ENDPOINT))

    async def get_market(self) -> List[MarketDataPoint]:
        payload = await self._request("GET", MARKET_ENDPOINT)
        if not isinstance(payload, list):
            raise PayloadError(f"{MARKET_ENDPOINT}: expected a list of market data points")
        return [MarketDataPoint.from_dict(item) for item in payload]
