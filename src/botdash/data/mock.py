"""Simulated data generators used when no live API is reachable."""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

import numpy as np
from loguru import logger

from botdash.data.models import (
    FeatureData,
    FeatureDataPoint,
    MarketDataPoint,
    Order,
    Position,
    StrategyConfig,
    StrategyParameter,
    Wallet,
)

DEFAULT_FEATURES = ["CPU Usage", "Memory Usage", "Network Traffic", "Disk I/O", "Response Time"]

# Upper bound of the uniform range each feature is drawn from
FEATURE_SCALES = {
    "Response Time": 500.0,
}
USAGE_SCALE = 100.0
DEFAULT_SCALE = 1000.0

SYMBOLS = ["BTC/USD", "ETH/USD", "SOL/USD"]


def _isoformat(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds")


class MockDataGenerator:
    """
    Generate randomized dashboard payloads.

    All generators draw from a single numpy Generator so a fixed seed
    gives reproducible output across calls.

    Args:
        seed: Random seed (None for non-deterministic output)
        feature_points: Number of samples per feature series
        feature_interval_seconds: Spacing between feature samples
        market_points: Number of market data samples

    Example:
        >>> generator = MockDataGenerator(seed=42)
        >>> features = generator.features()
        >>> len(features["CPU Usage"])
        20
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        feature_points: int = 20,
        feature_interval_seconds: int = 30,
        market_points: int = 100,
    ) -> None:
        if feature_points < 1:
            raise ValueError("feature_points must be >= 1")
        if market_points < 1:
            raise ValueError("market_points must be >= 1")

        self.rng = np.random.default_rng(seed)
        self.feature_points = feature_points
        self.feature_interval_seconds = feature_interval_seconds
        self.market_points = market_points

        logger.debug(
            f"MockDataGenerator initialized: seed={seed}, "
            f"feature_points={feature_points}, market_points={market_points}"
        )

    @staticmethod
    def feature_scale(feature: str) -> float:
        """Upper bound of the values generated for a feature."""
        if "Usage" in feature:
            return USAGE_SCALE
        return FEATURE_SCALES.get(feature, DEFAULT_SCALE)

    def features(
        self, names: Optional[List[str]] = None, now: Optional[datetime] = None
    ) -> FeatureData:
        """
        Generate one series per feature, oldest sample first.

        Args:
            names: Feature names (default: DEFAULT_FEATURES)
            now: Timestamp of the newest sample (default: current time)

        Returns:
            Mapping of feature name to chronological FeatureDataPoint list
        """
        names = names or DEFAULT_FEATURES
        now = now or datetime.now()

        data: FeatureData = {}
        for name in names:
            scale = self.feature_scale(name)
            values = self.rng.uniform(0.0, scale, size=self.feature_points)
            points = []
            for offset, value in zip(range(self.feature_points - 1, -1, -1), values):
                moment = now - timedelta(seconds=offset * self.feature_interval_seconds)
                points.append(
                    FeatureDataPoint(
                        name=name,
                        value=round(float(value), 2),
                        timestamp=_isoformat(moment),
                    )
                )
            data[name] = points
        return data

    def position(self, now: Optional[datetime] = None) -> Position:
        """Generate an open position with consistent P&L fields."""
        now = now or datetime.now()

        entry_price = round(float(self.rng.uniform(20000.0, 60000.0)), 2)
        change_pct = float(self.rng.normal(0.0, 3.0))
        current_price = round(entry_price * (1 + change_pct / 100), 2)
        quantity = round(float(self.rng.uniform(0.1, 2.0)), 4)
        pnl = round((current_price - entry_price) * quantity, 2)
        pnl_percentage = (current_price - entry_price) / entry_price * 100

        return Position(
            symbol=str(self.rng.choice(SYMBOLS)),
            quantity=quantity,
            entry_price=entry_price,
            current_price=current_price,
            pnl=pnl,
            pnl_percentage=round(pnl_percentage, 2),
            timestamp=_isoformat(now),
        )

    def orders(self, count: int = 5, now: Optional[datetime] = None) -> List[Order]:
        """Generate recent orders, newest first."""
        now = now or datetime.now()

        orders = []
        for i in range(count):
            moment = now - timedelta(minutes=int(self.rng.integers(1, 60)) * (i + 1))
            orders.append(
                Order(
                    id=f"ord-{int(self.rng.integers(100000, 999999))}",
                    symbol=str(self.rng.choice(SYMBOLS)),
                    side=str(self.rng.choice(["buy", "sell"])),
                    type=str(self.rng.choice(["market", "limit", "stop"])),
                    quantity=round(float(self.rng.uniform(0.01, 1.5)), 4),
                    price=round(float(self.rng.uniform(20000.0, 60000.0)), 2),
                    status=str(self.rng.choice(["open", "filled", "canceled", "rejected"])),
                    timestamp=_isoformat(moment),
                )
            )
        return orders

    def strategy(self, now: Optional[datetime] = None) -> StrategyConfig:
        """Generate the strategy configuration with its tunable parameters."""
        now = now or datetime.now()

        parameters: Dict[str, StrategyParameter] = {
            "lookbackPeriod": StrategyParameter(
                value=int(self.rng.integers(10, 50)),
                type="number",
                description="Number of candles used to compute the mean",
                min=5,
                max=200,
                step=1,
            ),
            "entryThreshold": StrategyParameter(
                value=round(float(self.rng.uniform(1.0, 3.0)), 2),
                type="number",
                description="Standard deviations from the mean required to enter",
                min=0.5,
                max=5.0,
                step=0.1,
            ),
            "stopLossPercent": StrategyParameter(
                value=round(float(self.rng.uniform(1.0, 5.0)), 1),
                type="number",
                description="Maximum loss per trade before the position is closed",
                min=0.1,
                max=20.0,
                step=0.1,
            ),
            "useTrailingStop": StrategyParameter(
                value=bool(self.rng.integers(0, 2)),
                type="boolean",
                description="Trail the stop loss behind the best price reached",
            ),
            "tradingPair": StrategyParameter(
                value=str(self.rng.choice(SYMBOLS)),
                type="string",
                description="Market the strategy trades",
            ),
        }

        return StrategyConfig(
            name="Mean Reversion",
            description="Buys dips and sells rallies around a rolling mean",
            enabled=bool(self.rng.integers(0, 2)),
            parameters=parameters,
            last_updated=_isoformat(now),
        )

    def wallet(self, now: Optional[datetime] = None) -> Wallet:
        """Generate wallet balances."""
        now = now or datetime.now()

        balance = round(float(self.rng.uniform(10000.0, 50000.0)), 2)
        available = round(balance * float(self.rng.uniform(0.3, 0.9)), 2)
        profit_loss = round(float(self.rng.normal(0.0, 1500.0)), 2)
        invested = balance - profit_loss

        return Wallet(
            balance=balance,
            available=available,
            profit_loss=profit_loss,
            profit_loss_percentage=round(profit_loss / invested * 100, 2) if invested else 0.0,
            last_updated=_isoformat(now),
        )

    def market(self, now: Optional[datetime] = None, start_price: float = 40000.0) -> List[MarketDataPoint]:
        """
        Generate an hourly random-walk price series with volume.

        Timestamps are epoch milliseconds, oldest first.
        """
        now = now or datetime.now()

        returns = self.rng.normal(0.0, 0.01, size=self.market_points)
        prices = start_price * np.cumprod(1 + returns)
        volumes = self.rng.uniform(100.0, 5000.0, size=self.market_points)

        points = []
        for offset, price, volume in zip(range(self.market_points - 1, -1, -1), prices, volumes):
            moment = now - timedelta(hours=offset)
            points.append(
                MarketDataPoint(
                    timestamp=int(moment.timestamp() * 1000),
                    value=round(float(price), 2),
                    volume=round(float(volume), 2),
                )
            )
        return points
