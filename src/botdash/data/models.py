"""Typed records for the payloads served by the trading bot API.

The API speaks camelCase JSON; every record converts from and to that
shape with ``from_dict`` / ``to_dict``.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Union

import pandas as pd

from botdash.data.exceptions import PayloadError, StrategyValidationError

Timestamp = Union[int, str]

ORDER_SIDES = ("buy", "sell")
ORDER_TYPES = ("market", "limit", "stop")
ORDER_STATUSES = ("open", "filled", "canceled", "rejected")
PARAMETER_TYPES = ("number", "boolean", "string")


def _require(payload: Mapping[str, Any], key: str, record: str) -> Any:
    if not isinstance(payload, Mapping):
        raise PayloadError(f"{record} payload must be an object, got {type(payload).__name__}")
    if key not in payload:
        raise PayloadError(f"{record} payload missing '{key}'")
    return payload[key]


def _number(payload: Mapping[str, Any], key: str, record: str) -> float:
    value = _require(payload, key, record)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PayloadError(f"{record}.{key} must be a number, got {value!r}")
    return float(value)


def _optional_number(
    payload: Mapping[str, Any], key: str, record: str, default: Optional[float] = None
) -> Optional[Union[int, float]]:
    """Numeric field that may be absent or null; ints are kept as ints."""
    if not isinstance(payload, Mapping):
        raise PayloadError(f"{record} payload must be an object, got {type(payload).__name__}")
    value = payload.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PayloadError(f"{record}.{key} must be a number, got {value!r}")
    return value


@dataclass
class FeatureDataPoint:
    """Single sample of a named metric."""

    name: str
    value: float
    timestamp: Timestamp

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FeatureDataPoint":
        return cls(
            name=str(_require(payload, "name", "FeatureDataPoint")),
            value=_number(payload, "value", "FeatureDataPoint"),
            timestamp=_require(payload, "timestamp", "FeatureDataPoint"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "value": self.value, "timestamp": self.timestamp}


FeatureData = Dict[str, List[FeatureDataPoint]]


def parse_feature_data(payload: Any) -> FeatureData:
    """
    Parse the ``/api/features`` response.

    Args:
        payload: Mapping of feature name to list of point objects

    Returns:
        Mapping of feature name to list of FeatureDataPoint

    Raises:
        PayloadError: If the payload is not a mapping of lists
    """
    if not isinstance(payload, Mapping):
        raise PayloadError(f"Feature payload must be an object, got {type(payload).__name__}")

    features: FeatureData = {}
    for name, points in payload.items():
        if not isinstance(points, list):
            raise PayloadError(f"Feature '{name}' must be a list of points")
        features[name] = [FeatureDataPoint.from_dict(point) for point in points]
    return features


@dataclass
class Position:
    """Open position held by the bot."""

    symbol: str
    quantity: float
    entry_price: float
    current_price: float
    pnl: float
    pnl_percentage: float
    timestamp: Timestamp

    @property
    def is_profitable(self) -> bool:
        return self.pnl > 0

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Position":
        return cls(
            symbol=str(_require(payload, "symbol", "Position")),
            quantity=_number(payload, "quantity", "Position"),
            entry_price=_number(payload, "entryPrice", "Position"),
            current_price=_number(payload, "currentPrice", "Position"),
            pnl=_number(payload, "pnl", "Position"),
            pnl_percentage=_number(payload, "pnlPercentage", "Position"),
            timestamp=_require(payload, "timestamp", "Position"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "quantity": self.quantity,
            "entryPrice": self.entry_price,
            "currentPrice": self.current_price,
            "pnl": self.pnl,
            "pnlPercentage": self.pnl_percentage,
            "timestamp": self.timestamp,
        }


@dataclass
class Order:
    """Order placed by the bot."""

    id: str
    symbol: str
    side: str
    type: str
    quantity: float
    price: float
    status: str
    timestamp: Timestamp

    def __post_init__(self) -> None:
        if self.side not in ORDER_SIDES:
            raise PayloadError(f"Invalid order side: {self.side}. Must be one of {ORDER_SIDES}")
        if self.status not in ORDER_STATUSES:
            raise PayloadError(
                f"Invalid order status: {self.status}. Must be one of {ORDER_STATUSES}"
            )

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Order":
        return cls(
            id=str(_require(payload, "id", "Order")),
            symbol=str(_require(payload, "symbol", "Order")),
            side=str(_require(payload, "side", "Order")).lower(),
            type=str(_require(payload, "type", "Order")).lower(),
            quantity=_number(payload, "quantity", "Order"),
            price=_number(payload, "price", "Order"),
            status=str(_require(payload, "status", "Order")).lower(),
            timestamp=_require(payload, "timestamp", "Order"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "side": self.side,
            "type": self.type,
            "quantity": self.quantity,
            "price": self.price,
            "status": self.status,
            "timestamp": self.timestamp,
        }


@dataclass
class StrategyParameter:
    """
    Tunable strategy parameter.

    Attributes:
        value: Current value (number, bool or string depending on type)
        type: One of "number", "boolean", "string"
        description: Human readable description
        min: Lower bound for numeric parameters
        max: Upper bound for numeric parameters
        step: Input step for numeric parameters
    """

    value: Any
    type: str
    description: str = ""
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None

    def __post_init__(self) -> None:
        if self.type not in PARAMETER_TYPES:
            raise PayloadError(
                f"Invalid parameter type: {self.type}. Must be one of {PARAMETER_TYPES}"
            )

    def validate(self, value: Any) -> Optional[str]:
        """
        Check a candidate value against this parameter's type and bounds.

        Returns:
            Error message, or None if the value is acceptable
        """
        if self.type == "number":
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return "Expected a number"
            if self.min is not None and value < self.min:
                return f"Must be at least {self.min}"
            if self.max is not None and value > self.max:
                return f"Must be at most {self.max}"
        elif self.type == "boolean":
            if not isinstance(value, bool):
                return "Expected true or false"
        elif not isinstance(value, str):
            return "Expected text"
        return None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "StrategyParameter":
        return cls(
            value=_require(payload, "value", "StrategyParameter"),
            type=str(_require(payload, "type", "StrategyParameter")),
            description=str(payload.get("description", "")),
            min=_optional_number(payload, "min", "StrategyParameter"),
            max=_optional_number(payload, "max", "StrategyParameter"),
            step=_optional_number(payload, "step", "StrategyParameter"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "value": self.value,
            "type": self.type,
            "description": self.description,
        }
        for key in ("min", "max", "step"):
            bound = getattr(self, key)
            if bound is not None:
                data[key] = bound
        return data


@dataclass
class StrategyConfig:
    """Trading strategy configuration as exposed by ``/api/strategy``."""

    name: str
    description: str
    enabled: bool
    parameters: Dict[str, StrategyParameter] = field(default_factory=dict)
    last_updated: Optional[Timestamp] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "StrategyConfig":
        raw_parameters = payload.get("parameters", {}) if isinstance(payload, Mapping) else {}
        if not isinstance(raw_parameters, Mapping):
            raise PayloadError("StrategyConfig.parameters must be an object")

        return cls(
            name=str(_require(payload, "name", "StrategyConfig")),
            description=str(payload.get("description", "")),
            enabled=bool(_require(payload, "enabled", "StrategyConfig")),
            parameters={
                key: StrategyParameter.from_dict(param) for key, param in raw_parameters.items()
            },
            last_updated=payload.get("lastUpdated"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "enabled": self.enabled,
            "parameters": {key: param.to_dict() for key, param in self.parameters.items()},
            "lastUpdated": self.last_updated,
        }

    def form_values(self) -> Dict[str, Any]:
        """Flatten name, enabled flag and parameter values into form defaults."""
        values: Dict[str, Any] = {"name": self.name, "enabled": self.enabled}
        for key, param in self.parameters.items():
            values[key] = param.value
        return values

    def apply_form_values(self, values: Mapping[str, Any]) -> "StrategyConfig":
        """
        Build an updated copy of this strategy from submitted form values.

        Keys that are not "name", "enabled" or a known parameter are ignored.
        The original object is left untouched.

        Args:
            values: Submitted form values

        Returns:
            New StrategyConfig carrying the submitted values

        Raises:
            StrategyValidationError: If any field is invalid (all errors are reported)

        Example:
            >>> updated = strategy.apply_form_values({"name": "Momentum", "enabled": True})
        """
        errors: Dict[str, str] = {}

        name = values.get("name", self.name)
        if not isinstance(name, str) or not name.strip():
            errors["name"] = "Strategy name is required"

        enabled = values.get("enabled", self.enabled)
        if not isinstance(enabled, bool):
            errors["enabled"] = "Expected true or false"

        parameters = {}
        for key, param in self.parameters.items():
            if key not in values:
                parameters[key] = replace(param)
                continue
            message = param.validate(values[key])
            if message:
                errors[key] = message
            parameters[key] = replace(param, value=values[key])

        if errors:
            raise StrategyValidationError(errors)

        return replace(self, name=name.strip(), enabled=enabled, parameters=parameters)


@dataclass
class Wallet:
    """Account balances and running profit."""

    balance: float
    available: float
    profit_loss: float
    profit_loss_percentage: float
    last_updated: Optional[Timestamp] = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Wallet":
        return cls(
            balance=_number(payload, "balance", "Wallet"),
            available=_number(payload, "available", "Wallet"),
            profit_loss=_number(payload, "profitLoss", "Wallet"),
            profit_loss_percentage=_number(payload, "profitLossPercentage", "Wallet"),
            last_updated=payload.get("lastUpdated"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "balance": self.balance,
            "available": self.available,
            "profitLoss": self.profit_loss,
            "profitLossPercentage": self.profit_loss_percentage,
            "lastUpdated": self.last_updated,
        }


@dataclass
class MarketDataPoint:
    """Price sample with traded volume."""

    timestamp: Timestamp
    value: float
    volume: float = 0.0

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "MarketDataPoint":
        return cls(
            timestamp=_require(payload, "timestamp", "MarketDataPoint"),
            value=_number(payload, "value", "MarketDataPoint"),
            volume=float(_optional_number(payload, "volume", "MarketDataPoint", default=0.0)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"timestamp": self.timestamp, "value": self.value, "volume": self.volume}


def points_to_frame(points: List[Any]) -> pd.DataFrame:
    """
    Convert a list of records into a DataFrame for charting.

    Args:
        points: FeatureDataPoint, MarketDataPoint or plain dicts

    Returns:
        DataFrame with one row per point (empty if no points)
    """
    rows = [point.to_dict() if hasattr(point, "to_dict") else dict(point) for point in points]
    return pd.DataFrame(rows)
