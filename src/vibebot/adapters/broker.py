from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Protocol


@dataclass(frozen=True)
class Quote:
    symbol: str
    price: float  # bid/ask midpoint
    bid: float
    ask: float
    timestamp: datetime | None = None


@dataclass(frozen=True)
class Trade:
    symbol: str
    price: float
    size: float
    timestamp: datetime | None = None


@dataclass(frozen=True)
class Position:
    symbol: str
    qty: float
    market_value: float
    cost_basis: float
    unrealized_pl: float
    unrealized_plpc: float
    side: str = "long"


@dataclass(frozen=True)
class Account:
    buying_power: float
    cash: float
    portfolio_value: float
    equity: float
    last_equity: float
    daytrading_buying_power: float
    regt_buying_power: float


@dataclass(frozen=True)
class MarketClock:
    timestamp: datetime | None
    is_open: bool
    next_open: datetime | None
    next_close: datetime | None


@dataclass(frozen=True)
class Order:
    id: str
    symbol: str
    qty: float
    side: str
    order_type: str
    status: str
    limit_price: float | None = None


class BrokerClient(Protocol):
    def get_account(self) -> Account:
        ...

    def get_latest_quote(self, symbol: str) -> Quote:
        ...

    def get_latest_trade(self, symbol: str) -> Trade:
        ...

    def get_positions(self) -> list[Position]:
        ...

    def get_position(self, symbol: str) -> Position | None:
        ...

    def get_orders(self, status: Literal["open", "closed", "all"] = "open") -> list[Order]:
        ...

    def place_order(
        self,
        symbol: str,
        qty: float,
        side: Literal["buy", "sell"],
        type: Literal["market", "limit"] = "market",
        limit_price: float | None = None,
    ) -> Order:
        ...

    def cancel_order(self, order_id: str) -> None:
        ...

    def cancel_all_orders(self) -> int:
        ...

    def get_market_clock(self) -> MarketClock:
        ...

    def close_position(self, symbol: str, qty: float | None = None) -> Order:
        ...
