"""
Shared fixtures: indicator catalogs, stores and an in-memory broker.
"""

import pytest

from vibebot.adapters.broker import Account, MarketClock, Order, Position, Quote, Trade
from vibebot.catalog.indicators import DEFAULT_INDICATORS, Indicator
from vibebot.catalog.store import IndicatorState, IndicatorStore


class FakeBroker:
    """Records calls; positions/orders are plain lists the test can seed."""

    def __init__(self):
        self.calls = []
        self.positions = []
        self.open_orders = []
        self.fail_with = None
        self._next_id = 0

    def _call(self, name, **kwargs):
        self.calls.append((name, kwargs))
        if self.fail_with is not None:
            raise self.fail_with

    def _order(self, symbol, qty, side, order_type="market", limit_price=None):
        self._next_id += 1
        return Order(
            id=f"ord-{self._next_id}",
            symbol=symbol,
            qty=qty,
            side=side,
            order_type=order_type,
            status="accepted",
            limit_price=limit_price,
        )

    def get_account(self):
        self._call("get_account")
        return Account(
            buying_power=20000.0,
            cash=10000.0,
            portfolio_value=25000.0,
            equity=25000.0,
            last_equity=24800.0,
            daytrading_buying_power=40000.0,
            regt_buying_power=20000.0,
        )

    def get_latest_quote(self, symbol):
        self._call("get_latest_quote", symbol=symbol)
        return Quote(symbol=symbol, price=100.0, bid=99.5, ask=100.5)

    def get_latest_trade(self, symbol):
        self._call("get_latest_trade", symbol=symbol)
        return Trade(symbol=symbol, price=100.25, size=10)

    def get_positions(self):
        self._call("get_positions")
        return list(self.positions)

    def get_position(self, symbol):
        self._call("get_position", symbol=symbol)
        for p in self.positions:
            if p.symbol == symbol:
                return p
        return None

    def get_orders(self, status="open"):
        self._call("get_orders", status=status)
        return list(self.open_orders)

    def place_order(self, symbol, qty, side, type="market", limit_price=None):
        self._call("place_order", symbol=symbol, qty=qty, side=side, type=type, limit_price=limit_price)
        return self._order(symbol, qty, side, type, limit_price)

    def cancel_order(self, order_id):
        self._call("cancel_order", order_id=order_id)

    def cancel_all_orders(self):
        self._call("cancel_all_orders")
        n = len(self.open_orders)
        self.open_orders = []
        return n

    def get_market_clock(self):
        self._call("get_market_clock")
        return MarketClock(timestamp=None, is_open=True, next_open=None, next_close=None)

    def close_position(self, symbol, qty=None):
        self._call("close_position", symbol=symbol, qty=qty)
        return self._order(symbol, qty or 0, "sell")

    def names(self):
        return [c[0] for c in self.calls]


def make_position(symbol="AAPL", qty=10.0, market_value=1500.0, pl=50.0, plpc=0.0345):
    return Position(
        symbol=symbol,
        qty=qty,
        market_value=market_value,
        cost_basis=market_value - pl,
        unrealized_pl=pl,
        unrealized_plpc=plpc,
    )


RSI = Indicator(name="Relative Strength Index (RSI)", param="Period", min=2, max=50, default=14)


@pytest.fixture
def rsi_store():
    """Single-indicator catalog from the RSI scenario."""
    return IndicatorStore([RSI], [IndicatorState(enabled=False, value=14)])


@pytest.fixture
def store():
    return IndicatorStore(DEFAULT_INDICATORS)


@pytest.fixture
def broker():
    return FakeBroker()


@pytest.fixture
def position():
    return make_position
