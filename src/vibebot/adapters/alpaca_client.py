from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from alpaca.common.exceptions import APIError
from alpaca.data.historical import StockHistoricalDataClient
from alpaca.data.requests import StockLatestQuoteRequest, StockLatestTradeRequest
from alpaca.trading.client import TradingClient
from alpaca.trading.enums import OrderSide, QueryOrderStatus, TimeInForce
from alpaca.trading.requests import ClosePositionRequest, GetOrdersRequest, LimitOrderRequest, MarketOrderRequest

from vibebot.adapters.broker import Account, MarketClock, Order, Position, Quote, Trade
from vibebot.util.env import Env


@dataclass(frozen=True)
class AlpacaClients:
    trading: TradingClient
    stocks: StockHistoricalDataClient


def make_alpaca_clients(env: Env) -> AlpacaClients:
    # alpaca-py targets the paper endpoint via TradingClient(paper=True)
    trading = TradingClient(env.key_id, env.secret_key, paper=env.paper)
    stocks = StockHistoricalDataClient(env.key_id, env.secret_key)
    return AlpacaClients(trading=trading, stocks=stocks)


def _f(x: Any, default: float = 0.0) -> float:
    try:
        return float(x) if x is not None else default
    except Exception:
        return default


def _enum_str(x: Any) -> str:
    return str(getattr(x, "value", x) or "")


def _order(o: Any) -> Order:
    lim = getattr(o, "limit_price", None)
    return Order(
        id=str(getattr(o, "id", "")),
        symbol=str(getattr(o, "symbol", "")),
        qty=_f(getattr(o, "qty", None)),
        side=_enum_str(getattr(o, "side", "")),
        order_type=_enum_str(getattr(o, "order_type", None) or getattr(o, "type", "")),
        status=_enum_str(getattr(o, "status", "")),
        limit_price=_f(lim) if lim is not None else None,
    )


def _position(p: Any) -> Position:
    return Position(
        symbol=str(p.symbol),
        qty=_f(p.qty),
        market_value=_f(p.market_value),
        cost_basis=_f(getattr(p, "cost_basis", 0.0)),
        unrealized_pl=_f(p.unrealized_pl),
        unrealized_plpc=_f(p.unrealized_plpc),
        side=_enum_str(getattr(p, "side", "long")) or "long",
    )


class AlpacaBroker:
    """BrokerClient over alpaca-py; converts SDK models to plain records."""

    def __init__(self, clients: AlpacaClients, *, time_in_force: str = "day"):
        self.clients = clients
        self.time_in_force = TimeInForce(time_in_force)

    def get_account(self) -> Account:
        a = self.clients.trading.get_account()
        return Account(
            buying_power=_f(a.buying_power),
            cash=_f(a.cash),
            portfolio_value=_f(getattr(a, "portfolio_value", a.equity)),
            equity=_f(a.equity),
            last_equity=_f(getattr(a, "last_equity", 0.0)),
            daytrading_buying_power=_f(getattr(a, "daytrading_buying_power", 0.0)),
            regt_buying_power=_f(getattr(a, "regt_buying_power", 0.0)),
        )

    def get_latest_quote(self, symbol: str) -> Quote:
        res = self.clients.stocks.get_stock_latest_quote(StockLatestQuoteRequest(symbol_or_symbols=symbol))
        q = res[symbol]
        bid = _f(q.bid_price)
        ask = _f(q.ask_price)
        return Quote(symbol=symbol, price=(bid + ask) / 2, bid=bid, ask=ask, timestamp=getattr(q, "timestamp", None))

    def get_latest_trade(self, symbol: str) -> Trade:
        res = self.clients.stocks.get_stock_latest_trade(StockLatestTradeRequest(symbol_or_symbols=symbol))
        t = res[symbol]
        return Trade(symbol=symbol, price=_f(t.price), size=_f(t.size), timestamp=getattr(t, "timestamp", None))

    def get_positions(self) -> list[Position]:
        return [_position(p) for p in self.clients.trading.get_all_positions()]

    def get_position(self, symbol: str) -> Position | None:
        try:
            p = self.clients.trading.get_open_position(symbol)
        except APIError as e:
            if getattr(e, "status_code", None) == 404:
                return None
            raise
        return _position(p)

    def get_orders(self, status: str = "open") -> list[Order]:
        req = GetOrdersRequest(status=QueryOrderStatus(status), limit=500)
        return [_order(o) for o in self.clients.trading.get_orders(filter=req)]

    def place_order(self, symbol, qty, side, type="market", limit_price=None) -> Order:
        order_side = OrderSide.BUY if side == "buy" else OrderSide.SELL
        if type == "limit":
            if limit_price is None:
                raise ValueError("limit orders require a limit_price")
            req = LimitOrderRequest(
                symbol=symbol,
                qty=qty,
                side=order_side,
                time_in_force=self.time_in_force,
                limit_price=round(float(limit_price), 2 if limit_price >= 1 else 4),
            )
        else:
            req = MarketOrderRequest(symbol=symbol, qty=qty, side=order_side, time_in_force=self.time_in_force)
        return _order(self.clients.trading.submit_order(req))

    def cancel_order(self, order_id: str) -> None:
        self.clients.trading.cancel_order_by_id(order_id)

    def cancel_all_orders(self) -> int:
        res = self.clients.trading.cancel_orders()
        return len(res or [])

    def get_market_clock(self) -> MarketClock:
        c = self.clients.trading.get_clock()
        return MarketClock(
            timestamp=getattr(c, "timestamp", None),
            is_open=bool(getattr(c, "is_open", False)),
            next_open=getattr(c, "next_open", None),
            next_close=getattr(c, "next_close", None),
        )

    def close_position(self, symbol: str, qty: float | None = None) -> Order:
        opts = ClosePositionRequest(qty=f"{float(qty):g}") if qty else None
        return _order(self.clients.trading.close_position(symbol, close_options=opts))
