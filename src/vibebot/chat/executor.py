from __future__ import annotations

from typing import Callable

from vibebot.catalog.indicators import find_indicator_index
from vibebot.catalog.store import IndicatorStore
from vibebot.chat.formatting import format_account, format_clock, format_positions, format_quote, money, num
from vibebot.chat.types import INDICATOR_COMMANDS, ActionResult, ParsedCommand

Handler = Callable[[ParsedCommand], ActionResult]

UNKNOWN_DETAILS = (
    "I didn't understand that command. Try commands like \"enable RSI\", "
    "\"set MACD period to 20\", or \"disable Bollinger Bands\"."
)


class IndicatorActions:
    def __init__(self, store: IndicatorStore):
        self.store = store

    def handlers(self) -> dict[str, Handler]:
        return {
            "enable_indicator": self.enable,
            "disable_indicator": self.disable,
            "set_parameter": self.set_parameter,
            "add_indicator": self.add,
            "remove_indicator": self.remove,
        }

    def _replace_state(self, index: int, **changes):
        states = list(self.store.states)
        states[index] = states[index].model_copy(update=changes)
        self.store.replace_states(states)
        return states[index]

    def enable(self, cmd: ParsedCommand) -> ActionResult:
        name = cmd.indicator or ""
        idx = find_indicator_index(self.store.indicators, name)
        if idx is None:
            available = ", ".join(i.name for i in self.store.indicators)
            return ActionResult(
                False, "Enable Indicator", f'Indicator "{name}" not found. Available indicators: {available}'
            )
        ind = self.store.indicators[idx]
        st = self._replace_state(idx, enabled=True)
        return ActionResult(
            True,
            "Enable Indicator",
            f"✅ Enabled {ind.name} with {ind.param}: {num(st.value)}",
            {"indicator": ind, "state": st},
        )

    def disable(self, cmd: ParsedCommand) -> ActionResult:
        name = cmd.indicator or ""
        idx = find_indicator_index(self.store.indicators, name)
        if idx is None:
            return ActionResult(False, "Disable Indicator", f'Indicator "{name}" not found.')
        ind = self.store.indicators[idx]
        st = self._replace_state(idx, enabled=False)
        return ActionResult(True, "Disable Indicator", f"❌ Disabled {ind.name}", {"indicator": ind, "state": st})

    def set_parameter(self, cmd: ParsedCommand) -> ActionResult:
        name = cmd.indicator or ""
        idx = find_indicator_index(self.store.indicators, name)
        if idx is None:
            return ActionResult(False, "Set Parameter", f'Indicator "{name}" not found.')
        ind = self.store.indicators[idx]
        value = float(cmd.value) if cmd.value is not None else None
        if value is None or not (ind.min <= value <= ind.max):
            return ActionResult(
                False,
                "Set Parameter",
                f"Value {num(value) if value is not None else '(none)'} is out of range for {ind.name}. "
                f"Valid range: {num(ind.min)} - {num(ind.max)}",
            )
        st = self._replace_state(idx, value=value)
        return ActionResult(
            True, "Set Parameter", f"🔧 Set {ind.name} {ind.param} to {num(value)}", {"indicator": ind, "state": st}
        )

    # Chat-driven catalog edits are not supported; the API/CLI handle add and remove.

    def add(self, cmd: ParsedCommand) -> ActionResult:
        name = cmd.indicator or ""
        if any(name.lower() in i.name.lower() for i in self.store.indicators):
            return ActionResult(False, "Add Indicator", f'Indicator "{name}" already exists in your configuration.')
        return ActionResult(
            False,
            "Add Indicator",
            "Adding custom indicators is not yet implemented. You can enable existing indicators instead.",
        )

    def remove(self, cmd: ParsedCommand) -> ActionResult:
        name = cmd.indicator or ""
        if find_indicator_index(self.store.indicators, name) is None:
            return ActionResult(False, "Remove Indicator", f'Indicator "{name}" not found.')
        return ActionResult(
            False,
            "Remove Indicator",
            "Removing indicators is not yet implemented. You can disable them instead.",
        )


class TradingActions:
    def __init__(self, broker, *, default_quantity: float = 1):
        self.broker = broker
        self.default_quantity = default_quantity

    def handlers(self) -> dict[str, Handler]:
        return {
            "buy_stock": self.buy,
            "sell_stock": self.sell,
            "get_quote": self.quote,
            "get_positions": self.positions,
            "get_account": self.account,
            "market_status": self.market_status,
            "close_position": self.close_position,
            "cancel_order": self.cancel_orders,
        }

    def _place(self, action: str, side: str, cmd: ParsedCommand, qty: float) -> ActionResult:
        order_type = cmd.order_type or "market"
        limit_price = cmd.price if order_type == "limit" else None
        order = self.broker.place_order(
            symbol=cmd.symbol, qty=qty, side=side, type=order_type, limit_price=limit_price
        )
        at = f" at {money(limit_price)}" if limit_price else ""
        icon = "📈" if side == "buy" else "📉"
        return ActionResult(
            True,
            action,
            f"{icon} Placed {order_type} {side} order for {num(qty)} shares of {cmd.symbol}{at}. Order ID: {order.id}",
            {"order": order},
        )

    def buy(self, cmd: ParsedCommand) -> ActionResult:
        qty = cmd.quantity or self.default_quantity
        if cmd.order_type == "limit" and not cmd.price:
            return ActionResult(False, "Buy Stock", 'Limit orders require a price. Try: "Buy 10 AAPL at $150"')
        return self._place("Buy Stock", "buy", cmd, qty)

    def sell(self, cmd: ParsedCommand) -> ActionResult:
        qty = cmd.quantity
        if not qty:
            # no quantity: sell the whole position
            pos = self.broker.get_position(cmd.symbol)
            if pos is None:
                return ActionResult(False, "Sell Stock", f"You don't have any position in {cmd.symbol} to sell.")
            qty = abs(pos.qty)
        if cmd.order_type == "limit" and not cmd.price:
            return ActionResult(False, "Sell Stock", 'Limit orders require a price. Try: "Sell 10 AAPL at $150"')
        return self._place("Sell Stock", "sell", cmd, qty)

    def quote(self, cmd: ParsedCommand) -> ActionResult:
        symbol = cmd.symbol
        try:
            q = self.broker.get_latest_quote(symbol)
            t = self.broker.get_latest_trade(symbol)
        except Exception:
            return ActionResult(False, "Get Quote", f"Could not get quote for {symbol}. Please check the symbol is valid.")
        return ActionResult(True, "Get Quote", format_quote(symbol, q, t), {"quote": q, "trade": t})

    def positions(self, cmd: ParsedCommand) -> ActionResult:
        positions = self.broker.get_positions()
        if not positions:
            return ActionResult(True, "Get Positions", "📊 You currently have no open positions.", {"positions": []})
        return ActionResult(True, "Get Positions", format_positions(positions), {"positions": positions})

    def account(self, cmd: ParsedCommand) -> ActionResult:
        acct = self.broker.get_account()
        return ActionResult(True, "Get Account", format_account(acct), {"account": acct})

    def market_status(self, cmd: ParsedCommand) -> ActionResult:
        clock = self.broker.get_market_clock()
        return ActionResult(True, "Market Status", format_clock(clock), {"clock": clock})

    def close_position(self, cmd: ParsedCommand) -> ActionResult:
        pos = self.broker.get_position(cmd.symbol)
        if pos is None:
            return ActionResult(False, "Close Position", f"You don't have any position in {cmd.symbol} to close.")
        order = self.broker.close_position(cmd.symbol, cmd.quantity)
        closed = cmd.quantity or abs(pos.qty)
        return ActionResult(
            True,
            "Close Position",
            f"🔒 Closed {num(closed)} shares of {cmd.symbol} position. Order ID: {order.id}",
            {"order": order, "position": pos},
        )

    def cancel_orders(self, cmd: ParsedCommand) -> ActionResult:
        open_orders = self.broker.get_orders("open")
        if not open_orders:
            return ActionResult(True, "Cancel Orders", "📋 No open orders to cancel.", {"cancelled_count": 0})
        self.broker.cancel_all_orders()
        n = len(open_orders)
        return ActionResult(
            True, "Cancel Orders", f"❌ Cancelled {n} open order{'s' if n != 1 else ''}.", {"cancelled_count": n}
        )


class CommandExecutor:
    """Dispatches parsed commands to indicator or trading handlers.

    No exception escapes execute(); failures come back as ActionResult.
    """

    def __init__(self, store: IndicatorStore, broker=None, *, default_quantity: float = 1):
        self.handlers: dict[str, Handler] = IndicatorActions(store).handlers()
        if broker is not None:
            self.handlers.update(TradingActions(broker, default_quantity=default_quantity).handlers())

    def execute(self, cmd: ParsedCommand) -> ActionResult:
        handler = self.handlers.get(cmd.type)
        if handler is None:
            if cmd.type != "unknown" and cmd.type not in INDICATOR_COMMANDS:
                return ActionResult(False, "Trading", "Trading is not configured. Set broker API keys to enable it.")
            return ActionResult(False, "Unknown Command", UNKNOWN_DETAILS)
        try:
            return handler(cmd)
        except Exception as e:
            return ActionResult(False, "Error", f"An error occurred: {e}")
