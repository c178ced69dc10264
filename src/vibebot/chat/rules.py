from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from vibebot.chat.extract import (
    extract_indicator_name,
    extract_number,
    extract_price,
    extract_quantity,
    extract_symbol,
)
from vibebot.chat.types import ParsedCommand

Predicate = Callable[[str], bool]
# (raw message, lower-cased message, indicator catalog) -> command or None
Builder = Callable[[str, str, tuple], "ParsedCommand | None"]


@dataclass(frozen=True)
class Rule:
    name: str
    predicate: Predicate
    build: Builder


def _any(*words: str) -> Predicate:
    return lambda low: any(w in low for w in words)


def _indicator_only(kind: str) -> Builder:
    def build(msg: str, low: str, catalog: tuple) -> ParsedCommand | None:
        ind = extract_indicator_name(msg, catalog)
        return ParsedCommand(type=kind, indicator=ind) if ind else None

    return build


def _set_parameter(msg: str, low: str, catalog: tuple) -> ParsedCommand | None:
    ind = extract_indicator_name(msg, catalog)
    value = extract_number(msg)
    if ind and value is not None:
        return ParsedCommand(type="set_parameter", indicator=ind, value=value)
    return None


def _order(side: str) -> Builder:
    def build(msg: str, low: str, catalog: tuple) -> ParsedCommand | None:
        symbol = extract_symbol(msg)
        if not symbol:
            return None
        return ParsedCommand(
            type=f"{side}_stock",
            symbol=symbol,
            quantity=extract_quantity(msg),
            price=extract_price(msg),
            order_type="limit" if "limit" in low else "market",
        )

    return build


def _symbol_only(kind: str, *, with_quantity: bool = False) -> Builder:
    def build(msg: str, low: str, catalog: tuple) -> ParsedCommand | None:
        symbol = extract_symbol(msg)
        if not symbol:
            return None
        qty = extract_number(msg) if with_quantity else None
        return ParsedCommand(type=kind, symbol=symbol, quantity=qty)

    return build


def _bare(kind: str) -> Builder:
    return lambda msg, low, catalog: ParsedCommand(type=kind)


INDICATOR_RULES: tuple[Rule, ...] = (
    Rule("enable_indicator", _any("enable", "turn on", "activate"), _indicator_only("enable_indicator")),
    Rule("disable_indicator", _any("disable", "turn off", "deactivate"), _indicator_only("disable_indicator")),
    Rule("set_parameter", _any("set", "change", "adjust"), _set_parameter),
    Rule(
        "add_indicator",
        lambda low: "add" in low and any(w in low for w in ("indicator", "rsi", "macd")),
        _indicator_only("add_indicator"),
    ),
    Rule("remove_indicator", _any("remove", "delete"), _indicator_only("remove_indicator")),
)

TRADING_RULES: tuple[Rule, ...] = (
    Rule("buy_stock", lambda low: "buy" in low and "buying power" not in low, _order("buy")),
    Rule("sell_stock", _any("sell"), _order("sell")),
    Rule("get_quote", _any("quote", "price"), _symbol_only("get_quote")),
    Rule("get_positions", lambda low: "position" in low and "close" not in low, _bare("get_positions")),
    Rule("get_account", _any("account", "balance", "buying power"), _bare("get_account")),
    Rule("market_status", lambda low: "market" in low and ("open" in low or "status" in low), _bare("market_status")),
    Rule(
        "close_position",
        lambda low: "close" in low and "position" in low,
        _symbol_only("close_position", with_quantity=True),
    ),
    Rule("cancel_order", _any("cancel"), _bare("cancel_order")),
)
