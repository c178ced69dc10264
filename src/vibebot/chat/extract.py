from __future__ import annotations

import re

from vibebot.catalog.indicators import name_matches

# Scanned in order; the first alias found in the message decides.
INDICATOR_ALIASES: tuple[str, ...] = (
    "rsi", "relative strength index",
    "macd", "moving average convergence divergence",
    "sma", "simple moving average",
    "ema", "exponential moving average",
    "bollinger bands", "bollinger",
    "stochastic", "stochastic oscillator",
    "atr", "average true range",
    "cci", "commodity channel index",
    "roc", "rate of change",
    "williams", "williams %r",
    "parabolic sar", "sar",
    "ichimoku", "ichimoku cloud",
    "vwap", "volume weighted average price",
    "pivot points", "pivot",
    "donchian", "donchian channel",
    "keltner", "keltner channel",
)

STOCK_NAMES: dict[str, str] = {
    "apple": "AAPL",
    "microsoft": "MSFT",
    "google": "GOOGL",
    "amazon": "AMZN",
    "tesla": "TSLA",
    "meta": "META",
    "nvidia": "NVDA",
    "netflix": "NFLX",
    "spotify": "SPOT",
    "uber": "UBER",
    "airbnb": "ABNB",
}

_NUMBER_RE = re.compile(r"\b\d+(\.\d+)?\b")
_SYMBOL_RE = re.compile(r"\b[A-Z]{2,5}\b")
_PRICE_RES = (
    re.compile(r"\$(\d+(?:\.\d+)?)"),
    re.compile(r"(?:at|price|limit)\s+(\d+(?:\.\d+)?)", re.IGNORECASE),
    re.compile(r"(\d+(?:\.\d+)?)\s*(?:dollars?|usd)", re.IGNORECASE),
)


def extract_indicator_name(message: str, indicators) -> str | None:
    lowered = message.lower()
    for alias in INDICATOR_ALIASES:
        if alias in lowered:
            for ind in indicators:
                if name_matches(ind.name, alias):
                    return ind.name
            return None
    return None


def extract_number(message: str) -> float | None:
    """Last number in the message; trailing numbers are taken as the target value."""
    matches = list(_NUMBER_RE.finditer(message))
    if not matches:
        return None
    return float(matches[-1].group(0))


def _price_match(message: str) -> re.Match | None:
    for pat in _PRICE_RES:
        m = pat.search(message)
        if m:
            return m
    return None


def extract_price(message: str) -> float | None:
    m = _price_match(message)
    return float(m.group(1)) if m else None


def extract_quantity(message: str) -> float | None:
    """Last number that does not overlap the price expression."""
    pm = _price_match(message)
    skip = pm.span(1) if pm else None
    qty = None
    for m in _NUMBER_RE.finditer(message):
        if skip and m.start() < skip[1] and m.end() > skip[0]:
            continue
        qty = float(m.group(0))
    return qty


def extract_symbol(message: str) -> str | None:
    m = _SYMBOL_RE.search(message)
    if m:
        return m.group(0)
    lowered = message.lower()
    for name, symbol in STOCK_NAMES.items():
        if name in lowered:
            return symbol
    return None
