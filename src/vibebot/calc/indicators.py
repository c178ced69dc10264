from __future__ import annotations

import numpy as np
import pandas as pd


def _clean(closes) -> pd.Series:
    return pd.Series(closes, dtype=float).dropna()


def sma(closes, n: int) -> float | None:
    n = int(n)
    if n <= 0:
        return None
    s = _clean(closes)
    if len(s) < n:
        return None
    return float(s.rolling(n).mean().iloc[-1])


def ema(closes, n: int) -> float | None:
    n = int(n)
    if n <= 0:
        return None
    s = _clean(closes)
    if len(s) < n:
        return None
    v = float(s.ewm(span=n, adjust=False).mean().iloc[-1])
    return v if np.isfinite(v) else None


def rsi(closes, n: int = 14) -> float | None:
    n = int(n)
    s = _clean(closes)
    if n <= 0 or len(s) < n + 1:
        return None
    delta = s.diff()
    gain = delta.clip(lower=0)
    loss = -delta.clip(upper=0)
    avg_gain = gain.rolling(n).mean().iloc[-1]
    avg_loss = loss.rolling(n).mean().iloc[-1]
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return float(100 - (100 / (1 + rs)))


def macd(closes, fast: int = 12, slow: int | None = None, signal: int | None = None) -> dict | None:
    """MACD line, signal line and histogram at the last bar.

    With only the fast period configured, slow and signal follow the usual
    12/26/9 proportions.
    """
    fast = int(fast)
    slow = int(slow) if slow else int(fast * 26 / 12)
    signal = int(signal) if signal else max(2, int(fast * 9 / 12))
    s = _clean(closes)
    if fast <= 0 or len(s) < slow:
        return None
    line = s.ewm(span=fast, adjust=False).mean() - s.ewm(span=slow, adjust=False).mean()
    sig = line.ewm(span=signal, adjust=False).mean()
    return {
        "macd": float(line.iloc[-1]),
        "signal": float(sig.iloc[-1]),
        "histogram": float(line.iloc[-1] - sig.iloc[-1]),
    }


def bollinger(closes, n: int = 20, k: float = 2.0) -> dict | None:
    n = int(n)
    s = _clean(closes)
    if n <= 0 or len(s) < n:
        return None
    window = s.tail(n)
    mid = float(window.mean())
    sd = float(window.std(ddof=0))
    return {"middle": mid, "upper": mid + k * sd, "lower": mid - k * sd}


def roc(closes, n: int) -> float | None:
    """Rate of change over n bars as fractional return."""
    n = int(n)
    s = _clean(closes)
    if n <= 0 or len(s) < n + 1:
        return None
    prev = float(s.iloc[-(n + 1)])
    if prev == 0:
        return None
    return float(s.iloc[-1] / prev - 1.0)


def stdev(closes, n: int) -> float | None:
    n = int(n)
    s = _clean(closes)
    if n <= 1 or len(s) < n:
        return None
    return float(s.tail(n).std(ddof=0))


def donchian(closes, n: int) -> dict | None:
    n = int(n)
    s = _clean(closes)
    if n <= 0 or len(s) < n:
        return None
    window = s.tail(n)
    return {"upper": float(window.max()), "lower": float(window.min())}


# Catalog-name keyword -> evaluator(closes, param value). Close-only indicators.
_EVALUATORS = (
    ("rsi", rsi),
    ("macd", macd),
    ("simple moving average", sma),
    ("exponential moving average", ema),
    ("bollinger", bollinger),
    ("rate of change", roc),
    ("standard deviation", stdev),
    ("donchian", donchian),
)


def evaluate_indicator(name: str, value: float, closes):
    """Latest value of a catalog indicator at its configured parameter.

    Raises KeyError for indicators that need more than closing prices.
    """
    low = name.lower()
    for key, fn in _EVALUATORS:
        if key in low:
            return fn(closes, value)
    raise KeyError(name)
