from __future__ import annotations

import numpy as np


def _arr(xs) -> np.ndarray:
    a = np.asarray(list(xs), dtype=float)
    return a[np.isfinite(a)]


def sharpe(returns, *, risk_free: float = 0.0, ann_factor: float = 252.0) -> float | None:
    """Annualized Sharpe ratio of periodic returns; risk_free is an annual rate."""
    r = _arr(returns)
    if len(r) < 2:
        return None
    excess = r - risk_free / ann_factor
    sd = float(excess.std(ddof=1))
    if sd == 0:
        return None
    return float(excess.mean() / sd * np.sqrt(ann_factor))


def sortino(returns, *, risk_free: float = 0.0, ann_factor: float = 252.0) -> float | None:
    r = _arr(returns)
    if len(r) < 2:
        return None
    excess = r - risk_free / ann_factor
    downside = np.minimum(excess, 0.0)
    dd = float(np.sqrt((downside**2).mean()))
    if dd == 0:
        return None
    return float(excess.mean() / dd * np.sqrt(ann_factor))


def beta(returns, benchmark) -> float | None:
    r = np.asarray(list(returns), dtype=float)
    b = np.asarray(list(benchmark), dtype=float)
    n = min(len(r), len(b))
    if n < 2:
        return None
    r, b = r[-n:], b[-n:]
    var = float(b.var(ddof=1))
    if var == 0:
        return None
    return float(np.cov(r, b, ddof=1)[0, 1] / var)


def correlation(xs, ys) -> float | None:
    x = np.asarray(list(xs), dtype=float)
    y = np.asarray(list(ys), dtype=float)
    n = min(len(x), len(y))
    if n < 2:
        return None
    x, y = x[-n:], y[-n:]
    if x.std() == 0 or y.std() == 0:
        return None
    return float(np.corrcoef(x, y)[0, 1])


def value_at_risk(returns, *, confidence: float = 0.95) -> float | None:
    """Historical VaR as a positive loss fraction."""
    r = _arr(returns)
    if len(r) == 0:
        return None
    q = float(np.quantile(r, 1.0 - confidence))
    return max(0.0, -q)


def max_drawdown(returns) -> float:
    r = _arr(returns)
    if len(r) == 0:
        return 0.0
    equity = np.cumprod(1.0 + r)
    peak = np.maximum.accumulate(np.concatenate([[1.0], equity]))[1:]
    return float(((peak - equity) / peak).max())


def summarize(returns, benchmark=None, *, risk_free: float = 0.0, ann_factor: float = 252.0) -> dict:
    out = {
        "sharpe": sharpe(returns, risk_free=risk_free, ann_factor=ann_factor),
        "sortino": sortino(returns, risk_free=risk_free, ann_factor=ann_factor),
        "var_95": value_at_risk(returns, confidence=0.95),
        "var_99": value_at_risk(returns, confidence=0.99),
        "max_drawdown": max_drawdown(returns),
    }
    if benchmark is not None:
        out["beta"] = beta(returns, benchmark)
        out["correlation"] = correlation(returns, benchmark)
    return out
