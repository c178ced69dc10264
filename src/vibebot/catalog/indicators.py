from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, model_validator


CATALOG_PATH = Path("data/indicators.json")


class Indicator(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    param: str
    min: float
    max: float
    default: float
    step: float | None = None
    custom: bool = False

    @model_validator(mode="after")
    def _check_bounds(self) -> "Indicator":
        if not self.name.strip():
            raise ValueError("indicator name must not be empty")
        if self.min > self.max:
            raise ValueError(f"min {self.min} > max {self.max}")
        if not (self.min <= self.default <= self.max):
            raise ValueError(f"default {self.default} outside [{self.min}, {self.max}]")
        return self


def _ind(name: str, param: str, lo: float, hi: float, default: float, step: float | None = None) -> Indicator:
    return Indicator(name=name, param=param, min=lo, max=hi, default=default, step=step)


DEFAULT_INDICATORS: tuple[Indicator, ...] = (
    _ind("Relative Strength Index (RSI)", "Period", 2, 50, 14),
    _ind("Moving Average Convergence Divergence (MACD)", "Fast EMA", 2, 20, 12),
    _ind("Simple Moving Average (SMA)", "Period", 2, 200, 20),
    _ind("Exponential Moving Average (EMA)", "Period", 2, 200, 20),
    _ind("Bollinger Bands", "Period", 2, 50, 20),
    _ind("Stochastic Oscillator", "K Period", 2, 50, 14),
    _ind("Average True Range (ATR)", "Period", 2, 50, 14),
    _ind("Commodity Channel Index (CCI)", "Period", 2, 50, 20),
    _ind("Rate of Change (ROC)", "Period", 2, 50, 12),
    _ind("Williams %R", "Period", 2, 50, 14),
    _ind("Parabolic SAR", "Step", 0.01, 0.1, 0.02, step=0.01),
    _ind("Ichimoku Cloud", "Conversion Line", 2, 20, 9),
    _ind("Volume Weighted Average Price (VWAP)", "Session", 1, 10, 1),
    _ind("Pivot Points", "Period", 1, 30, 1),
    _ind("Donchian Channel", "Period", 2, 50, 20),
    _ind("Keltner Channel", "Period", 2, 50, 20),
    _ind("Chande Momentum Oscillator (CMO)", "Period", 2, 50, 14),
    _ind("Detrended Price Oscillator (DPO)", "Period", 2, 50, 20),
    _ind("Elder Ray Index", "Period", 2, 50, 13),
    _ind("Force Index", "Period", 2, 50, 13),
    _ind("Gann Fan", "Angle", 10, 90, 45),
    _ind("Hull Moving Average (HMA)", "Period", 2, 200, 20),
    _ind("Money Flow Index (MFI)", "Period", 2, 50, 14),
    _ind("On-Balance Volume (OBV)", "N/A", 0, 0, 0),
    _ind("Price Oscillator", "Short Period", 2, 50, 12),
    _ind("Price Rate of Change", "Period", 2, 50, 12),
    _ind("Standard Deviation", "Period", 2, 50, 20),
    _ind("TRIX", "Period", 2, 50, 15),
    _ind("Ultimate Oscillator", "Short Period", 2, 10, 7),
    _ind("Vortex Indicator", "Period", 2, 50, 14),
)


def name_matches(indicator_name: str, query: str) -> bool:
    """Loose match used by both the parser and the executor.

    True if the query is contained in the catalog name, or if the first word
    of the catalog name is contained in the query.
    """
    name = indicator_name.lower()
    q = query.lower()
    return q in name or name.split(" ")[0] in q


def find_indicator_index(indicators, query: str) -> int | None:
    # Exact name first, unlike the parser's alias lookup: the loose match alone
    # sends "Simple Moving Average (SMA)" to MACD ("moving" is MACD's first word).
    q = query.strip().lower()
    for i, ind in enumerate(indicators):
        if ind.name.lower() == q:
            return i
    for i, ind in enumerate(indicators):
        if name_matches(ind.name, query):
            return i
    return None


def load_catalog(path: Path = CATALOG_PATH) -> list[Indicator]:
    if not path.exists():
        return list(DEFAULT_INDICATORS)
    rows = json.loads(path.read_text()) or []
    return [Indicator.model_validate(r) for r in rows]


def save_catalog(indicators, path: Path = CATALOG_PATH) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps([ind.model_dump() for ind in indicators], indent=2))
