from __future__ import annotations

import math

from fastapi import HTTPException
from pydantic import ValidationError

from vibebot.catalog.indicators import Indicator


def validate_indicator_payload(payload: dict) -> Indicator:
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid indicator: expected an object")
    try:
        return Indicator.model_validate({**payload, "custom": True})
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid indicator: {e}")


def validate_bot_config_payload(payload: dict) -> dict:
    rows = (payload or {}).get("indicators") if isinstance(payload, dict) else None
    if not isinstance(rows, list):
        raise HTTPException(status_code=400, detail="Invalid config: 'indicators' must be a list")
    for r in rows:
        if not isinstance(r, dict) or not r.get("name"):
            raise HTTPException(status_code=400, detail="Invalid config: each indicator needs a name")
        try:
            value = float(r.get("value", 0))
        except (TypeError, ValueError):
            value = math.nan
        if not math.isfinite(value):
            raise HTTPException(status_code=400, detail=f"Invalid config: bad value for {r.get('name')}")
    return {"indicators": rows}


def float_list(payload: dict, key: str, *, required: bool = True) -> list[float] | None:
    xs = (payload or {}).get(key)
    if xs is None and not required:
        return None
    if not isinstance(xs, list) or not xs:
        raise HTTPException(status_code=400, detail=f"Missing {key}")
    try:
        return [float(x) for x in xs]
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"{key} must be numbers")
