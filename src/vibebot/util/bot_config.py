from __future__ import annotations

import json
from pathlib import Path

BOT_CONFIG_PATH = Path("data/bot_config.json")


def load_bot_config(path: Path = BOT_CONFIG_PATH) -> dict:
    if not path.exists():
        return {"indicators": []}
    obj = json.loads(path.read_text()) or {}
    rows = obj.get("indicators") or []
    if not isinstance(rows, list):
        rows = []
    return {"indicators": [r for r in rows if isinstance(r, dict)]}


def save_bot_config(payload: dict, path: Path = BOT_CONFIG_PATH) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"indicators": list(payload.get("indicators") or [])}, indent=2, sort_keys=True))
