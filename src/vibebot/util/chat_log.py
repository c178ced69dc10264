from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

BASE_DIR = Path("data/chat_log")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _json_default(x):
    if is_dataclass(x):
        return asdict(x)
    if hasattr(x, "model_dump"):
        return x.model_dump()
    return str(x)


def append_chat_event(
    *,
    message: str,
    command: str,
    actions: list[dict[str, Any]],
    base_dir: Path = BASE_DIR,
    ts: str | None = None,
) -> None:
    base_dir.mkdir(parents=True, exist_ok=True)
    row = {"ts": ts or _now_iso(), "message": message, "command": command, "actions": actions}
    with (base_dir / "events.jsonl").open("a", encoding="utf-8") as f:
        f.write(json.dumps(row, sort_keys=True, default=_json_default) + "\n")


def record_chat_event(**kwargs) -> None:
    """Fire-and-forget variant: a failed write never reaches the chat user."""
    try:
        append_chat_event(**kwargs)
    except Exception:
        pass


def get_events(*, limit: int = 200, base_dir: Path = BASE_DIR) -> list[dict[str, Any]]:
    path = base_dir / "events.jsonl"
    if not path.exists():
        return []
    rows: list[dict[str, Any]] = []
    for ln in path.read_text(encoding="utf-8").splitlines():
        if not ln.strip():
            continue
        try:
            rows.append(json.loads(ln))
        except Exception:
            continue
    rows = rows[-max(1, min(int(limit), 5000)) :]
    rows.reverse()
    return rows
