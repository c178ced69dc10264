from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


def _truthy(v: str) -> bool:
    return v.strip().lower() in ("1", "true", "yes", "y")


@dataclass(frozen=True)
class Env:
    key_id: str
    secret_key: str
    paper: bool

    @property
    def has_broker_keys(self) -> bool:
        return bool(self.key_id and self.secret_key)


def load_env(*, require_keys: bool = True) -> Env:
    # Loads from .env in cwd if present
    load_dotenv(override=False)

    key_id = os.getenv("APCA_API_KEY_ID", "").strip()
    secret = os.getenv("APCA_API_SECRET_KEY", "").strip()
    paper = _truthy(os.getenv("APCA_PAPER", "true"))

    if require_keys and (not key_id or not secret):
        raise RuntimeError("Missing APCA_API_KEY_ID / APCA_API_SECRET_KEY in environment")

    return Env(key_id=key_id, secret_key=secret, paper=paper)
