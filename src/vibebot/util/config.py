from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel

from vibebot.catalog.indicators import Indicator


class Assistant(BaseModel):
    # trading commands need broker keys in the environment as well
    trading_enabled: bool = True
    default_quantity: float = 1
    time_in_force: Literal["day", "gtc"] = "day"
    log_messages: bool = True


class Storage(BaseModel):
    data_dir: str = "data"

    @property
    def bot_config_path(self) -> Path:
        return Path(self.data_dir) / "bot_config.json"

    @property
    def catalog_path(self) -> Path:
        return Path(self.data_dir) / "indicators.json"

    @property
    def chat_log_dir(self) -> Path:
        return Path(self.data_dir) / "chat_log"


class Dashboard(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8008


class AppConfig(BaseModel):
    assistant: Assistant = Assistant()
    storage: Storage = Storage()
    dashboard: Dashboard = Dashboard()
    # Optional starting catalog; the built-in 30 indicators are used when unset.
    indicators: list[Indicator] | None = None


def load_config(path: str | Path) -> AppConfig:
    path = Path(path)
    if not path.exists():
        return AppConfig()
    data = yaml.safe_load(path.read_text()) or {}
    return AppConfig.model_validate(data)
