from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Callable

from vibebot.catalog.indicators import DEFAULT_INDICATORS, load_catalog, save_catalog
from vibebot.catalog.store import IndicatorStore
from vibebot.chat.assistant import ChatAssistant
from vibebot.util.bot_config import load_bot_config, save_bot_config
from vibebot.util.chat_log import record_chat_event
from vibebot.util.config import AppConfig
from vibebot.util.env import Env, load_env


@dataclass
class Runtime:
    """Application root: owns the store, the broker and the assistant."""

    config: AppConfig
    store: IndicatorStore
    assistant: ChatAssistant
    broker: object | None = None
    _teardown: list[Callable[[], None]] = field(default_factory=list)

    def close(self) -> None:
        while self._teardown:
            self._teardown.pop()()


def make_broker(cfg: AppConfig, env: Env | None = None):
    """AlpacaBroker when trading is enabled and keys are present, else None."""
    if not cfg.assistant.trading_enabled:
        return None
    env = env or load_env(require_keys=False)
    if not env.has_broker_keys:
        return None
    from vibebot.adapters.alpaca_client import AlpacaBroker, make_alpaca_clients

    return AlpacaBroker(make_alpaca_clients(env), time_in_force=cfg.assistant.time_in_force)


def load_store(cfg: AppConfig) -> IndicatorStore:
    paths = cfg.storage
    if paths.catalog_path.exists():
        indicators = load_catalog(paths.catalog_path)
    else:
        indicators = list(cfg.indicators or DEFAULT_INDICATORS)
    store = IndicatorStore(indicators)
    store.apply_config(load_bot_config(paths.bot_config_path))
    return store


def build_runtime(
    cfg: AppConfig,
    *,
    broker=None,
    log_messages: bool | None = None,
    persist: bool = True,
) -> Runtime:
    store = load_store(cfg)
    if log_messages is None:
        log_messages = cfg.assistant.log_messages
    log_event = None
    if log_messages:
        log_event = partial(record_chat_event, base_dir=cfg.storage.chat_log_dir)
    assistant = ChatAssistant(
        store,
        broker,
        default_quantity=cfg.assistant.default_quantity,
        log_event=log_event,
    )
    rt = Runtime(config=cfg, store=store, assistant=assistant, broker=broker)

    if persist:
        def _save(s: IndicatorStore) -> None:
            save_bot_config(s.to_config(), cfg.storage.bot_config_path)
            save_catalog(s.indicators, cfg.storage.catalog_path)

        rt._teardown.append(store.subscribe(_save))
    return rt
