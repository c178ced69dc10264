import json

import pytest
from pydantic import ValidationError

from vibebot.catalog.indicators import DEFAULT_INDICATORS
from vibebot.cli import build_parser
from vibebot.runtime import build_runtime, load_store, make_broker
from vibebot.util.bot_config import load_bot_config, save_bot_config
from vibebot.util.chat_log import append_chat_event, get_events, record_chat_event
from vibebot.util.config import AppConfig, Storage, load_config
from vibebot.util.env import Env, load_env


def test_missing_config_file_gives_defaults(tmp_path):
    cfg = load_config(tmp_path / "nope.yaml")
    assert cfg == AppConfig()
    assert cfg.assistant.default_quantity == 1
    assert cfg.dashboard.port == 8008


def test_config_yaml_sections(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "assistant:\n  default_quantity: 5\n  time_in_force: gtc\n"
        "indicators:\n  - {name: Custom, param: Period, min: 1, max: 9, default: 3}\n"
    )
    cfg = load_config(path)
    assert cfg.assistant.default_quantity == 5
    assert cfg.assistant.time_in_force == "gtc"
    assert cfg.indicators[0].name == "Custom"


def test_bad_config_value_rejected(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("assistant:\n  time_in_force: ioc\n")
    with pytest.raises(ValidationError):
        load_config(path)


def test_env_without_keys(monkeypatch):
    monkeypatch.setenv("APCA_API_KEY_ID", "")
    monkeypatch.setenv("APCA_API_SECRET_KEY", "")
    with pytest.raises(RuntimeError):
        load_env()
    assert load_env(require_keys=False).has_broker_keys is False


def test_make_broker_needs_keys_and_flag():
    cfg = AppConfig()
    assert make_broker(cfg, Env(key_id="", secret_key="", paper=True)) is None
    off = AppConfig.model_validate({"assistant": {"trading_enabled": False}})
    assert make_broker(off, Env(key_id="k", secret_key="s", paper=True)) is None


def test_bot_config_file(tmp_path):
    path = tmp_path / "bot_config.json"
    assert load_bot_config(path) == {"indicators": []}
    save_bot_config({"indicators": [{"name": "RSI", "value": 10, "enabled": True}]}, path)
    assert json.loads(path.read_text())["indicators"][0]["value"] == 10
    path.write_text(json.dumps({"indicators": [1, {"name": "x"}]}))
    assert load_bot_config(path) == {"indicators": [{"name": "x"}]}


def test_chat_log_newest_first(tmp_path):
    for i in range(3):
        append_chat_event(message=f"m{i}", command="unknown", actions=[], base_dir=tmp_path, ts=f"t{i}")
    with (tmp_path / "events.jsonl").open("a") as f:
        f.write("not json\n")
    events = get_events(limit=2, base_dir=tmp_path)
    assert [e["message"] for e in events] == ["m2", "m1"]
    assert get_events(base_dir=tmp_path / "empty") == []


def test_record_chat_event_never_raises(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    record_chat_event(message="x", command="unknown", actions=[], base_dir=blocker / "sub")


def test_runtime_persists_changes(tmp_path):
    cfg = AppConfig(storage=Storage(data_dir=str(tmp_path)))
    rt = build_runtime(cfg, log_messages=False)
    rt.assistant.process_message("enable RSI")
    rt.close()

    reloaded = load_store(cfg)
    assert reloaded.states[0].enabled is True
    assert [i.name for i in reloaded.indicators] == [i.name for i in DEFAULT_INDICATORS]

    rt.store.toggle(0)
    assert load_store(cfg).states[0].enabled is True


def test_runtime_logs_chat_when_enabled(tmp_path):
    cfg = AppConfig(storage=Storage(data_dir=str(tmp_path)))
    rt = build_runtime(cfg, persist=False)
    rt.assistant.process_message("help")
    assert get_events(base_dir=cfg.storage.chat_log_dir)[0]["message"] == "help"
    assert not cfg.storage.bot_config_path.exists()


def test_cli_parser():
    args = build_parser().parse_args(["chat", "-m", "enable RSI", "--no-trading"])
    assert args.message == "enable RSI"
    assert args.no_trading is True
    assert build_parser().parse_args(["dashboard", "--port", "9000"]).port == 9000
