import json

import pytest
from pydantic import ValidationError

from vibebot.catalog.indicators import (
    DEFAULT_INDICATORS,
    Indicator,
    find_indicator_index,
    load_catalog,
    name_matches,
    save_catalog,
)
from vibebot.catalog.store import IndicatorState, IndicatorStore

RSI = DEFAULT_INDICATORS[0]


def test_default_catalog_is_consistent():
    assert len(DEFAULT_INDICATORS) == 30
    assert len({i.name for i in DEFAULT_INDICATORS}) == 30
    for ind in DEFAULT_INDICATORS:
        assert ind.min <= ind.default <= ind.max


def test_indicator_bounds_validated():
    with pytest.raises(ValidationError):
        Indicator(name="Broken", param="Period", min=10, max=5, default=7)
    with pytest.raises(ValidationError):
        Indicator(name="Broken", param="Period", min=2, max=5, default=7)


def test_name_matches_both_directions():
    assert name_matches("Bollinger Bands", "bollinger")
    assert name_matches("Donchian Channel", "donchian channel breakout")
    assert not name_matches("Donchian Channel", "keltner")


def test_exact_match_beats_loose_match():
    idx = find_indicator_index(DEFAULT_INDICATORS, "Simple Moving Average (SMA)")
    assert DEFAULT_INDICATORS[idx].name == "Simple Moving Average (SMA)"
    assert find_indicator_index(DEFAULT_INDICATORS, "nothing like it") is None


def test_default_states_follow_catalog(store):
    assert len(store.states) == len(store.indicators)
    assert all(not s.enabled for s in store.states)
    assert store.states[0].value == 14


def test_length_mismatch_rejected():
    with pytest.raises(ValueError):
        IndicatorStore([RSI], [])


def test_replace_swaps_tuples_and_notifies(rsi_store):
    seen = []
    unsubscribe = rsi_store.subscribe(lambda s: seen.append(s.states))
    before = rsi_store.states
    rsi_store.toggle(0)
    assert rsi_store.states is not before
    assert before[0].enabled is False
    assert seen == [rsi_store.states]

    unsubscribe()
    rsi_store.toggle(0)
    assert len(seen) == 1


def test_set_value_bounds(rsi_store):
    assert rsi_store.set_value(0, 20).value == 20
    with pytest.raises(ValueError):
        rsi_store.set_value(0, 51)
    assert rsi_store.states[0].value == 20


def test_add_and_remove_indicator(rsi_store):
    custom = Indicator(name="My Oscillator", param="Length", min=1, max=10, default=3, custom=True)
    rsi_store.add_indicator(custom)
    assert rsi_store.indicators[-1] == custom
    assert rsi_store.states[-1] == IndicatorState(enabled=False, value=3)

    with pytest.raises(ValueError):
        rsi_store.add_indicator(custom)

    assert rsi_store.remove_indicator("my oscillator") == custom
    assert len(rsi_store.indicators) == len(rsi_store.states) == 1
    with pytest.raises(KeyError):
        rsi_store.remove_indicator("my oscillator")


def test_config_roundtrip_by_name(store):
    store.set_value(0, 21)
    store.toggle(0)
    cfg = store.to_config()

    fresh = IndicatorStore(DEFAULT_INDICATORS)
    fresh.apply_config(cfg)
    assert fresh.states == store.states


def test_apply_config_clamps_to_default(rsi_store):
    rsi_store.apply_config(
        {"indicators": [{"name": "Relative Strength Index (RSI)", "value": 500, "enabled": True}, {"name": "Nope"}]}
    )
    assert rsi_store.states[0] == IndicatorState(enabled=True, value=14)


def test_active_and_count(store):
    store.toggle(2)
    store.toggle(4)
    assert store.enabled_count() == 2
    assert [ind.name for ind, _ in store.active()] == ["Simple Moving Average (SMA)", "Bollinger Bands"]


def test_catalog_file_roundtrip(tmp_path):
    path = tmp_path / "indicators.json"
    assert load_catalog(path) == list(DEFAULT_INDICATORS)

    save_catalog([RSI], path)
    assert json.loads(path.read_text())[0]["name"] == RSI.name
    assert load_catalog(path) == [RSI]


def test_failed_subscriber_rolls_back(rsi_store):
    def boom(_store):
        raise OSError("disk full")

    before = rsi_store.states
    rsi_store.subscribe(boom)
    with pytest.raises(OSError):
        rsi_store.toggle(0)
    assert rsi_store.states is before
    with pytest.raises(OSError):
        rsi_store.add_indicator(Indicator(name="Extra", param="Length", min=1, max=5, default=2))
    assert len(rsi_store.indicators) == len(rsi_store.states) == 1


def test_nan_is_never_stored(rsi_store):
    with pytest.raises(ValueError):
        rsi_store.set_value(0, float("nan"))
    rsi_store.apply_config({"indicators": [{"name": RSI.name, "value": "nan", "enabled": True}]})
    assert rsi_store.states[0] == IndicatorState(enabled=True, value=14)
