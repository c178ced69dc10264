from __future__ import annotations

from typing import Callable

from pydantic import BaseModel, ConfigDict

from vibebot.catalog.indicators import Indicator


class IndicatorState(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    value: float


Subscriber = Callable[["IndicatorStore"], None]


class IndicatorStore:
    """Indicator catalog plus the parallel states tuple.

    Every mutation swaps in whole new tuples and then notifies subscribers.
    Readers holding an older snapshot keep seeing it; the last write wins.
    """

    def __init__(self, indicators=(), states=None):
        indicators = tuple(indicators)
        if states is None:
            states = tuple(IndicatorState(enabled=False, value=ind.default) for ind in indicators)
        self._indicators: tuple[Indicator, ...] = ()
        self._states: tuple[IndicatorState, ...] = ()
        self._subscribers: list[Subscriber] = []
        self._set(indicators, tuple(states), notify=False)

    @property
    def indicators(self) -> tuple[Indicator, ...]:
        return self._indicators

    @property
    def states(self) -> tuple[IndicatorState, ...]:
        return self._states

    def subscribe(self, fn: Subscriber) -> Callable[[], None]:
        self._subscribers.append(fn)

        def _unsubscribe() -> None:
            if fn in self._subscribers:
                self._subscribers.remove(fn)

        return _unsubscribe

    def _set(self, indicators: tuple, states: tuple, *, notify: bool = True) -> None:
        if len(indicators) != len(states):
            raise ValueError(f"indicators/states length mismatch: {len(indicators)} != {len(states)}")
        previous = (self._indicators, self._states)
        self._indicators = indicators
        self._states = states
        if notify:
            try:
                for fn in list(self._subscribers):
                    fn(self)
            except Exception:
                # a failed subscriber (persistence) leaves the store as it was
                self._indicators, self._states = previous
                raise

    def replace_states(self, states) -> None:
        self._set(self._indicators, tuple(states))

    def replace(self, indicators, states) -> None:
        self._set(tuple(indicators), tuple(states))

    def reset(self) -> None:
        self._set((), ())

    # UI-style handlers

    def toggle(self, index: int) -> IndicatorState:
        cur = self._states[index]
        new = cur.model_copy(update={"enabled": not cur.enabled})
        self.replace_states(self._states[:index] + (new,) + self._states[index + 1 :])
        return new

    def set_value(self, index: int, value: float) -> IndicatorState:
        ind = self._indicators[index]
        if not (ind.min <= value <= ind.max):
            raise ValueError(f"value {value} outside [{ind.min}, {ind.max}] for {ind.name}")
        new = self._states[index].model_copy(update={"value": value})
        self.replace_states(self._states[:index] + (new,) + self._states[index + 1 :])
        return new

    def index_of(self, name: str) -> int | None:
        n = name.strip().lower()
        for i, ind in enumerate(self._indicators):
            if ind.name.lower() == n:
                return i
        return None

    def add_indicator(self, indicator: Indicator) -> None:
        if self.index_of(indicator.name) is not None:
            raise ValueError(f"indicator already exists: {indicator.name}")
        self.replace(
            self._indicators + (indicator,),
            self._states + (IndicatorState(enabled=False, value=indicator.default),),
        )

    def remove_indicator(self, name: str) -> Indicator:
        idx = self.index_of(name)
        if idx is None:
            raise KeyError(name)
        removed = self._indicators[idx]
        self.replace(
            self._indicators[:idx] + self._indicators[idx + 1 :],
            self._states[:idx] + self._states[idx + 1 :],
        )
        return removed

    # bot config payload: {"indicators": [{name, param, value, enabled}, ...]}

    def to_config(self) -> dict:
        return {
            "indicators": [
                {"name": ind.name, "param": ind.param, "value": st.value, "enabled": st.enabled}
                for ind, st in zip(self._indicators, self._states)
            ]
        }

    def apply_config(self, payload: dict | None) -> None:
        """Apply saved states by indicator name; unknown names are ignored."""
        saved: dict[str, dict] = {}
        for row in (payload or {}).get("indicators") or []:
            if isinstance(row, dict) and row.get("name"):
                saved[str(row["name"]).lower()] = row

        states = []
        for ind, st in zip(self._indicators, self._states):
            row = saved.get(ind.name.lower())
            if row is None:
                states.append(st)
                continue
            value = float(row.get("value", st.value))
            if not (ind.min <= value <= ind.max):
                value = ind.default
            states.append(IndicatorState(enabled=bool(row.get("enabled", False)), value=value))
        self.replace_states(states)

    def enabled_count(self) -> int:
        return sum(1 for s in self._states if s.enabled)

    def active(self) -> list[tuple[Indicator, IndicatorState]]:
        return [(ind, st) for ind, st in zip(self._indicators, self._states) if st.enabled]
