from __future__ import annotations

from typing import Callable

from vibebot.chat.rules import INDICATOR_RULES, TRADING_RULES, Rule
from vibebot.chat.types import UNKNOWN, ParsedCommand


class CommandParser:
    """Maps free-text chat input to a ParsedCommand.

    Rules are tried top to bottom; the first rule whose keywords match and
    whose builder manages to extract its payload wins. A rule whose keywords
    match but whose payload is missing falls through to the next rule.
    """

    def __init__(self, catalog: Callable[[], tuple], *, trading: bool = False):
        # catalog is read on every parse so the parser follows store updates
        self._catalog = catalog
        self.rules: tuple[Rule, ...] = INDICATOR_RULES + (TRADING_RULES if trading else ())

    def parse(self, message: str) -> ParsedCommand:
        low = message.lower()
        catalog = tuple(self._catalog())
        for rule in self.rules:
            if not rule.predicate(low):
                continue
            cmd = rule.build(message, low, catalog)
            if cmd is not None:
                return cmd
        return UNKNOWN
