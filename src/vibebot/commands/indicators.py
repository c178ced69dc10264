from __future__ import annotations

import argparse

from rich import print
from rich.markup import escape

from vibebot.chat.formatting import num
from vibebot.runtime import load_store
from vibebot.util.config import load_config


def cmd_indicators(args: argparse.Namespace) -> int:
    store = load_store(load_config(args.config))
    rows = list(zip(store.indicators, store.states))
    if args.active:
        rows = [(ind, st) for ind, st in rows if st.enabled]
    if not rows:
        print("(no indicators)")
        return 0
    for ind, st in rows:
        flag = "[green]ON [/green]" if st.enabled else "[dim]off[/dim]"
        custom = " [cyan](custom)[/cyan]" if ind.custom else ""
        print(f"{flag} {escape(ind.name):48s} {escape(ind.param)}={num(st.value)}  [{num(ind.min)}..{num(ind.max)}]{custom}")
    print(f"\n{store.enabled_count()} of {len(store.indicators)} enabled")
    return 0
