from __future__ import annotations

import argparse

from rich import print
from rich.markup import escape

from vibebot.runtime import build_runtime, make_broker
from vibebot.util.config import load_config


def _show(reply) -> None:
    ok = all(a.success for a in reply.actions)
    tag = "[green]bot[/green]" if ok else "[yellow]bot[/yellow]"
    print(f"{tag}: {escape(reply.response)}")


def cmd_chat(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    broker = None if args.no_trading else make_broker(cfg)
    rt = build_runtime(cfg, broker=broker)
    try:
        mode = "indicators + trading" if rt.assistant.trading else "indicators only"
        if args.message:
            _show(rt.assistant.process_message(args.message))
            return 0

        print(f"[bold]vibebot[/bold] chat ({mode}); {rt.store.enabled_count()} active indicators. Ctrl-D to quit.")
        while True:
            try:
                line = input("you> ").strip()
            except (EOFError, KeyboardInterrupt):
                print()
                break
            if not line:
                continue
            if line.lower() in ("quit", "exit"):
                break
            _show(rt.assistant.process_message(line))
        return 0
    finally:
        rt.close()
