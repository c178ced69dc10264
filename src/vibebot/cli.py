from __future__ import annotations

import argparse
from pathlib import Path

from vibebot.commands.chat import cmd_chat
from vibebot.commands.dashboard import cmd_dashboard
from vibebot.commands.indicators import cmd_indicators

DEFAULT_CONFIG = str(Path("config/config.yaml"))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="vibebot")
    sub = p.add_subparsers(dest="cmd", required=True)

    pc = sub.add_parser("chat", help="Talk to the configuration assistant")
    pc.add_argument("--config", default=DEFAULT_CONFIG, help="Path to config YAML")
    pc.add_argument("-m", "--message", default=None, help="Process one message and exit")
    pc.add_argument("--no-trading", action="store_true", help="Indicator commands only, even if broker keys are set")
    pc.set_defaults(func=cmd_chat)

    pi = sub.add_parser("indicators", help="List the indicator catalog and current states")
    pi.add_argument("--config", default=DEFAULT_CONFIG, help="Path to config YAML")
    pi.add_argument("--active", action="store_true", help="Only enabled indicators")
    pi.set_defaults(func=cmd_indicators)

    pd = sub.add_parser("dashboard", help="Run the config/chat HTTP API")
    pd.add_argument("--config", default=DEFAULT_CONFIG, help="Path to config YAML")
    pd.add_argument("--host", default=None, help="Overrides dashboard.host")
    pd.add_argument("--port", type=int, default=None, help="Overrides dashboard.port")
    pd.set_defaults(func=cmd_dashboard)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
