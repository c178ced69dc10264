from __future__ import annotations

import argparse

import uvicorn

from vibebot.dashboard.app import create_app
from vibebot.util.config import load_config


def cmd_dashboard(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    host = args.host or cfg.dashboard.host
    port = args.port or cfg.dashboard.port
    app = create_app(config_path=args.config)
    uvicorn.run(app, host=host, port=port, log_level="info")
    return 0
