"""Entry point for the stock chart display."""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from stock_display.config_loader import AppConfig, load_config
from stock_display.runner import create_runner
from stock_display.selection import ensure_selection
from stock_display.utils import setup_logger


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Stock price chart display")
    parser.add_argument("--run", action="store_true", help="Poll and redraw until interrupted")
    parser.add_argument("--once", action="store_true", help="Draw a single update and exit")
    parser.add_argument("--select", action="store_true", help="Prompt for a new stock selection")
    parser.add_argument("--config", type=str, default="config.yaml", help="Path to config.yaml")
    parser.add_argument("--sample", action="store_true", help="Use generated sample data (offline)")
    parser.add_argument("--png", type=str, default=None, help="Write the chart to this PNG file")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logger = setup_logger("stock_display.main")
    if not (args.run or args.once or args.select):
        logger.error("Use --run, --once or --select")
        return 1

    _load_env_file()
    env = {"STOCK_DISPLAY_SAMPLE": "1" if args.sample else os.getenv("STOCK_DISPLAY_SAMPLE")}
    try:
        config = load_config(args.config) if Path(args.config).exists() else AppConfig()
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1

    selection = ensure_selection(config, force=args.select)
    if not (args.run or args.once):
        return 0

    runner = create_runner(config, env, selection, png_path=args.png)
    if args.once:
        return 0 if runner.run_once() is not None else 1
    logger.info("Running stock display for %s, hold Ctrl+C to stop", selection.symbol)
    runner.run_forever()
    return 0


def _load_env_file(path: str = ".env") -> None:
    if not os.path.exists(path):
        return
    with open(path, "r", encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            key, value = line.split("=", 1)
            if key and value:
                os.environ.setdefault(key.strip(), value.strip())


if __name__ == "__main__":
    sys.exit(main())
