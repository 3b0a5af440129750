"""Persisted choice of symbol, interval and range."""
from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from .config_loader import AppConfig
from .models import StockSelection
from .utils import load_json, save_json, setup_logger

logger = setup_logger(__name__)


def load_selection(path: str | Path) -> Optional[StockSelection]:
    """Read a saved selection, or None if the file does not exist."""
    path = Path(path)
    if not path.exists():
        return None
    try:
        (symbol, region), (interval, range_) = load_json(path)
    except (ValueError, TypeError) as exc:
        raise ValueError(f"Malformed selection file {path}: {exc}") from exc
    selection = StockSelection(symbol=symbol, region=region, interval=interval, range=range_)
    logger.info(
        "Parameters loaded %s (%s, %s, %s)",
        selection.symbol,
        selection.region,
        selection.interval,
        selection.range,
    )
    return selection


def save_selection(path: str | Path, selection: StockSelection) -> None:
    data = [[selection.symbol, selection.region], [selection.interval, selection.range]]
    save_json(Path(path), data)
    logger.info("Selected stock, interval, and range saved")


def _select_option(
    options: Sequence[Tuple[str, str]],
    label: str,
    input_fn: Callable[[str], str],
    output_fn: Callable[[str], None],
) -> Tuple[str, str]:
    output_fn(f"Select an option for the {label}")
    for idx, (first, second) in enumerate(options, start=1):
        output_fn(f"{idx}. {first}:{second}")
    while True:
        answer = input_fn("Enter the number you want to select: ").strip()
        if answer.isdigit() and 1 <= int(answer) <= len(options):
            return options[int(answer) - 1]
        output_fn(f"Invalid choice {answer!r}, pick 1-{len(options)}")


def prompt_selection(
    stocks: List[Tuple[str, str]],
    intervals: List[Tuple[str, str]],
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
) -> StockSelection:
    symbol, region = _select_option(stocks, "stock", input_fn, output_fn)
    logger.info("Selected %s:%s", symbol, region)
    interval, range_ = _select_option(intervals, "interval and range", input_fn, output_fn)
    logger.info("Selected %s:%s", interval, range_)
    return StockSelection(symbol=symbol, region=region, interval=interval, range=range_)


def ensure_selection(
    config: AppConfig,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[[str], None] = print,
    force: bool = False,
) -> StockSelection:
    """Return the saved selection, prompting (and saving) when there is none."""
    path = Path(config.selection.get("config_path", "selected_stock_config.json"))
    if not force:
        existing = load_selection(path)
        if existing is not None:
            return existing
    selection = prompt_selection(config.stock_choices(), config.interval_choices(), input_fn, output_fn)
    save_selection(path, selection)
    return selection
