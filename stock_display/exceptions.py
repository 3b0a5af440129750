"""Error types raised by the chart pipeline."""
from __future__ import annotations

from typing import Any, Dict, Optional


class StockDisplayError(Exception):
    """Base class for stock display errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class MissingDataError(StockDisplayError):
    """Close prices are absent from the provider output.

    Aborts the current render pass only; the next poll retries.
    """


class PreconditionError(StockDisplayError):
    """A caller handed the renderer something it must never receive."""
