"""Stock price chart display package."""

__all__ = [
    "charts",
    "config_loader",
    "data_provider",
    "display",
    "exceptions",
    "market",
    "models",
    "palette",
    "raster",
    "runner",
    "scaling",
    "selection",
    "series",
    "summary",
]
