"""Fixed 16-color palette shared by the canvas and the display surfaces."""
from __future__ import annotations

from typing import Dict, List, Tuple

RGB = Tuple[int, int, int]

# Order defines the palette index stored in the canvas.
_COLORS: List[Tuple[str, RGB]] = [
    ("white", (240, 240, 240)),
    ("orange", (242, 178, 51)),
    ("magenta", (229, 127, 216)),
    ("lightBlue", (153, 178, 242)),
    ("yellow", (222, 222, 108)),
    ("lime", (127, 204, 25)),
    ("pink", (242, 178, 204)),
    ("gray", (76, 76, 76)),
    ("lightGray", (153, 153, 153)),
    ("cyan", (76, 153, 178)),
    ("purple", (178, 102, 229)),
    ("blue", (51, 102, 204)),
    ("brown", (127, 102, 76)),
    ("green", (87, 166, 78)),
    ("red", (204, 76, 76)),
    ("black", (17, 17, 17)),
]

COLOR_NAMES: List[str] = [name for name, _ in _COLORS]
_INDEX: Dict[str, int] = {name: idx for idx, (name, _) in enumerate(_COLORS)}


def color_index(name: str) -> int:
    """Return the palette index for ``name``."""
    try:
        return _INDEX[name]
    except KeyError:
        raise ValueError(
            f"Unknown color {name!r}; expected one of {', '.join(COLOR_NAMES)}"
        ) from None


def color_rgb(index: int) -> RGB:
    return _COLORS[index][1]


def color_name(index: int) -> str:
    return _COLORS[index][0]
