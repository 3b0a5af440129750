"""Display surfaces that present a rendered canvas and its summary lines."""
from __future__ import annotations

import shutil
import sys
from pathlib import Path
from typing import IO, List, Optional, Sequence

from .charts import write_png
from .models import TextLine
from .palette import color_index, color_rgb
from .raster import Canvas
from .utils import setup_logger

HALF_BLOCK = "▀"
RESET = "\033[0m"


def _fg(index: int) -> str:
    r, g, b = color_rgb(index)
    return f"\033[38;2;{r};{g};{b}m"


def _bg(index: int) -> str:
    r, g, b = color_rgb(index)
    return f"\033[48;2;{r};{g};{b}m"


class BaseDisplay:
    """A fixed-size surface measured in text rows and fine pixels.

    ``v_res`` is the number of canvas pixels stacked in one text row, so the
    canvas handed to ``present`` is ``width`` by ``rows * v_res``.
    """

    v_res = 1

    def __init__(self, width: int, rows: int, background: Optional[int] = None) -> None:
        if width <= 0 or rows <= 1:
            raise ValueError(f"Display too small: width={width}, rows={rows}")
        self.width = width
        self.rows = rows
        self.background = color_index("black") if background is None else background

    @property
    def height(self) -> int:
        return self.rows * self.v_res

    def set_background(self, color: int) -> None:
        self.background = color

    def new_canvas(self) -> Canvas:
        return Canvas(self.width, self.height, background=self.background)

    def present(self, canvas: Canvas, lines: Sequence[TextLine]) -> None:
        raise NotImplementedError


class TerminalDisplay(BaseDisplay):
    """ANSI terminal; each character cell holds two vertical pixels."""

    v_res = 2

    def __init__(
        self,
        width: int,
        rows: int,
        background: Optional[int] = None,
        stream: Optional[IO[str]] = None,
    ) -> None:
        super().__init__(width, rows, background)
        self.stream = stream or sys.stdout

    @classmethod
    def from_terminal(cls, background: Optional[int] = None) -> "TerminalDisplay":
        size = shutil.get_terminal_size(fallback=(80, 24))
        # keep the last line free for the cursor
        return cls(size.columns, max(2, size.lines - 1), background)

    def compose(self, canvas: Canvas, lines: Sequence[TextLine]) -> List[str]:
        """Return one escaped string per terminal row, text over the first rows."""
        output: List[str] = []
        for row in range(self.rows):
            if row < len(lines):
                line = lines[row]
                text = line.text[: self.width].ljust(self.width)
                output.append(f"{_bg(self.background)}{_fg(line.color)}{text}{RESET}")
                continue
            top = canvas.pixels[row * 2]
            bottom = canvas.pixels[row * 2 + 1]
            cells = [
                f"{_fg(int(upper))}{_bg(int(lower))}{HALF_BLOCK}"
                for upper, lower in zip(top, bottom)
            ]
            output.append("".join(cells) + RESET)
        return output

    def present(self, canvas: Canvas, lines: Sequence[TextLine]) -> None:
        self.stream.write("\033[H\033[2J")
        self.stream.write("\n".join(self.compose(canvas, lines)))
        self.stream.write("\n")
        self.stream.flush()


class PngDisplay(BaseDisplay):
    """Headless surface writing each committed canvas to a PNG file."""

    v_res = 3

    def __init__(
        self,
        path: str | Path,
        width: int = 164,
        rows: int = 40,
        background: Optional[int] = None,
        scale: int = 4,
    ) -> None:
        super().__init__(width, rows, background)
        self.path = Path(path)
        self.scale = scale
        self.logger = setup_logger(__name__)

    def present(self, canvas: Canvas, lines: Sequence[TextLine]) -> None:
        write_png(canvas, self.path, scale=self.scale)
        for line in lines:
            self.logger.info("%s", line.text)
        self.logger.info("Chart written to %s", self.path)
