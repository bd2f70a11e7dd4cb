"""Progress chart: solve times in seconds against solve number."""

import logging

import numpy as np
from PIL import Image, ImageDraw, ImageFont

log = logging.getLogger("cubetimer.ui.chart")

BG = (13, 17, 23)
GRID = (48, 54, 61)
LINE = (88, 166, 255)
FILL = (24, 44, 68)
POINT_FILL = (13, 17, 23)
TEXT_DIM = (139, 148, 158)

GRID_LINES = 4


class ChartRenderer:
    """Renders (index, seconds) points as a filled line chart."""

    def __init__(self, width: int = 560, height: int = 270):
        self.width = width
        self.height = height
        self.margin_left = 48
        self.margin_right = 12
        self.margin_top = 12
        self.margin_bottom = 28
        self._font = None
        self._load_fonts()

    def _load_fonts(self) -> None:
        try:
            self._font = ImageFont.truetype(
                "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf", 11
            )
        except OSError:
            self._font = ImageFont.load_default(size=11)

    @property
    def plot_box(self) -> tuple[int, int, int, int]:
        """(left, top, right, bottom) of the plotting area in pixels."""
        return (
            self.margin_left,
            self.margin_top,
            self.width - self.margin_right,
            self.height - self.margin_bottom,
        )

    def y_range(self, seconds: np.ndarray) -> tuple[float, float]:
        """Value range of the y axis. Does not start at zero."""
        lo, hi = float(seconds.min()), float(seconds.max())
        pad = (hi - lo) * 0.1 if hi > lo else max(1.0, hi * 0.1)
        return max(0.0, lo - pad), hi + pad

    def to_pixels(self, points) -> np.ndarray:
        """Map points into the plot box; returns an (n, 2) array of x, y."""
        left, top, right, bottom = self.plot_box
        data = np.asarray(points, dtype=float).reshape(-1, 2)
        xs, ys = data[:, 0], data[:, 1]
        if len(xs) == 1 or xs.min() == xs.max():
            px = np.full_like(xs, (left + right) / 2)
        else:
            px = np.interp(xs, [xs.min(), xs.max()], [left, right])
        y_lo, y_hi = self.y_range(ys)
        # screen y grows downwards
        py = np.interp(ys, [y_lo, y_hi], [bottom, top])
        return np.column_stack([px, py])

    def render(self, points) -> Image.Image:
        img = Image.new("RGB", (self.width, self.height), BG)
        draw = ImageDraw.Draw(img)
        left, top, right, bottom = self.plot_box

        if not points:
            draw.text(((left + right) // 2, (top + bottom) // 2), "No solves yet",
                      fill=TEXT_DIM, font=self._font, anchor="mm")
            return img

        seconds = np.asarray([p[1] for p in points], dtype=float)
        y_lo, y_hi = self.y_range(seconds)
        for i in range(GRID_LINES + 1):
            y = bottom - (bottom - top) * i / GRID_LINES
            value = y_lo + (y_hi - y_lo) * i / GRID_LINES
            draw.line([(left, y), (right, y)], fill=GRID)
            draw.text((left - 6, y), f"{value:.1f}s", fill=TEXT_DIM,
                      font=self._font, anchor="rm")

        first, last = points[0][0], points[-1][0]
        draw.text((left, bottom + 8), f"#{first}", fill=TEXT_DIM, font=self._font, anchor="lt")
        if last != first:
            draw.text((right, bottom + 8), f"#{last}", fill=TEXT_DIM, font=self._font, anchor="rt")

        xy = [tuple(p) for p in self.to_pixels(points).tolist()]
        if len(xy) > 1:
            area = [(xy[0][0], bottom)] + xy + [(xy[-1][0], bottom)]
            draw.polygon(area, fill=FILL)
            draw.line(xy, fill=LINE, width=2)
        radius = 4 if len(xy) <= 60 else 2
        for x, y in xy:
            draw.ellipse([x - radius, y - radius, x + radius, y + radius],
                         fill=POINT_FILL, outline=LINE)
        return img
