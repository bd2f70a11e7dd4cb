"""Timer screen.

Renders a PIL Image with the live time, scramble, tip, statistics,
recent solves and the progress chart.
"""

import logging
from PIL import Image, ImageDraw, ImageFont

from stopwatch.state_machine import TimerState
from ui.chart import ChartRenderer
from ui.display_state import DisplayState

log = logging.getLogger("cubetimer.ui.screens")

WIDTH = 960
HEIGHT = 540

# Colors
BG = (13, 17, 23)
TEXT = (201, 209, 217)
TEXT_DIM = (139, 148, 158)
ACCENT = (88, 166, 255)
PB_COLOR = (255, 166, 87)
SEPARATOR = (48, 54, 61)

STATE_COLORS = {
    TimerState.IDLE: TEXT,
    TimerState.READY: (63, 185, 80),
    TimerState.RUNNING: ACCENT,
    TimerState.STOPPED: PB_COLOR,
}

HISTORY_TOP = 262
ROW_H = 22
CHART_X = 390


class TimerScreen:
    """Renders the full timer view."""

    def __init__(self):
        self._font_time: ImageFont.FreeTypeFont | None = None
        self._font: ImageFont.FreeTypeFont | None = None
        self._font_small: ImageFont.FreeTypeFont | None = None
        self._load_fonts()
        self._chart = ChartRenderer(WIDTH - CHART_X - 10, HEIGHT - HISTORY_TOP - 10)

    def _load_fonts(self) -> None:
        try:
            self._font_time = ImageFont.truetype(
                "/usr/share/fonts/truetype/dejavu/DejaVuSansMono-Bold.ttf", 96
            )
            self._font = ImageFont.truetype(
                "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf", 16
            )
            self._font_small = ImageFont.truetype(
                "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", 13
            )
        except OSError:
            log.warning("DejaVu fonts not found, using Pillow's default font")
            self._font_time = ImageFont.load_default(size=96)
            self._font = ImageFont.load_default(size=16)
            self._font_small = ImageFont.load_default(size=13)

    def render(self, display: DisplayState) -> Image.Image:
        img = Image.new("RGB", (WIDTH, HEIGHT), BG)
        draw = ImageDraw.Draw(img)

        color = STATE_COLORS.get(display.timer_state, TEXT)
        draw.text((WIDTH // 2, 80), display.time_text, fill=color,
                  font=self._font_time, anchor="mm")

        draw.text((WIDTH // 2, 160), display.scramble, fill=TEXT,
                  font=self._font, anchor="mm")

        stats = display.stats
        draw.text(
            (WIDTH // 2, 196),
            f"Solves: {stats.count}    PB: {stats.pb_text}    Ao5: {stats.ao5_text}",
            fill=ACCENT, font=self._font, anchor="mm",
        )

        if display.tip is not None:
            draw.text((WIDTH // 2, 228), f"{display.tip.title}: {display.tip.text}"[:130],
                      fill=TEXT_DIM, font=self._font_small, anchor="mm")

        draw.line([(10, HISTORY_TOP - 12), (WIDTH - 10, HISTORY_TOP - 12)], fill=SEPARATOR)
        self._draw_history(draw, display)

        img.paste(self._chart.render(display.chart), (CHART_X, HISTORY_TOP))
        return img

    def _draw_history(self, draw: ImageDraw.ImageDraw, display: DisplayState) -> None:
        max_rows = (HEIGHT - HISTORY_TOP - 10) // ROW_H
        for i, row in enumerate(display.history[:max_rows]):
            y = HISTORY_TOP + i * ROW_H
            draw.text((14, y), f"{row.number:>4}", fill=TEXT_DIM, font=self._font)
            label = row.time_text + (" PB" if row.is_pb else "")
            draw.text((74, y), label, fill=PB_COLOR if row.is_pb else TEXT, font=self._font)
            draw.text((250, y + 2), row.date_text, fill=TEXT_DIM, font=self._font_small)
