"""Writes rendered frames to disk as PNG."""

import logging
import os
from pathlib import Path

from PIL import Image

log = logging.getLogger("cubetimer.ui.frame_writer")


class FrameWriter:
    """Saves each frame to ``path``, replacing the previous one atomically."""

    def __init__(self, path):
        self.path = Path(path).expanduser()
        self.frames_written = 0

    def send_frame(self, img: Image.Image) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(f".{self.path.name}.tmp")
        img.save(tmp, format="PNG")
        os.replace(tmp, self.path)
        self.frames_written += 1
        if self.frames_written == 1:
            log.info("Writing frames to %s", self.path)
