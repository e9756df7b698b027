"""Paint targets for rendered frames."""

from __future__ import annotations

import base64
from io import BytesIO
from pathlib import Path
from typing import Protocol

from PIL import Image

from .models import FrameBuffer

SURFACE_ID = "drawing-area"


class Surface(Protocol):
    def resize(self, width: int, height: int) -> None: ...

    def paint(self, frame: FrameBuffer) -> None: ...


def frame_to_image(frame: FrameBuffer) -> Image.Image:
    if frame.pixel_format != "RGBA8888":
        raise ValueError(f"Unsupported pixel format: {frame.pixel_format}")
    return Image.frombytes("RGBA", (frame.width, frame.height), frame.bytes)


class ImageSurface:
    """Offscreen surface that keeps the last painted frame as a Pillow image."""

    def __init__(self) -> None:
        self.width = 0
        self.height = 0
        self.image: Image.Image | None = None
        self.paint_count = 0

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.image = Image.new("RGBA", (width, height), (0, 0, 0, 0))

    def paint(self, frame: FrameBuffer) -> None:
        self.image = frame_to_image(frame)
        self.paint_count += 1

    def scaled(self, factor: int) -> Image.Image:
        if self.image is None:
            raise RuntimeError("Nothing has been painted yet")
        if factor <= 1:
            return self.image
        size = (self.image.width * factor, self.image.height * factor)
        return self.image.resize(size, resample=Image.NEAREST)

    def save(self, path: Path, scale: int = 1) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        self.scaled(scale).save(path, format="PNG")
        return path

    def data_url(self) -> str:
        buf = BytesIO()
        self.scaled(1).save(buf, format="PNG")
        b64 = base64.b64encode(buf.getvalue()).decode("ascii")
        return f"data:image/png;base64,{b64}"
