"""Frame output helpers for the board emulator."""

from __future__ import annotations

from pathlib import Path

from PIL import Image

DEFAULT_FRAME_PATH = "emulator_output/board.png"


def save_frame(image: Image.Image, path: str = DEFAULT_FRAME_PATH) -> Path:
    """Save a frame to disk as a PNG image and return its path."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(output_path, format="PNG")
    return output_path


__all__ = ["DEFAULT_FRAME_PATH", "save_frame"]
