"""Writes generated media to disk so the terminal can show a path."""

import logging
import re
import time
from pathlib import Path

from ..jobs import VideoResult
from ..llm import ImagePayload

logger = logging.getLogger(__name__)

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(text: str, max_length: int = 40) -> str:
    """File-name friendly version of a prompt."""
    slug = _SLUG_PATTERN.sub("-", text.lower()).strip("-")
    return slug[:max_length].rstrip("-") or "output"


def _target(output_dir: Path, stem: str, extension: str) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / f"{stem}-{int(time.time() * 1000)}.{extension}"


def save_images(images: list[ImagePayload], output_dir: str | Path, label: str) -> list[Path]:
    """Write each image and return the paths, in order."""
    output_dir = Path(output_dir)
    paths = []
    for i, image in enumerate(images, 1):
        path = _target(output_dir, f"{slugify(label)}-{i}", image.extension)
        path.write_bytes(image.data)
        logger.info("Saved image to %s", path)
        paths.append(path)
    return paths


def save_video(video: VideoResult, output_dir: str | Path, label: str) -> Path:
    path = _target(Path(output_dir), slugify(label), "mp4")
    path.write_bytes(video.data)
    logger.info("Saved video to %s", path)
    return path
