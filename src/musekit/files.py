"""File input boundary.

Turns user-selected files into the payloads the service boundary expects:
images become ``ImagePayload`` (bytes + MIME type), documents become text.
"""

import mimetypes
from pathlib import Path

from .config import MAX_IMAGE_BYTES
from .errors import InputValidationError
from .llm.models import ImagePayload


def load_image(path: str | Path, max_bytes: int = MAX_IMAGE_BYTES) -> ImagePayload:
    """Read an image file for a vision or stylization request.

    Raises:
        InputValidationError: If the file is missing, not an image, or too large
    """
    path = Path(path)
    if not path.is_file():
        raise InputValidationError("Please upload an image to analyze.")

    mime_type, _ = mimetypes.guess_type(path.name)
    if not mime_type or not mime_type.startswith("image/"):
        raise InputValidationError("Please upload a valid image file.")

    if path.stat().st_size > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        raise InputValidationError(f"Please upload an image smaller than {limit_mb}MB.")

    return ImagePayload(data=path.read_bytes(), mime_type=mime_type)


def load_document(path: str | Path) -> str:
    """Read a plain-text document for analysis.

    Raises:
        InputValidationError: If the file is missing or not plain text
    """
    path = Path(path)
    mime_type, _ = mimetypes.guess_type(path.name)
    if not path.is_file() or mime_type != "text/plain":
        raise InputValidationError("Please upload a valid .txt file.")

    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InputValidationError("Please upload a valid .txt file.") from e


def load_source_file(path: str | Path) -> str:
    """Read a source file to debug. Any extension is accepted.

    Raises:
        InputValidationError: If the file is missing or not UTF-8 text
    """
    path = Path(path)
    if not path.is_file():
        raise InputValidationError("Please provide the code you want to debug.")

    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InputValidationError("Please provide a UTF-8 text file with the code to debug.") from e
