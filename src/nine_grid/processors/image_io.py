"""Image I/O utilities for decoding, encoding and saving images."""

from pathlib import Path
from typing import List, Union

import cv2
import numpy as np

from ..exceptions import ImageDecodeError, ImageEncodeError, ImageSaveError

DEFAULT_JPEG_QUALITY = 95

IMAGE_EXTENSIONS = [".jpg", ".jpeg", ".png", ".webp", ".tiff", ".tif", ".bmp"]


def decode_image(data: bytes) -> np.ndarray:
    """Decode raw image bytes into a BGR raster.

    Alpha is dropped on decode; it never takes part in border detection.

    Args:
        data: Encoded image bytes in any format OpenCV understands

    Returns:
        numpy array of shape (H, W, 3)

    Raises:
        ImageDecodeError: If the bytes are not a readable image
    """
    if not data:
        raise ImageDecodeError("Cannot decode empty image data")

    buffer = np.frombuffer(data, dtype=np.uint8)
    try:
        image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    except cv2.error as e:
        raise ImageDecodeError(f"Could not decode image: {e}", size=len(data))
    if image is None:
        raise ImageDecodeError("Could not decode image", size=len(data))
    return image


def encode_image(image: np.ndarray, quality: int = DEFAULT_JPEG_QUALITY) -> bytes:
    """Encode a raster as JPEG bytes.

    Args:
        image: Image array to encode
        quality: JPEG quality (1-100)

    Returns:
        Encoded JPEG bytes

    Raises:
        ImageEncodeError: If the raster cannot be serialized
    """
    if image is None or image.size == 0:
        raise ImageEncodeError("Cannot encode an empty image")

    try:
        ok, buffer = cv2.imencode(".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, int(quality)])
    except cv2.error as e:
        raise ImageEncodeError(f"Could not encode image: {e}", shape=image.shape)
    if not ok:
        raise ImageEncodeError("Could not encode image", shape=image.shape)
    return buffer.tobytes()


def load_image(image_path: Union[str, Path]) -> np.ndarray:
    """Load and decode an image file.

    Raises:
        ImageDecodeError: If the file is missing or cannot be decoded
    """
    path = Path(image_path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImageDecodeError(f"Could not read image: {e}", image_path=str(path))
    try:
        return decode_image(data)
    except ImageDecodeError as e:
        raise ImageDecodeError(e.message, image_path=str(path), **e.details)


def save_bytes(data: bytes, output_path: Path) -> None:
    """Write encoded image bytes to ``output_path``.

    Raises:
        ImageSaveError: If the file cannot be written
    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(data)
    except OSError as e:
        raise ImageSaveError(f"Could not save image: {e}", image_path=str(output_path))


def get_image_files(directory: Path) -> List[Path]:
    """Get all image files from directory.

    Args:
        directory: Directory to search for images

    Returns:
        List of paths to image files, sorted
    """
    image_files = set()  # Use set to avoid duplicates on case-insensitive filesystems

    for ext in IMAGE_EXTENSIONS:
        image_files.update(directory.glob(f"*{ext}"))
        image_files.update(directory.glob(f"*{ext.upper()}"))

    return sorted(image_files)
