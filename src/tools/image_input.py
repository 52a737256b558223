"""
Image input handling for extraction.

Accepts what a file picker or drag-and-drop hands over (raw bytes, or a
base64 data URL as produced by a browser FileReader) and resolves the MIME
type, sniffing it with PIL when the caller does not know it.
"""
import base64
import binascii
import io
from dataclasses import dataclass
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from .errors import ValidationError


NOT_AN_IMAGE = "Please upload an image file."


@dataclass(frozen=True)
class ImagePayload:
    """Decoded image bytes plus MIME type, ready to send inline."""
    data: bytes
    mime_type: str

    def __repr__(self) -> str:
        return f"ImagePayload({self.mime_type}, {len(self.data)} bytes)"


def decode_data_url(data_url: str) -> tuple[bytes, str]:
    """
    Split a base64 data URL into (bytes, mime_type).

    Raises:
        ValidationError: not a base64 data URL
    """
    header, sep, payload = data_url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValidationError(NOT_AN_IMAGE)

    mime_type = header[len("data:"):-len(";base64")]
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(NOT_AN_IMAGE) from e
    return data, mime_type


def sniff_mime_type(data: bytes) -> Optional[str]:
    """Identify the image format with PIL. Returns None if PIL can't read it."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.get_format_mimetype()
    except (UnidentifiedImageError, OSError):
        return None


def get_image_dimensions(data: bytes) -> tuple[int, int]:
    """
    Get image dimensions using PIL.

    Returns:
        (width, height) tuple, or (0, 0) if unable to read
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.size
    except (UnidentifiedImageError, OSError):
        return (0, 0)


def require_image(mime_type: Optional[str]) -> str:
    """
    Check that a MIME type names an image.

    Raises:
        ValidationError: missing or non-image MIME type
    """
    if not mime_type or not mime_type.lower().startswith("image/"):
        raise ValidationError(NOT_AN_IMAGE)
    return mime_type.lower()


def load_image(image: Union[bytes, str], mime_type: Optional[str] = None) -> ImagePayload:
    """
    Build an ImagePayload from raw bytes or a data URL.

    MIME type priority:
        1. mime_type argument
        2. data URL header
        3. sniffed from the bytes

    Raises:
        ValidationError: empty payload, or not an image
    """
    if isinstance(image, str):
        data, header_mime = decode_data_url(image)
        mime_type = mime_type or header_mime
    else:
        data = bytes(image)

    if not data:
        raise ValidationError(NOT_AN_IMAGE)

    if not mime_type:
        mime_type = sniff_mime_type(data)

    return ImagePayload(data=data, mime_type=require_image(mime_type))
