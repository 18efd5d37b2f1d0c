import base64
import binascii
from dataclasses import dataclass
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from billedy.config import settings

FORMAT_TO_MEDIA_TYPE = {
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}


class InvalidImageError(ValueError):
    pass


@dataclass(frozen=True)
class ImageInfo:
    mime_type: str
    width: int
    height: int


def split_data_url(data: str) -> tuple[str | None, str]:
    if data.startswith("data:") and ";base64," in data:
        header, payload = data.split(";base64,", 1)
        return header[len("data:"):] or None, payload
    return None, data


def detect_mime_type(image_bytes: bytes) -> str:
    fmt = _detect_image_format(image_bytes)
    return FORMAT_TO_MEDIA_TYPE.get(fmt, "image/jpeg")


def _detect_image_format(image_bytes: bytes) -> str:
    if image_bytes[:8] == b"\x89PNG\r\n\x1a\n":
        return "png"
    if image_bytes[:2] == b"\xff\xd8":
        return "jpeg"
    if image_bytes[:6] in (b"GIF87a", b"GIF89a"):
        return "gif"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "webp"
    return "jpeg"


def _decode(payload: str) -> bytes:
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidImageError("Image data is not valid base64") from e


def inspect_image(data: str, max_bytes: int | None = None) -> ImageInfo:
    limit = settings.max_upload_bytes if max_bytes is None else max_bytes
    _, payload = split_data_url(data)
    image_bytes = _decode(payload)
    if not image_bytes:
        raise InvalidImageError("Image data is empty")
    if len(image_bytes) > limit:
        raise InvalidImageError(f"Image exceeds {limit} bytes")
    try:
        img = Image.open(BytesIO(image_bytes))
        img.verify()
    except Image.DecompressionBombError as e:
        raise InvalidImageError("Image dimensions too large") from e
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise InvalidImageError("Data is not a supported image") from e
    width, height = img.size
    return ImageInfo(mime_type=detect_mime_type(image_bytes), width=width, height=height)


def to_data_url(data: str) -> str:
    mime_type, payload = split_data_url(data)
    if mime_type:
        return data
    return f"data:{detect_mime_type(_decode(payload))};base64,{payload}"
