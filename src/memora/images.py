"""Image encoder: turn selected files into self-contained data URIs."""

from __future__ import annotations

import asyncio
import base64
import binascii
import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?:;[^,;]+=[^,;]+)*;base64,(?P<data>.*)$", re.DOTALL)


@dataclass(frozen=True)
class ImageData:
    """Raw image bytes plus MIME type, as sent inline to a generation API."""

    mime_type: str
    data: bytes

    @property
    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


def _guess_image_type(path: Path) -> str:
    mime, _ = mimetypes.guess_type(path.name)
    if not mime or not mime.startswith("image/"):
        raise ValueError(f"Not an image file: {path}")
    return mime


def _read_as_data_uri(path: Path) -> str:
    mime = _guess_image_type(path)
    payload = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{payload}"


async def encode_image(path: Path | str) -> str:
    """Read an image file into a `data:<mime>;base64,...` URI without blocking the loop."""
    path = Path(path).expanduser()
    if not path.is_file():
        raise FileNotFoundError(f"Image not found: {path}")
    return await asyncio.to_thread(_read_as_data_uri, path)


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def resolve_image(source: str) -> str:
    """Pass remote URLs and data URIs through; encode anything else as a local file."""
    if is_remote(source) or source.startswith("data:"):
        return source
    return await encode_image(source)


def decode_data_uri(uri: str) -> ImageData | None:
    """Split a base64 data URI. Remote URLs and malformed URIs give None."""
    match = _DATA_URI_RE.match(uri)
    if not match:
        return None
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError):
        return None
    return ImageData(mime_type=match.group("mime"), data=data)
