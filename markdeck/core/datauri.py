"""Encoding and decoding of base64 data URIs."""

import base64
import binascii
import mimetypes
import re
from dataclasses import dataclass

from markdeck.core.models import InvalidInputError, MalformedInputError

DATA_URI_PATTERN = re.compile(r'^data:([\w.+-]+/[\w.+-]+);base64,([A-Za-z0-9+/=\s]*)$')

# mimetypes has no entry for these on some platforms, or a surprising one
_EXTENSION_OVERRIDES = {
    'image/jpeg': 'jpg',
    'image/svg+xml': 'svg',
    'image/webp': 'webp',
    'image/x-icon': 'ico',
}


@dataclass(frozen=True)
class DataUri:
    """Decoded content of a data URI."""
    mime_type: str
    data: bytes

    @property
    def extension(self) -> str:
        return extension_for(self.mime_type)


def encode(data: bytes, mime_type: str) -> str:
    """Build a ``data:<mime>;base64,<payload>`` string.

    Raises:
        InvalidInputError: if data or mime_type is empty
    """
    if not data or not mime_type:
        raise InvalidInputError("Missing data or type for data URI")
    if isinstance(data, str):
        data = data.encode('utf-8')
    payload = base64.b64encode(data).decode('ascii')
    return f"data:{mime_type};base64,{payload}"


def decode(data_uri: str) -> DataUri:
    """Parse a base64 data URI.

    Raises:
        MalformedInputError: if the string is not a base64 data URI
    """
    match = DATA_URI_PATTERN.match(data_uri.strip())
    if not match:
        raise MalformedInputError(f"Not a base64 data URI: {data_uri[:40]}")
    payload = re.sub(r'\s+', '', match.group(2))
    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise MalformedInputError(f"Invalid base64 payload: {e}") from e
    return DataUri(mime_type=match.group(1), data=data)


def extension_for(mime_type: str) -> str:
    """File extension (without dot) for a MIME type, ``jpeg`` normalized to ``jpg``."""
    mime_type = mime_type.lower()
    if mime_type in _EXTENSION_OVERRIDES:
        return _EXTENSION_OVERRIDES[mime_type]
    guessed = mimetypes.guess_extension(mime_type)
    if guessed:
        extension = guessed.lstrip('.')
    else:
        extension = mime_type.split('/')[-1].split('+')[0]
    return extension.replace('jpeg', 'jpg')


def guess_mime_type(name: str) -> str:
    """MIME type for a file name or URL path, ``application/octet-stream`` if unknown."""
    mime_type, _ = mimetypes.guess_type(name)
    return mime_type or 'application/octet-stream'
