"""Data-URI helpers for project file payloads.

File contents travel inside the document as self-describing ``data:`` URIs so
they persist in the same blob as everything else.

Examples
--------
Encode and decode a payload:

>>> uri = encode_data_uri(b"hi", "text/plain")
>>> uri
'data:text/plain;base64,aGk='
>>> decode_data_uri(uri)
('text/plain', b'hi')
"""

from __future__ import annotations

import base64
import binascii
import datetime as dt
import mimetypes

from .commands import FileUpload

DEFAULT_MEDIA_TYPE = "application/octet-stream"
_DATA_URI_PREFIX = "data:"
_BASE64_MARKER = ";base64"


def encode_data_uri(content: bytes, media_type: str | None = None) -> str:
    """Return ``content`` as a base64 ``data:`` URI.

    Parameters
    ----------
    content : bytes
        Raw file bytes.
    media_type : str | None, optional
        Media type recorded in the URI; blank values use
        ``application/octet-stream``.

    Returns
    -------
    str
        URI of the form ``data:<media type>;base64,<body>``.
    """
    declared = (media_type or "").strip() or DEFAULT_MEDIA_TYPE
    body = base64.b64encode(content).decode("ascii")
    return f"{_DATA_URI_PREFIX}{declared}{_BASE64_MARKER},{body}"


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    """Split a base64 ``data:`` URI into its media type and bytes.

    Parameters
    ----------
    uri : str
        URI previously produced by :func:`encode_data_uri` or a browser.

    Returns
    -------
    tuple[str, bytes]
        Pair of ``(media_type, content)``.

    Raises
    ------
    ValueError
        If the URI is not a base64 ``data:`` URI or its body is not valid
        base64.
    """
    if not uri.startswith(_DATA_URI_PREFIX) or "," not in uri:
        msg = "Expected a data: URI with a comma-separated payload."
        raise ValueError(msg)
    header, body = uri[len(_DATA_URI_PREFIX) :].split(",", 1)
    if not header.endswith(_BASE64_MARKER):
        msg = "Only base64-encoded data: URIs are supported."
        raise ValueError(msg)
    media_type = header.removesuffix(_BASE64_MARKER) or DEFAULT_MEDIA_TYPE
    try:
        content = base64.b64decode(body, validate=True)
    except binascii.Error as exc:
        msg = f"Invalid base64 payload in data: URI: {exc}"
        raise ValueError(msg) from exc
    return media_type, content


def build_file_upload(
    name: str,
    content: bytes,
    *,
    media_type: str | None = None,
    last_modified: dt.datetime | None = None,
) -> FileUpload:
    """Build the payload of an ``UploadFile`` command from raw bytes.

    The media type is guessed from ``name`` when not given, and
    ``last_modified`` defaults to the current UTC time.
    """
    resolved_type = media_type or mimetypes.guess_type(name)[0] or DEFAULT_MEDIA_TYPE
    modified = last_modified or dt.datetime.now(dt.UTC)
    return FileUpload(
        name=name,
        media_type=resolved_type,
        size=len(content),
        last_modified=int(modified.timestamp() * 1000),
        content=encode_data_uri(content, resolved_type),
    )


__all__ = [
    "DEFAULT_MEDIA_TYPE",
    "build_file_upload",
    "decode_data_uri",
    "encode_data_uri",
]
