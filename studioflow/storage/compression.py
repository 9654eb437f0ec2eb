"""Compression helpers for stored workflow blobs.

Documents carry file payloads inline as data URIs, so stored blobs grow
quickly. Large blobs are stored Zstandard-compressed while small ones stay
as readable text.

Examples
--------
Compress and decode a blob:

>>> text_value, compressed = encode_blob_for_storage('{"channels": []}')
>>> decode_blob_from_storage(
...     text_value=text_value,
...     compressed_value=compressed,
...     field_name="state_blobs.example",
... )
'{"channels": []}'
"""

from __future__ import annotations

from compression import zstd

MINIMUM_COMPRESS_BYTES = 4096
COMPRESSED_BLOB_SENTINEL = "__zstd__"


def encode_blob_for_storage(
    blob: str,
    *,
    minimum_bytes: int = MINIMUM_COMPRESS_BYTES,
) -> tuple[str, bytes | None]:
    """Return storage values for a document blob.

    Parameters
    ----------
    blob : str
        Serialized document to store.
    minimum_bytes : int, default=MINIMUM_COMPRESS_BYTES
        UTF-8 byte threshold at or above which compression is considered.

    Returns
    -------
    tuple[str, bytes | None]
        Pair of ``(text_value, compressed_value)``. ``compressed_value`` is
        ``None`` when compression is not used; otherwise ``text_value`` is the
        sentinel marker.

    Raises
    ------
    ValueError
        If ``minimum_bytes`` is negative.
    """
    if minimum_bytes < 0:
        msg = "minimum_bytes must be non-negative."
        raise ValueError(msg)

    utf8_bytes = blob.encode("utf-8")
    if len(utf8_bytes) < minimum_bytes:
        return blob, None

    compressed = zstd.compress(utf8_bytes)
    if len(compressed) >= len(utf8_bytes):
        return blob, None
    return COMPRESSED_BLOB_SENTINEL, compressed


def decode_blob_from_storage(
    *,
    text_value: str,
    compressed_value: bytes | None,
    field_name: str,
) -> str:
    """Decode a possibly-compressed stored blob into text.

    Parameters
    ----------
    text_value : str
        Value stored in the text slot.
    compressed_value : bytes | None
        Value stored in the compressed slot.
    field_name : str
        Identifier of the stored blob used in error context.

    Returns
    -------
    str
        Decoded blob.

    Raises
    ------
    ValueError
        If the sentinel and compressed bytes disagree or decompression fails.
    """
    if compressed_value is None:
        if text_value == COMPRESSED_BLOB_SENTINEL:
            msg = (
                f"Inconsistent compressed blob marker for {field_name}: "
                "sentinel text value present without compressed bytes."
            )
            raise ValueError(msg)
        return text_value
    if text_value != COMPRESSED_BLOB_SENTINEL:
        msg = (
            f"Inconsistent compressed blob marker for {field_name}: "
            "expected sentinel text value."
        )
        raise ValueError(msg)
    return decompress_blob(compressed_value, field_name=field_name)


def decompress_blob(compressed_value: bytes, *, field_name: str) -> str:
    """Decompress a Zstandard blob into UTF-8 text.

    Raises
    ------
    ValueError
        If the bytes are not a valid Zstandard frame of UTF-8 text.
    """
    try:
        return zstd.decompress(compressed_value).decode("utf-8")
    except (UnicodeDecodeError, zstd.ZstdError) as exc:
        msg = (
            f"Failed to decompress stored blob for {field_name}: "
            f"{exc.__class__.__name__}: {exc}"
        )
        raise ValueError(msg) from exc
