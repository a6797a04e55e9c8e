"""Text encoding helpers shared by build files and README output."""

from __future__ import annotations

RAW_ENCODING = "raw"
DEFAULT_ENCODING = "UTF-8"


def is_raw(encoding: str | None) -> bool:
    return encoding is None or encoding.lower() in (RAW_ENCODING, "bytes")


def encode_content(content: str, encoding: str | None) -> bytes:
    """Encode ``content`` with ``encoding``; raw content passes through.

    Raw content was decoded with ``surrogateescape`` so undecodable bytes
    come back out unchanged.
    """

    if is_raw(encoding):
        return content.encode("utf-8", "surrogateescape")
    return content.encode(encoding)  # type: ignore[arg-type]


def decode_content(payload: bytes) -> tuple[str, str]:
    """Return ``(text, encoding)`` for bytes read from disk."""

    try:
        return payload.decode("utf-8"), DEFAULT_ENCODING
    except UnicodeDecodeError:
        return payload.decode("utf-8", "surrogateescape"), RAW_ENCODING


__all__ = [
    "DEFAULT_ENCODING",
    "RAW_ENCODING",
    "decode_content",
    "encode_content",
    "is_raw",
]
