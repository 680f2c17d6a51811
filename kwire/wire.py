"""Shared protocol pieces: primitive encoders, headers and helpers."""

from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass
from datetime import timedelta
from enum import IntEnum
from typing import Callable, Iterable, TypeVar

from .errors import InvalidDurationError
from .zreader import ZReader

T = TypeVar("T")

API_KEY_PRODUCE = 0
API_KEY_FETCH = 1
API_KEY_OFFSET = 2
API_KEY_METADATA = 3
# 4-7 are reserved for non-public broker services
API_KEY_OFFSET_COMMIT = 8
API_KEY_OFFSET_FETCH = 9
API_KEY_GROUP_COORDINATOR = 10

API_VERSION = 0

I32_MAX = 2**31 - 1


class Compression(IntEnum):
    """Message compression codecs, as stored in the attribute bits."""

    NONE = 0
    GZIP = 1
    SNAPPY = 2


@dataclass(frozen=True)
class PartitionOffset:
    """An offset retrieved for a partition of an already known topic."""

    offset: int
    partition: int


def _pack(fmt: str, bits: int, value: int) -> bytes:
    low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    if not low <= value <= high:
        raise ValueError(f"{value} does not fit a signed {bits}-bit integer")
    return struct.pack(fmt, value)


def encode_i8(value: int) -> bytes:
    return _pack(">b", 8, value)


def encode_i16(value: int) -> bytes:
    return _pack(">h", 16, value)


def encode_i32(value: int) -> bytes:
    return _pack(">i", 32, value)


def encode_i64(value: int) -> bytes:
    return _pack(">q", 64, value)


def encode_str(value: str | None) -> bytes:
    """Encode a protocol string; None becomes the null string."""
    if value is None:
        return encode_i16(-1)
    raw = value.encode("utf-8")
    return encode_i16(len(raw)) + raw


def encode_bytes(value: bytes | None) -> bytes:
    """Encode protocol bytes; None becomes null bytes."""
    if value is None:
        return encode_i32(-1)
    return encode_i32(len(value)) + bytes(value)


def encode_array(items: Iterable[T], encode_item: Callable[[T], bytes]) -> bytes:
    """Encode a length-prefixed array of items."""
    parts = [encode_item(item) for item in items]
    return encode_i32(len(parts)) + b"".join(parts)


@dataclass
class HeaderRequest:
    """The header that starts every request."""

    api_key: int
    api_version: int
    correlation_id: int
    client_id: str

    def encode(self) -> bytes:
        return (
            encode_i16(self.api_key)
            + encode_i16(self.api_version)
            + encode_i32(self.correlation_id)
            + encode_str(self.client_id)
        )


@dataclass
class HeaderResponse:
    """The header that starts every response."""

    correlation: int = 0

    @classmethod
    def decode(cls, reader: ZReader) -> "HeaderResponse":
        return cls(correlation=reader.read_i32())


def to_crc(data: bytes) -> int:
    """Return the unsigned IEEE CRC-32 of ``data``."""
    return zlib.crc32(data) & 0xFFFFFFFF


def to_millis_i32(duration: timedelta) -> int:
    """Convert a duration to whole milliseconds fitting a signed 32-bit field."""
    if duration < timedelta(0):
        raise InvalidDurationError(f"negative duration: {duration}")
    seconds = duration.days * 86_400 + duration.seconds
    millis = seconds * 1_000 + duration.microseconds // 1_000
    if millis > I32_MAX:
        raise InvalidDurationError(f"duration too long: {duration}")
    return millis