"""Fetch response: messages delivered by a broker for topic partitions."""

from __future__ import annotations

import gzip
from dataclasses import dataclass, field

from .errors import (
    KafkaCode,
    KafkaError,
    UnexpectedEOFError,
    UnsupportedCompressionError,
    UnsupportedProtocolError,
    error_from_protocol,
)
from .fetch_request import FetchRequest, TopicPartitionFetchRequest
from .wire import Compression, to_crc
from .zreader import ZReader

_COMPRESSION_MASK = 0x07


def _signed32(value: int) -> int:
    return value - (1 << 32) if value >= (1 << 31) else value


@dataclass(frozen=True)
class Message:
    """A fetched message and the offset it resides at in its partition.

    ``key`` and ``value`` are empty when the message carries no such data.
    """

    offset: int
    key: bytes
    value: bytes


@dataclass
class Data:
    """The successfully fetched payload of one partition."""

    highwatermark_offset: int
    messages: list[Message] = field(default_factory=list)


@dataclass
class Partition:
    """The fetch outcome for one partition: either data or a broker error."""

    partition: int
    data: Data | None = None
    error: KafkaError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class Topic:
    """The fetch outcomes for the requested partitions of one topic."""

    topic: str
    partitions: list[Partition] = field(default_factory=list)


def _read_protocol_message(raw: bytes, validate_crc: bool) -> tuple[int, bytes, bytes]:
    """Parse a raw message into (attributes, key, value); no decompression."""
    reader = ZReader(raw)
    msg_crc = reader.read_i32()
    if validate_crc and _signed32(to_crc(reader.rest())) != msg_crc:
        raise KafkaError(KafkaCode.CORRUPT_MESSAGE)
    # only the "zero" magic byte is supported (kafka 0.8 and 0.9)
    magic = reader.read_i8()
    if magic != 0:
        raise UnsupportedProtocolError(f"unsupported message magic byte: {magic}")
    attributes = reader.read_i8()
    key = reader.read_bytes()
    value = reader.read_bytes()
    return attributes, key, value


def parse_message_set(
    data: bytes, req_offset: int = 0, validate_crc: bool = False
) -> list[Message]:
    """Parse a message set, dropping messages below ``req_offset``.

    A trailing incomplete message is silently ignored. A gzip-compressed
    message is expanded and its content parsed as the message set.
    """
    reader = ZReader(data)
    messages: list[Message] = []
    while not reader.is_empty():
        try:
            offset = reader.read_i64()
            attributes, key, value = _read_protocol_message(
                reader.read_bytes(), validate_crc
            )
        except UnexpectedEOFError:
            # the last message may be cut off; consumers handle that
            break
        codec = attributes & _COMPRESSION_MASK
        if codec == Compression.NONE:
            if offset >= req_offset:
                messages.append(Message(offset, key, value))
        elif codec == Compression.GZIP:
            return parse_message_set(gzip.decompress(value), req_offset, validate_crc)
        else:
            raise UnsupportedCompressionError(f"unsupported compression codec: {codec}")
    return messages


def _read_partition(
    reader: ZReader,
    requests: TopicPartitionFetchRequest | None,
    validate_crc: bool,
) -> Partition:
    partition = reader.read_i32()
    request = requests.get(partition) if requests is not None else None
    req_offset = request.offset if request is not None else 0
    error = error_from_protocol(reader.read_i16())
    # the rest is read even on error to consume the input
    highwatermark = reader.read_i64()
    messages = parse_message_set(reader.read_bytes(), req_offset, validate_crc)
    if error is not None:
        return Partition(partition, error=error)
    return Partition(partition, data=Data(highwatermark, messages))


def _read_topic(
    reader: ZReader, requests: FetchRequest | None, validate_crc: bool
) -> Topic:
    name = reader.read_str()
    partition_requests = requests.get(name) if requests is not None else None
    partitions = reader.read_array(
        lambda r: _read_partition(r, partition_requests, validate_crc)
    )
    return Topic(name, partitions)


@dataclass
class Response:
    """A broker's answer to a fetch request, covering several topic partitions."""

    correlation_id: int
    topics: list[Topic] = field(default_factory=list)

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        requests: FetchRequest | None = None,
        validate_crc: bool = False,
    ) -> "Response":
        """Parse a fetch response; ``requests`` supplies the requested offsets."""
        reader = ZReader(data)
        correlation_id = reader.read_i32()
        topics = reader.read_array(lambda r: _read_topic(r, requests, validate_crc))
        return cls(correlation_id, topics)


@dataclass
class ResponseParser:
    """Parses raw fetch responses against the request that produced them."""

    validate_crc: bool = False
    requests: FetchRequest | None = None

    def parse(self, response: bytes) -> Response:
        return Response.from_bytes(response, self.requests, self.validate_crc)