"""Produce request and response."""

from __future__ import annotations

import gzip
from dataclasses import dataclass, field

from .errors import KafkaCode, UnsupportedCompressionError, kafka_code_from_protocol
from .wire import (
    API_KEY_PRODUCE,
    API_VERSION,
    Compression,
    HeaderRequest,
    HeaderResponse,
    encode_array,
    encode_bytes,
    encode_i8,
    encode_i16,
    encode_i32,
    encode_i64,
    encode_str,
    to_crc,
)
from .zreader import ZReader

MESSAGE_MAGIC_BYTE = 0
"""The magic byte (message format version) used for sent messages."""


def _signed32(value: int) -> int:
    return value - (1 << 32) if value >= (1 << 31) else value


@dataclass
class ProducePartitionConfirm:
    """The outcome for one partition: an offset, or the broker's error."""

    partition: int
    offset: int | None = None
    error: KafkaCode | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ProduceConfirm:
    """The outcomes for the partitions of one topic."""

    topic: str
    partition_confirms: list[ProducePartitionConfirm] = field(default_factory=list)


@dataclass
class MessageProduceRequest:
    """A single message to send."""

    key: bytes | None = None
    value: bytes | None = None

    def encode(self, magic: int, attributes: int) -> bytes:
        """Render as Offset MessageSize Crc MagicByte Attributes Key Value."""
        body = (
            encode_i8(magic)
            + encode_i8(attributes)
            + encode_bytes(self.key)
            + encode_bytes(self.value)
        )
        message = encode_i32(_signed32(to_crc(body))) + body
        return encode_i64(0) + encode_i32(len(message)) + message


@dataclass
class PartitionProduceRequest:
    """The messages to send to one partition."""

    partition: int
    messages: list[MessageProduceRequest] = field(default_factory=list)

    def add(self, key: bytes | None, value: bytes | None) -> None:
        self.messages.append(MessageProduceRequest(key, value))

    def encode(self, compression: Compression) -> bytes:
        """Render as Partition MessageSetSize MessageSet."""
        message_set = b"".join(
            msg.encode(MESSAGE_MAGIC_BYTE, 0) for msg in self.messages
        )
        if compression == Compression.GZIP:
            cdata = gzip.compress(message_set, mtime=0)
            message_set = MessageProduceRequest(None, cdata).encode(
                MESSAGE_MAGIC_BYTE, int(compression)
            )
        elif compression != Compression.NONE:
            raise UnsupportedCompressionError(
                f"unsupported compression: {Compression(compression).name}"
            )
        return encode_i32(self.partition) + encode_bytes(message_set)


@dataclass
class TopicPartitionProduceRequest:
    """The messages to send to the partitions of one topic."""

    topic: str
    compression: Compression = Compression.NONE
    partitions: list[PartitionProduceRequest] = field(default_factory=list)

    def add(self, partition: int, key: bytes | None, value: bytes | None) -> None:
        for pp in self.partitions:
            if pp.partition == partition:
                pp.add(key, value)
                return
        pp = PartitionProduceRequest(partition)
        pp.add(key, value)
        self.partitions.append(pp)

    def encode(self) -> bytes:
        return encode_str(self.topic) + encode_array(
            self.partitions, lambda pp: pp.encode(self.compression)
        )


@dataclass
class ProduceRequest:
    """Sends messages to a broker."""

    required_acks: int
    timeout: int
    correlation_id: int
    client_id: str
    compression: Compression = Compression.NONE
    topic_partitions: list[TopicPartitionProduceRequest] = field(default_factory=list)
    header: HeaderRequest = field(init=False)

    def __post_init__(self) -> None:
        self.header = HeaderRequest(
            API_KEY_PRODUCE, API_VERSION, self.correlation_id, self.client_id
        )

    def add(
        self, topic: str, partition: int, key: bytes | None, value: bytes | None
    ) -> None:
        for tp in self.topic_partitions:
            if tp.topic == topic:
                tp.add(partition, key, value)
                return
        tp = TopicPartitionProduceRequest(topic, self.compression)
        tp.add(partition, key, value)
        self.topic_partitions.append(tp)

    def encode(self) -> bytes:
        return (
            self.header.encode()
            + encode_i16(self.required_acks)
            + encode_i32(self.timeout)
            + encode_array(self.topic_partitions, TopicPartitionProduceRequest.encode)
        )


@dataclass
class PartitionProduceResponse:
    """The broker's outcome for one partition."""

    partition: int = 0
    error: int = 0
    offset: int = 0

    @classmethod
    def decode(cls, reader: ZReader) -> "PartitionProduceResponse":
        return cls(
            partition=reader.read_i32(),
            error=reader.read_i16(),
            offset=reader.read_i64(),
        )

    def get_response(self) -> ProducePartitionConfirm:
        code = kafka_code_from_protocol(self.error)
        if code is None:
            return ProducePartitionConfirm(self.partition, offset=self.offset)
        return ProducePartitionConfirm(self.partition, error=code)


@dataclass
class TopicPartitionProduceResponse:
    """The broker's outcomes for the partitions of one topic."""

    topic: str = ""
    partitions: list[PartitionProduceResponse] = field(default_factory=list)

    @classmethod
    def decode(cls, reader: ZReader) -> "TopicPartitionProduceResponse":
        return cls(
            topic=reader.read_str(),
            partitions=reader.read_array(PartitionProduceResponse.decode),
        )

    def get_response(self) -> ProduceConfirm:
        return ProduceConfirm(
            topic=self.topic,
            partition_confirms=[p.get_response() for p in self.partitions],
        )


@dataclass
class ProduceResponse:
    """A broker's answer to a produce request."""

    header: HeaderResponse = field(default_factory=HeaderResponse)
    topic_partitions: list[TopicPartitionProduceResponse] = field(default_factory=list)

    @classmethod
    def decode(cls, reader: ZReader) -> "ProduceResponse":
        return cls(
            header=HeaderResponse.decode(reader),
            topic_partitions=reader.read_array(TopicPartitionProduceResponse.decode),
        )

    def get_response(self) -> list[ProduceConfirm]:
        return [tp.get_response() for tp in self.topic_partitions]