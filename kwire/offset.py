"""Offset (list offsets) request and response."""

from __future__ import annotations

from dataclasses import dataclass, field

from .errors import KafkaError, kafka_code_from_protocol
from .wire import (
    API_KEY_OFFSET,
    API_VERSION,
    HeaderRequest,
    HeaderResponse,
    PartitionOffset,
    encode_array,
    encode_i32,
    encode_i64,
    encode_str,
)
from .zreader import ZReader


@dataclass
class PartitionOffsetRequest:
    """Asks for the offset of one partition at the given time."""

    partition: int
    time: int
    max_offsets: int = 1

    def encode(self) -> bytes:
        return (
            encode_i32(self.partition)
            + encode_i64(self.time)
            + encode_i32(self.max_offsets)
        )


@dataclass
class TopicPartitionOffsetRequest:
    """The partitions of one topic whose offsets are requested."""

    topic: str
    partitions: list[PartitionOffsetRequest] = field(default_factory=list)

    def add(self, partition: int, time: int) -> None:
        self.partitions.append(PartitionOffsetRequest(partition, time))

    def encode(self) -> bytes:
        return encode_str(self.topic) + encode_array(
            self.partitions, PartitionOffsetRequest.encode
        )


@dataclass
class OffsetRequest:
    """Asks a broker for partition offsets."""

    correlation_id: int
    client_id: str
    replica: int = -1
    topic_partitions: list[TopicPartitionOffsetRequest] = field(default_factory=list)
    header: HeaderRequest = field(init=False)

    def __post_init__(self) -> None:
        self.header = HeaderRequest(
            API_KEY_OFFSET, API_VERSION, self.correlation_id, self.client_id
        )

    def add(self, topic: str, partition: int, time: int) -> None:
        for tp in self.topic_partitions:
            if tp.topic == topic:
                tp.add(partition, time)
                return
        tp = TopicPartitionOffsetRequest(topic)
        tp.add(partition, time)
        self.topic_partitions.append(tp)

    def encode(self) -> bytes:
        return (
            self.header.encode()
            + encode_i32(self.replica)
            + encode_array(self.topic_partitions, TopicPartitionOffsetRequest.encode)
        )


@dataclass
class PartitionOffsetResponse:
    """The offsets reported for one partition."""

    partition: int = 0
    error: int = 0
    offset: list[int] = field(default_factory=list)

    @classmethod
    def decode(cls, reader: ZReader) -> "PartitionOffsetResponse":
        return cls(
            partition=reader.read_i32(),
            error=reader.read_i16(),
            offset=reader.read_array(ZReader.read_i64),
        )

    def into_offset(self) -> PartitionOffset:
        """Return the first reported offset (-1 if none); raise on a broker error."""
        code = kafka_code_from_protocol(self.error)
        if code is not None:
            raise KafkaError(code)
        offset = self.offset[0] if self.offset else -1
        return PartitionOffset(offset=offset, partition=self.partition)


@dataclass
class TopicPartitionOffsetResponse:
    """The partition offsets reported for one topic."""

    topic: str = ""
    partitions: list[PartitionOffsetResponse] = field(default_factory=list)

    @classmethod
    def decode(cls, reader: ZReader) -> "TopicPartitionOffsetResponse":
        return cls(
            topic=reader.read_str(),
            partitions=reader.read_array(PartitionOffsetResponse.decode),
        )


@dataclass
class OffsetResponse:
    """A broker's answer to an offset request."""

    header: HeaderResponse = field(default_factory=HeaderResponse)
    topic_partitions: list[TopicPartitionOffsetResponse] = field(default_factory=list)

    @classmethod
    def decode(cls, reader: ZReader) -> "OffsetResponse":
        return cls(
            header=HeaderResponse.decode(reader),
            topic_partitions=reader.read_array(TopicPartitionOffsetResponse.decode),
        )