"""Consumer group requests and responses: coordinator lookup, offset fetch and commit."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from .errors import KafkaCode, KafkaError, error_from_protocol, kafka_code_from_protocol
from .wire import (
    API_KEY_GROUP_COORDINATOR,
    API_KEY_OFFSET_COMMIT,
    API_KEY_OFFSET_FETCH,
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


# --------------------------------------------------------------------
# group coordinator


@dataclass
class GroupCoordinatorRequest:
    """Asks which broker coordinates the given consumer group."""

    group: str
    correlation_id: int
    client_id: str
    header: HeaderRequest = field(init=False)

    def __post_init__(self) -> None:
        self.header = HeaderRequest(
            API_KEY_GROUP_COORDINATOR, API_VERSION, self.correlation_id, self.client_id
        )

    def encode(self) -> bytes:
        return self.header.encode() + encode_str(self.group)


@dataclass
class GroupCoordinatorResponse:
    """The broker coordinating a consumer group."""

    header: HeaderResponse = field(default_factory=HeaderResponse)
    error: int = 0
    broker_id: int = 0
    port: int = 0
    host: str = ""

    @classmethod
    def decode(cls, reader: ZReader) -> "GroupCoordinatorResponse":
        header = HeaderResponse.decode(reader)
        error = reader.read_i16()
        broker_id = reader.read_i32()
        host = reader.read_str()
        port = reader.read_i32()
        return cls(header=header, error=error, broker_id=broker_id, port=port, host=host)

    def to_result(self) -> "GroupCoordinatorResponse":
        """Return this response, or raise the error the broker reported."""
        error = error_from_protocol(self.error)
        if error is not None:
            raise error
        return self


# --------------------------------------------------------------------
# offset fetch


class OffsetFetchVersion(IntEnum):
    """Where committed offsets are read from."""

    V0 = 0
    """Offsets are retrieved from zookeeper."""
    V1 = 1
    """Offsets are retrieved from the brokers themselves (kafka 0.8.2+)."""


@dataclass
class TopicPartitionOffsetFetchRequest:
    """The partitions of one topic whose committed offsets are requested."""

    topic: str
    partitions: list[int] = field(default_factory=list)

    def add(self, partition: int) -> None:
        self.partitions.append(partition)

    def encode(self) -> bytes:
        return encode_str(self.topic) + encode_array(self.partitions, encode_i32)


@dataclass
class OffsetFetchRequest:
    """Asks for the offsets a consumer group has committed."""

    group: str
    version: OffsetFetchVersion
    correlation_id: int
    client_id: str
    topic_partitions: list[TopicPartitionOffsetFetchRequest] = field(default_factory=list)
    header: HeaderRequest = field(init=False)

    def __post_init__(self) -> None:
        self.header = HeaderRequest(
            API_KEY_OFFSET_FETCH, int(self.version), self.correlation_id, self.client_id
        )

    def add(self, topic: str, partition: int) -> None:
        for tp in self.topic_partitions:
            if tp.topic == topic:
                tp.add(partition)
                return
        tp = TopicPartitionOffsetFetchRequest(topic)
        tp.add(partition)
        self.topic_partitions.append(tp)

    def encode(self) -> bytes:
        return (
            self.header.encode()
            + encode_str(self.group)
            + encode_array(self.topic_partitions, TopicPartitionOffsetFetchRequest.encode)
        )


@dataclass
class PartitionOffsetFetchResponse:
    """The committed offset of one partition."""

    partition: int = 0
    offset: int = 0
    metadata: str = ""
    error: int = 0

    @classmethod
    def decode(cls, reader: ZReader) -> "PartitionOffsetFetchResponse":
        return cls(
            partition=reader.read_i32(),
            offset=reader.read_i64(),
            metadata=reader.read_str(),
            error=reader.read_i16(),
        )

    def get_offsets(self) -> PartitionOffset:
        """Return the committed offset; raise on a broker error.

        An unknown topic or partition means no offset was committed
        (protocol v0) and yields offset -1, as protocol v1 does.
        """
        code = kafka_code_from_protocol(self.error)
        if code is KafkaCode.UNKNOWN_TOPIC_OR_PARTITION:
            return PartitionOffset(offset=-1, partition=self.partition)
        if code is not None:
            raise KafkaError(code)
        return PartitionOffset(offset=self.offset, partition=self.partition)


@dataclass
class TopicPartitionOffsetFetchResponse:
    """The committed offsets of the partitions of one topic."""

    topic: str = ""
    partitions: list[PartitionOffsetFetchResponse] = field(default_factory=list)

    @classmethod
    def decode(cls, reader: ZReader) -> "TopicPartitionOffsetFetchResponse":
        return cls(
            topic=reader.read_str(),
            partitions=reader.read_array(PartitionOffsetFetchResponse.decode),
        )


@dataclass
class OffsetFetchResponse:
    """A broker's answer to an offset fetch request."""

    header: HeaderResponse = field(default_factory=HeaderResponse)
    topic_partitions: list[TopicPartitionOffsetFetchResponse] = field(default_factory=list)

    @classmethod
    def decode(cls, reader: ZReader) -> "OffsetFetchResponse":
        return cls(
            header=HeaderResponse.decode(reader),
            topic_partitions=reader.read_array(TopicPartitionOffsetFetchResponse.decode),
        )


# --------------------------------------------------------------------
# offset commit


class OffsetCommitVersion(IntEnum):
    """Where committed offsets are stored."""

    V0 = 0
    """Offsets are stored in zookeeper."""
    V1 = 1
    """Offsets are stored in the brokers (kafka 0.8.2+)."""
    V2 = 2
    """Offsets are stored in the brokers (kafka 0.9.0+)."""


@dataclass
class PartitionOffsetCommitRequest:
    """An offset to commit for one partition."""

    partition: int
    offset: int
    metadata: str = ""


@dataclass
class TopicPartitionOffsetCommitRequest:
    """The offsets to commit for the partitions of one topic."""

    topic: str
    partitions: list[PartitionOffsetCommitRequest] = field(default_factory=list)

    def add(self, partition: int, offset: int, metadata: str) -> None:
        self.partitions.append(PartitionOffsetCommitRequest(partition, offset, metadata))


@dataclass
class OffsetCommitRequest:
    """Commits offsets on behalf of a consumer group."""

    group: str
    version: OffsetCommitVersion
    correlation_id: int
    client_id: str
    topic_partitions: list[TopicPartitionOffsetCommitRequest] = field(default_factory=list)
    header: HeaderRequest = field(init=False)

    def __post_init__(self) -> None:
        self.header = HeaderRequest(
            API_KEY_OFFSET_COMMIT, int(self.version), self.correlation_id, self.client_id
        )

    def add(self, topic: str, partition: int, offset: int, metadata: str) -> None:
        for tp in self.topic_partitions:
            if tp.topic == topic:
                tp.add(partition, offset, metadata)
                return
        tp = TopicPartitionOffsetCommitRequest(topic)
        tp.add(partition, offset, metadata)
        self.topic_partitions.append(tp)

    def encode(self) -> bytes:
        """Render the request; raise ValueError for an unknown header version."""
        version = OffsetCommitVersion(self.header.api_version)
        parts = [self.header.encode(), encode_str(self.group)]
        if version in (OffsetCommitVersion.V1, OffsetCommitVersion.V2):
            # generation id and consumer id
            parts.append(encode_i32(-1))
            parts.append(encode_str(""))
        if version == OffsetCommitVersion.V2:
            # retention time
            parts.append(encode_i64(-1))

        def encode_partition(p: PartitionOffsetCommitRequest) -> bytes:
            out = encode_i32(p.partition) + encode_i64(p.offset)
            if version == OffsetCommitVersion.V1:
                # timestamp
                out += encode_i64(-1)
            return out + encode_str(p.metadata)

        def encode_topic(tp: TopicPartitionOffsetCommitRequest) -> bytes:
            return encode_str(tp.topic) + encode_array(tp.partitions, encode_partition)

        parts.append(encode_array(self.topic_partitions, encode_topic))
        return b"".join(parts)


@dataclass
class PartitionOffsetCommitResponse:
    """The outcome of committing the offset of one partition."""

    partition: int = 0
    error: int = 0

    @classmethod
    def decode(cls, reader: ZReader) -> "PartitionOffsetCommitResponse":
        return cls(partition=reader.read_i32(), error=reader.read_i16())

    def to_error(self) -> KafkaCode | None:
        """Return the reported error code, or None on success."""
        return kafka_code_from_protocol(self.error)


@dataclass
class TopicPartitionOffsetCommitResponse:
    """The commit outcomes for the partitions of one topic."""

    topic: str = ""
    partitions: list[PartitionOffsetCommitResponse] = field(default_factory=list)

    @classmethod
    def decode(cls, reader: ZReader) -> "TopicPartitionOffsetCommitResponse":
        return cls(
            topic=reader.read_str(),
            partitions=reader.read_array(PartitionOffsetCommitResponse.decode),
        )


@dataclass
class OffsetCommitResponse:
    """A broker's answer to an offset commit request."""

    header: HeaderResponse = field(default_factory=HeaderResponse)
    topic_partitions: list[TopicPartitionOffsetCommitResponse] = field(default_factory=list)

    @classmethod
    def decode(cls, reader: ZReader) -> "OffsetCommitResponse":
        return cls(
            header=HeaderResponse.decode(reader),
            topic_partitions=reader.read_array(TopicPartitionOffsetCommitResponse.decode),
        )