"""Metadata request and response."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .wire import (
    API_KEY_METADATA,
    API_VERSION,
    HeaderRequest,
    HeaderResponse,
    encode_array,
    encode_str,
)
from .zreader import ZReader


@dataclass
class MetadataRequest:
    """Asks a broker for metadata on the given topics, or on all topics if none."""

    correlation_id: int
    client_id: str
    topics: Sequence[str] = ()
    header: HeaderRequest = field(init=False)

    def __post_init__(self) -> None:
        self.header = HeaderRequest(
            API_KEY_METADATA, API_VERSION, self.correlation_id, self.client_id
        )

    def encode(self) -> bytes:
        return self.header.encode() + encode_array(self.topics, encode_str)


@dataclass
class BrokerMetadata:
    """A broker of the cluster and where to reach it."""

    node_id: int = 0
    host: str = ""
    port: int = 0

    @classmethod
    def decode(cls, reader: ZReader) -> "BrokerMetadata":
        return cls(
            node_id=reader.read_i32(),
            host=reader.read_str(),
            port=reader.read_i32(),
        )


@dataclass
class PartitionMetadata:
    """Leadership and replica information of one partition."""

    error: int = 0
    id: int = 0
    leader: int = 0
    replicas: list[int] = field(default_factory=list)
    isr: list[int] = field(default_factory=list)

    @classmethod
    def decode(cls, reader: ZReader) -> "PartitionMetadata":
        return cls(
            error=reader.read_i16(),
            id=reader.read_i32(),
            leader=reader.read_i32(),
            replicas=reader.read_array(ZReader.read_i32),
            isr=reader.read_array(ZReader.read_i32),
        )


@dataclass
class TopicMetadata:
    """A topic and the metadata of its partitions."""

    error: int = 0
    topic: str = ""
    partitions: list[PartitionMetadata] = field(default_factory=list)

    @classmethod
    def decode(cls, reader: ZReader) -> "TopicMetadata":
        return cls(
            error=reader.read_i16(),
            topic=reader.read_str(),
            partitions=reader.read_array(PartitionMetadata.decode),
        )


@dataclass
class MetadataResponse:
    """A broker's answer to a metadata request."""

    header: HeaderResponse = field(default_factory=HeaderResponse)
    brokers: list[BrokerMetadata] = field(default_factory=list)
    topics: list[TopicMetadata] = field(default_factory=list)

    @classmethod
    def decode(cls, reader: ZReader) -> "MetadataResponse":
        return cls(
            header=HeaderResponse.decode(reader),
            brokers=reader.read_array(BrokerMetadata.decode),
            topics=reader.read_array(TopicMetadata.decode),
        )