"""Fetch request: asks brokers for messages from topic partitions."""

from __future__ import annotations

from dataclasses import dataclass, field

from .wire import (
    API_KEY_FETCH,
    API_VERSION,
    HeaderRequest,
    encode_i32,
    encode_i64,
    encode_str,
)


@dataclass
class PartitionFetchRequest:
    """Where to start fetching in one partition and how much to fetch."""

    offset: int
    max_bytes: int

    def encode(self, partition: int) -> bytes:
        return (
            encode_i32(partition)
            + encode_i64(self.offset)
            + encode_i32(self.max_bytes)
        )


@dataclass
class TopicPartitionFetchRequest:
    """The partitions of one topic to fetch from, keyed by partition id."""

    partitions: dict[int, PartitionFetchRequest] = field(default_factory=dict)

    def add(self, partition: int, offset: int, max_bytes: int) -> None:
        """Request ``partition``; a later call for the same partition replaces it."""
        self.partitions[partition] = PartitionFetchRequest(offset, max_bytes)

    def get(self, partition: int) -> PartitionFetchRequest | None:
        return self.partitions.get(partition)

    def encode(self, topic: str) -> bytes:
        parts = [encode_str(topic), encode_i32(len(self.partitions))]
        parts.extend(p.encode(pid) for pid, p in self.partitions.items())
        return b"".join(parts)


@dataclass
class FetchRequest:
    """Asks a broker for messages from a set of topic partitions."""

    correlation_id: int
    client_id: str
    max_wait_time: int
    min_bytes: int
    replica: int = -1
    topic_partitions: dict[str, TopicPartitionFetchRequest] = field(default_factory=dict)
    header: HeaderRequest = field(init=False)

    def __post_init__(self) -> None:
        self.header = HeaderRequest(
            API_KEY_FETCH, API_VERSION, self.correlation_id, self.client_id
        )

    def add(self, topic: str, partition: int, offset: int, max_bytes: int) -> None:
        self.topic_partitions.setdefault(topic, TopicPartitionFetchRequest()).add(
            partition, offset, max_bytes
        )

    def get(self, topic: str) -> TopicPartitionFetchRequest | None:
        return self.topic_partitions.get(topic)

    def encode(self) -> bytes:
        parts = [
            self.header.encode(),
            encode_i32(self.replica),
            encode_i32(self.max_wait_time),
            encode_i32(self.min_bytes),
            encode_i32(len(self.topic_partitions)),
        ]
        parts.extend(tp.encode(name) for name, tp in self.topic_partitions.items())
        return b"".join(parts)