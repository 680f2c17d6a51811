import pytest

from kwire.errors import KafkaCode, KafkaError, UnexpectedEOFError
from kwire.offset import (
    OffsetRequest,
    OffsetResponse,
    PartitionOffsetRequest,
    PartitionOffsetResponse,
    TopicPartitionOffsetRequest,
)
from kwire.wire import (
    API_KEY_OFFSET,
    API_VERSION,
    PartitionOffset,
    encode_array,
    encode_i16,
    encode_i32,
    encode_i64,
    encode_str,
)
from kwire.zreader import ZReader


def _read_partition(r):
    return (r.read_i32(), r.read_i64(), r.read_i32())


def _read_topic(r):
    return (r.read_str(), r.read_array(_read_partition))


def test_add_groups_by_topic_in_order():
    req = OffsetRequest(1, "c")
    req.add("a", 0, -1)
    req.add("b", 1, -2)
    req.add("a", 2, -1)
    assert [tp.topic for tp in req.topic_partitions] == ["a", "b"]
    assert req.topic_partitions[0].partitions == [
        PartitionOffsetRequest(0, -1),
        PartitionOffsetRequest(2, -1),
    ]
    assert req.topic_partitions[1].partitions == [PartitionOffsetRequest(1, -2)]


def test_partition_request_defaults_to_one_offset():
    assert PartitionOffsetRequest(3, -1).max_offsets == 1


def test_request_encode_round_trip():
    req = OffsetRequest(9, "client")
    req.add("topic", 0, -1)
    req.add("topic", 1, -2)
    r = ZReader(req.encode())
    assert r.read_i16() == API_KEY_OFFSET
    assert r.read_i16() == API_VERSION
    assert r.read_i32() == 9
    assert r.read_str() == "client"
    assert r.read_i32() == req.replica
    assert r.read_array(_read_topic) == [("topic", [(0, -1, 1), (1, -2, 1)])]
    assert r.is_empty()


def test_replica_is_minus_one():
    req = OffsetRequest(0, "c")
    assert req.replica == -1


def test_topic_request_encode():
    tp = TopicPartitionOffsetRequest("x")
    tp.add(5, 1234567890123)
    r = ZReader(tp.encode())
    assert _read_topic(r) == ("x", [(5, 1234567890123, 1)])
    assert r.is_empty()


def test_into_offset_takes_first_offset():
    resp = PartitionOffsetResponse(partition=2, error=0, offset=[50, 10])
    assert resp.into_offset() == PartitionOffset(offset=50, partition=2)


def test_into_offset_without_offsets_is_minus_one():
    resp = PartitionOffsetResponse(partition=4, error=0, offset=[])
    assert resp.into_offset() == PartitionOffset(offset=-1, partition=4)


def test_into_offset_raises_kafka_error():
    resp = PartitionOffsetResponse(
        partition=0, error=int(KafkaCode.UNKNOWN_TOPIC_OR_PARTITION), offset=[1]
    )
    with pytest.raises(KafkaError) as info:
        resp.into_offset()
    assert info.value.code is KafkaCode.UNKNOWN_TOPIC_OR_PARTITION


def test_into_offset_unmapped_code_is_unknown():
    resp = PartitionOffsetResponse(partition=0, error=-100, offset=[])
    with pytest.raises(KafkaError) as info:
        resp.into_offset()
    assert info.value.code is KafkaCode.UNKNOWN


def test_response_decode():
    partition = encode_i32(1) + encode_i16(0) + encode_array([7, 3], encode_i64)
    topic = encode_str("t") + encode_i32(1) + partition
    data = encode_i32(77) + encode_i32(1) + topic
    r = ZReader(data)
    resp = OffsetResponse.decode(r)
    assert r.is_empty()
    assert resp.header.correlation == 77
    assert len(resp.topic_partitions) == 1
    tp = resp.topic_partitions[0]
    assert tp.topic == "t"
    assert tp.partitions == [PartitionOffsetResponse(partition=1, error=0, offset=[7, 3])]


def test_truncated_response_raises():
    data = encode_i32(1) + encode_i32(1) + encode_str("t") + encode_i32(1)
    with pytest.raises(UnexpectedEOFError):
        OffsetResponse.decode(ZReader(data))