# kwire

kwire builds and parses the binary messages of the Kafka wire protocol
in its classic v0/v1/v2 request and response formats. You encode a
request into `bytes`, send it however you like, and decode the bytes
that come back.

It covers these APIs:

- metadata (`kwire.metadata`)
- produce (`kwire.produce`), either uncompressed or gzip-compressed
- fetch (`kwire.fetch_request` for requests, `kwire.fetch` for
  responses), with optional CRC checks and gzip decompression
- list offsets (`kwire.offset`)
- group coordinator, offset fetch and offset commit (`kwire.consumer`)

## Installation

```
pip install kwire
```

## Encoding a request

```python
from kwire.fetch_request import FetchRequest

request = FetchRequest(correlation_id=1, client_id="my-client",
                       max_wait_time=100, min_bytes=1)
request.add("my-topic", 0, 0, 1024 * 1024)
payload = request.encode()
```

Every request class has a matching `encode()` method. Examples are
`MetadataRequest`, `ProduceRequest`, `OffsetRequest`,
`GroupCoordinatorRequest`, `OffsetFetchRequest` and
`OffsetCommitRequest`. Each one writes the request header built from
the correlation id and the client id.

## Decoding a response

Fetch responses are parsed with `kwire.fetch.Response.from_bytes`. The
request you pass in supplies the offsets you asked for. Messages below
those offsets are dropped.

```python
from kwire.fetch import Response

response = Response.from_bytes(raw, request, True)  # True: validate CRCs
for topic in response.topics:
    for partition in topic.partitions:
        if not partition.ok:
            print("error:", partition.error.code)
            continue
        for message in partition.data.messages:
            print(topic.topic, partition.partition, message.offset, message.value)
```

`kwire.fetch.ResponseParser` holds the request and the CRC setting, and
its `parse(raw)` method does the same job. The parser silently ignores
an incomplete message at the end of a message set.

The other response classes decode from a `kwire.zreader.ZReader`:

```python
from kwire.zreader import ZReader
from kwire.metadata import MetadataResponse

metadata = MetadataResponse.decode(ZReader(raw))
```

A few helpers turn broker error codes into results:

- `PartitionOffsetResponse.into_offset()`
- `PartitionOffsetFetchResponse.get_offsets()`
- `GroupCoordinatorResponse.to_result()`

Each returns a value or raises `kwire.errors.KafkaError`. An offset
fetch for an unknown topic or partition gives offset `-1`.
`ProduceResponse.get_response()` returns `ProduceConfirm` objects. Each
holds one `ProducePartitionConfirm` per partition, with either an
`offset` or an `error` code.

## Errors

All exceptions derive from `kwire.errors.KwireError`:

- `KafkaError`: a broker error. Its `code` is a `KafkaCode`.
- `UnexpectedEOFError`: the input ended early.
- `StringDecodeError`: a protocol string is not valid UTF-8.
- `UnsupportedProtocolError`: a message magic byte other than 0.
- `UnsupportedCompressionError`: a compression codec other than none or
  gzip.
- `InvalidDurationError`: raised by `to_millis_i32`.

`kafka_code_from_protocol(n)` maps a raw error number to a `KafkaCode`.
Zero maps to `None`, and numbers that are not known map to
`KafkaCode.UNKNOWN`.

## Low-level helpers

`kwire.zreader.ZReader` reads big-endian integers, strings, byte blobs
and arrays from a byte buffer. `kwire.wire` provides:

- the matching `encode_*` functions
- `Compression`, `PartitionOffset`, `HeaderRequest` and `HeaderResponse`
- `to_crc`, the unsigned IEEE CRC-32
- `to_millis_i32`, which turns a non-negative `datetime.timedelta` into
  protocol milliseconds and rejects values over the signed 32-bit range

## What kwire does not do

kwire only turns requests into bytes and bytes into responses. It does
not:

- open connections or talk to brokers
- keep cluster metadata
- provide a producer or consumer client
- compress or decompress snappy data; snappy message sets raise
  `UnsupportedCompressionError`

## Running the tests

```
pip install -e .[test]
pytest
```