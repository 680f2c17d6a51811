"""Encoding and decoding of Kafka wire protocol requests and responses."""

__version__ = "0.1.0"