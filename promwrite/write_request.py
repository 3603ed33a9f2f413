"""Protobuf serialisation of remote-write requests, with snappy compression."""

from __future__ import annotations

import logging
import struct
from collections.abc import Iterable

from .errors import EncodeError, SeriesLimitError
from .snappy import compress, max_compressed_length
from .timeseries import Label, Sample, TimeSeries

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 512

_WIRE_VARINT = 0
_WIRE_FIXED64 = 1
_WIRE_LENGTH = 2

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


def _varint(value: int) -> bytes:
    if value < 0:
        value += 1 << 64
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def _key(field: int, wire_type: int) -> bytes:
    return _varint((field << 3) | wire_type)


def _length_delimited(field: int, payload: bytes) -> bytes:
    return _key(field, _WIRE_LENGTH) + _varint(len(payload)) + payload


def encode_label(label: Label) -> bytes:
    """Encode a label as the body of a ``Label`` message."""
    return _length_delimited(1, label.key.encode("utf-8")) + _length_delimited(
        2, label.value.encode("utf-8")
    )


def encode_sample(sample: Sample) -> bytes:
    """Encode a sample as the body of a ``Sample`` message.

    Fields holding their zero value are left out, as proto3 prescribes.
    """
    if not _INT64_MIN <= sample.ts_millis <= _INT64_MAX:
        raise EncodeError(f"timestamp {sample.ts_millis} does not fit in a signed 64-bit integer")
    out = bytearray()
    packed = struct.pack("<d", sample.value)
    if any(packed):
        out += _key(1, _WIRE_FIXED64) + packed
    if sample.ts_millis:
        out += _key(2, _WIRE_VARINT) + _varint(sample.ts_millis)
    return bytes(out)


def _repeated(field: int, messages: Iterable[bytes]) -> bytes:
    return b"".join(_length_delimited(field, message) for message in messages)


def encode_timeseries(series: TimeSeries) -> bytes:
    """Encode a time series, its labels and its current samples."""
    return _repeated(1, map(encode_label, series.labels)) + _repeated(
        2, map(encode_sample, series.samples())
    )


class WriteRequest:
    """A batch of time series to be pushed in one remote-write call."""

    def __init__(self, num_series: int, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        if num_series < 0:
            raise ValueError("number of series must not be negative")
        if buffer_size <= 0:
            raise ValueError("buffer size must be positive")
        self.num_series = num_series
        self.buffer_size = buffer_size
        self._series: list[TimeSeries] = []

    @property
    def series(self) -> tuple[TimeSeries, ...]:
        """The time series added so far, in order."""
        return tuple(self._series)

    def add_time_series(self, series: TimeSeries) -> None:
        """Add a time series; raise SeriesLimitError once the request is full."""
        if len(self._series) >= self.num_series:
            raise SeriesLimitError(
                "cannot add series, max number of series have already been added."
            )
        self._series.append(series)

    def to_proto(self) -> bytes:
        """Serialise the request; raise EncodeError if it exceeds the buffer size."""
        payload = _repeated(1, map(encode_timeseries, self._series))
        if len(payload) > self.buffer_size:
            logger.debug(
                "Error from proto encode: %d bytes needed, buffer holds %d",
                len(payload),
                self.buffer_size,
            )
            raise EncodeError(
                f"Error creating protobuf: {len(payload)} bytes needed "
                f"but the buffer size is {self.buffer_size}"
            )
        logger.debug("Bytes used for serialization: %d", len(payload))
        return payload

    def to_snappy_proto(self) -> bytes:
        """Serialise and snappy-compress the request."""
        payload = self.to_proto()
        required = max_compressed_length(len(payload))
        logger.debug("Required buffer size for compression: %d", required)
        if required > self.buffer_size:
            raise EncodeError(
                "WriteRequest buffer size is too small and will be overrun during "
                f"compression: {required} bytes required, {self.buffer_size} available"
            )
        compressed = compress(payload)
        logger.debug("Compressed Len: %d", len(compressed))
        return compressed

    def __len__(self) -> int:
        return len(self._series)