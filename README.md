# promwrite

A small, dependency-free library for pushing metric samples to a Prometheus
remote-write endpoint. Samples are gathered into fixed-size batches, encoded
as a remote-write protobuf, snappy-compressed and sent with an HTTP POST over
a kept-alive connection.

## Installation

```
pip install promwrite
```

## Usage

```python
import time

from promwrite.client import PromClient
from promwrite.errors import SendError
from promwrite.timeseries import TimeSeries
from promwrite.write_request import WriteRequest

temperature = TimeSeries(5, "temperature_celsius", '{job="sensors",room="kitchen"}')
humidity = TimeSeries(5, "humidity_percent", 'job="sensors",room="kitchen"')

request = WriteRequest(2, 1024)
request.add_time_series(temperature)
request.add_time_series(humidity)

now = int(time.time() * 1000)
temperature.add_sample(now, 21.5)
humidity.add_sample(now, 48.0)

with PromClient(url="prometheus.example.com", path="/api/v1/write", port=9090) as client:
    try:
        status = client.send(request)   # HTTP status, e.g. 204
    except SendError as exc:
        if exc.retryable:
            ...  # keep the samples and try again later
        else:
            ...  # drop the batch

temperature.reset_samples()
humidity.reset_samples()
```

With basic authentication and TLS:

```python
password = "password"
client = PromClient(
    url="prometheus.example.com",
    path="/api/prom/push",
    port=443,
    user="user",
    password=password,
    use_tls=True,
)
```

## Modules

### `promwrite.timeseries`

`TimeSeries(batch_size, name, labels="")` holds up to `batch_size` samples.
Labels are given as a string of `key=value` pairs separated by commas; empty
pairs are skipped, and quotes, backslashes and braces are dropped, so
Prometheus-style `{job="x"}` works as well as `job=x`. A pair without `=`
raises `ValueError`. The metric name is stored first, as the `__name__`
label, and the labels are available as `series.labels`.

- `add_sample(ts_millis, value)` appends a `Sample`; it raises
  `BatchFullError` once the batch is full.
- `reset_samples()` empties the batch.
- `samples()` returns the current samples, oldest first; `len(series)` is
  their count.

`parse_labels(text)` returns the parsed `Label` objects on its own.

### `promwrite.write_request`

`WriteRequest(num_series, buffer_size=512)` groups up to `num_series` series
(`add_time_series` raises `SeriesLimitError` beyond that). The `series`
property and `len()` report what has been added.

- `to_proto()` returns the encoded protobuf and raises `EncodeError` if it is
  longer than `buffer_size`.
- `to_snappy_proto()` returns the compressed payload and raises `EncodeError`
  if the worst-case compressed size (`max_compressed_length`) would exceed
  `buffer_size`.

`encode_label`, `encode_sample` and `encode_timeseries` return the protobuf
bodies of the individual messages. Samples with a zero value or timestamp
leave that field out; timestamps must fit in a signed 64-bit integer.

### `promwrite.client`

`PromClient(url, path, port, user=None, password=None, use_tls=False,
timeout=15.0, connection_factory=None)`:

- `begin()` checks the settings (raising `ConfigurationError` when url, path
  or port is missing or the port is out of range) and creates the connection.
  Using the client as a context manager calls `begin()` and `close()`.
- `send(request)` posts the compressed request with
  `Content-Type: application/x-protobuf`, `Content-Encoding: snappy` and a
  `User-Agent` header, plus basic authentication when both `user` and
  `password` are set. It returns the HTTP status for 2xx responses and raises
  `SendError` otherwise. Calling it before `begin()` raises
  `ConfigurationError`.
- `connect_count` is the number of connections opened so far; an open
  connection is reused between sends.
- `close()` closes the connection.

`connection_factory` is called as `factory(host, port, timeout)` and must
return an object behaving like `http.client.HTTPConnection`; by default an
`HTTPConnection` or, with `use_tls`, an `HTTPSConnection` is used.

### `promwrite.errors`

All errors derive from `PromError`. `SendError` carries `message`, `status`
(the HTTP status, or `None` if the server did not answer) and `result`, a
`SendResult`:

- `FAILED_RETRYABLE` for connection failures, timeouts, invalid responses,
  5xx and other unexpected status codes;
- `FAILED_DONT_RETRY` for 4xx responses and requests that could not be
  encoded.

`SendError.retryable` is `True` for retryable failures.

### `promwrite.snappy`

The raw snappy block codec on its own: `compress(data)`,
`decompress(data)` (raises `ValueError` on malformed input) and
`max_compressed_length(n)`.

## Logging

Progress and failure details are logged at debug level on the
`promwrite.client` and `promwrite.write_request` loggers; enable them with
the standard `logging` module.

## What it does not do

This is a library only: it has no command-line tool, does not retry or queue
failed batches itself, and does not read or query metrics back from the
server.

## Running the tests

```
pip install -e ".[test]"
pytest
```