"""Batch metric samples and push them to Prometheus via remote-write."""

__version__ = "0.2.2"
__all__ = ["client", "errors", "snappy", "timeseries", "write_request"]