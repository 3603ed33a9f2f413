"""Time series with a fixed-size batch of samples and a parsed label set."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import BatchFullError

NAME_LABEL = "__name__"
_IGNORED_CHARS = str.maketrans("", "", '\\"{}')


@dataclass(frozen=True)
class Sample:
    """One value at a timestamp given in milliseconds."""

    ts_millis: int
    value: float


@dataclass(frozen=True)
class Label:
    """A label name and its value."""

    key: str
    value: str


def parse_labels(labels: str) -> list[Label]:
    """Parse ``key="value",other="value"`` text into labels.

    Pairs are split on commas, empty pairs are skipped, and backslashes,
    double quotes and braces are dropped. The key ends at the first ``=``;
    everything after it is the value.
    """
    parsed = []
    for pair in labels.split(","):
        if not pair:
            continue
        key, sep, value = pair.partition("=")
        if not sep:
            raise ValueError(f"label pair {pair!r} has no '='")
        parsed.append(Label(key.translate(_IGNORED_CHARS), value.translate(_IGNORED_CHARS)))
    return parsed


class TimeSeries:
    """A named metric with labels and room for ``batch_size`` samples."""

    def __init__(self, batch_size: int, name: str, labels: str = "") -> None:
        if batch_size < 0:
            raise ValueError("batch size must not be negative")
        self.batch_size = batch_size
        self.name = name
        self.labels: tuple[Label, ...] = (Label(NAME_LABEL, name), *parse_labels(labels))
        self._samples: list[Sample] = []

    def add_sample(self, ts_millis: int, value: float) -> None:
        """Append a sample; raise BatchFullError once the batch is full."""
        if len(self._samples) >= self.batch_size:
            raise BatchFullError("batch full")
        self._samples.append(Sample(int(ts_millis), float(value)))

    def reset_samples(self) -> None:
        """Drop every sample so the batch can be refilled."""
        self._samples.clear()

    def samples(self) -> tuple[Sample, ...]:
        """Return the samples added since the last reset, oldest first."""
        return tuple(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def __repr__(self) -> str:
        return f"TimeSeries(name={self.name!r}, samples={len(self)}/{self.batch_size})"