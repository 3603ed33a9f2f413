import pytest

from promwrite.errors import BatchFullError, PromError
from promwrite.timeseries import Label, Sample, TimeSeries, parse_labels


def test_parse_quoted_pairs():
    assert parse_labels('job="esp32-test",host="esp32"') == [
        Label("job", "esp32-test"),
        Label("host", "esp32"),
    ]


def test_parse_strips_braces_quotes_and_backslashes():
    assert parse_labels('{a="1\\\\",b="2"}') == [Label("a", "1"), Label("b", "2")]


def test_parse_empty_string():
    assert parse_labels("") == []


def test_parse_skips_empty_pairs():
    assert parse_labels(",a=1,,b=2,") == [Label("a", "1"), Label("b", "2")]


def test_parse_value_keeps_later_equals():
    assert parse_labels("a=b=c") == [Label("a", "b=c")]


def test_parse_rejects_pair_without_equals():
    with pytest.raises(ValueError):
        parse_labels("novalue")


def test_name_label_comes_first():
    series = TimeSeries(5, "temperature_celsius", 'job="esp32",host="esp32"')
    assert series.labels == (
        Label("__name__", "temperature_celsius"),
        Label("job", "esp32"),
        Label("host", "esp32"),
    )
    assert series.name == "temperature_celsius"


def test_no_labels_gives_only_name():
    series = TimeSeries(1, "uptime", "")
    assert series.labels == (Label("__name__", "uptime"),)


def test_add_samples_in_order():
    series = TimeSeries(3, "m", "")
    series.add_sample(1000, 1.5)
    series.add_sample(2000, 2)
    assert series.samples() == (Sample(1000, 1.5), Sample(2000, 2.0))
    assert len(series) == 2


def test_batch_full_raises():
    series = TimeSeries(2, "m", "")
    series.add_sample(1, 1.0)
    series.add_sample(2, 2.0)
    with pytest.raises(BatchFullError, match="batch full"):
        series.add_sample(3, 3.0)
    assert len(series) == 2


def test_batch_full_is_prom_error():
    series = TimeSeries(0, "m", "")
    with pytest.raises(PromError):
        series.add_sample(1, 1.0)


def test_reset_allows_refill():
    series = TimeSeries(1, "m", "")
    series.add_sample(1, 1.0)
    series.reset_samples()
    assert len(series) == 0
    series.add_sample(5, 4.25)
    assert series.samples() == (Sample(5, 4.25),)


def test_samples_is_a_snapshot():
    series = TimeSeries(2, "m", "")
    series.add_sample(1, 1.0)
    snapshot = series.samples()
    series.add_sample(2, 2.0)
    assert len(snapshot) == 1
    assert len(series.samples()) == 2


def test_negative_batch_size_rejected():
    with pytest.raises(ValueError):
        TimeSeries(-1, "m", "")