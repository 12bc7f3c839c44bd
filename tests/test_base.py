import pytest

from metricstore.base import (
    COUNTER,
    GAUGE,
    MapNotAvailableError,
    Metric,
    MetricValue,
    MetricValueError,
    StorageError,
    ValueNotFoundError,
)


@pytest.mark.parametrize(
    "metric_type, value, want_int, want_float",
    [
        (COUNTER, 5, 5, 0.0),
        (GAUGE, 5.5, 0, 5.5),
    ],
    ids=["valid_counter", "valid_gauge"],
)
def test_metric_value_set_valid(metric_type, value, want_int, want_float):
    mv = MetricValue()
    mv.set(metric_type, value)
    assert mv.int_value == want_int
    assert mv.float_value == want_float


@pytest.mark.parametrize(
    "metric_type, value",
    [
        (GAUGE, 5),
        (COUNTER, 5.5),
        (COUNTER, "string"),
        (COUNTER, True),
        ("unknown", 5),
    ],
    ids=["gauge_with_int", "counter_with_float", "string", "bool", "unknown_type"],
)
def test_metric_value_set_invalid(metric_type, value):
    mv = MetricValue()
    with pytest.raises(MetricValueError):
        mv.set(metric_type, value)
    assert mv == MetricValue(0, 0.0)


def test_metric_to_dict_omits_unset_fields():
    assert Metric("m", GAUGE, value=1.5).to_dict() == {
        "id": "m",
        "type": "gauge",
        "value": 1.5,
    }
    assert Metric("c", COUNTER, delta=3).to_dict() == {
        "id": "c",
        "type": "counter",
        "delta": 3,
    }


def test_metric_round_trip():
    metric = Metric("m", COUNTER, delta=7, value=2.5)
    assert Metric.from_dict(metric.to_dict()) == metric


def test_metric_from_dict_converts_integer_value_to_float():
    metric = Metric.from_dict({"id": "g", "type": "gauge", "value": 42})
    assert metric.value == 42.0
    assert isinstance(metric.value, float)


def test_error_messages_and_hierarchy():
    with pytest.raises(StorageError, match="map not available"):
        raise MapNotAvailableError()
    with pytest.raises(StorageError, match="value not found"):
        raise ValueNotFoundError()
    with pytest.raises(StorageError, match="incorrect value for metric"):
        MetricValue().set(GAUGE, "x")