"""Shared metric model, value validation and storage errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

GAUGE = "gauge"
COUNTER = "counter"


class StorageError(Exception):
    """Base class for storage failures."""


class MapNotAvailableError(StorageError):
    """The in-memory map backing a storage is not available."""

    def __init__(self, message: str = "map not available") -> None:
        super().__init__(message)


class MetricValueError(StorageError):
    """A value does not fit the metric type it was given for."""

    def __init__(self, message: str = "incorrect value for metric") -> None:
        super().__init__(message)


class ValueNotFoundError(StorageError):
    """No metric matches the lookup."""

    def __init__(self, message: str = "value not found") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class Metric:
    """A single metric: a counter carries ``delta``, a gauge carries ``value``."""

    id: str
    mtype: str
    delta: int | None = None
    value: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form, leaving out unset fields."""
        data: dict[str, Any] = {"id": self.id, "type": self.mtype}
        if self.delta is not None:
            data["delta"] = self.delta
        if self.value is not None:
            data["value"] = self.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Metric:
        """Build a metric from its JSON form."""
        delta = data.get("delta")
        value = data.get("value")
        return cls(
            id=data["id"],
            mtype=data["type"],
            delta=None if delta is None else int(delta),
            value=None if value is None else float(value),
        )


@dataclass
class MetricValue:
    """A validated metric value: integer for counters, float for gauges."""

    int_value: int = 0
    float_value: float = 0.0

    def set(self, metric_type: str, value: Any) -> None:
        """Store ``value`` if it fits ``metric_type``, else raise MetricValueError."""
        if isinstance(value, int) and not isinstance(value, bool):
            if metric_type == COUNTER:
                self.int_value = value
                return
        elif isinstance(value, float):
            if metric_type == GAUGE:
                self.float_value = value
                return
        raise MetricValueError()


@runtime_checkable
class Storage(Protocol):
    """Operations every metric storage provides."""

    def list(self) -> list[Metric]:
        """Return all stored metrics."""
        ...

    def upsert_by_value(self, metric: Metric, value: Any) -> None:
        """Set or add ``value`` to the metric."""
        ...

    def insert_batch(self, metrics: list[Metric]) -> None:
        """Store many metrics at once."""
        ...

    def get_by_name(self, name: str) -> Metric:
        """Return the metric called ``name``."""
        ...

    def get_by_name_type(self, name: str, mtype: str) -> Metric:
        """Return the metric called ``name`` of type ``mtype``."""
        ...

    def insert(self, metric: Metric) -> Metric:
        """Store a metric and return what is stored."""
        ...

    def close(self) -> None:
        """Release the storage."""
        ...

    def ping(self) -> None:
        """Check that the storage is usable."""
        ...

    def run_migrations(self) -> None:
        """Prepare the storage for use."""
        ...