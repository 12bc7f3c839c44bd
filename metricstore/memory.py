"""Metric storage kept in a dictionary, optionally mirrored to a file."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any

from metricstore.base import (
    COUNTER,
    GAUGE,
    MapNotAvailableError,
    Metric,
    MetricValue,
    MetricValueError,
    ValueNotFoundError,
)
from metricstore.filestore import FileManager

logger = logging.getLogger(__name__)


class MemStorage:
    """In-memory metric storage; with ``sync_save`` every change is written to disk."""

    def __init__(self, file_manager: FileManager | None, sync_save: bool) -> None:
        logger.info("init in memory storage")
        self.metrics: dict[str, Metric] | None = {}
        self.file_manager = file_manager
        self.sync_save = sync_save
        self._lock = threading.RLock()

    def upsert_by_value(self, metric: Metric, value: Any) -> None:
        """Set a gauge to ``value`` or add ``value`` to a counter."""
        new_value = MetricValue()
        new_value.set(metric.mtype, value)

        if metric.mtype == GAUGE:
            self._create(replace(metric, value=new_value.float_value))
        elif metric.mtype == COUNTER:
            existing = self._lookup(metric.id)
            if existing is None:
                self._create(replace(metric, delta=new_value.int_value))
            else:
                total = (existing.delta or 0) + new_value.int_value
                self._create(replace(existing, delta=total))
        else:
            raise MetricValueError()

    def list(self) -> list[Metric]:
        """Return all stored metrics in no particular order."""
        with self._lock:
            if self.metrics is None:
                raise MapNotAvailableError()
            return list(self.metrics.values())

    def get_by_name(self, name: str) -> Metric:
        """Return the metric called ``name``."""
        metric = self._lookup(name)
        if metric is None:
            raise ValueNotFoundError()
        return metric

    def insert_batch(self, metrics: list[Metric]) -> None:
        """Store many metrics; counters are added to existing ones."""
        with self._lock:
            for metric in metrics:
                if metric.mtype not in (GAUGE, COUNTER):
                    continue
                existing = self._lookup(metric.id)
                self._put(self._merge(existing, metric))
        self._save()

    def get_by_name_type(self, name: str, mtype: str) -> Metric:
        """Return the metric called ``name`` if it has type ``mtype``."""
        metric = self._lookup(name)
        if metric is None or metric.mtype != mtype:
            raise ValueNotFoundError()
        return metric

    def insert(self, metric: Metric) -> Metric:
        """Store ``metric``, adding to an existing counter, and return what is stored."""
        existing = self._lookup(metric.id)
        if existing is None:
            self._create(metric)
            return metric
        merged = self._merge(existing, metric)
        self._create(merged)
        self._save()
        return merged

    def close(self) -> None:
        """Nothing to release for memory storage."""

    def ping(self) -> None:
        """Raise MapNotAvailableError if the map is gone."""
        if self.metrics is None:
            logger.error("map not available")
            raise MapNotAvailableError()

    def run_migrations(self) -> None:
        """Load the metrics saved in the file into memory."""
        logger.info("run migrations")
        if self.file_manager is None:
            raise MapNotAvailableError("file manager not available")
        metrics = self.file_manager.read_file()
        self.insert_batch(metrics)
        logger.info("migrations completed")

    @staticmethod
    def _merge(existing: Metric | None, incoming: Metric) -> Metric:
        if existing is None or incoming.mtype != COUNTER:
            return incoming
        return replace(existing, delta=(existing.delta or 0) + (incoming.delta or 0))

    def _lookup(self, name: str) -> Metric | None:
        with self._lock:
            if self.metrics is None:
                raise MapNotAvailableError()
            return self.metrics.get(name)

    def _put(self, metric: Metric) -> None:
        with self._lock:
            if self.metrics is None:
                raise MapNotAvailableError()
            self.metrics[metric.id] = metric

    def _create(self, metric: Metric) -> None:
        self._put(metric)
        self._save()

    def _save(self) -> None:
        if self.sync_save and self.file_manager is not None:
            self.file_manager.overwrite(self.list())