"""Metric storage backed by a PostgreSQL table, over any DB-API 2.0 connection."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from contextlib import closing
from typing import Any

from metricstore.base import COUNTER, GAUGE, Metric, MetricValue, StorageError, ValueNotFoundError

logger = logging.getLogger(__name__)

_SELECT_ALL = "SELECT * FROM metric"
_SELECT_BY_NAME = "select * from metric where id = %s;"
_SELECT_BY_NAME_TYPE = 'select * from metric where id = %s and "type" = %s;'
_UPSERT = (
    "insert into metric (id, type, delta, value) "
    "values (%s, %s, %s, %s) on conflict (id) "
    "do update set delta = metric.delta + EXCLUDED.delta, value = EXCLUDED.value;"
)
_UPSERT_RETURNING = (
    "INSERT INTO metric (id, type, delta, value) "
    "VALUES (%s, %s, %s, %s) "
    "ON CONFLICT (id) "
    "DO UPDATE SET delta = metric.delta + EXCLUDED.delta, value = EXCLUDED.value "
    "RETURNING id, type, delta, value;"
)
_CREATE_TABLE = (
    "create table if not exists metric("
    "id varchar(200) unique not null, "
    '"type" varchar(50) not null, '
    "delta bigint, "
    '"value" double precision);'
)


def _params(metric: Metric) -> tuple[Any, ...]:
    return (metric.id, metric.mtype, metric.delta, metric.value)


def _to_metric(description: Sequence[Sequence[Any]], row: Sequence[Any]) -> Metric:
    names = [column[0] for column in description]
    return Metric.from_dict(dict(zip(names, row)))


class PgStorage:
    """Stores metrics in the ``metric`` table; the connection uses ``%s`` placeholders."""

    def __init__(self, connection: Any) -> None:
        self._conn = connection
        logger.info("init pg storage")

    def list(self) -> list[Metric]:
        """Return every stored metric."""
        try:
            with closing(self._conn.cursor()) as cur:
                cur.execute(_SELECT_ALL)
                rows = cur.fetchall()
                description = cur.description
        except Exception as exc:
            raise StorageError(f"failed to execute query: {exc}") from exc
        return [_to_metric(description, row) for row in rows]

    def upsert_by_value(self, metric: Metric, value: Any) -> None:
        """Set a gauge to ``value`` or add ``value`` to a counter."""
        new_value = MetricValue()
        new_value.set(metric.mtype, value)

        try:
            existing = self.get_by_name(metric.id)
        except ValueNotFoundError:
            existing = metric

        if metric.mtype == GAUGE:
            self._create(Metric(existing.id, existing.mtype, existing.delta, new_value.float_value))
        elif metric.mtype == COUNTER:
            self._create(Metric(existing.id, existing.mtype, new_value.int_value, existing.value))

    def get_by_name(self, name: str) -> Metric:
        """Return the metric called ``name``."""
        return self._fetch_one(_SELECT_BY_NAME, (name,))

    def insert_batch(self, metrics: list[Metric]) -> None:
        """Upsert all ``metrics`` in one transaction."""
        try:
            cur = self._conn.cursor()
        except Exception as exc:
            raise StorageError(f"failed to begin transaction: {exc}") from exc

        with closing(cur):
            for metric in metrics:
                try:
                    cur.execute(_UPSERT, _params(metric))
                except Exception as exc:
                    self._conn.rollback()
                    raise StorageError(f"failed to execute statement: {exc}") from exc

        try:
            self._conn.commit()
        except Exception as exc:
            raise StorageError(f"failed to commit transaction: {exc}") from exc

    def get_by_name_type(self, name: str, mtype: str) -> Metric:
        """Return the metric called ``name`` with type ``mtype``."""
        return self._fetch_one(_SELECT_BY_NAME_TYPE, (name, mtype))

    def insert(self, metric: Metric) -> Metric:
        """Upsert ``metric`` and return the row as stored."""
        try:
            with closing(self._conn.cursor()) as cur:
                cur.execute(_UPSERT_RETURNING, _params(metric))
                row = cur.fetchone()
                description = cur.description
        except Exception:
            self._conn.rollback()
            raise
        if row is None:
            self._conn.rollback()
            raise ValueNotFoundError()
        self._conn.commit()
        return _to_metric(description, row)

    def close(self) -> None:
        """Close the connection."""
        try:
            self._conn.close()
        except Exception as exc:
            logger.error("%s", exc)
            raise

    def ping(self) -> None:
        """Check that the database answers."""
        try:
            with closing(self._conn.cursor()) as cur:
                cur.execute("SELECT 1")
                cur.fetchone()
        except Exception as exc:
            logger.error("%s", exc)
            raise

    def run_migrations(self) -> None:
        """Create the ``metric`` table if it does not exist."""
        logger.info("run migrations")
        with closing(self._conn.cursor()) as cur:
            cur.execute(_CREATE_TABLE)
        self._conn.commit()
        logger.info("migrations completed")

    def _fetch_one(self, query: str, params: tuple[Any, ...]) -> Metric:
        with closing(self._conn.cursor()) as cur:
            cur.execute(query, params)
            row = cur.fetchone()
            description = cur.description
        if row is None:
            raise ValueNotFoundError()
        return _to_metric(description, row)

    def _create(self, metric: Metric) -> None:
        try:
            with closing(self._conn.cursor()) as cur:
                cur.execute(_UPSERT, _params(metric))
        except Exception:
            logger.error("error insert row to pg")
            self._conn.rollback()
            raise
        self._conn.commit()