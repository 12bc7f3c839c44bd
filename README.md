# metricstore

Storage backends for two kinds of metric:

- **gauge**: a floating-point value that is replaced on every update;
- **counter**: an integer delta that accumulates across updates.

Two backends are provided, `MemStorage` (in `metricstore.memory`) and
`PgStorage` (in `metricstore.postgres`). Both offer the operations `list`,
`get_by_name`, `get_by_name_type`, `insert`, `insert_batch` and
`upsert_by_value`, along with `ping`, `close` and `run_migrations`. The
`metricstore.base.Storage` protocol describes this common set.

## Installation

```
pip install .
```

The package has no runtime dependencies.

## Metrics

```python
from metricstore.base import Metric, MetricValue

gauge = Metric(id="Alloc", mtype="gauge", value=12.5)
counter = Metric(id="PollCount", mtype="counter", delta=3)

counter.to_dict()   # {"id": "PollCount", "type": "counter", "delta": 3}
Metric.from_dict({"id": "Alloc", "type": "gauge", "value": 12.5})
```

`Metric` is a frozen dataclass. `to_dict` leaves out `delta` and `value` when
they are `None`.

`MetricValue().set(metric_type, value)` accepts an `int` (not a `bool`) for
`"counter"` and a `float` for `"gauge"`, storing it in `int_value` or
`float_value`. Any other combination raises `MetricValueError`.

## In-memory storage with a file on disk

```python
from metricstore.base import Metric
from metricstore.filestore import FileManager, create_dir
from metricstore.memory import MemStorage

create_dir("data")                       # no error if it already exists
manager = FileManager("data")            # opens or creates data/metrics.txt
store = MemStorage(manager, sync_save=True)

store.run_migrations()                   # loads the list saved in the file
store.upsert_by_value(Metric(id="PollCount", mtype="counter"), 5)
store.upsert_by_value(Metric(id="PollCount", mtype="counter"), 2)
store.get_by_name("PollCount").delta     # 7
store.upsert_by_value(Metric(id="Alloc", mtype="gauge"), 1.5)
```

Behaviour of `MemStorage`:

- `upsert_by_value` replaces a gauge's value and adds to a counter's delta.
- `insert` and `insert_batch` store metrics as given, except that a counter
  that already exists has the new delta added to it; entries of any type other
  than `"gauge"` or `"counter"` are skipped by `insert_batch`.
- `get_by_name` and `get_by_name_type` raise `ValueNotFoundError` when nothing
  matches (including when the type differs).
- `list` returns the stored metrics in no particular order.
- With `sync_save=True` and a file manager, every change rewrites the file
  with the full set of metrics as one JSON list. With `sync_save=False`,
  nothing is written.
- `run_migrations` reads the file through the manager and inserts what it
  finds; it raises `MapNotAvailableError` if no file manager was given.
- `close` does nothing.

`FileManager` can be used as a context manager. `overwrite(metrics)` truncates
and rewrites `metrics.txt` (the file must still exist). `read_file()` returns
the next JSON list from the file, or an empty list when the file is empty or
does not hold a readable list. `close()` closes the file; calling it, or
`read_file`, on a closed manager raises `OSError`.

## PostgreSQL storage

`PgStorage` takes an open DB-API 2.0 connection whose driver uses `%s`
placeholders, such as a psycopg connection. No driver is bundled; install one
yourself.

```python
from metricstore.base import Metric
from metricstore.postgres import PgStorage

store = PgStorage(connection)
store.run_migrations()                   # create table if not exists metric
store.insert(Metric(id="PollCount", mtype="counter", delta=1))
store.get_by_name_type("PollCount", "counter")
```

Rows are upserted on `id`: the stored delta is added to, the value replaced.
`insert` returns the row as stored. `insert_batch` runs all rows in one
transaction and rolls back on the first failure. Failures in `list` and
`insert_batch` are raised as `StorageError` whose message says which step
failed; other driver errors are passed through. `ping` runs `SELECT 1`.

## Errors

All errors raised by the package itself derive from
`metricstore.base.StorageError`: `MapNotAvailableError`, `MetricValueError`
and `ValueNotFoundError`.

## What this package does not do

It is a storage layer only. It has no command-line program, no HTTP server
for receiving metrics, and no agent that collects them; an application has
to supply those and call the storage classes directly.

## Tests

```
pip install .[test]
pytest
```