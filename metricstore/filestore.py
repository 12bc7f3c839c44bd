"""JSON file persistence of metrics."""

from __future__ import annotations

import errno
import json
import logging
import os
from collections.abc import Iterable
from types import TracebackType

from metricstore.base import Metric

logger = logging.getLogger(__name__)

_FILE_NAME = "metrics.txt"


def create_dir(path: str | os.PathLike[str]) -> None:
    """Create the directory ``path`` unless it already exists."""
    if not os.path.exists(path):
        try:
            os.mkdir(path, 0o755)
        except OSError:
            logger.error("the directory %s not created", path)
            raise
    logger.info("the directory %s is done", path)


class FileManager:
    """Keeps metrics in ``metrics.txt`` inside a directory."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.file_path = os.path.join(os.fspath(path), _FILE_NAME)
        fd = os.open(self.file_path, os.O_RDWR | os.O_CREAT, 0o666)
        self._file = os.fdopen(fd, "r+", encoding="utf-8")
        self._pending = ""
        self._decoder = json.JSONDecoder()

    def __enter__(self) -> FileManager:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if not self._file.closed:
            self.close()

    def overwrite(self, metrics: Iterable[Metric]) -> None:
        """Replace the file contents with ``metrics``; the file must exist."""
        payload = [metric.to_dict() for metric in metrics]
        fd = os.open(self.file_path, os.O_WRONLY | os.O_TRUNC)
        with os.fdopen(fd, "w", encoding="utf-8") as out:
            json.dump(payload, out)
            out.write("\n")

    def read_file(self) -> list[Metric]:
        """Read the next stored list of metrics; empty if none can be decoded."""
        if self._file.closed:
            raise OSError(errno.EBADF, "file already closed", self.file_path)
        text = (self._pending + self._file.read()).lstrip()
        if not text:
            self._pending = ""
            return []
        try:
            obj, end = self._decoder.raw_decode(text)
        except json.JSONDecodeError:
            logger.warning("warning read metrics from file")
            self._pending = ""
            return []
        self._pending = text[end:]
        if obj is None:
            return []
        if not isinstance(obj, list):
            logger.warning("warning read metrics from file")
            return []
        try:
            return [Metric.from_dict(item) for item in obj]
        except (KeyError, TypeError, ValueError):
            logger.warning("warning read metrics from file")
            return []

    def close(self) -> None:
        """Close the underlying file; closing twice is an error."""
        if self._file.closed:
            raise OSError(errno.EBADF, "file already closed", self.file_path)
        self._file.close()