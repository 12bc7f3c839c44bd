import json
import os

import pytest

from metricstore.base import GAUGE, Metric
from metricstore.filestore import FileManager, create_dir

METRICS = [Metric(id="metric1", mtype=GAUGE, value=42.0)]


@pytest.fixture
def manager(tmp_path):
    fm = FileManager(tmp_path)
    yield fm
    try:
        fm.close()
    except OSError:
        pass


def test_new_manager_creates_file(tmp_path):
    with FileManager(tmp_path) as fm:
        assert fm.file_path == os.path.join(str(tmp_path), "metrics.txt")
        assert (tmp_path / "metrics.txt").exists()


def test_new_manager_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileManager(tmp_path / "fakedir")


def test_create_dir_success_and_existing(tmp_path):
    new_dir = tmp_path / "newdir"
    create_dir(new_dir)
    assert new_dir.is_dir()
    create_dir(new_dir)
    assert new_dir.is_dir()


def test_create_dir_missing_parent(tmp_path):
    with pytest.raises(FileNotFoundError):
        create_dir(tmp_path / "a" / "b")


def test_overwrite_then_read(manager):
    manager.overwrite(METRICS)
    assert manager.read_file() == METRICS


def test_overwrite_writes_json(manager, tmp_path):
    manager.overwrite(METRICS)
    content = (tmp_path / "metrics.txt").read_text(encoding="utf-8")
    assert json.loads(content) == [{"id": "metric1", "type": "gauge", "value": 42.0}]
    with FileManager(tmp_path) as reader:
        assert reader.read_file() == METRICS


def test_overwrite_replaces_previous_content(manager, tmp_path):
    manager.overwrite(METRICS * 3)
    manager.overwrite(METRICS)
    with FileManager(tmp_path) as reader:
        assert reader.read_file() == METRICS


def test_overwrite_missing_file(manager):
    os.remove(manager.file_path)
    with pytest.raises(FileNotFoundError):
        manager.overwrite(METRICS)


def test_read_empty_file(manager):
    assert manager.read_file() == []


def test_read_not_a_list(tmp_path):
    (tmp_path / "metrics.txt").write_text(json.dumps('{"not":"a list"'), encoding="utf-8")
    with FileManager(tmp_path) as fm:
        assert fm.read_file() == []


def test_read_malformed(tmp_path):
    (tmp_path / "metrics.txt").write_text("[{broken", encoding="utf-8")
    with FileManager(tmp_path) as fm:
        assert fm.read_file() == []


def test_read_existing_file(tmp_path):
    (tmp_path / "metrics.txt").write_text(
        '[{"id":"c","type":"counter","delta":5}]\n', encoding="utf-8"
    )
    with FileManager(tmp_path) as fm:
        assert fm.read_file() == [Metric(id="c", mtype="counter", delta=5)]


def test_close_twice_raises(tmp_path):
    fm = FileManager(tmp_path)
    fm.close()
    with pytest.raises(OSError):
        fm.close()


def test_read_after_close_raises(tmp_path):
    fm = FileManager(tmp_path)
    fm.close()
    with pytest.raises(OSError):
        fm.read_file()