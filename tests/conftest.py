"""Pytest fixtures for the cartography tests."""

import json

import pytest


def _records(pairs):
    return [{"t": name, "n": count} for name, count in pairs]


@pytest.fixture
def write_dataset(tmp_path):
    """Return a helper that writes {tag: [(name, count), ...]} as a dataset file."""
    datasets = tmp_path / "datasets"
    datasets.mkdir()

    def _write(filename, relations, raw=None):
        path = datasets / filename
        if raw is not None:
            path.write_text(raw, encoding="utf-8")
        else:
            data = {tag: _records(pairs) for tag, pairs in relations.items()}
            path.write_text(json.dumps(data), encoding="utf-8")
        return path

    _write.dir = datasets
    return _write


@pytest.fixture
def triangle_relations():
    """a <-> b with count 10, c -> a with count 5."""
    return {
        "a": [("b", 10)],
        "b": [("a", 10)],
        "c": [("a", 5)],
    }


@pytest.fixture
def two_domains(write_dataset):
    """Two domains sharing the python tag and the (python, linux) edge."""
    write_dataset("stackoverflow.json", {
        "python": [("django", 400), ("linux", 10)],
        "django": [("python", 400)],
        "linux": [("python", 10)],
    })
    write_dataset("unix.json", {
        "linux": [("python", 20), ("bash", 300)],
        "python": [("linux", 20)],
        "bash": [("linux", 300)],
    })
    return write_dataset.dir
