"""Shared fixtures for the timing plot tests."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest


@pytest.fixture
def write_csv(tmp_path):
    """Write ``text`` to a CSV file under tmp_path and return its path."""

    def _write(name, text):
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def timing_files(write_csv):
    """The two-row scenario used throughout: memo times in milliseconds."""
    no_memo = write_csv("fib-no-memo-results.csv", "n,time\n1,0.0001\n2,0.0002\n")
    memo = write_csv("fib-memo-results.csv", "n,time\n1,50\n2,60\n")
    return no_memo, memo


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")
