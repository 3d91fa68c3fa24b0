"""Pytest configuration: fast-by-default setup.

Slow tests (large images, threaded band execution) are skipped unless --slow is passed.
Run the full suite:   pytest --slow
Run fast tests only:  pytest          (default)
"""
import numpy as np
import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--slow",
        action="store_true",
        default=False,
        help="Run slow tests on large images",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--slow"):
        return  # run everything
    skip_slow = pytest.mark.skip(reason="slow test skipped, pass --slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
