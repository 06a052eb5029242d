"""
Configuration for pytest to set up the proper import paths and shared fixtures.
"""

import sys
from pathlib import Path

import pytest


# Add the parent directory to Python path so we can import lazy, models, utils
parent_dir = Path(__file__).parent.parent
sys.path.insert(0, str(parent_dir))

from utils import clear_performance_metrics


@pytest.fixture
def numbers():
    """The five element source used throughout the examples."""
    return [1, 2, 3, 4, 5]


@pytest.fixture
def call_log():
    """Records (element, index) pairs seen by a callback."""
    calls = []

    def record(el, index):
        calls.append((el, index))
        return el

    record.calls = calls
    return record


@pytest.fixture(autouse=True)
def reset_metrics():
    """Keep the module level performance history isolated per test."""
    clear_performance_metrics()
    yield
    clear_performance_metrics()
