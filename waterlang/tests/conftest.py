"""
Pytest configuration for water tests.
"""
from pathlib import Path
import os
import sys

import pytest


# Ensure the project root is on the Python path for all tests
PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def no_debug_dump(monkeypatch):
    """
    Keep a WATERDEBUG set in the calling shell from changing CLI output.
    """
    if os.environ.get("WATERDEBUG"):
        monkeypatch.delenv("WATERDEBUG")
