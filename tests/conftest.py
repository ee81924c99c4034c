"""
Shared pytest fixtures for dcfail tests.

Fixture Organization
--------------------
- **clean_env**: Removes DCFAIL_* variables so host settings don't leak in
- **write_config**: Writes a dcfail.yaml into a temporary directory
- **reset_logging**: Restores default logging after each test (autouse)
"""

import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, Generator

import pytest
import yaml

from dcfail.core import logging as dcfail_logging
from dcfail.core.logging import LogConfig


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every DCFAIL_* environment variable for the test."""
    for name in list(os.environ):
        if name.startswith("DCFAIL_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[Dict[str, Any]], Path]:
    """Write a dcfail.yaml built from a dict.

    Example:
        def test_load(write_config):
            path = write_config({"data_call": {...}})
    """

    def _write(data: Dict[str, Any], filename: str = "dcfail.yaml") -> Path:
        path = tmp_path / filename
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo configure_logging() calls made by a test."""
    root_level = logging.getLogger().level
    yield
    logging.getLogger().setLevel(root_level)
    default = LogConfig()
    dcfail_logging._ConfigHolder.set_config(default)
    for structured in dcfail_logging._loggers.values():
        structured.reconfigure(default)
