"""
Pytest configuration and shared fixtures for tagpolicy tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from tagpolicy.logging import SilentLogger, set_global_logger


class RecordingLogger:
    """Logger that keeps every message for assertions."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str, str]] = []

    def step(self, step: int, total: int, message: str) -> None:
        self.messages.append(("step", f"{step}/{total}", message))

    def verbose(self, prefix: str, message: str) -> None:
        self.messages.append(("verbose", prefix, message))

    def debug(self, prefix: str, message: str) -> None:
        self.messages.append(("debug", prefix, message))

    def text(self) -> str:
        return "\n".join(m for _, _, m in self.messages)


@pytest.fixture(autouse=True)
def reset_global_logger():
    """Keep CLI tests from leaking a configured logger into other tests."""
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Provide a logger that records messages."""
    return RecordingLogger()


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def sample_watch_data() -> dict[str, Any]:
    """
    Provide sample watch file data.

    Returns a watch file with defaults and three images.
    """
    return {
        "apiVersion": "tagpolicy/v1",
        "defaults": {
            "policy": "minor",
            "match_pre_release": True,
        },
        "images": [
            {
                "image": "karolis/webhook-demo:1.4.5",
                "tags": ["1.4.6", "1.5.0", "2.0.0", "latest"],
            },
            {
                "image": "registry.example.com/api:20.1-9638",
                "policy": "all",
                "candidate": "20.1-9700",
            },
            {
                "image": "example/frozen:3.2.1",
                "policy": "none",
                "tags": ["3.2.2"],
            },
        ],
    }


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("watch.yaml", {"key": "value"})
    """

    def _create(filename: str, data: Any) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)
        return path

    return _create
