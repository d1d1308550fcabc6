"""
Pytest configuration and fixtures for arcbuilder tests.
"""

import os
import sys
from pathlib import Path

import pytest

# Add the repo root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# External tools are never run by the tests; make sure nothing configured
# in the developer's shell leaks into the command lines under test.
for _name in (
    "ARCBUILD_BOWER",
    "ARCBUILD_NPM",
    "ARCBUILD_BUNDLER",
    "ARCBUILD_WRAPPER",
    "ARCBUILD_INSTALL_TIMEOUT",
    "ARCBUILD_BUNDLE_TIMEOUT",
    "ARCBUILD_WRAPPER_TIMEOUT",
):
    os.environ.pop(_name, None)


class RecordingLogger:
    """Logger double that keeps every message."""

    def __init__(self):
        self.messages = []

    def _record(self, level, parts):
        self.messages.append((level, " ".join(str(p) for p in parts)))

    def debug(self, *parts):
        self._record("debug", parts)

    def log(self, *parts):
        self._record("log", parts)

    def info(self, *parts):
        self._record("info", parts)

    def warn(self, *parts):
        self._record("warn", parts)

    def error(self, *parts):
        self._record("error", parts)

    def at(self, level):
        return [msg for lvl, msg in self.messages if lvl == level]


@pytest.fixture
def recording_logger():
    """A logger that records messages instead of printing them."""
    return RecordingLogger()


@pytest.fixture
def workspace_dir(tmp_path):
    """Create a temporary workspace directory."""
    path = tmp_path / "_arctmp"
    path.mkdir()
    return path


@pytest.fixture
def arc_refs():
    """Default scope references used across the manifest tests."""
    return [
        "raml-other-panel",
        "advanced-rest-client/paper-combobox",
        "paper-fabric#1.0.0",
    ]


@pytest.fixture
def extra_refs():
    """Third-party references used across the manifest tests."""
    return [
        "raml-request-panel",
        "advanced-rest-client/paper-autocomplete",
        "PolymerElements/paper-fab#1.0.0",
        "PolymerElements/paper-input#^1.0.0",
    ]
