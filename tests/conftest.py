"""
Pytest configuration for the sexpedit test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- A fresh engine configuration per test
- Dialect and temporary file fixtures
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from sexpedit.cli.config import CLIConfig
from sexpedit.config import EngineConfig, reset_engine_config
from sexpedit.dialects import CLOJURE, COMMON_LISP, EMACS_LISP, SCHEME
from sexpedit.logging_config import reset_logging, setup_logging


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest for machine-mode operation."""
    os.environ.setdefault("SEXPEDIT_MACHINE_MODE", "1")


# ============================================================================
# LOGGING AND CONFIG FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    reset_logging()
    setup_logging(level="DEBUG", suppress_console=True)


@pytest.fixture(autouse=True)
def fresh_config():
    """Every test sees the environment's engine config, never a cached one."""
    reset_engine_config()
    CLIConfig.set_machine_mode(None)
    yield
    reset_engine_config()
    CLIConfig.set_machine_mode(None)


@pytest.fixture
def config():
    """Default engine configuration, independent of SEXPEDIT_* variables."""
    return EngineConfig(
        fill_column=80,
        pretty_threshold=4000,
        reindent_mode="indent",
        safe_actions=True,
        ignore_strings=True,
        ignore_comments=True,
        protect_comments=True,
        max_scan_length=1500,
    )


# ============================================================================
# DIALECT FIXTURES
# ============================================================================

@pytest.fixture
def elisp():
    return EMACS_LISP


@pytest.fixture
def clojure():
    return CLOJURE


@pytest.fixture
def scheme():
    return SCHEME


@pytest.fixture
def common_lisp():
    return COMMON_LISP


# ============================================================================
# TEMPORARY DIRECTORY FIXTURES
# ============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that's cleaned up after the test."""
    tmp = Path(tempfile.mkdtemp(prefix="sexpedit_test_"))
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def lisp_file(temp_dir):
    """
    Write a small Emacs Lisp file.

    Returns:
        Factory taking the file content (and optional name) and returning its path.
    """
    def _make(content: str, name: str = "sample.el") -> Path:
        path = temp_dir / name
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        return path
    return _make
