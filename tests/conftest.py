"""Shared pytest fixtures for dirlens tests."""
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator

import pytest
import yaml

from dirlens.infrastructure import config_manager, logger

PNG_HEADER = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def listing_dir(temp_dir: Path) -> Path:
    """Directory with a text file, a PNG and a hidden file."""
    x = temp_dir / "x"
    x.mkdir()
    (x / "a.txt").write_text("hello")
    (x / "b.png").write_bytes(PNG_HEADER)
    (x / ".secret").write_text("s3cr3t")
    return x


@pytest.fixture
def source_dir(temp_dir: Path) -> Path:
    """Create a source tree with nested, hidden and ignored directories."""
    source = temp_dir / "source"
    source.mkdir()

    (source / "file.txt").write_text("Hello World")
    (source / "README.md").write_text("# Test README\n\nTest content")
    (source / "script.py").write_text("#!/usr/bin/env python\nprint('test')\n")

    (source / "subdir").mkdir()
    (source / "subdir" / "nested.txt").write_text("Nested content")

    (source / "docs").mkdir()
    (source / "docs" / "api.md").write_text("# API Documentation")

    (source / ".hidden").write_text("Hidden file")
    (source / ".config").mkdir()
    (source / ".config" / "settings.ini").write_text("[main]\n")

    (source / "node_modules").mkdir()
    (source / "node_modules" / "left-pad.js").write_text("module.exports = 1;\n")

    return source


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Provide a sample dirlens configuration."""
    return {
        "dirlens": {
            "listing": {
                "include_hidden": True,
                "recursive": False,
                "ignore": [".git", "build"],
                "ignore_recursive": ["node_modules", ".git", "target"],
                "max_workers": 4,
                "format": "{{ file.name }}",
            },
            "logging": {
                "level": "DEBUG",
                "file": None,
            },
        }
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: Dict[str, Any]) -> Path:
    """Create a configuration file."""
    config_path = temp_dir / "dirlens.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Reset global logger and config, and hide DIRLENS_* variables."""
    import os

    for key in list(os.environ):
        if key.startswith(config_manager.ENV_PREFIX):
            monkeypatch.delenv(key)
    monkeypatch.setattr(config_manager, "SYSTEM_CONFIG_PATH", "/nonexistent/dirlens/config.yaml")
    monkeypatch.setattr(config_manager, "USER_CONFIG_PATH", "/nonexistent/dirlens/user.yaml")
    yield
    config_manager.set_global_config(None)
    logger._global_logger = None
