"""Shared pytest fixtures for node packages inventory tests."""

import json
from pathlib import Path

import pytest

from node_packages.config import reset_config_manager
from node_packages.logging import close_logging

MANAGER_ENV_VARS = (
    "PNPM_HOME",
    "YARN_CACHE_FOLDER",
    "DENO_DIR",
    "NODE_PACKAGES_MANAGERS",
    "NODE_PACKAGES_MANIFEST",
    "NODE_PACKAGES_FOLLOW_SYMLINKS",
    "NODE_PACKAGES_MAX_WORKERS",
    "NODE_PACKAGES_OUTPUT_FORMAT",
    "NODE_PACKAGES_LOG_LEVEL",
    "NODE_PACKAGES_LOG_FILE",
    "NODE_PACKAGES_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    for name in MANAGER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config_manager()
    yield
    reset_config_manager()
    close_logging()


@pytest.fixture
def write_manifest():
    """Write a package.json, creating parent directories."""

    def _write(path: Path, name=None, version=None, raw=None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        if raw is None:
            data = {}
            if name is not None:
                data["name"] = name
            if version is not None:
                data["version"] = version
            raw = json.dumps(data)
        path.write_text(raw, encoding="utf-8")
        return path

    return _write
