"""Fixtures compartidas: repo de updates con remoto bare y proyecto Expo falso."""

from __future__ import annotations

import sys
from pathlib import Path

import git as gitpython
import pytest

from otapublish.config import AppConfig

FAKE_EXPO = str(Path(__file__).parent / "fake_expo.py")


def expo_command(*args: str) -> list[str]:
    """Comando que corre fake_expo.py con el intérprete actual."""
    return [sys.executable, FAKE_EXPO, *args]


@pytest.fixture(autouse=True)
def entorno_limpio(monkeypatch):
    """Evita que el entorno de la máquina contamine los tests."""
    for var in ("OTA_REPO_PATH", "OTA_GIT_AUTHOR_NAME", "OTA_GIT_AUTHOR_EMAIL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def remote_repo(tmp_path) -> gitpython.Repo:
    """Remoto bare que hace de GitHub."""
    return gitpython.Repo.init(tmp_path / "remote.git", bare=True)


@pytest.fixture
def update_store(tmp_path, remote_repo) -> gitpython.Repo:
    """Repo de updates vacío con `origin` apuntando al remoto bare."""
    repo = gitpython.Repo.init(tmp_path / "store")
    repo.create_remote("origin", remote_repo.git_dir)
    return repo


@pytest.fixture
def project_dir(tmp_path) -> Path:
    """Directorio del proyecto Expo (el export lo llena fake_expo.py)."""
    ruta = tmp_path / "appA"
    ruta.mkdir()
    return ruta


@pytest.fixture
def make_config(update_store):
    """Fábrica de AppConfig apuntando al repo de updates y a fake_expo.py."""

    def _make(*export_args: str, config_args: tuple[str, ...] = ()) -> AppConfig:
        config = AppConfig(repo_path=update_store.working_tree_dir)
        config.export.command = expo_command("export", *export_args)
        config.expo_config.command = expo_command("config", *config_args)
        config.git.branch = "main"
        return config

    return _make
