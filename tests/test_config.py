"""
test_config.py — Tests para el módulo de configuración.

Verificamos que:
1. Los valores por defecto reproducen el flujo clásico (android, origin)
2. Las variables de entorno se resuelven y pueden sobreescribir valores
3. config.yaml se mapea a las dataclasses ignorando keys desconocidas
4. repo_path siempre queda como ruta absoluta
"""

from pathlib import Path
from unittest.mock import patch

import git as gitpython
import pytest

from otapublish.config import (
    AppConfig,
    ExportConfig,
    GitConfig,
    UpdatesConfig,
    load_config,
    _dict_to_dataclass,
    _resolve_env_vars,
    _resolve_env_recursive,
)


class TestResolveEnvVars:
    """Tests para la resolución de variables de entorno."""

    def test_resuelve_variable_existente(self):
        """Debe reemplazar ${VAR} con el valor de la variable de entorno."""
        with patch.dict("os.environ", {"MI_VAR": "hola"}):
            assert _resolve_env_vars("${MI_VAR}/updates") == "hola/updates"

    def test_mantiene_variable_inexistente(self):
        """Si la variable no existe, debe mantener el placeholder."""
        assert _resolve_env_vars("${NO_EXISTE_OTA}") == "${NO_EXISTE_OTA}"

    def test_resuelve_en_estructuras_anidadas(self):
        """Debe resolver dentro de dicts y listas, sin tocar otros tipos."""
        with patch.dict("os.environ", {"CANAL": "beta"}):
            datos = {"updates": {"channels": ["production", "${CANAL}"]}, "n": 3}
            resultado = _resolve_env_recursive(datos)
            assert resultado["updates"]["channels"] == ["production", "beta"]
            assert resultado["n"] == 3


class TestDataclasses:
    """Tests para los valores por defecto."""

    def test_valores_por_defecto(self):
        """AppConfig debe reproducir el flujo clásico de publicación."""
        config = AppConfig()
        assert config.export.command == ["npx", "expo", "export", "-p", "android"]
        assert config.export.platform == "android"
        assert config.export.output_dir == "dist"
        assert config.expo_config.filename == "expoConfig.json"
        assert config.updates.base_dir == "updates"
        assert config.updates.channels == ["production", "beta"]
        assert config.updates.require_channel is False
        assert config.git.author_name == "OTA Publish Script"
        assert config.git.author_email == "bot@expo.dev"
        assert config.git.remote == "origin"

    def test_listas_no_compartidas(self):
        """Cada instancia debe tener su propia lista de canales."""
        a, b = UpdatesConfig(), UpdatesConfig()
        a.channels.append("alpha")
        assert b.channels == ["production", "beta"]

    def test_ignora_keys_desconocidas(self):
        """Keys extra en el YAML no deben romper la carga."""
        git = _dict_to_dataclass({"remote": "upstream", "extra": 1}, GitConfig)
        assert git.remote == "upstream"


class TestLoadConfig:
    """Tests para la función load_config."""

    def test_carga_sin_archivo(self, tmp_path):
        """Sin config.yaml: defaults, y el repo queda sin configurar."""
        with patch("otapublish.config._find_config_dir", return_value=tmp_path):
            config = load_config()
        assert isinstance(config, AppConfig)
        assert config.export == ExportConfig()
        assert config.repo_path == ""

    def test_cwd_sin_config_no_es_el_repo(self, tmp_path, monkeypatch):
        """Parado dentro de un proyecto git sin config.yaml, el cwd NO se vuelve el repo."""
        proyecto = tmp_path / "appA"
        proyecto.mkdir()
        gitpython.Repo.init(proyecto)
        monkeypatch.chdir(proyecto)
        config = load_config()
        assert config.repo_path == ""

    def test_config_yaml_define_el_repo(self, tmp_path):
        """Con config.yaml (aunque no tenga repo_path), el repo es su directorio."""
        (tmp_path / "config.yaml").write_text("git:\n  remote: origin\n", encoding="utf-8")
        with patch("otapublish.config._find_config_dir", return_value=tmp_path):
            config = load_config()
        assert config.repo_path == str(tmp_path.resolve())

    def test_carga_yaml(self, tmp_path):
        """Las secciones del YAML deben llegar a sus dataclasses."""
        (tmp_path / "config.yaml").write_text(
            "updates:\n"
            "  channels: [production, beta, alpha]\n"
            "  require_channel: true\n"
            "git:\n"
            "  author_name: Release Bot\n"
            "  branch: main\n",
            encoding="utf-8",
        )
        with patch("otapublish.config._find_config_dir", return_value=tmp_path):
            config = load_config()
        assert config.updates.channels == ["production", "beta", "alpha"]
        assert config.updates.require_channel is True
        assert config.git.author_name == "Release Bot"
        assert config.git.author_email == "bot@expo.dev"
        assert config.git.branch == "main"

    def test_repo_path_relativo_al_config(self, tmp_path):
        """Un repo_path relativo se resuelve contra el directorio del config."""
        (tmp_path / "config.yaml").write_text("repo_path: store\n", encoding="utf-8")
        with patch("otapublish.config._find_config_dir", return_value=tmp_path):
            config = load_config()
        assert config.repo_path == str((tmp_path / "store").resolve())

    def test_overrides_de_entorno(self, tmp_path, monkeypatch):
        """OTA_REPO_PATH y OTA_GIT_AUTHOR_* tienen prioridad sobre el YAML."""
        (tmp_path / "config.yaml").write_text(
            "git:\n  author_name: Desde YAML\n", encoding="utf-8"
        )
        monkeypatch.setenv("OTA_REPO_PATH", str(tmp_path / "otro"))
        monkeypatch.setenv("OTA_GIT_AUTHOR_NAME", "Desde Env")
        monkeypatch.setenv("OTA_GIT_AUTHOR_EMAIL", "ci@example.com")
        with patch("otapublish.config._find_config_dir", return_value=tmp_path):
            config = load_config()
        assert config.repo_path == str((tmp_path / "otro").resolve())
        assert config.git.author_name == "Desde Env"
        assert config.git.author_email == "ci@example.com"

    def test_config_path_explicito(self, tmp_path):
        """Con config_path explícito, el repo por defecto es su directorio."""
        otro = tmp_path / "store"
        otro.mkdir()
        (otro / "config.yaml").write_text("updates:\n  base_dir: ota\n", encoding="utf-8")
        with patch("otapublish.config._find_config_dir", return_value=tmp_path):
            config = load_config(otro / "config.yaml")
        assert config.updates.base_dir == "ota"
        assert config.repo_path == str(otro.resolve())
