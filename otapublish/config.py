"""
config.py — Carga y gestiona la configuración de otapublish.

Se encarga de:
1. Cargar config.yaml (configuración del repo de updates)
2. Cargar .env (overrides locales: rutas, identidad del bot)
3. Resolver variables de entorno ${VAR} en los valores de config
4. Convertir cada sección a su dataclass

¿Por qué la identidad del commit es configurable?
    El autor de los commits de publicación (nombre + email) es un
    valor de configuración, no una constante. Así los tests pueden
    verificarlo sin depender del git config global de la máquina.

Uso:
    from otapublish.config import load_config
    config = load_config()
    print(config.git.author_name)  # "OTA Publish Script"
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

CONFIG_FILENAME = "config.yaml"


# ============================================================
# Dataclasses de configuración
# ============================================================
# Cada sección de config.yaml tiene su propia dataclass.
# ============================================================

@dataclass
class ExportConfig:
    """Cómo se invoca el export de Expo y dónde deja su output."""
    command: list[str] = field(default_factory=lambda: [
        "npx", "expo", "export", "-p", "android",
    ])
    platform: str = "android"
    output_dir: str = "dist"


@dataclass
class ExpoConfigSnapshot:
    """Extracción de la config pública del proyecto (expoConfig.json)."""
    command: list[str] = field(default_factory=lambda: [
        "npx", "expo", "config", "--type", "public", "--json",
    ])
    filename: str = "expoConfig.json"


@dataclass
class UpdatesConfig:
    """Layout del directorio de updates dentro del repo."""
    base_dir: str = "updates"
    channels: list[str] = field(default_factory=lambda: ["production", "beta"])
    require_channel: bool = False
    metadata_filename: str = "metadata.json"


@dataclass
class GitConfig:
    """Identidad del bot y destino del push."""
    author_name: str = "OTA Publish Script"
    author_email: str = "bot@expo.dev"
    remote: str = "origin"
    # Vacío = push al upstream de la rama actual
    branch: str = ""


@dataclass
class AppConfig:
    """Configuración completa de la aplicación."""
    export: ExportConfig = field(default_factory=ExportConfig)
    expo_config: ExpoConfigSnapshot = field(default_factory=ExpoConfigSnapshot)
    updates: UpdatesConfig = field(default_factory=UpdatesConfig)
    git: GitConfig = field(default_factory=GitConfig)

    # Raíz del repo de updates. Vacío en el YAML = directorio de config.yaml
    repo_path: str = ""


# ============================================================
# Funciones de carga
# ============================================================

def _resolve_env_vars(value: str) -> str:
    """
    Resuelve variables de entorno en un string.

    Ejemplo:
        "${OTA_REPO_PATH}" → "/srv/ota-updates"

    Si la variable no existe se deja el placeholder tal cual.
    """
    patron = re.compile(r"\$\{(\w+)\}")

    def reemplazar(match: re.Match) -> str:
        nombre_var = match.group(1)
        return os.environ.get(nombre_var, match.group(0))

    return patron.sub(reemplazar, value)


def _resolve_env_recursive(data: Any) -> Any:
    """Resuelve ${VARIABLE} recursivamente en un dict/list del YAML."""
    if isinstance(data, str):
        return _resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_recursive(item) for item in data]
    return data


def _dict_to_dataclass(data: dict, cls: type) -> Any:
    """
    Convierte un diccionario a una dataclass, ignorando keys desconocidas.

    Un config.yaml con keys extra (o de otra versión) no debe explotar.
    """
    campos_validos = {f.name for f in cls.__dataclass_fields__.values()}
    datos_filtrados = {k: v for k, v in data.items() if k in campos_validos}
    return cls(**datos_filtrados)


def _find_config_dir() -> Path:
    """
    Encuentra el directorio raíz del repo de updates (donde está config.yaml).

    Busca hacia arriba desde el directorio actual. Si no lo encuentra,
    usa el directorio actual.
    """
    current = Path.cwd()
    for parent in [current] + list(current.parents):
        if (parent / CONFIG_FILENAME).exists():
            return parent
    return current


def load_config(config_path: Path | None = None) -> AppConfig:
    """
    Carga la configuración completa de otapublish.

    Pasos:
    1. Carga .env para tener las variables de entorno disponibles
    2. Lee config.yaml (si no existe, valores por defecto)
    3. Resuelve ${VARIABLES} en los valores del YAML
    4. Convierte cada sección a su dataclass
    5. Aplica overrides del entorno (OTA_REPO_PATH, OTA_GIT_AUTHOR_*)

    Args:
        config_path: Ruta al config.yaml. Si es None, busca automáticamente.

    Returns:
        AppConfig con repo_path absoluto, o "" si nada lo configura
        (ni OTA_REPO_PATH, ni repo_path, ni un config.yaml encontrado).
    """
    proyecto_dir = _find_config_dir()
    env_path = proyecto_dir / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    if config_path is None:
        config_path = proyecto_dir / CONFIG_FILENAME
    else:
        proyecto_dir = config_path.parent

    raw_config: dict = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}

    config_resuelto = _resolve_env_recursive(raw_config)

    app_config = AppConfig(
        export=_dict_to_dataclass(config_resuelto.get("export", {}), ExportConfig),
        expo_config=_dict_to_dataclass(
            config_resuelto.get("expo_config", {}), ExpoConfigSnapshot
        ),
        updates=_dict_to_dataclass(
            config_resuelto.get("updates", {}), UpdatesConfig
        ),
        git=_dict_to_dataclass(config_resuelto.get("git", {}), GitConfig),
        repo_path=str(config_resuelto.get("repo_path", "") or ""),
    )

    # Overrides del entorno
    app_config.repo_path = os.environ.get("OTA_REPO_PATH", app_config.repo_path)
    app_config.git.author_name = os.environ.get(
        "OTA_GIT_AUTHOR_NAME", app_config.git.author_name
    )
    app_config.git.author_email = os.environ.get(
        "OTA_GIT_AUTHOR_EMAIL", app_config.git.author_email
    )

    if app_config.repo_path:
        repo = Path(app_config.repo_path).expanduser()
        if not repo.is_absolute():
            repo = proyecto_dir / repo
        app_config.repo_path = str(repo.resolve())
    elif config_path.exists():
        app_config.repo_path = str(proyecto_dir.resolve())
    # Sin config.yaml ni OTA_REPO_PATH el repo queda sin configurar (""):
    # nunca se asume el cwd, que suele ser el propio proyecto Expo.

    return app_config
