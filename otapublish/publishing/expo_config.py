"""
expo_config.py — Snapshot de la config pública del proyecto Expo.

La config pública (la que Expo considera segura para embeber en el
bundle) se obtiene del propio CLI de Expo:

    npx expo config --type public --json

y se guarda como expoConfig.json junto al update.
"""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any

from otapublish.config import ExpoConfigSnapshot
from otapublish.errors import ConfigSnapshotError
from otapublish.publishing.metadata import write_json
from otapublish.utils.logger import get_logger

logger = get_logger("otapublish.expo_config")


class ExpoConfigExtractor:
    """
    Extrae la config pública de un proyecto Expo.

    Args:
        config: Sección `expo_config` de la configuración.
    """

    def __init__(self, config: ExpoConfigSnapshot):
        self._config = config

    @property
    def filename(self) -> str:
        return self._config.filename

    def extract(self, project_dir: Path) -> dict[str, Any]:
        """
        Corre el comando de config y parsea su salida.

        Raises:
            ConfigSnapshotError: Si el comando falla o no devuelve un objeto JSON.
        """
        comando = self._config.command
        try:
            result = subprocess.run(
                comando,
                cwd=project_dir,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise ConfigSnapshotError(
                f"No se encontró el comando: {comando[0]}", exit_code=127
            ) from e

        if result.returncode != 0:
            raise ConfigSnapshotError(
                f"\"{' '.join(comando)}\" terminó con status "
                f"{result.returncode}: {result.stderr.strip()}",
                exit_code=result.returncode,
            )

        try:
            exp = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ConfigSnapshotError(
                f"La config pública no es JSON válido: {e}"
            ) from e

        if not isinstance(exp, dict):
            raise ConfigSnapshotError("La config pública no es un objeto JSON")
        return exp

    def snapshot(self, project_dir: Path, destination: Path) -> Path:
        """Extrae la config pública y la escribe en el directorio del update."""
        logger.info("Extrayendo config pública de Expo...")
        exp = self.extract(project_dir)
        ruta = destination / self._config.filename
        write_json(ruta, exp)
        logger.info(f"Config pública guardada en {ruta}")
        return ruta
