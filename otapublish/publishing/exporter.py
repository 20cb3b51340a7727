"""
exporter.py — Corre `expo export` sobre el proyecto.

El export es bloqueante y su output va directo a la terminal (no se
captura): si falla, el usuario ve el error de Expo arriba del nuestro.

Uso:
    from otapublish.publishing.exporter import ExpoExporter
    exporter = ExpoExporter(config.export)
    dist = exporter.export(project_dir)
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from otapublish.config import ExportConfig
from otapublish.errors import ExportFailedError, ExportOutputMissingError
from otapublish.utils.logger import get_logger

logger = get_logger("otapublish.export")


class ExpoExporter:
    """
    Invoca el toolchain de export y localiza su output.

    Args:
        config: Sección `export` de la configuración.
    """

    def __init__(self, config: ExportConfig):
        self._config = config

    def run(self, project_dir: Path) -> None:
        """
        Ejecuta el comando de export con cwd en el proyecto.

        Raises:
            ExportFailedError: Si el comando termina con status != 0
                o el ejecutable no existe.
        """
        comando = self._config.command
        logger.info(f"Corriendo \"{' '.join(comando)}\" en {project_dir}")
        try:
            result = subprocess.run(comando, cwd=project_dir)
        except FileNotFoundError as e:
            raise ExportFailedError(
                f"No se encontró el comando de export: {comando[0]}",
                returncode=127,
            ) from e

        if result.returncode != 0:
            raise ExportFailedError(
                f"El export terminó con status {result.returncode}",
                returncode=result.returncode,
            )

    def output_dir(self, project_dir: Path) -> Path:
        """
        Verifica que el export dejó su directorio de salida.

        Raises:
            ExportOutputMissingError: Si dist/ no existe.
        """
        dist = project_dir / self._config.output_dir
        if not dist.is_dir():
            raise ExportOutputMissingError(
                f"No se encontró \"{self._config.output_dir}\" después del "
                "export. Revisa los errores de arriba."
            )
        return dist

    def export(self, project_dir: Path) -> Path:
        """Corre el export y devuelve la ruta a su output."""
        self.run(project_dir)
        return self.output_dir(project_dir)
