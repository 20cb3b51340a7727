"""
logger.py — Logging para otapublish usando Rich + archivo.

Salida doble:
- Rich console: colores para uso interactivo (errores van a stderr)
- Archivo rotativo: ~/.otapublish/logs/otapublish.log para CI y post-mortem

El log de archivo NUNCA vive dentro del repo de updates: el publisher
hace `git add .` en la raíz del repo y lo commitearía.

Uso:
    from otapublish.utils.logger import get_logger, console
    logger = get_logger("otapublish.publisher")
    logger.info("Exportando...")
    logger.success("Update publicado")
    logger.error("El export falló")
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.theme import Theme

# No crear logs en pytest
_in_pytest = "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ

ota_theme = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "step": "bold magenta",
})

# Consola global — se usa en todo el proyecto
console = Console(theme=ota_theme)
# Los diagnósticos de error van a stderr
err_console = Console(theme=ota_theme, stderr=True)

LOG_DIR_ENV = "OTA_LOG_DIR"

_file_logger: logging.Logger | None = None


def _log_dir() -> Path:
    """Directorio de logs: $OTA_LOG_DIR o ~/.otapublish/logs."""
    override = os.environ.get(LOG_DIR_ENV)
    if override:
        return Path(override)
    return Path.home() / ".otapublish" / "logs"


def _setup_file_logger() -> logging.Logger:
    """Configura el logger de archivo con rotacion."""
    global _file_logger
    if _file_logger is not None:
        return _file_logger

    if _in_pytest:
        _file_logger = logging.getLogger("otapublish.null")
        _file_logger.addHandler(logging.NullHandler())
        return _file_logger

    _file_logger = logging.getLogger("otapublish.file")
    _file_logger.setLevel(logging.DEBUG)

    if not _file_logger.handlers:
        log_dir = _log_dir()
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            handler: logging.Handler = RotatingFileHandler(
                log_dir / "otapublish.log",
                maxBytes=5 * 1024 * 1024,  # 5 MB
                backupCount=5,
                encoding="utf-8",
            )
        except OSError:
            # HOME de solo lectura (algunos runners de CI)
            handler = logging.NullHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        _file_logger.addHandler(handler)

    return _file_logger


class OtaLogger:
    """
    Logger que usa Rich para la terminal + archivo para CI.

    Cada módulo crea su propio logger con un nombre para
    identificar de dónde viene cada mensaje.

    Args:
        name: Nombre del módulo (ej: "otapublish.git")
    """

    def __init__(self, name: str):
        self._name = name
        self._file = _setup_file_logger()

    def info(self, message: str) -> None:
        """Mensaje informativo (cyan)."""
        console.print(f"[info]i  {escape(message)}[/info]", highlight=False)
        self._file.info(f"[{self._name}] {message}")

    def success(self, message: str) -> None:
        """Mensaje de éxito (verde)."""
        console.print(f"[success][OK] {escape(message)}[/success]", highlight=False)
        self._file.info(f"[{self._name}] OK: {message}")

    def warning(self, message: str) -> None:
        """Mensaje de advertencia (amarillo)."""
        console.print(f"[warning][!] {escape(message)}[/warning]", highlight=False)
        self._file.warning(f"[{self._name}] {message}")

    def error(self, message: str) -> None:
        """Mensaje de error (rojo, a stderr)."""
        err_console.print(f"[error][X] {escape(message)}[/error]", highlight=False)
        self._file.error(f"[{self._name}] {message}")

    def step(self, number: int, total: int, message: str) -> None:
        """Mensaje de paso en el pipeline."""
        console.print(f"[step]  [{number}/{total}] {escape(message)}[/step]", highlight=False)
        self._file.info(f"[{self._name}] [{number}/{total}] {message}")


def get_logger(name: str = "otapublish") -> OtaLogger:
    """
    Obtiene un logger para el módulo especificado.

    Ejemplo:
        logger = get_logger("otapublish.export")
        logger.info("Corriendo expo export...")
    """
    return OtaLogger(name)
