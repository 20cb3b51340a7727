"""
errors.py — Errores tipados del pipeline de publicación.

Todos son fatales: ningún paso reintenta ni hace rollback. Cada error
lleva el exit code con el que termina el proceso; el CLI es el único
lugar que los atrapa, imprime el diagnóstico a stderr y sale.
"""

from __future__ import annotations


class PublishError(Exception):
    """Base de los errores de publicación.

    Attributes:
        exit_code: Código de salida del proceso para este error.
    """

    exit_code = 1

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class MissingProjectError(PublishError, FileNotFoundError):
    """El --project-path no existe o no es un directorio."""


class ExportFailedError(PublishError, RuntimeError):
    """`expo export` terminó con status distinto de cero.

    El exit code del proceso es el del toolchain.
    """

    def __init__(self, message: str, returncode: int):
        super().__init__(message, exit_code=returncode or 1)
        self.returncode = returncode


class ExportOutputMissingError(PublishError, FileNotFoundError):
    """El export terminó bien pero no dejó el directorio dist/."""


class DestinationExistsError(PublishError, FileExistsError):
    """El directorio del update ya existe (colisión de timestamp)."""


class MetadataError(PublishError, ValueError):
    """metadata.json existe pero no es JSON válido o no tiene la forma esperada."""


class ConfigSnapshotError(PublishError, RuntimeError):
    """No se pudo extraer la config pública del proyecto."""


class RepositoryPublishFailedError(PublishError, RuntimeError):
    """Falló alguno de los pasos git (config, add, commit, push).

    Attributes:
        step: Nombre del paso git que falló.
    """

    def __init__(self, message: str, step: str, exit_code: int | None = None):
        super().__init__(message, exit_code=exit_code)
        self.step = step


class RepositoryNotConfiguredError(PublishError):
    """No hay repo de updates: falta --repo, OTA_REPO_PATH o config.yaml."""
