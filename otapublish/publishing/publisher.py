"""
publisher.py — Orquesta una publicación OTA completa.

Pipeline secuencial, sin reintentos ni rollback:

    1. Validar que el proyecto existe
    2. Resolver rutas absolutas (proyecto y repo de updates)
    3. expo export
    4. Verificar que existe dist/
    5. Calcular destino: updates/<runtime>/[<channel>/]<timestamp>/
    6. Copiar dist/ al destino
    7. Normalizar metadata.json (si existe)
    8. Guardar expoConfig.json
    9. git config + add + commit + push

Cada paso levanta un PublishError si falla; el primero que falla
corta el pipeline. Lo que hicieron los pasos anteriores queda en disco
(un directorio copiado a medias, cambios staged sin commit, etc.).

Uso:
    from otapublish.publishing.publisher import Publisher, PublishRequest
    publisher = Publisher(config)
    record = publisher.publish(PublishRequest(Path("../app"), "1.0.0", "beta"))
"""

from __future__ import annotations

import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from otapublish.config import AppConfig
from otapublish.errors import (
    DestinationExistsError,
    MissingProjectError,
    RepositoryNotConfiguredError,
)
from otapublish.publishing.exporter import ExpoExporter
from otapublish.publishing.expo_config import ExpoConfigExtractor
from otapublish.publishing.git_ops import GitOperations, build_commit_message
from otapublish.publishing.metadata import normalize_metadata_file
from otapublish.utils.logger import get_logger

logger = get_logger("otapublish.publisher")

TOTAL_STEPS = 9


def now_millis() -> int:
    """Timestamp actual en milisegundos desde epoch."""
    return time.time_ns() // 1_000_000


@dataclass
class PublishRequest:
    """
    Parámetros de una publicación.

    Attributes:
        project_path: Ruta al proyecto Expo (relativa o absoluta).
        runtime_version: Generación de binario nativo compatible.
        channel: Canal de release (None si no se usan canales).
    """
    project_path: Path
    runtime_version: str
    channel: str | None = None


@dataclass
class UpdateRecord:
    """
    Resultado de una publicación exitosa.

    Attributes:
        directory: Directorio absoluto del update dentro del repo.
        runtime_version: Runtime version publicada.
        channel: Canal (o None).
        timestamp: Milisegundos desde epoch; identifica al update.
        commit_message: Mensaje del commit de publicación.
        commit_sha: Hash del commit (None en dry-run).
        metadata_patched: Si metadata.json fue reescrito.
    """
    directory: Path
    runtime_version: str
    channel: str | None
    timestamp: int
    commit_message: str
    commit_sha: str | None = None
    metadata_patched: bool = False


def update_directory(
    repo_dir: Path,
    base_dir: str,
    runtime_version: str,
    timestamp: int,
    channel: str | None = None,
) -> Path:
    """Ruta del update: <repo>/<base>/<runtime>/[<channel>/]<timestamp>."""
    ruta = repo_dir / base_dir / runtime_version
    if channel:
        ruta = ruta / channel
    return ruta / str(timestamp)


class Publisher:
    """
    Publica un update OTA en el repo de distribución.

    Todos los colaboradores externos son inyectables; por defecto se
    construyen a partir de la configuración.

    Args:
        config: Configuración de la app (repo_path obligatorio).
        exporter: Corre el export y localiza dist/.
        config_extractor: Genera expoConfig.json.
        git: Commit y push; por defecto GitOperations sobre config.repo_path.
        clock: Fuente del timestamp en milisegundos.

    Raises:
        RepositoryNotConfiguredError: Si config.repo_path está vacío.
    """

    def __init__(
        self,
        config: AppConfig,
        exporter: ExpoExporter | None = None,
        config_extractor: ExpoConfigExtractor | None = None,
        git: GitOperations | None = None,
        clock: Callable[[], int] = now_millis,
    ):
        if not config.repo_path:
            raise RepositoryNotConfiguredError(
                "No hay repo de updates configurado. Usa --repo, OTA_REPO_PATH "
                "o un config.yaml en la raíz del repo de updates."
            )
        self._config = config
        self._repo_dir = Path(config.repo_path).resolve()
        self._exporter = exporter or ExpoExporter(config.export)
        self._config_extractor = config_extractor or ExpoConfigExtractor(
            config.expo_config
        )
        self._git = git or GitOperations(self._repo_dir, config.git)
        self._clock = clock

    @property
    def repo_dir(self) -> Path:
        return self._repo_dir

    def publish(self, request: PublishRequest, dry_run: bool = False) -> UpdateRecord:
        """
        Corre el pipeline completo.

        Args:
            request: Proyecto, runtime version y canal.
            dry_run: Si es True, deja el update en disco sin commit ni push.

        Returns:
            UpdateRecord del update creado.

        Raises:
            PublishError: En el primer paso que falle.
        """
        # Paso 1: validar proyecto
        logger.step(1, TOTAL_STEPS, "Validando proyecto")
        if not request.project_path.is_dir():
            raise MissingProjectError(
                f"El proyecto no existe: {request.project_path}"
            )

        # Paso 2: rutas absolutas
        logger.step(2, TOTAL_STEPS, "Resolviendo rutas")
        project_dir = request.project_path.resolve()
        logger.info(f"Proyecto: {project_dir}")
        logger.info(f"Plataforma: {self._config.export.platform}")
        logger.info(f"Runtime version: {request.runtime_version}")
        if request.channel:
            logger.info(f"Canal: {request.channel}")

        # Pasos 3-4: export + verificación de dist/
        logger.step(3, TOTAL_STEPS, "Exportando bundle")
        self._exporter.run(project_dir)
        logger.step(4, TOTAL_STEPS, "Verificando output del export")
        dist = self._exporter.output_dir(project_dir)

        # Paso 5: destino
        logger.step(5, TOTAL_STEPS, "Calculando destino")
        timestamp = self._clock()
        destino = update_directory(
            self._repo_dir,
            self._config.updates.base_dir,
            request.runtime_version,
            timestamp,
            request.channel,
        )
        if destino.exists():
            raise DestinationExistsError(f"El update ya existe: {destino}")

        # Paso 6: copia
        logger.step(6, TOTAL_STEPS, f"Copiando {dist} → {destino}")
        destino.parent.mkdir(parents=True, exist_ok=True)
        shutil.copytree(dist, destino)

        # Paso 7: metadata.json
        logger.step(7, TOTAL_STEPS, "Normalizando metadata")
        patched = normalize_metadata_file(
            destino / self._config.updates.metadata_filename,
            self._config.export.platform,
        )

        # Paso 8: config pública
        logger.step(8, TOTAL_STEPS, "Guardando config pública")
        self._config_extractor.snapshot(project_dir, destino)

        record = UpdateRecord(
            directory=destino,
            runtime_version=request.runtime_version,
            channel=request.channel,
            timestamp=timestamp,
            commit_message=build_commit_message(
                request.runtime_version, timestamp, request.channel
            ),
            metadata_patched=patched,
        )

        # Paso 9: git
        if dry_run:
            logger.warning("Dry-run: el update queda en disco, sin commit ni push")
            return record

        logger.step(9, TOTAL_STEPS, "Commit y push al repo de updates")
        record.commit_sha = self._git.publish_update(record.commit_message)
        return record
