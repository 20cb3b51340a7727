"""
git_ops.py — Commit y push del update al repo de distribución.

El repo de updates ES el store: cada publicación es un commit nuevo
con el directorio updates/<runtime>/[<channel>/]<timestamp>/.

Flujo:
    1. git config user.name / user.email (identidad del bot, local al repo)
    2. git add .
    3. git commit -m "Publish [beta] update for runtime 1.0.0 at 1700000000000"
    4. git push

Cualquier fallo aborta: no hay reintento, ni pull --rebase, ni
resolución de conflictos. Un push rechazado (non-fast-forward) es fatal.

Uso:
    from otapublish.publishing.git_ops import GitOperations
    git = GitOperations(repo_path, config.git)
    sha = git.publish_update("Publish update for runtime 1.0.0 at 1700000000000")
"""

from __future__ import annotations

from pathlib import Path

import git as gitpython

from otapublish.config import GitConfig
from otapublish.errors import RepositoryPublishFailedError
from otapublish.utils.logger import get_logger

logger = get_logger("otapublish.git")


def build_commit_message(
    runtime_version: str, timestamp: int, channel: str | None = None
) -> str:
    """
    Genera el mensaje de commit de una publicación.

    Ejemplos:
        Publish [beta] update for runtime 1.0.0 at 1700000000000
        Publish update for runtime 1.0.0 at 1700000000000
    """
    canal = f" [{channel}]" if channel else ""
    return f"Publish{canal} update for runtime {runtime_version} at {timestamp}"


class GitOperations:
    """
    Gestiona las operaciones git de una publicación.

    Args:
        repo_path: Raíz del repo de updates.
        config: Sección `git` de la configuración (identidad y remoto).
    """

    def __init__(self, repo_path: str | Path, config: GitConfig):
        self._repo_path = Path(repo_path)
        self._config = config
        self._repo: gitpython.Repo | None = None

    def _get_repo(self) -> gitpython.Repo:
        """
        Obtiene o abre el repositorio git.

        Raises:
            RepositoryPublishFailedError: Si la ruta no existe o no es un repo.
        """
        if self._repo is None:
            try:
                self._repo = gitpython.Repo(self._repo_path)
            except (gitpython.NoSuchPathError, gitpython.InvalidGitRepositoryError) as e:
                raise RepositoryPublishFailedError(
                    f"{self._repo_path} no es un repositorio git", step="open"
                ) from e
        return self._repo

    def configure_identity(self) -> None:
        """Fija user.name / user.email en la config local del repo."""
        repo = self._get_repo()
        try:
            with repo.config_writer() as writer:
                writer.set_value("user", "name", self._config.author_name)
                writer.set_value("user", "email", self._config.author_email)
        except (OSError, gitpython.GitCommandError) as e:
            raise RepositoryPublishFailedError(
                f"No se pudo configurar la identidad git: {e}", step="config"
            ) from e
        logger.info(
            f"Autor: {self._config.author_name} <{self._config.author_email}>"
        )

    def stage_all(self) -> None:
        """git add . desde la raíz del repo."""
        self._run("add", ".")

    def commit(self, message: str) -> str:
        """
        Crea el commit y devuelve su hash.

        Se usa `git commit` (no `index.commit`) para que git aplique
        la identidad configurada y los hooks del repo.
        """
        self._run("commit", "-m", message)
        sha = self._get_repo().head.commit.hexsha
        logger.info(f"Commit creado: {sha[:7]} — {message}")
        return sha

    def push(self) -> None:
        """
        Push al remoto configurado.

        Con `branch` vacío se respeta el upstream de la rama actual
        (igual que un `git push` pelado); si no, HEAD:<branch>.
        """
        repo = self._get_repo()
        remote_name = self._config.remote
        try:
            remote = repo.remote(remote_name)
        except ValueError as e:
            raise RepositoryPublishFailedError(
                f"El remoto \"{remote_name}\" no existe", step="push"
            ) from e

        refspec = f"HEAD:{self._config.branch}" if self._config.branch else None
        try:
            resultados = remote.push(refspec)
            resultados.raise_if_error()
        except gitpython.GitCommandError as e:
            raise RepositoryPublishFailedError(
                f"git push falló: {e.stderr.strip() if e.stderr else e}",
                step="push",
                exit_code=e.status if isinstance(e.status, int) else None,
            ) from e

        for info in resultados:
            if info.flags & (gitpython.PushInfo.ERROR | gitpython.PushInfo.REJECTED
                             | gitpython.PushInfo.REMOTE_REJECTED):
                raise RepositoryPublishFailedError(
                    f"git push rechazado: {info.summary.strip()}", step="push"
                )

        destino = self._config.branch or "upstream"
        logger.success(f"Push exitoso a {remote_name}/{destino}")

    def publish_update(self, message: str) -> str:
        """
        Publica todo lo pendiente en el repo: identidad, add, commit, push.

        Returns:
            Hash del commit creado.

        Raises:
            RepositoryPublishFailedError: En el primer paso que falle.
        """
        self.configure_identity()
        self.stage_all()
        sha = self.commit(message)
        self.push()
        return sha

    def _run(self, command: str, *args: str) -> None:
        """Ejecuta un subcomando git y traduce su fallo a error de publicación."""
        repo = self._get_repo()
        try:
            getattr(repo.git, command)(*args)
        except gitpython.GitCommandError as e:
            detalle = (e.stderr or e.stdout or str(e)).strip()
            raise RepositoryPublishFailedError(
                f"git {command} falló: {detalle}",
                step=command,
                exit_code=e.status if isinstance(e.status, int) else None,
            ) from e
