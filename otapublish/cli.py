"""
cli.py — Punto de entrada de otapublish.

Comandos disponibles:
    otapublish publish -p ../app -r 1.0.0 -c beta   → Exporta, copia, commit y push
    otapublish publish -p ../app -r 1.0.0 --dry-run → Deja el update en disco, sin git
    otapublish config --show                        → Muestra configuración
    otapublish config --validate                    → Valida el repo de updates

Uso:
    # Desde línea de comandos:
    python -m otapublish publish --project-path ../easyweather --runtime-version 1.0.0

    # Desde código (testing):
    from click.testing import CliRunner
    from otapublish.cli import main
    CliRunner().invoke(main, ["publish", "-p", "app", "-r", "1.0.0"])
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
import git as gitpython
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from otapublish import __version__
from otapublish.config import AppConfig, load_config
from otapublish.errors import PublishError
from otapublish.publishing.publisher import Publisher, PublishRequest, UpdateRecord
from otapublish.utils.logger import get_logger, console as rich_console

logger = get_logger("otapublish.cli")


@click.group()
@click.version_option(version=__version__, prog_name="otapublish")
def main():
    """Publica updates OTA de Expo en un repo git."""
    pass


@main.command()
@click.option(
    "--project-path", "-p",
    required=True,
    type=click.Path(path_type=Path),
    help="Ruta al proyecto Expo a publicar (ej: ../easyweather)",
)
@click.option(
    "--runtime-version", "-r",
    required=True,
    help="Runtime version del update",
)
@click.option(
    "--channel", "-c",
    default=None,
    help="Canal de release (ej: production, beta)",
)
@click.option(
    "--repo", "-R",
    "repo_path",
    default=None,
    type=click.Path(path_type=Path),
    help="Raíz del repo de updates (por defecto: OTA_REPO_PATH o donde está config.yaml)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Copia el update al repo pero NO hace commit ni push",
)
def publish(
    project_path: Path,
    runtime_version: str,
    channel: str | None,
    repo_path: Path | None,
    dry_run: bool,
):
    """Exporta el proyecto y publica el update en el repo."""
    config = load_config()
    if repo_path is not None:
        config.repo_path = str(repo_path.resolve())

    _check_channel(config, channel)

    request = PublishRequest(
        project_path=project_path,
        runtime_version=runtime_version,
        channel=channel,
    )

    try:
        publisher = Publisher(config)
        record = publisher.publish(request, dry_run=dry_run)
    except PublishError as e:
        logger.error(str(e))
        sys.exit(e.exit_code)

    _show_summary(record, dry_run)


@main.command()
@click.option("--show", is_flag=True, help="Muestra la configuración actual")
@click.option("--validate", is_flag=True, help="Valida el repo de updates")
def config(show: bool, validate: bool):
    """Gestiona la configuración de otapublish."""
    cfg = load_config()

    if show:
        tabla = Table(title="Configuración de otapublish")
        tabla.add_column("Parámetro", style="cyan")
        tabla.add_column("Valor", style="green")

        tabla.add_row("Repo de updates", cfg.repo_path or "(no configurado)")
        tabla.add_row("Directorio base", cfg.updates.base_dir)
        tabla.add_row("Canales", ", ".join(cfg.updates.channels))
        tabla.add_row("Canal obligatorio", "Sí" if cfg.updates.require_channel else "No")
        tabla.add_row("Export", " ".join(cfg.export.command))
        tabla.add_row("Plataforma", cfg.export.platform)
        tabla.add_row("Config pública", " ".join(cfg.expo_config.command))
        tabla.add_row("Autor", f"{cfg.git.author_name} <{cfg.git.author_email}>")
        tabla.add_row("Remoto", f"{cfg.git.remote} {cfg.git.branch or '(upstream)'}")

        rich_console.print(tabla)

    if validate:
        if not _validate_config(cfg):
            sys.exit(1)


# ============================================================
# Funciones auxiliares (privadas)
# ============================================================

def _check_channel(config: AppConfig, channel: str | None) -> None:
    """Valida --channel contra la lista de canales configurada."""
    if channel is None:
        if config.updates.require_channel:
            raise click.MissingParameter(param_type="option", param_hint="'--channel' / '-c'")
        return
    if channel not in config.updates.channels:
        raise click.BadParameter(
            f"'{channel}' no es uno de: {', '.join(config.updates.channels)}",
            param_hint="'--channel' / '-c'",
        )


def _show_summary(record: UpdateRecord, dry_run: bool) -> None:
    """Muestra resumen después de publicar."""
    canal = f"[{record.channel}] " if record.channel else ""
    lineas = [
        f"[bold]Runtime:[/bold] {escape(record.runtime_version)}",
        f"[bold]Canal:[/bold] {escape(record.channel or '(sin canal)')}",
        f"[bold]Timestamp:[/bold] {record.timestamp}",
        f"[bold]Directorio:[/bold] {escape(str(record.directory))}",
        f"[bold]Metadata:[/bold] {'normalizada' if record.metadata_patched else 'sin cambios'}",
    ]
    if record.commit_sha:
        lineas.append(f"[bold]Commit:[/bold] {record.commit_sha[:7]}")

    titulo = "Dry-run completo" if dry_run else f"Update {canal}publicado"
    rich_console.print(Panel(
        "\n".join(lineas),
        title=escape(titulo),
        border_style="yellow" if dry_run else "green",
    ))


def _validate_config(cfg: AppConfig) -> bool:
    """Valida que el repo de updates sea un repo git con el remoto configurado."""
    problemas = []

    if not cfg.repo_path:
        problemas.append("Repo de updates no configurado (--repo, OTA_REPO_PATH o config.yaml)")
    else:
        try:
            repo = gitpython.Repo(cfg.repo_path)
            if cfg.git.remote not in [r.name for r in repo.remotes]:
                problemas.append(f"El remoto \"{cfg.git.remote}\" no existe en {cfg.repo_path}")
        except (gitpython.NoSuchPathError, gitpython.InvalidGitRepositoryError):
            problemas.append(f"{cfg.repo_path} no es un repositorio git")

    if not cfg.updates.channels:
        problemas.append("updates.channels está vacío")
    if cfg.updates.require_channel and not cfg.updates.channels:
        problemas.append("updates.require_channel sin canales configurados")

    for p in problemas:
        logger.error(p)
    if not problemas:
        logger.success("Configuración válida")
    return not problemas


if __name__ == "__main__":
    main()
