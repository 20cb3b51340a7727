"""
metadata.py — Normaliza las rutas de metadata.json.

Cuando `expo export` corre en Windows, metadata.json trae rutas con
backslashes (assets\\abc123). El servidor de updates las espera con
forward slashes, así que reescribimos:

    fileMetadata.<platform>.bundle
    fileMetadata.<platform>.assets[*].path

El resto del documento queda intacto.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from otapublish.errors import MetadataError
from otapublish.utils.logger import get_logger

logger = get_logger("otapublish.metadata")


def to_forward_slashes(path: str) -> str:
    """Reemplaza todos los backslashes por forward slashes."""
    return path.replace("\\", "/")


def write_json(path: Path, data: Any) -> None:
    """Escribe JSON con indentación de 2 espacios y newline final."""
    path.write_text(
        json.dumps(data, indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )


def _platform_section(metadata: Any, platform: str) -> dict | None:
    """
    Devuelve fileMetadata.<platform> validando la forma del documento.

    Returns:
        La sección de la plataforma, o None si no está.

    Raises:
        MetadataError: Si algún nivel no tiene el tipo esperado.
    """
    if not isinstance(metadata, dict):
        raise MetadataError("metadata.json debe ser un objeto JSON")

    file_metadata = metadata.get("fileMetadata", {})
    if not isinstance(file_metadata, dict):
        raise MetadataError("fileMetadata debe ser un objeto")

    if platform not in file_metadata:
        return None
    plataforma = file_metadata[platform]
    if not isinstance(plataforma, dict):
        raise MetadataError(f"fileMetadata.{platform} debe ser un objeto")

    if "bundle" in plataforma and not isinstance(plataforma["bundle"], str):
        raise MetadataError(f"fileMetadata.{platform}.bundle debe ser un string")

    assets = plataforma.get("assets", [])
    if not isinstance(assets, list):
        raise MetadataError(f"fileMetadata.{platform}.assets debe ser una lista")
    for i, asset in enumerate(assets):
        if not isinstance(asset, dict):
            raise MetadataError(f"fileMetadata.{platform}.assets[{i}] debe ser un objeto")
        if "path" in asset and not isinstance(asset["path"], str):
            raise MetadataError(
                f"fileMetadata.{platform}.assets[{i}].path debe ser un string"
            )

    return plataforma


def normalize_metadata(metadata: Any, platform: str = "android") -> bool:
    """
    Reescribe in-place las rutas de bundle y assets de una plataforma.

    La forma se valida completa antes de tocar nada.

    Args:
        metadata: Documento de metadata.json ya parseado.
        platform: Plataforma exportada (ej: "android").

    Returns:
        True si la plataforma estaba presente y se normalizó.

    Raises:
        MetadataError: Si el documento no tiene la forma esperada.
    """
    plataforma = _platform_section(metadata, platform)
    if plataforma is None:
        return False

    if "bundle" in plataforma:
        plataforma["bundle"] = to_forward_slashes(plataforma["bundle"])

    for asset in plataforma.get("assets", []):
        if "path" in asset:
            asset["path"] = to_forward_slashes(asset["path"])

    return True


def normalize_metadata_file(path: Path, platform: str = "android") -> bool:
    """
    Normaliza metadata.json en disco, si existe.

    Returns:
        True si el archivo se reescribió. False si no existe o no
        trae sección para la plataforma (no es error).

    Raises:
        MetadataError: Si el archivo no es JSON válido o no tiene la
            forma esperada.
    """
    if not path.is_file():
        return False

    logger.info(f"Normalizando rutas en {path.name}...")
    try:
        metadata = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise MetadataError(f"{path} no es JSON válido: {e}") from e

    if not normalize_metadata(metadata, platform):
        logger.warning(
            f"{path.name} no tiene fileMetadata.{platform}; se deja sin cambios"
        )
        return False

    write_json(path, metadata)
    return True
