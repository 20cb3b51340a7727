"""
test_exporter.py — Tests para el export de Expo.

Verificamos que:
1. El comando corre con cwd en el proyecto
2. Un status distinto de cero se propaga como exit code
3. La ausencia de dist/ se detecta después del export
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from conftest import expo_command
from otapublish.config import ExportConfig
from otapublish.errors import ExportFailedError, ExportOutputMissingError
from otapublish.publishing.exporter import ExpoExporter


class TestRun:
    """Tests para la invocación del comando de export."""

    @patch("otapublish.publishing.exporter.subprocess.run")
    def test_corre_en_el_proyecto(self, mock_run, project_dir):
        """El comando por defecto es `npx expo export -p android` con cwd en el proyecto."""
        mock_run.return_value = MagicMock(returncode=0)
        ExpoExporter(ExportConfig()).run(project_dir)
        mock_run.assert_called_once_with(
            ["npx", "expo", "export", "-p", "android"], cwd=project_dir
        )

    def test_status_distinto_de_cero(self, project_dir):
        """Un export que sale con 2 propaga ese código."""
        exporter = ExpoExporter(ExportConfig(command=expo_command("export", "--fail", "2")))
        with pytest.raises(ExportFailedError) as exc:
            exporter.run(project_dir)
        assert exc.value.returncode == 2
        assert exc.value.exit_code == 2

    @patch("otapublish.publishing.exporter.subprocess.run", side_effect=FileNotFoundError)
    def test_comando_inexistente(self, _, project_dir):
        """Sin npx en el PATH: ExportFailedError con 127."""
        with pytest.raises(ExportFailedError) as exc:
            ExpoExporter(ExportConfig()).run(project_dir)
        assert exc.value.exit_code == 127


class TestOutputDir:
    """Tests para la verificación del directorio de salida."""

    def test_export_real_deja_dist(self, project_dir):
        """Un export exitoso deja dist/ con sus archivos."""
        exporter = ExpoExporter(ExportConfig(command=expo_command("export")))
        dist = exporter.export(project_dir)
        assert dist == project_dir / "dist"
        assert (dist / "index.html").is_file()
        assert (dist / "assets" / "a.png").is_file()

    def test_sin_dist(self, project_dir):
        """Export sin dist/: ExportOutputMissingError con exit 1."""
        exporter = ExpoExporter(ExportConfig(command=expo_command("export", "--no-dist")))
        with pytest.raises(ExportOutputMissingError) as exc:
            exporter.export(project_dir)
        assert exc.value.exit_code == 1

    def test_output_dir_configurable(self, project_dir):
        """El nombre del directorio de salida sale de la config."""
        (project_dir / "build").mkdir()
        exporter = ExpoExporter(ExportConfig(output_dir="build"))
        assert exporter.output_dir(project_dir) == project_dir / "build"
