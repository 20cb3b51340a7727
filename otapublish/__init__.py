"""
otapublish — Publicador de updates OTA de Expo sobre un repo git.

Este paquete contiene:
- publishing/ → Export, normalización de metadata, config pública, git
- utils/      → Logging compartido
- config.py   → Carga de config.yaml + .env
- errors.py   → Errores tipados del pipeline

Uso:
    python -m otapublish publish -p ../app -r 1.0.0 -c beta
    python -m otapublish config --show
"""

__version__ = "1.0.0"
