"""
publishing/ — Todo lo relacionado con publicar un update.

Módulos:
- exporter.py    → Corre `expo export` y localiza dist/
- metadata.py    → Normaliza rutas de metadata.json
- expo_config.py → Snapshot de la config pública (expoConfig.json)
- git_ops.py     → Identidad del bot, add, commit, push
- publisher.py   → Orquesta el pipeline completo
"""
