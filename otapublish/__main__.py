"""
__main__.py — Permite ejecutar otapublish como módulo.

    python -m otapublish publish -p ../app -r 1.0.0
"""

from otapublish.cli import main

if __name__ == "__main__":
    main()
