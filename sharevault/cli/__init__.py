"""
sharevault.cli - the `sharevault` command (Typer).

    sharevault simulate SCENARIO.json [--json]
    sharevault version
"""

from .main import app, main

__all__ = ["app", "main"]
