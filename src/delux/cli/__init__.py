"""
CLI entry points for delux.

Contains the main executable scripts:
- serve: HTTP control server (delux-server)
- run_mode: apply one mode from the shell (delux)
"""

from .run_mode import main as mode_main
from .serve import main as server_main

__all__ = [
    "mode_main",
    "server_main",
]
