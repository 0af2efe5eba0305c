"""Trellis CLI.

Subcommand groups:
- task: Task creation (single and bulk) and inspection
- project: Project creation
"""

from trellis.cli.main import app, main

__all__ = ["app", "main"]
