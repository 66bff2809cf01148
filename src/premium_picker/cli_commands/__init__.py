"""Command registrations for the Typer CLI.

We keep `premium_picker/cli.py` as the entrypoint module (because
`pyproject.toml` points scripts at `premium_picker.cli:app`).

To keep that file small, commands are defined in this package and registered
from the entrypoint.
"""
