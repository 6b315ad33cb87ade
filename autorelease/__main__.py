"""Allow running as `python -m autorelease`."""

from autorelease.cli import app

app(prog_name="autorelease")
