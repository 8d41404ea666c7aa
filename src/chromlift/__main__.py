"""Allow running as ``python -m chromlift``."""

from chromlift.main import cli


cli()
