"""RenderVault command line tooling."""

from .typer_app import app

__all__ = ["app"]
