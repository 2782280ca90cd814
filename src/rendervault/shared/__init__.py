"""RenderVault Shared Module.

This package contains shared constants, error handling and logging used
across RenderVault.
"""

__all__ = ["constants", "errors", "logging", "types"]
