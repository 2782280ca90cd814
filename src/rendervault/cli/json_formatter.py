"""
JSON Output Formatter for the RenderVault CLI

Produces the machine-readable envelope printed when a command runs with
``--json``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import orjson


def format_json_output(
    success: bool,
    command: str,
    data: Any | None = None,
    errors: list[str] | None = None,
) -> bytes:
    """
    Format command output as JSON.

    Args:
        success: Whether the command executed successfully
        command: The command name (e.g., "key", "flatten")
        data: The command's output data
        errors: List of error messages

    Returns:
        JSON-encoded bytes ready for output
    """
    if errors is None:
        errors = []
    if errors:
        success = False

    json_data = {
        "success": success,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "command": command,
        "data": data,
        "errors": errors,
    }
    return orjson.dumps(
        json_data,
        default=str,
        option=orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2,
    )
