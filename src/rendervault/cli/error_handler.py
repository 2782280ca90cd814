"""
CLI Error Handling Utilities

This module maps exceptions raised by CLI commands to exit codes and prints
them either as a one-line message on stderr or as a JSON envelope.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import typer

from rendervault.cli.json_formatter import format_json_output
from rendervault.shared.constants import CLIDefaults
from rendervault.shared.errors import (
    ApplicationError,
    ErrorCode,
    InfrastructureError,
    RenderVaultError,
)
from rendervault.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


def _describe(error: Exception) -> tuple[str, str]:
    """Return (error code, user-facing message) for an exception."""
    if isinstance(error, ApplicationError):
        return error.code.value, f"Application error: {error.message}"
    if isinstance(error, InfrastructureError):
        return error.code.value, f"Infrastructure error: {error.message}"
    if isinstance(error, RenderVaultError):
        return error.code.value, error.message
    if isinstance(error, OSError):
        return ErrorCode.FILE_READ_ERROR.value, f"File system error: {error}"
    if isinstance(error, ValueError):
        return ErrorCode.CLI_INVALID_ARGUMENTS.value, f"Invalid input: {error}"
    return ErrorCode.CLI_UNEXPECTED_ERROR.value, f"Unexpected error: {error}"


def handle_cli_error(
    error: Exception,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Handle CLI errors with consistent formatting and logging.

    Args:
        error: The exception that occurred
        command: The CLI command being executed
        json_output: Whether to output JSON format

    Returns:
        Exit code for the CLI command
    """
    code, message = _describe(error)
    error_context: dict[str, Any] = {
        "command": command,
        "error_type": type(error).__name__,
        "error_code": code,
    }
    if isinstance(error, RenderVaultError):
        log_operation_error(logger, error, operation=command, additional_context=error_context)
    else:
        logger.exception("CLI error in %s: %s", command, message, extra={"context": error_context})

    if json_output:
        typer.echo(
            format_json_output(
                success=False,
                command=command,
                errors=[message],
                data={"error_code": code, "error_type": type(error).__name__},
            ).decode("utf-8")
        )
    else:
        sys.stderr.write(f"Error: {message}\n")
    return CLIDefaults.EXIT_ERROR
