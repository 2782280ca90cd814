"""Settings loader and singleton manager.

This module handles:
- Configuration file loading from TOML
- Wrapping validation failures into ConfigurationError
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

import toml
from pydantic import ValidationError

from rendervault.config.models.settings import Settings
from rendervault.shared.errors import (
    ConfigurationError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
)
from rendervault.shared.logging import log_operation_success

logger = logging.getLogger(__name__)


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load Settings from the environment and an optional TOML file.

    Args:
        config_path: TOML file to read. None reads the environment only.

    Returns:
        Validated Settings instance.

    Raises:
        InfrastructureError: If the file is missing or unreadable.
        ConfigurationError: If the file is not valid TOML or fails validation.
    """
    path = Path(config_path) if config_path is not None else None
    context = ErrorContext(
        operation="load_settings",
        file_path=str(path) if path is not None else None,
    )
    started = time.perf_counter()
    try:
        settings = Settings.from_toml_file(path) if path is not None else Settings()
    except FileNotFoundError as e:
        raise InfrastructureError(
            ErrorCode.FILE_NOT_FOUND,
            f"Configuration file not found: {path}",
            context,
            e,
        ) from e
    except PermissionError as e:
        raise InfrastructureError(
            ErrorCode.FILE_READ_ERROR,
            f"Cannot read configuration file: {path}",
            context,
            e,
        ) from e
    except toml.TomlDecodeError as e:
        raise ConfigurationError(
            ErrorCode.PARSING_ERROR,
            f"Invalid TOML in {path}: {e}",
            context,
            e,
        ) from e
    except ValidationError as e:
        raise ConfigurationError(
            ErrorCode.CONFIG_INVALID,
            f"Invalid configuration: {e.error_count()} validation error(s)",
            ErrorContext(
                operation="load_settings",
                file_path=context.file_path,
                additional_data={"errors": "; ".join(err["msg"] for err in e.errors())},
            ),
            e,
        ) from e

    log_operation_success(
        logger,
        operation="load_settings",
        duration_ms=(time.perf_counter() - started) * 1000,
        result_info={"environment": settings.environment, "components": len(settings.components)},
        context={"file_path": context.file_path},
    )
    return settings


__all__ = ["load_settings"]
