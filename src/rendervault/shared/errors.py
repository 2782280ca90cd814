"""RenderVault Error Handling Module

This module defines the error handling system for RenderVault, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original exceptions are preserved

Render-path faults are deliberately few: a failing key generator or an
unregistered component bypasses the cache instead of raising. What remains
here are configuration-time faults (bad settings, FlatKey collisions) and
misuse of the store introspection API.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Error codes for RenderVault.

    This enum serves as the single source of truth for all error codes
    used throughout the package.
    """

    # Cache Errors
    STORE_OPERATION_UNSUPPORTED = "STORE_OPERATION_UNSUPPORTED"

    # Key / Template Errors
    FLAT_KEY_COLLISION = "FLAT_KEY_COLLISION"
    INVALID_ATTRIBUTE_PATH = "INVALID_ATTRIBUTE_PATH"
    TEMPLATE_COMPILE_FAILED = "TEMPLATE_COMPILE_FAILED"

    # Configuration Errors
    CONFIG_INVALID = "CONFIG_INVALID"

    # File System Errors
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_READ_ERROR = "FILE_READ_ERROR"

    # Parsing Errors
    PARSING_ERROR = "PARSING_ERROR"

    # CLI Errors
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"
    CLI_INVALID_ARGUMENTS = "CLI_INVALID_ARGUMENTS"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to ensure safe serialization into structured logs.

    Attributes:
        component: Optional component name associated with the error
        operation: Optional operation name that caused the error
        file_path: Optional file path (configuration files, CLI inputs)
        additional_data: Optional dict with primitive values only
    """

    component: str | None = None
    operation: str | None = None
    file_path: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self) -> dict[str, Any]:
        """Export context as dict for logging.

        Returns:
            Dictionary of the non-empty fields with a guaranteed
            additional_data key.
        """
        data: dict[str, Any] = {}
        if self.component is not None:
            data["component"] = self.component
        if self.operation is not None:
            data["operation"] = self.operation
        if self.file_path is not None:
            data["file_path"] = self.file_path
        data["additional_data"] = dict(self.additional_data or {})
        return data


class RenderVaultError(Exception):
    """Base exception class for all RenderVault errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize RenderVaultError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        formatted_message = f"{code.value}: {message}"
        super().__init__(formatted_message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error with code, message,
            context, and original_error (if present)
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(RenderVaultError):
    """Domain-specific errors.

    Raised when the caching rules themselves cannot be applied, e.g. a
    template that cannot be compiled from the rendered output.
    """


class ApplicationError(RenderVaultError):
    """Application-level errors.

    Raised for misuse of the public API, such as asking a store that only
    implements get/set for its size.
    """


class ConfigurationError(ApplicationError):
    """Configuration-time faults.

    Kept distinct from runtime faults: these are surfaced when a controller
    or settings object is built and are never retried.

    Examples:
    - Invalid settings values
    - Two template attribute paths addressing the same FlatKey
    - Empty attribute paths
    """


class InfrastructureError(RenderVaultError):
    """Infrastructure-related errors (files, external stores)."""


class TemplateError(DomainError):
    """Errors raised while compiling or rendering a cached template."""


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ConfigurationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return ConfigurationError(
        ErrorCode.CONFIG_INVALID,
        message,
        context,
        original_error,
    )


def create_flat_key_collision_error(
    flat_key: str,
    first_path: str,
    second_path: str,
    component: str | None = None,
) -> ConfigurationError:
    """Create an error for two attribute paths that resolve to one FlatKey."""
    context = ErrorContext(
        component=component,
        operation="check_collisions",
        additional_data={
            "flat_key": flat_key,
            "first_path": first_path,
            "second_path": second_path,
        },
    )
    return ConfigurationError(
        ErrorCode.FLAT_KEY_COLLISION,
        f"Attribute paths '{first_path}' and '{second_path}' both resolve to '{flat_key}'",
        context,
    )


def create_unsupported_store_error(
    operation: str,
    store: object,
) -> ApplicationError:
    """Create an error for an introspection call the store does not implement."""
    context = ErrorContext(
        operation=operation,
        additional_data={"store_type": type(store).__name__},
    )
    return ApplicationError(
        ErrorCode.STORE_OPERATION_UNSUPPORTED,
        f"Store {type(store).__name__} does not support '{operation}'",
        context,
    )
