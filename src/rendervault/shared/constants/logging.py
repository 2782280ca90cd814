"""
Logging Constants

Logger names, defaults and the structured record fields understood by
StructuredFormatter.
"""


class Logging:
    """Logging configuration constants."""

    ROOT_LOGGER = "rendervault"
    DEFAULT_LEVEL = "INFO"

    EXTRA_FIELDS = (
        "error_code",
        "context",
        "operation",
        "duration_ms",
        "result_info",
    )
