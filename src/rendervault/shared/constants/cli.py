"""
CLI Constants

Command names, help texts and exit codes for the rendervault CLI.
"""


class CLIDefaults:
    """Default values for CLI execution."""

    APP_NAME = "rendervault"
    EXIT_SUCCESS = 0
    EXIT_ERROR = 1


class CLIHelp:
    """Help texts for commands and options."""

    APP_HELP = "Developer tooling for the RenderVault render cache."
    CHECK_CONFIG_HELP = "Validate a TOML configuration and list cached components."
    FLATTEN_HELP = "Show FlatKeys, placeholders and shape fingerprint for props."
    KEY_HELP = "Compute the cache key a component would use for the given props."
    VERSION_TEXT = "rendervault {version}"


class CLIMessages:
    """User-facing CLI messages."""

    CONFIG_OK = "Configuration is valid."
    UNCACHEABLE = "uncacheable"
    UNREGISTERED = "Component '{name}' is not registered for caching."
