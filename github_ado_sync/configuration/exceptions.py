"""Contains exceptions raised when reconciling application configuration."""


class ConfigurationError(Exception):
    """Base class for configuration problems detected before any remote call."""

    pass


class RequiredConfigurationElementError(ConfigurationError):
    """Raised when a required configuration element is missing."""

    def __init__(self, name: str, config_key: str, env_name: str | None = None) -> None:
        """Initializes the exception with the name of the missing element."""
        location = f"configuration key {config_key}"
        if env_name:
            location += f" or environment variable {env_name}"
        super().__init__(f"Missing required configuration element: {name} ({location})")
        self.name = name
        self.config_key = config_key
        self.env_name = env_name


class InvalidConfigurationSourceError(ConfigurationError):
    """Raised when a configuration file or action input cannot be parsed."""

    def __init__(self, source: str, reason: str) -> None:
        """Initializes the exception with the offending source."""
        super().__init__(f"Invalid configuration in {source}: {reason}")
        self.source = source
        self.reason = reason
