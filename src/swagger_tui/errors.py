"""Exception types raised by swagger-tui outside the interactive loop."""


class SwaggerTuiError(Exception):
    """Base class for errors surfaced to the user by the CLI."""


class ConfigError(SwaggerTuiError):
    """The on-disk configuration file could not be read."""


class SpecParseError(SwaggerTuiError):
    """An API description document could not be decoded into endpoints."""
