"""Exceptions raised by the configuration generator."""

from __future__ import annotations


class ConfigGeneratorError(RuntimeError):
    """Base class for configuration generation failures."""


class InvalidConstructorInput(ConfigGeneratorError, ValueError):
    """Raised when a generator is built with a missing logger or gateway address."""


class IdentityResolutionError(ConfigGeneratorError):
    """Raised when the gateway id cannot be derived from the outbound interface."""


class UnsupportedPlatformTarget(ConfigGeneratorError):
    """Raised when a config target has no path on the current platform."""


class MissingParentDirectory(ConfigGeneratorError):
    """Raised when the directory that should hold a config file does not exist."""


class ConfigReadError(ConfigGeneratorError):
    """Raised when an existing config file cannot be read."""


class ConfigParseError(ConfigGeneratorError):
    """Raised when an existing config file is not valid JSON or has the wrong shape."""


class ConfigWriteError(ConfigGeneratorError):
    """Raised when writing a config file fails."""
