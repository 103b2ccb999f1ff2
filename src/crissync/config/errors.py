"""Errors raised while reading crissync settings."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A setting is present but cannot be used, e.g. a non-numeric worker count."""


class MissingConfigurationError(ConfigurationError):
    """ORCID credentials or other required settings are absent."""
