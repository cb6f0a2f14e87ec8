"""Exceptions raised while loading configuration."""

from __future__ import annotations


class ConfigInvalid(Exception):
    """The checks file or settings file could not be loaded or validated."""
