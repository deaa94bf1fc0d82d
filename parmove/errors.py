"""
Exceptions raised by parmove.
"""


class ParmoveError(Exception):
    """Base class for errors that abort a run."""


class ConfigError(ParmoveError):
    """Invalid or unusable configuration, detected before any file is touched."""
