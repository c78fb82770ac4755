"""Exceptions raised by taskmatch."""


class TaskMatchError(Exception):
    """Base class for taskmatch errors."""


class ConfigError(TaskMatchError):
    """Invalid configuration value or unreadable configuration file."""


class TaskFileError(TaskMatchError):
    """Task file could not be read or does not contain task records."""


class ClassifierTimeoutError(TaskMatchError, TimeoutError):
    """Classifier did not answer within the caller's deadline."""
