"""Custom exception hierarchy for rainbowtree."""


class AppError(Exception):
    """Base exception for app-specific failures."""


class UsageError(ValueError, AppError):
    """Command usage or user-input errors."""


class ConfigError(ValueError, AppError):
    """Configuration file validation errors."""


class ProcessError(AppError):
    """External process lifecycle misuse."""
