"""Error hierarchy for kmodinfo."""

from __future__ import annotations

from typing import Any

__all__ = [
    "ModinfoError",
    "ConfigNotFoundError",
    "ConfigError",
    "InvalidInputError",
    "IndexUnavailableError",
    "ModuleUnreadableError",
    "ErrorCodes",
]


class ModinfoError(Exception):
    """Base error for all kmodinfo errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = details or {}
        self.cause = cause

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ConfigNotFoundError(ModinfoError):
    """Raised when a settings file cannot be found."""

    def __init__(self, config_path: str, **kwargs: Any) -> None:
        super().__init__(
            code="CONFIG_NOT_FOUND",
            message=f"Configuration file not found: {config_path}",
            details={"config_path": config_path},
            **kwargs,
        )


class ConfigError(ModinfoError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        super().__init__(code="CONFIG_INVALID", message=message, **kwargs)


class InvalidInputError(ModinfoError):
    """Raised for invalid input."""

    def __init__(self, message: str = "Invalid input", **kwargs: Any) -> None:
        super().__init__(code="GENERAL_INVALID_INPUT", message=message, **kwargs)


class IndexUnavailableError(ModinfoError):
    """Raised when no dependency index file could be opened."""

    def __init__(self, attempted: list[str], **kwargs: Any) -> None:
        super().__init__(
            code="INDEX_UNAVAILABLE",
            message=f"Dependency index unavailable, tried: {', '.join(attempted)}",
            details={"attempted": attempted},
            **kwargs,
        )

    @property
    def attempted(self) -> list[str]:
        """Index paths that were tried, in order."""
        return self.details["attempted"]


class ModuleUnreadableError(ModinfoError):
    """Raised when a module image cannot be read from any candidate path."""

    def __init__(self, path: str, reason: str, attempted: list[str] | None = None, **kwargs: Any) -> None:
        super().__init__(
            code="MODULE_UNREADABLE",
            message=f"{path}: {reason}",
            details={"path": path, "reason": reason, "attempted": attempted or [path]},
            **kwargs,
        )

    @property
    def path(self) -> str:
        """The module specifier that could not be read."""
        return self.details["path"]

    @property
    def reason(self) -> str:
        """System error text of the last failed attempt."""
        return self.details["reason"]

    @property
    def attempted(self) -> list[str]:
        """Candidate paths that were tried, in order."""
        return self.details["attempted"]


class ErrorCodes:
    """All kmodinfo error codes as constants.

    Example:
        if error.code == ErrorCodes.MODULE_UNREADABLE:
            skip_module()
    """

    CONFIG_NOT_FOUND = "CONFIG_NOT_FOUND"
    CONFIG_INVALID = "CONFIG_INVALID"
    GENERAL_INVALID_INPUT = "GENERAL_INVALID_INPUT"
    INDEX_UNAVAILABLE = "INDEX_UNAVAILABLE"
    MODULE_UNREADABLE = "MODULE_UNREADABLE"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("ErrorCodes is immutable")
