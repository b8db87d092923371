"""Custom exceptions for jtix."""


class JtixError(Exception):
    """Base exception for jtix operations."""


class ConfigError(JtixError):
    """Raised when a required configuration is missing or invalid."""


class JiraError(JtixError):
    """Error talking to the Jira REST API."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
