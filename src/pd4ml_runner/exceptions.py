"""Custom exceptions for the PD4ML wrapper."""


class PD4MLError(Exception):
    """Base exception for all wrapper errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class InvalidOptionError(PD4MLError):
    """Raised for an unknown option, a rejected value or a missing prerequisite path."""

    def __init__(self, message: str, option: str | None = None, *args, **kwargs):
        self.option = option
        super().__init__(message, *args, **kwargs)


class ToolNotFoundError(PD4MLError):
    """Raised when the external tool cannot be launched (exit status 127)."""

    def __init__(self, message: str, exit_status: int | None = None, *args, **kwargs):
        self.exit_status = exit_status
        super().__init__(message, *args, **kwargs)


class ToolReportedError(PD4MLError):
    """Raised on request when the tool reported errors instead of pages."""

    def __init__(self, message: str, errors: dict[int, str] | None = None, *args, **kwargs):
        self.errors = dict(errors or {})
        super().__init__(message, *args, **kwargs)
