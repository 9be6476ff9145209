class CheckScamError(Exception):
    """Base exception for the application."""


class ProviderError(CheckScamError):
    """Raised when an external provider cannot be reached or answers garbage."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class ReportNotFoundError(CheckScamError):
    """Raised when a scam report does not exist."""

    def __init__(self, report_id: int) -> None:
        super().__init__(f"Report {report_id} not found")
        self.report_id = report_id


class InvalidPhoneError(CheckScamError):
    """Raised when a submitted phone number is rejected by both validators."""
