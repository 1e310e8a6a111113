class ConfigurationError(Exception):
    """Raised when the service-account configuration is missing or unusable."""


class SheetsAPIError(Exception):
    """Base for failures reported by the Sheets API or its token endpoint."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status


class AuthenticationError(SheetsAPIError):
    """Raised when credentials are rejected or a token cannot be obtained."""


class IntegrationError(SheetsAPIError):
    """Raised when a Sheets API call fails."""


class RateLimitError(SheetsAPIError):
    """Raised when the Sheets API rate limit is hit."""


class InvalidSpreadsheetUrlError(ValueError):
    """Raised when a spreadsheet ID or URL cannot be parsed."""


class DuplicateToolError(Exception):
    """Raised when two tools are registered under the same name."""
