"""Exception types for flightdeck."""

from __future__ import annotations


class FlightdeckError(Exception):
    """Base exception for expected application errors."""


class NotFoundError(FlightdeckError):
    """Raised when the scan root is missing or is not a directory."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Source directory not found: {path}")


class ParseFailure(FlightdeckError):
    """Raised when a single source file cannot be parsed."""

    def __init__(self, file: str, reason: str) -> None:
        self.file = file
        self.reason = reason
        super().__init__(f"Could not parse {file}: {reason}")


class InvalidConfigRow(FlightdeckError):
    """Raised for one malformed row of audience data."""

    def __init__(self, row_number: int, row: list[str]) -> None:
        self.row_number = row_number
        super().__init__(f"Skipping audience row {row_number}: {','.join(row)!r}")


class ConfigError(FlightdeckError):
    """Raised when a configuration file is unreadable or invalid."""

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        super().__init__(f"Invalid configuration in {path}: {detail}")


class DataTableError(FlightdeckError):
    """Raised when a feature, alias or browser table is malformed."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Invalid data table {path}: {detail}")


class QueryError(FlightdeckError):
    """Raised when a browser-selection query cannot be understood."""

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__(f"Unknown browser query: {query!r}")


class NetworkError(FlightdeckError):
    """Raised when a network operation fails."""

    def __init__(self, url: str, *, cause: str | None = None) -> None:
        detail = f"Unable to connect to {url}"
        if cause:
            detail = f"{detail} ({cause})"
        super().__init__(detail)


class RequestTimeoutError(FlightdeckError):
    """Raised when a request times out."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Request timed out for {url}")


class HttpStatusError(FlightdeckError):
    """Raised when an unexpected HTTP status is returned."""

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"Request failed with HTTP {status_code} for {url}")


class ContentError(FlightdeckError):
    """Raised when a response body is invalid or unexpectedly empty."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Received empty or invalid content from {url}")
