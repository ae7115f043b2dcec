class SunsideError(Exception):
    """Base exception for Sunside errors."""


class AirportNotFoundError(SunsideError):
    """Raised when an IATA code has no airport record."""

    def __init__(self, code: str):
        super().__init__(f"Airport not found: {code}")
        self.code = code


class ValidationError(SunsideError):
    """Raised by the request validation layer with one message per problem."""

    def __init__(self, messages: list[str]):
        super().__init__("; ".join(messages))
        self.messages = list(messages)


class DataError(SunsideError):
    """Raised for malformed reference data."""


class ConfigError(SunsideError):
    """Raised for unreadable or invalid configuration."""
