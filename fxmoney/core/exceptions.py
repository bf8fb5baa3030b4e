"""Custom exceptions for money handling."""


class MoneyError(Exception):
    """Base exception for money handling."""
    pass


class InvalidDeclarationError(MoneyError):
    """Raised when a Money value is declared with an invalid amount or currency."""
    pass


class InvalidConfigurationError(MoneyError):
    """Raised when a conversion table is configured with invalid data."""
    pass


class UnknownConversionError(MoneyError):
    """Raised when no conversion rate is known between two currencies."""
    pass


class UnsupportedOperationError(MoneyError):
    """Raised when arithmetic is attempted with an unsupported operand."""
    pass


class InvalidComparisonError(MoneyError):
    """Raised when Money is compared against something that is not Money."""
    pass
