"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for callers that only care about bad input.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested transaction or recurring template does not exist."""


class PersistenceError(RuntimeError):
    """Reading or writing the backing store failed.

    Attributes:
        operation: Name of the storage operation that failed
    """

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def template_not_found(template_id: str) -> str:
    """Return message for missing recurring template."""
    return f"Recurring template {template_id} not found"


def empty_field(entity: str, field: str) -> str:
    """Return message for a required field that is empty after cleaning."""
    return f"{entity} '{field}' cannot be empty"


def unsupported_currency(currency: str) -> str:
    return f"Unsupported currency: '{currency}'"


def unsupported_language(language: str) -> str:
    return f"Unsupported language: '{language}'"


def start_date_out_of_range(start_date: int) -> str:
    return f"Invalid start date: {start_date} (must be between 1 and 31)"
