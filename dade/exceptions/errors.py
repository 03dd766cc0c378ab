from typing import Any
from sqlalchemy.exc import MultipleResultsFound, NoResultFound

__all__ = [
    "DadeException",
    "ConfigurationError",
    "TransactionCompletedError",
    "MappingError",
    "NoResultFound",
    "MultipleResultsFound",
]


class DadeException(Exception):
    """Base class for data-access layer exceptions."""
    def __init__(self, message: str, detail: Any = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ConfigurationError(DadeException, ValueError):
    """Invalid factory configuration, e.g. an empty connection string."""


class TransactionCompletedError(DadeException, RuntimeError):
    """Operation attempted on a unit of work or context that already completed."""
    def __init__(self, message: str, state: Any = None):
        super().__init__(message, detail={"state": getattr(state, "value", state)})
        self.state = state


class MappingError(DadeException, TypeError):
    """Entity type cannot be mapped to a single-key table."""
