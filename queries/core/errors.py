"""
Error types raised while running bookstore operations
"""

from typing import Optional


class OperationError(Exception):
    """Base error for any failed database operation"""

    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.step = step

    def __str__(self) -> str:
        if self.step:
            return f"[{self.step}] {self.message}"
        return self.message


class DatabaseConnectionError(OperationError):
    """Connecting to or pinging the database failed"""


class QueryExecutionError(OperationError):
    """A find, update, delete, aggregate or explain call failed"""


class IndexCreationError(OperationError):
    """Index creation failed"""


class QueryValidationError(ValueError):
    """A query, update, pipeline or index descriptor is malformed"""
