"""Custom exceptions for LLM output reconciliation."""

from typing import Optional


class ReconciliationError(Exception):
    """Base exception for reconciliation failures that must reach the caller."""
    pass


class ParseError(ReconciliationError):
    """Raised when a model response does not contain a decodable payload."""
    def __init__(self, message: str, payload: str = ""):
        self.payload = payload
        super().__init__(message)


class StructureError(ReconciliationError):
    """Raised when a decoded payload does not have the shape of a graph."""
    def __init__(self, message: str, element: Optional[str] = None, index: Optional[int] = None):
        self.element = element
        self.index = index
        if element is not None and index is not None:
            message = f"{element.capitalize()} {index}: {message}"
        super().__init__(message)
