"""Error types for mysql-dto-cli."""

from typing import Optional, Dict, Any


class DtoGenError(Exception):
    """Base exception for DTO generation errors."""

    def __init__(self, message: str, code: str = "DTO_GEN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a dictionary (used by the run log and --verbose output)."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConnectionError(DtoGenError):
    """Could not check out a connection from the pool."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONNECTION_ERROR", details=details)


class QueryError(DtoGenError):
    """A catalog query was rejected or failed at the server."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="QUERY_ERROR", details=details)


class ValidationError(DtoGenError):
    """Invalid run parameters (database name, credentials, output directory)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="VALIDATION_ERROR", details=details)
