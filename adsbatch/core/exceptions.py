"""
Custom exceptions for batch job operations.

Transport and serialization errors are raised by the collaborators and
propagate through BatchJobUtilities unchanged.
"""
from typing import Optional


class BatchJobException(Exception):
    """Base exception for all batch job errors."""
    
    def __init__(self, message: str, error_code: Optional[int] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            error_code: Numeric error code (if available)
        """
        self.error_code = error_code
        super().__init__(message)


class BatchJobTransferError(BatchJobException):
    """Raised when the storage server answers with an unexpected HTTP status."""
    
    def __init__(self, status: int, message: str, url: Optional[str] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            status: HTTP status code returned by the server
            message: Error message
            url: URL of the failed request
        """
        self.status = status
        self.url = url
        super().__init__(f"HTTP {status}: {message}", error_code=status)


class BatchJobSerializationError(BatchJobException):
    """Raised when a request or response document cannot be (de)serialized."""
    
    def __init__(self, message: str, document: Optional[str] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            document: The offending text, if available
        """
        self.document = document
        super().__init__(message)
