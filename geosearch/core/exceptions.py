"""
Custom application exceptions.
"""

from typing import Optional


class AppException(Exception):
    """Base application exception."""
    
    def __init__(self, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class TransportFailure(AppException):
    """Remote call failed: unreachable, timed out or non-success status."""
    
    def __init__(self, detail: str = "Remote call failed", status_code: Optional[int] = None):
        super().__init__(detail=detail, status_code=status_code)


class DecodeFailure(AppException):
    """Response body could not be decoded into the expected records."""
    
    def __init__(self, detail: str = "Malformed response body"):
        super().__init__(detail=detail)


class NotFoundException(AppException):
    """Resource not found exception."""
    
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(detail=detail, status_code=404)


class BadRequestException(AppException):
    """Bad request exception."""
    
    def __init__(self, detail: str = "Bad request"):
        super().__init__(detail=detail, status_code=400)
