"""
HTTP Client Module

requests-backed client used by the HTTP registry gateway.
"""

from .client import HttpClient, HttpError, HttpResponse

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
]
