"""
Module 05 - Anchoring

Authoritative store interface, its in-memory and HTTP implementations,
and the retrying committer.
"""

from .base import AuthoritativeStore
from .committer import AnchorCommitter
from .http import HttpAuthoritativeStore
from .memory import InMemoryAuthoritativeStore

__all__ = [
    "AuthoritativeStore",
    "AnchorCommitter",
    "HttpAuthoritativeStore",
    "InMemoryAuthoritativeStore",
]
