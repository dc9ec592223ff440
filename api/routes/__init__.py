"""API route handlers."""

from api.routes import checkpoints, diff, health, verify

__all__ = ["checkpoints", "diff", "health", "verify"]
