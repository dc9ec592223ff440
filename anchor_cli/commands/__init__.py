"""
CLI command modules.
"""

from anchor_cli.commands import checkpoint, diff, listing, verify

__all__ = ["checkpoint", "diff", "listing", "verify"]
