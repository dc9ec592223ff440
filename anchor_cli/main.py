"""
Module 09 - CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m anchor_cli checkpoint [--dry-run] [--json]
    python -m anchor_cli verify <file> [--checkpoint N] [--remote] [--json]
    python -m anchor_cli verify --content "<text>" [--checkpoint N]
    python -m anchor_cli diff <a> <b> [--json]
    python -m anchor_cli list [--checkpoint N] [--json]
    python -m anchor_cli config --init|--show

Environment Variables:
    ANCHOR_CONFIG           Path to the YAML config file
    ANCHOR_WORKSPACE        Root directory of the checkpointed files
    ANCHOR_STORE_DIR        Local checkpoint directory
    ANCHOR_REGISTRY_URL     Registry gateway endpoint
    ANCHOR_AGENT_ID         Agent id in the registry
    ANCHOR_LOG_LEVEL        Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import traceback
from pathlib import Path
from typing import Sequence

from anchor_cli.commands import checkpoint, diff, listing, verify
from core.config.runtime import DEFAULT_CONFIG_FILENAME, RuntimeConfig, load_config


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="anchor",
        description="Memory anchor CLI - checkpoint files, publish merkle roots and verify inclusion.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to YAML configuration file (default: $ANCHOR_CONFIG or ./{DEFAULT_CONFIG_FILENAME})",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on unexpected errors",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- checkpoint command ---
    checkpoint_parser = subparsers.add_parser(
        "checkpoint",
        help="Build a checkpoint, publish its root and store it",
        description="Hash the configured files, build the merkle tree and publish the root.",
    )
    checkpoint_parser.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Build and print the checkpoint without publishing or storing it",
    )
    checkpoint_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    checkpoint_parser.set_defaults(func=checkpoint.checkpoint_cmd)

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify a file was part of a checkpoint",
        description="Check a file's inclusion proof and whether it changed since the checkpoint.",
    )
    verify_parser.add_argument(
        "file",
        type=str,
        nargs="?",
        default=None,
        help="File path relative to the workspace, or a unique file name. "
             "Omit to list the checkpoint's files.",
    )
    verify_parser.add_argument(
        "--checkpoint",
        type=int,
        default=None,
        help="Local checkpoint id (default: latest)",
    )
    verify_parser.add_argument(
        "--content",
        type=str,
        default=None,
        help="Look up exact content instead of a file",
    )
    verify_parser.add_argument(
        "--remote",
        action="store_true",
        default=False,
        help="Also verify the proof against the registry",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON report",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- diff command ---
    diff_parser = subparsers.add_parser(
        "diff",
        help="Compare two checkpoints",
        description="List files added, removed and modified between two checkpoints.",
    )
    diff_parser.add_argument("a", type=int, help="Older checkpoint id")
    diff_parser.add_argument("b", type=int, help="Newer checkpoint id")
    diff_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="JSON output",
    )
    diff_parser.set_defaults(func=diff.diff_cmd)

    # --- list command ---
    list_parser = subparsers.add_parser(
        "list",
        help="List checkpoints, or the files in one checkpoint",
    )
    list_parser.add_argument(
        "--checkpoint",
        type=int,
        default=None,
        help="List the files of this checkpoint",
    )
    list_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="JSON output",
    )
    list_parser.set_defaults(func=listing.list_cmd)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage configuration",
        description="Create or inspect the configuration file.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a configuration file with default values",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show the effective configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default=DEFAULT_CONFIG_FILENAME,
        help=f"Path for config file (default: {DEFAULT_CONFIG_FILENAME})",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(RuntimeConfig().to_yaml())
        print(f"Created configuration file: {config_path}")
        print("\nEdit this file to configure your settings.")
        print("You can also use environment variables (ANCHOR_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    # Default: show help
    print("Usage: anchor config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    config_path = args.config or os.getenv("ANCHOR_CONFIG")
    try:
        config = load_config(config_path)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(level=args.log_level or config.log_level)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
