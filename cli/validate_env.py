"""CLI check of the deployment environment before a build or deploy."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import dotenv_values

from newsfront.exceptions import ConfigurationError
from newsfront.services.env_validation import log_env_status, validate_env_or_throw

DEFAULT_ENV_FILE = ".env"


def load_env(env_file: Path | None, include_process_env: bool = True) -> dict[str, str | None]:
    """Merge the process environment with ``env_file``; the file wins."""
    merged: dict[str, str | None] = dict(os.environ) if include_process_env else {}
    if env_file is not None:
        merged.update(dotenv_values(env_file))
    return merged


def run(env: dict[str, str | None]) -> int:
    """Validate ``env``, log and print a report, return the process exit code."""
    result = log_env_status(env)
    for warning in result.warnings:
        print(f"Warning: {warning}")
    try:
        validate_env_or_throw(env)
    except ConfigurationError as exc:
        print(f"Error: {exc}")
        return 1
    print("Environment validation passed")
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="newsfront-validate-env",
        description="Validate NewsFront environment configuration",
    )
    parser.add_argument(
        "--env-file",
        "-e",
        default=DEFAULT_ENV_FILE,
        help=f"Environment file to load (default: {DEFAULT_ENV_FILE})",
    )
    parser.add_argument(
        "--no-process-env",
        action="store_true",
        help="Ignore variables already set in the process environment",
    )
    parser.add_argument(
        "--require-file",
        action="store_true",
        help="Fail when the environment file does not exist",
    )
    args = parser.parse_args(argv)

    env_file = Path(args.env_file)
    if not env_file.exists() and args.require_file:
        print(f"Error: environment file not found: {env_file}")
        sys.exit(1)

    env = load_env(
        env_file if env_file.exists() else None,
        include_process_env=not args.no_process_env,
    )
    sys.exit(run(env))


if __name__ == "__main__":
    main()
