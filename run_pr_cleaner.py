#!/usr/bin/env python3
"""
CLI entry-point for the pr-cleaner-ai bootstrapper.

Usage
-----
  # Verify Node.js, Git, GitHub CLI (authenticated) and tsx
  pr-cleaner-ai check

  # Install hook: refresh .cursor/rules/pr-cleaner-ai.mdc (skipped on CI)
  pr-cleaner-ai postinstall

  # Same refresh, requested by hand (runs on CI too)
  pr-cleaner-ai sync --project-root path/to/project
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler


def _setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pr-cleaner-ai",
        description="🧹 pr-cleaner-ai — requirement checks and rules-file setup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s check                            Verify required tools (exit 1 if any missing)
  %(prog)s postinstall                      Install hook, no-op when CI is set
  %(prog)s sync --project-root ../app       Refresh the rules file by hand
        """,
    )
    parser.add_argument(
        "command",
        choices=["check", "postinstall", "sync"],
        help="What to run",
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to pr-cleaner.yaml (default: <project-root>/pr-cleaner.yaml if present)",
    )
    parser.add_argument(
        "--project-root",
        default=None,
        help="Consumer project root (default: current directory)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug-level logging",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    import yaml

    from pr_cleaner.config import is_ci, load_config
    from pr_cleaner.requirements import check_all, default_requirements
    from pr_cleaner.sync import run_postinstall

    console = Console()
    root = Path(args.project_root).resolve() if args.project_root else Path.cwd()

    try:
        cfg = load_config(args.config, project_root=root)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        if args.command != "postinstall":
            console.print(f"[red]Invalid configuration: {exc}[/red]")
            sys.exit(2)
        # Configured CI variables are unknown, so never sync; never fail the install
        if not is_ci():
            logging.getLogger(__name__).warning("Skipping rules sync, unreadable config: %s", exc)
        sys.exit(0)

    if args.command == "check":
        requirements = default_requirements(console, root, optional=cfg.optional_requirements)
        report = check_all(requirements, console)
        sys.exit(0 if report.success else 1)

    # postinstall honours the CI gate; an explicit sync does not
    from_install = args.command == "postinstall"
    ci = from_install and is_ci(names=cfg.ci_env_vars)
    run_postinstall(root, ci=ci, cfg=cfg, console=console, from_install=from_install)
    sys.exit(0)


if __name__ == "__main__":
    main()
