"""
Requirement checks.

Validates that the external tools the PR-cleaning workflow shells out to
are in place before it runs.  Each requirement carries a probe that
prints one status line and returns a bool; the engine only consumes the
bool and groups whatever is missing into actionable install
instructions.

Checks
------
1. Node.js          (``node --version``)
2. Git              (``git --version``)
3. GitHub CLI       (``gh --version``, then ``gh auth status``)
4. tsx              (local ``node_modules/.bin`` or global ``tsx --version``)
"""

from __future__ import annotations

import enum
import logging
import os
import subprocess
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Callable, Iterable

from rich.console import Console

from .report import print_requirements_report, print_status

logger = logging.getLogger(__name__)


# ── Result types ─────────────────────────────────────────────

@dataclass
class Requirement:
    """One external dependency to verify."""

    name: str
    required: bool
    probe: Callable[[], bool]
    install_instructions: str
    description: str
    # Set by check_all(); meaningless before a check run
    installed: bool = False


@dataclass
class RequirementReport:
    requirements: list[Requirement] = field(default_factory=list)

    @property
    def missing_required(self) -> list[Requirement]:
        return [r for r in self.requirements if r.required and not r.installed]

    @property
    def missing_optional(self) -> list[Requirement]:
        return [r for r in self.requirements if not r.required and not r.installed]

    @property
    def success(self) -> bool:
        """Exit-code success: nothing *required* is missing."""
        return not self.missing_required

    @property
    def fully_clean(self) -> bool:
        """Nothing at all is missing, optional tools included."""
        return not self.missing_required and not self.missing_optional


class GitHubCliStatus(enum.Enum):
    NOT_INSTALLED = "not_installed"
    NOT_AUTHENTICATED = "not_authenticated"
    AUTHENTICATED = "authenticated"


# ── Individual probes ────────────────────────────────────────

def _run_command(cmd: list[str], timeout: int = 10) -> tuple[int, str, str]:
    """Run a command and return (returncode, stdout, stderr).

    Returns ``(-1, "", error_message)`` when the binary is missing, cannot
    be executed, or the command times out.
    """
    logger.debug("Running: %s", " ".join(cmd))
    try:
        r = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
        return r.returncode, r.stdout.strip(), r.stderr.strip()
    except FileNotFoundError:
        return -1, "", f"Command not found: {cmd[0]}"
    except subprocess.TimeoutExpired:
        return -1, "", f"Command timed out after {timeout}s"
    except OSError as exc:
        return -1, "", f"Could not run {cmd[0]}: {exc}"


def _check_version(console: Console, label: str, cmd: list[str]) -> bool:
    rc, out, err = _run_command(cmd)
    if rc != 0:
        logger.debug("%s probe failed: %s", label, err or f"exit {rc}")
        print_status(console, "fail", label, "NOT INSTALLED")
        return False
    print_status(console, "ok", label, out.splitlines()[0] if out else "installed")
    return True


def check_node(console: Console) -> bool:
    """Node.js runs the TypeScript scripts."""
    return _check_version(console, "Node.js", ["node", "--version"])


def check_git(console: Console) -> bool:
    """Git determines the repository and branch."""
    return _check_version(console, "Git", ["git", "--version"])


def probe_github_cli() -> tuple[GitHubCliStatus, str]:
    """Two-stage probe: the binary must run before auth is queried.

    Returns the status and the first line of ``gh --version`` (empty
    when the binary is absent).
    """
    rc, out, _ = _run_command(["gh", "--version"])
    if rc != 0:
        return GitHubCliStatus.NOT_INSTALLED, ""
    version = out.splitlines()[0] if out else ""

    rc, _, err = _run_command(["gh", "auth", "status"])
    if rc != 0:
        logger.debug("gh auth status failed: %s", err)
        return GitHubCliStatus.NOT_AUTHENTICATED, version
    return GitHubCliStatus.AUTHENTICATED, version


def check_github_cli(console: Console) -> bool:
    """The GitHub CLI fetches PR comments and must be logged in."""
    status, version = probe_github_cli()
    if status is GitHubCliStatus.NOT_INSTALLED:
        print_status(console, "fail", "GitHub CLI", "NOT INSTALLED")
        return False

    print_status(console, "ok", "GitHub CLI", version or "installed")
    if status is GitHubCliStatus.NOT_AUTHENTICATED:
        print_status(console, "warn", "GitHub CLI", "Installed but NOT AUTHENTICATED")
        console.print("      Run: gh auth login", highlight=False)
        return False

    print_status(console, "ok", "GitHub CLI", "Authenticated")
    return True


def check_tsx(console: Console, project_root: Path | None = None) -> bool:
    """tsx runs TypeScript files directly; a local install wins."""
    root = project_root if project_root is not None else Path.cwd()
    bin_dir = root / "node_modules" / ".bin"
    names = ["tsx.cmd", "tsx"] if os.name == "nt" else ["tsx"]
    if any((bin_dir / n).exists() for n in names):
        print_status(console, "ok", "tsx", "Installed locally (node_modules)")
        return True

    rc, _, err = _run_command(["tsx", "--version"])
    if rc == 0:
        print_status(console, "ok", "tsx", "Installed globally")
        return True

    logger.debug("tsx probe failed: %s", err)
    print_status(console, "fail", "tsx", "NOT INSTALLED")
    return False


# ── Install instructions ─────────────────────────────────────

_GH_INSTRUCTIONS = """
   Install GitHub CLI:

   macOS:
     brew install gh

   Windows:
     winget install --id GitHub.cli
     # or download from: https://cli.github.com/

   Linux:
     # See: https://github.com/cli/cli/blob/trunk/docs/install_linux.md

   After installation, authenticate:
     gh auth login
"""

_TSX_INSTRUCTIONS = """
   Locally (recommended):
     yarn add -D tsx
     # or
     npm install -D tsx

   Globally:
     npm install -g tsx
     # or
     yarn global add tsx
"""


def default_requirements(
    console: Console,
    project_root: Path | None = None,
    optional: Iterable[str] = (),
) -> list[Requirement]:
    """Build the standard requirement list, fresh for every check run.

    Names in *optional* are demoted to ``required=False``.
    """
    optional = set(optional)
    specs = [
        (
            "Node.js",
            partial(check_node, console),
            "Install Node.js: https://nodejs.org/",
            "Required to run TypeScript scripts",
        ),
        (
            "Git",
            partial(check_git, console),
            "Install Git: https://git-scm.com/downloads",
            "Required to determine repository and branch",
        ),
        (
            "GitHub CLI (gh)",
            partial(check_github_cli, console),
            _GH_INSTRUCTIONS,
            "Required to fetch PR comments from GitHub",
        ),
        (
            "tsx",
            partial(check_tsx, console, project_root),
            _TSX_INSTRUCTIONS,
            "Used to run TypeScript files directly",
        ),
    ]
    return [
        Requirement(
            name=name,
            required=name not in optional,
            probe=probe,
            install_instructions=instructions,
            description=description,
        )
        for name, probe, instructions, description in specs
    ]


# ── Aggregate runner ─────────────────────────────────────────

def check_all(requirements: list[Requirement], console: Console | None = None) -> RequirementReport:
    """Probe every requirement in order, render the report and return it."""
    if console is None:
        console = Console()

    console.print("\n🔍 Checking requirements for pr-cleaner-ai...\n")

    for req in requirements:
        req.installed = bool(req.probe())
        logger.debug("%s: installed=%s required=%s", req.name, req.installed, req.required)

    report = RequirementReport(requirements=list(requirements))
    print_requirements_report(report, console)
    return report


def check_requirements(
    requirements: list[Requirement] | None = None,
    console: Console | None = None,
    project_root: Path | None = None,
) -> bool:
    """Library entry point: True when every required tool is available."""
    if console is None:
        console = Console()
    if requirements is None:
        requirements = default_requirements(console, project_root)
    return check_all(requirements, console).success
