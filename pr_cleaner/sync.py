"""
Rules-file synchronisation.

On every install the packaged Cursor rules template is copied into the
consumer project at ``.cursor/rules/pr-cleaner-ai.mdc`` so that the rules
always match the installed version.  The file is treated as an opaque
blob: it is refreshed unconditionally, never diffed and never deleted.

The template is searched for in several places because its physical
location depends on how the tool was installed (a project-local override,
an npm dependency tree, the installed Python package, or a source
checkout).  The first hit wins.
"""

from __future__ import annotations

import enum
import logging
import shutil
from pathlib import Path
from typing import Iterable

import yaml
from rich.console import Console
from rich.markup import escape

from .config import ToolConfig, load_config
from .report import print_usage_footer

logger = logging.getLogger(__name__)

_PACKAGE_DIR = Path(__file__).resolve().parent


class SyncOutcome(enum.Enum):
    UPDATED = "updated"
    CREATED = "created"
    SOURCE_NOT_FOUND_WITH_EXISTING = "source_not_found_with_existing"
    SOURCE_NOT_FOUND_NO_DESTINATION = "source_not_found_no_destination"


def candidate_source_paths(
    project_root: Path,
    cfg: ToolConfig,
    package_dir: Path = _PACKAGE_DIR,
) -> list[Path]:
    """Return template locations in priority order.

    Configured overrides come first (relative ones resolved against
    *project_root*), then the npm dependency tree, then the template
    bundled with this package, then a source checkout's ``config/``.
    """
    paths: list[Path] = []
    for override in cfg.source_overrides:
        p = Path(override).expanduser()
        paths.append(p if p.is_absolute() else project_root / p)
    paths.append(project_root / "node_modules" / cfg.package_name / "config" / cfg.template_name)
    paths.append(package_dir / "templates" / cfg.template_name)
    paths.append(package_dir.parent / "config" / cfg.template_name)
    return paths


def resolve_source(candidates: Iterable[Path]) -> Path | None:
    """Return the first candidate that exists, or None."""
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def sync_artifact(destination: Path, candidates: Iterable[Path]) -> SyncOutcome:
    """Copy the first available template over *destination*.

    The classification depends only on whether *destination* existed on
    entry, so repeated calls with unchanged inputs report ``UPDATED``.
    A failed copy is reported like a missing source.
    """
    has_destination = destination.exists()
    not_found = (
        SyncOutcome.SOURCE_NOT_FOUND_WITH_EXISTING
        if has_destination
        else SyncOutcome.SOURCE_NOT_FOUND_NO_DESTINATION
    )

    source = resolve_source(candidates)
    if source is None:
        logger.debug("No template found; destination exists=%s", has_destination)
        return not_found

    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)
    except OSError as exc:
        logger.warning("Could not copy %s to %s: %s", source, destination, exc)
        return not_found

    logger.debug("Copied %s -> %s", source, destination)
    return SyncOutcome.UPDATED if has_destination else SyncOutcome.CREATED


def print_sync_summary(
    outcome: SyncOutcome,
    cfg: ToolConfig,
    console: Console | None = None,
    *,
    from_install: bool = True,
) -> None:
    """Print a heading and the guidance for *outcome*.

    *from_install* picks the post-install welcome over a neutral heading
    for a sync requested by hand.
    """
    if console is None:
        console = Console()

    package = escape(cfg.package_name)
    rules = escape(cfg.rules_file)
    rules_dir = Path(cfg.rules_file).parent
    rerun = f"[bold]{package} sync[/bold]"

    if from_install:
        console.print(f"\n🎉 {package} installed successfully!\n")
    else:
        console.print(f"\n🔄 {package} rules sync\n")

    if outcome is SyncOutcome.UPDATED:
        console.print(f"✅ Auto-updated {rules} to match installed version")
        console.print("   (No action needed - rules are up-to-date)\n")
    elif outcome is SyncOutcome.CREATED:
        console.print(f"✅ Created {rules}")
        console.print("   (Rules file auto-created from the installed package)\n")
    elif outcome is SyncOutcome.SOURCE_NOT_FOUND_WITH_EXISTING:
        console.print("💡 Cursor rules file detected, but it could not be refreshed.")
        console.print(f"   Run: {rerun} to update\n")
    elif outcome is SyncOutcome.SOURCE_NOT_FOUND_NO_DESTINATION:
        console.print("📝 Next step: set up the rules file")
        console.print()
        console.print(f"   Run: {rerun}")
        console.print()
        console.print("This will:")
        console.print(f"  • Copy {rules} from the installed package")
        if rules_dir != Path("."):
            console.print(f"  • Create {escape(rules_dir.as_posix())}/ if it does not exist")
        console.print()
        console.print("💡 Note: Rules are auto-created/updated on every install!")
        console.print()
    else:
        raise ValueError(f"Unknown sync outcome: {outcome!r}")

    print_usage_footer(console, cfg.package_name)


def run_postinstall(
    project_root: Path | None = None,
    *,
    ci: bool = False,
    cfg: ToolConfig | None = None,
    console: Console | None = None,
    from_install: bool = True,
) -> SyncOutcome | None:
    """Install hook: sync the rules file and print a summary.

    Returns ``None`` without touching anything when *ci* is set (silently)
    or when the project config cannot be read, since its CI variables are
    then unknown.
    """
    if ci:
        return None

    root = project_root if project_root is not None else Path.cwd()
    if cfg is None:
        try:
            cfg = load_config(project_root=root)
        except (OSError, ValueError, yaml.YAMLError) as exc:
            logger.warning("Skipping rules sync, unreadable config: %s", exc)
            return None
    if console is None:
        console = Console()

    destination = cfg.destination(root)
    outcome = sync_artifact(destination, candidate_source_paths(root, cfg))
    print_sync_summary(outcome, cfg, console, from_install=from_install)
    return outcome
