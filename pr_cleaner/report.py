"""
Console reporting.

Renders the requirement-check report and the usage hints shown after a
rules sync with rich.  Nothing here makes decisions: the grouping and
verdicts come from ``RequirementReport``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

if TYPE_CHECKING:
    from .requirements import Requirement, RequirementReport

_MARKERS = {
    "ok": "[green]✅[/green]",
    "fail": "[red]❌[/red]",
    "warn": "[yellow]⚠️ [/yellow]",
}

DOCS_URL = "https://github.com/Szesnasty/pr-cleaner-ai#readme"


def print_status(console: Console, state: str, label: str, detail: str) -> None:
    """Print one ``   ✅ Label: detail`` probe line."""
    console.print(f"   {_MARKERS[state]} {escape(label)}: {escape(detail)}", highlight=False)


def _print_missing(console: Console, missing: list[Requirement]) -> None:
    for req in missing:
        console.print(f"📦 [bold]{escape(req.name)}[/bold]")
        console.print(f"   {req.description}", markup=False, highlight=False)
        console.print("   💡 Installation:")
        # Instructions are free text; never interpret them as markup
        console.print(req.install_instructions, markup=False, highlight=False)
        console.print()


def print_requirements_report(report: RequirementReport, console: Console | None = None) -> None:
    """Print the grouped missing-tool sections and the final verdict."""
    if console is None:
        console = Console()

    console.print()
    console.rule(style="dim")
    console.print()

    if report.fully_clean:
        console.print(
            Panel(
                "[green bold]All requirements met! You can use the tool.[/green bold]",
                border_style="green",
            )
        )
        return

    if report.missing_required:
        console.print("[red bold]❌ Missing required tools:[/red bold]\n")
        _print_missing(console, report.missing_required)

    if report.missing_optional:
        console.print("[yellow bold]⚠️  Optional tools (useful, but not required):[/yellow bold]\n")
        _print_missing(console, report.missing_optional)

    if not report.success:
        n_fail = len(report.missing_required)
        console.print(
            Panel(
                f"[red bold]{n_fail} required tool(s) missing — you cannot run the tool "
                f"until you install them.[/red bold]",
                border_style="red",
            )
        )
    else:
        console.print(
            Panel(
                "[yellow bold]All required tools found — optional extras are listed above.[/yellow bold]",
                border_style="yellow",
            )
        )


# ── Usage footer ─────────────────────────────────────────────

def print_usage_footer(console: Console, package_name: str) -> None:
    """Print the how-to-use hints shown after every rules sync."""
    console.print("After setup, you can use:")
    console.print("  • In Cursor: [cyan]fix PR 2146[/cyan] (or \"PR 2146\")")
    console.print(f"  • In terminal: [cyan]npx {escape(package_name)} fetch --pr=2146[/cyan]")
    console.print()
    console.print("💡 Requirement: GitHub CLI must be installed and authenticated")
    console.print("   Install: [cyan]brew install gh[/cyan] (macOS) or https://cli.github.com/")
    console.print("   Authenticate: [cyan]gh auth login[/cyan]")
    console.print()
    console.print(f"📚 Documentation: {DOCS_URL}\n")
