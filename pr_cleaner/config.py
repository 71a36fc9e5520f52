"""
Configuration loader for the bootstrapper.

Reads an optional ``pr-cleaner.yaml`` from the project root and provides
typed access to all settings.  Every setting has a built-in default, so
the file is only needed to customise behaviour.

Environment variable interpolation
-----------------------------------
Any string value in the config file can reference environment variables:

  ``$VAR``  or  ``${VAR}``  or  ``${VAR:-default}``

The variable is expanded at load time.  If the variable is not set and
no ``:-default`` is given, the literal string is left unchanged::

    source_overrides:
      - "${PR_CLEANER_RULES:-tools/pr-cleaner-ai.mdc}"
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

# Matches  $VAR  ,  ${VAR}  ,  and  ${VAR:-default}
_ENV_RE = re.compile(
    r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-(.*?))?\}"
    r"|\$([A-Za-z_][A-Za-z0-9_]*)"
)

CONFIG_FILENAME = "pr-cleaner.yaml"

PACKAGE_NAME = "pr-cleaner-ai"
TEMPLATE_NAME = "pr-cleaner-ai.mdc"
RULES_FILE = ".cursor/rules/pr-cleaner-ai.mdc"


def _expand_env(value: str) -> str:
    """Replace ``$VAR`` / ``${VAR}`` / ``${VAR:-default}`` with env values.

    If the variable is not set **and** no default is provided, the original
    reference is left unchanged.
    """
    def _replace(m: re.Match[str]) -> str:
        # ${VAR} or ${VAR:-default}
        if m.group(1) is not None:
            var = m.group(1)
            default = m.group(2)  # None when no :- was used
            env_val = os.environ.get(var)
            if env_val is not None:
                return env_val
            return default if default is not None else m.group(0)
        # $VAR  (bare)
        var = m.group(3)
        return os.environ.get(var, m.group(0))
    return _ENV_RE.sub(_replace, value)


def _str_list(raw: Any) -> list[str]:
    """Accept a single string or a list of strings."""
    if raw is None:
        return []
    if isinstance(raw, str):
        return [_expand_env(raw)]
    if isinstance(raw, list):
        return [_expand_env(str(v)) for v in raw]
    raise ValueError(f"Expected a string or a list of strings, got {type(raw).__name__}")


@dataclass
class ToolConfig:
    """Top-level bootstrapper configuration."""

    package_name: str = PACKAGE_NAME
    template_name: str = TEMPLATE_NAME
    rules_file: str = RULES_FILE
    # Extra template locations, searched before the packaged ones
    source_overrides: list[str] = field(default_factory=list)
    # Requirement names that should not block a passing check
    optional_requirements: list[str] = field(default_factory=list)
    ci_env_vars: list[str] = field(default_factory=lambda: ["CI"])

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ToolConfig:
        # CI always gates; configured names only add to it
        ci_vars = ["CI", *(v for v in _str_list(d.get("ci_env_vars")) if v != "CI")]
        return cls(
            package_name=_expand_env(str(d.get("package_name", PACKAGE_NAME))),
            template_name=_expand_env(str(d.get("template_name", TEMPLATE_NAME))),
            rules_file=_expand_env(str(d.get("rules_file", RULES_FILE))),
            source_overrides=_str_list(d.get("source_overrides")),
            optional_requirements=_str_list(d.get("optional_requirements")),
            ci_env_vars=ci_vars,
        )

    def destination(self, project_root: Path) -> Path:
        """Absolute location of the synced rules file."""
        return project_root / self.rules_file


def is_ci(environ: Mapping[str, str] | None = None, names: list[str] | None = None) -> bool:
    """Return True when ``CI`` or any of *names* is set to a non-empty value."""
    if environ is None:
        environ = os.environ
    return any(environ.get(name) for name in ["CI", *(names or [])])


def load_config(path: str | Path | None = None, project_root: Path | None = None) -> ToolConfig:
    """Load configuration from a YAML file.

    When *path* is ``None``, looks for ``pr-cleaner.yaml`` in *project_root*
    (default: the current directory) and falls back to built-in defaults
    if it is absent.  An explicit *path* must exist.
    """
    if path is None:
        root = project_root if project_root is not None else Path.cwd()
        path = root / CONFIG_FILENAME
        if not path.exists():
            return ToolConfig()
    else:
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if raw is None:
        return ToolConfig()
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(raw).__name__}")

    return ToolConfig.from_dict(raw)
