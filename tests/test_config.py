"""Tests for the YAML configuration loader and CI detection."""

from __future__ import annotations

import pytest
import yaml

from pr_cleaner.config import ToolConfig, _expand_env, is_ci, load_config


def test_defaults_without_file(tmp_path):
    cfg = load_config(project_root=tmp_path)

    assert cfg == ToolConfig()
    assert cfg.destination(tmp_path) == tmp_path / ".cursor" / "rules" / "pr-cleaner-ai.mdc"
    assert cfg.ci_env_vars == ["CI"]


def test_explicit_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.yaml")


def test_empty_file_gives_defaults(tmp_path):
    (tmp_path / "pr-cleaner.yaml").write_text("", encoding="utf-8")
    assert load_config(project_root=tmp_path) == ToolConfig()


def test_non_mapping_rejected(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        load_config(path)


def test_invalid_yaml_propagates(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text("key: [unclosed\n", encoding="utf-8")
    with pytest.raises(yaml.YAMLError):
        load_config(path)


def test_values_and_env_interpolation(tmp_path, monkeypatch):
    monkeypatch.setenv("RULES_DIR", "/opt/rules")
    monkeypatch.delenv("UNSET_RULES", raising=False)
    path = tmp_path / "pr-cleaner.yaml"
    path.write_text(
        "rules_file: .cursor/rules/custom.mdc\n"
        "source_overrides:\n"
        "  - ${RULES_DIR}/pr-cleaner-ai.mdc\n"
        "  - ${UNSET_RULES:-local/pr-cleaner-ai.mdc}\n"
        "optional_requirements: tsx\n"
        "ci_env_vars: [CI, BUILDKITE]\n",
        encoding="utf-8",
    )

    cfg = load_config(project_root=tmp_path)

    assert cfg.rules_file == ".cursor/rules/custom.mdc"
    assert cfg.source_overrides == ["/opt/rules/pr-cleaner-ai.mdc", "local/pr-cleaner-ai.mdc"]
    assert cfg.optional_requirements == ["tsx"]
    assert cfg.ci_env_vars == ["CI", "BUILDKITE"]


def test_bad_list_type_rejected():
    with pytest.raises(ValueError):
        ToolConfig.from_dict({"source_overrides": {"not": "a list"}})


def test_unset_variable_left_alone(monkeypatch):
    monkeypatch.delenv("PR_CLEANER_NOPE", raising=False)
    assert _expand_env("$PR_CLEANER_NOPE/x") == "$PR_CLEANER_NOPE/x"
    assert _expand_env("${PR_CLEANER_NOPE}") == "${PR_CLEANER_NOPE}"


@pytest.mark.parametrize(
    "environ, names, expected",
    [
        ({}, None, False),
        ({"CI": "true"}, None, True),
        ({"CI": ""}, None, False),
        ({"BUILDKITE": "1"}, None, False),
        ({"BUILDKITE": "1"}, ["CI", "BUILDKITE"], True),
        ({"CI": "true"}, ["BUILDKITE"], True),
    ],
)
def test_is_ci(environ, names, expected):
    assert is_ci(environ, names) is expected


def test_custom_ci_vars_add_to_default(tmp_path):
    (tmp_path / "pr-cleaner.yaml").write_text("ci_env_vars: [BUILDKITE]\n", encoding="utf-8")

    cfg = load_config(project_root=tmp_path)

    assert cfg.ci_env_vars == ["CI", "BUILDKITE"]
    assert is_ci({"CI": "true"}, cfg.ci_env_vars) is True
    assert is_ci({"BUILDKITE": "1"}, cfg.ci_env_vars) is True
