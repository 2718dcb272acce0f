import pytest

from biolink.api.deps import PROJECT_ROOT
from biolink.app_shell.config import ConfigError, validate_ops_rules
from biolink.rules.loader import load_rules
from biolink.rules.models import Rules


def test_project_rules_file_is_valid():
    rules = load_rules(PROJECT_ROOT / "rules.yaml")

    assert rules.links.title.max == 200
    assert "https" in rules.links.allowed_link_protocols
    assert rules.profiles.theme_values == ["default", "dark", "custom"]


def test_missing_sections_use_defaults(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text('rules_version: "1"\n')

    rules = load_rules(path)

    assert rules.links.max_links_per_profile == 100
    assert rules.auth.password_min_length == 8


def test_rules_inside_markdown_fence(tmp_path):
    path = tmp_path / "rules.md"
    path.write_text(
        "# Rules\n\nSome prose.\n\n```yaml\nrules_version: \"2\"\nlinks:\n"
        "  max_links_per_profile: 5\n```\n\nMore prose.\n"
    )

    rules = load_rules(path)

    assert rules.rules_version == "2"
    assert rules.links.max_links_per_profile == 5


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("rules_version: [unclosed\n")

    with pytest.raises(ValueError, match="Invalid YAML"):
        load_rules(path)


def test_inverted_range_rejected(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text('rules_version: "1"\nlinks:\n  title:\n    min: 10\n    max: 2\n')

    with pytest.raises(ValueError, match="Rules validation failed"):
        load_rules(path)


def test_required_env_missing(monkeypatch):
    monkeypatch.delenv("BIOLINK_TEST_REQUIRED", raising=False)
    rules = Rules.model_validate(
        {"rules_version": "1", "ops": {"required_env": ["BIOLINK_TEST_REQUIRED"]}}
    )

    with pytest.raises(ConfigError, match="BIOLINK_TEST_REQUIRED"):
        validate_ops_rules(rules)

    monkeypatch.setenv("BIOLINK_TEST_REQUIRED", "1")
    validate_ops_rules(rules)
