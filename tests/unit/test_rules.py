import logging
from pathlib import Path

import pytest

from src.adapters.auth.crypto import DEFAULT_SECRET_KEY
from src.app_shell.config import check_secret_key, validate_ops_rules
from src.rules.loader import load_rules
from src.rules.models import Rules

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def test_project_rules_file_loads():
    rules = load_rules(PROJECT_ROOT / "rules.yaml")

    assert rules.posts.page_size == 20
    assert rules.posts.title_max_length == 255
    assert rules.sessions.rotate_on_login is True
    assert rules.sessions.cookie.http_only is True


def test_missing_file_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "nope.yaml")


def test_invalid_yaml_raises(tmp_path: Path):
    path = tmp_path / "rules.yaml"
    path.write_text("project: [unclosed\n")

    with pytest.raises(ValueError, match="Invalid YAML"):
        load_rules(path)


def test_schema_violation_raises(tmp_path: Path):
    path = tmp_path / "rules.yaml"
    path.write_text("project:\n  slug: x\n  rules_version: '1'\nposts:\n  page_size: 0\n")

    with pytest.raises(ValueError, match="Rules validation failed"):
        load_rules(path)


def test_sections_default_when_omitted(tmp_path: Path):
    path = tmp_path / "rules.yaml"
    path.write_text("project:\n  slug: x\n  rules_version: '1'\n")

    rules = load_rules(path)

    assert rules.posts.page_size == 20
    assert rules.sessions.cookie.name == "postboard_session"


def test_required_env_is_checked(monkeypatch: pytest.MonkeyPatch):
    rules = Rules.model_validate(
        {
            "project": {"slug": "x", "rules_version": "1"},
            "ops": {"required_env": ["POSTBOARD_TEST_REQUIRED"]},
        }
    )
    monkeypatch.delenv("POSTBOARD_TEST_REQUIRED", raising=False)

    with pytest.raises(RuntimeError, match="POSTBOARD_TEST_REQUIRED"):
        validate_ops_rules(rules)

    monkeypatch.setenv("POSTBOARD_TEST_REQUIRED", "1")
    validate_ops_rules(rules)


def test_empty_file_is_rejected(tmp_path: Path):
    path = tmp_path / "rules.yaml"
    path.write_text("")

    with pytest.raises(ValueError, match="mapping"):
        load_rules(path)


def test_default_secret_key_is_flagged(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.WARNING, logger="src.app_shell.config"):
        assert check_secret_key(DEFAULT_SECRET_KEY) is False

    assert "POSTBOARD_SECRET_KEY" in caplog.text


def test_custom_secret_key_passes_quietly(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.WARNING, logger="src.app_shell.config"):
        assert check_secret_key("a-real-secret") is True

    assert caplog.text == ""
