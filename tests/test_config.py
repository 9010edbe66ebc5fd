"""Tests for pr_teammate.shared.config."""

import json

import pytest

from pr_teammate.shared.config import DEFAULT_TRIGGER_PATTERNS, ActionSettings


@pytest.fixture
def action_env(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "ghs_test")
    monkeypatch.setenv("GITHUB_REPOSITORY", "octo/repo")
    for name in ("GITHUB_EVENT_NAME", "GITHUB_EVENT_PATH", "AI_TRIGGER_PATTERNS", "AI_PROVIDER", "DEMO_MODE"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(action_env):
    settings = ActionSettings.from_env()
    assert settings.repository == "octo/repo"
    assert settings.trigger_patterns == DEFAULT_TRIGGER_PATTERNS
    assert settings.ai_provider == "anthropic"
    assert settings.demo_mode is False


def test_overrides(action_env):
    action_env.setenv("AI_TRIGGER_PATTERNS", " @fixer , @helper ,")
    action_env.setenv("AI_PROVIDER", "OpenAI")
    action_env.setenv("DEMO_MODE", "TRUE")

    settings = ActionSettings.from_env()

    assert settings.trigger_patterns == ["@fixer", "@helper"]
    assert settings.ai_provider == "openai"
    assert settings.demo_mode is True


@pytest.mark.parametrize("missing", ["GITHUB_TOKEN", "GITHUB_REPOSITORY"])
def test_required(action_env, missing):
    action_env.delenv(missing)
    with pytest.raises(ValueError, match=f"{missing} must be set"):
        ActionSettings.from_env()


def test_loads_event_payload(action_env, tmp_path):
    event_file = tmp_path / "event.json"
    event_file.write_text(json.dumps({"comment": {"body": "@ai-bot"}}))
    action_env.setenv("GITHUB_EVENT_PATH", str(event_file))

    assert ActionSettings.from_env().load_event_payload() == {"comment": {"body": "@ai-bot"}}


def test_missing_event_path_is_empty_payload(action_env):
    assert ActionSettings.from_env().load_event_payload() == {}
