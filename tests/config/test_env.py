from __future__ import annotations

import pytest

from modelsentinel.config import ConfigurationError
from modelsentinel.config.env import env_name, get_env, parse_bool, parse_float, parse_list


def test_env_names_are_prefixed() -> None:
    assert env_name("health.threshold") == "SENTINEL_HEALTH_THRESHOLD"
    assert get_env("judge.model", {"SENTINEL_JUDGE_MODEL": " gpt-4o "}) == "gpt-4o"
    assert get_env("judge.model", {"SENTINEL_JUDGE_MODEL": "  "}) is None


@pytest.mark.parametrize(("raw", "expected"), [("yes", True), ("0", False), (True, True)])
def test_parse_bool(raw: object, expected: bool) -> None:
    assert parse_bool(raw, key="flag") is expected


def test_parse_errors_name_the_key() -> None:
    with pytest.raises(ConfigurationError, match="dry_run"):
        parse_bool("maybe", key="dry_run")
    with pytest.raises(ConfigurationError, match="health.threshold"):
        parse_float("high", key="health.threshold")


def test_parse_list_accepts_sequences_and_csv() -> None:
    assert parse_list("openai, anthropic,", key="providers") == ("openai", "anthropic")
    assert parse_list(["openai"], key="providers") == ("openai",)
    with pytest.raises(ConfigurationError):
        parse_list(3, key="providers")
