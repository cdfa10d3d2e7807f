"""Tests for configuration management."""

import os
from pathlib import Path

import pytest
import yaml

from ghd.config import (
    GhdConfig,
    ProfileConfig,
    GitHubConfig,
    ResolverConfig,
    GlobalConfig,
    ConfigLoader,
    SelectionStrategy,
    StatusErrorPolicy,
    load_config,
    get_default_config,
)
from ghd.core.exceptions import ConfigError
from ghd.core.logging import LogLevel
from ghd.core.output import OutputFormat


class TestGitHubConfig:
    """Tests for GitHubConfig."""

    def test_default_values(self):
        config = GitHubConfig()
        assert config.token is None
        assert config.base_url == "https://api.github.com"
        assert config.timeout == 5.0

    def test_get_token_from_config(self):
        config = GitHubConfig(token="ghp_config")
        assert config.get_token() == "ghp_config"

    def test_get_token_env_order(self, monkeypatch):
        monkeypatch.setenv("GH_TOKEN", "gh")
        monkeypatch.setenv("GITHUB_TOKEN", "github")
        assert GitHubConfig().get_token() == "github"

        monkeypatch.setenv("GHD_GITHUB_TOKEN", "ghd")
        assert GitHubConfig().get_token() == "ghd"

    def test_from_env_placeholder(self):
        os.environ["GITHUB_TOKEN"] = "ghp_env"
        config = GitHubConfig(token="from_env")
        assert config.get_token() == "ghp_env"
        del os.environ["GITHUB_TOKEN"]

    def test_explicit_token_beats_env(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_env")
        assert GitHubConfig(token="ghp_config").get_token() == "ghp_config"

    def test_no_token(self):
        assert GitHubConfig().get_token() is None

    def test_token_hidden_from_repr(self):
        assert "ghp_secret" not in repr(GitHubConfig(token="ghp_secret"))
    @pytest.mark.parametrize("timeout", [0, -1])
    def test_invalid_timeout(self, timeout):
        with pytest.raises(ValueError):
            GitHubConfig(timeout=timeout)


class TestResolverConfig:
    def test_default_values(self):
        config = ResolverConfig()
        assert config.environment == "prod"
        assert config.strategy == SelectionStrategy.VERIFY
        assert config.on_status_error == StatusErrorPolicy.FAIL
    def test_strategy_from_string(self):
        config = ResolverConfig(strategy="trust-order", on_status_error="skip")
        assert config.strategy == SelectionStrategy.TRUST_ORDER
        assert config.on_status_error == StatusErrorPolicy.SKIP

    def test_invalid_strategy(self):
        with pytest.raises(ValueError):
            ResolverConfig(strategy="newest")


class TestGlobalConfig:
    def test_default_values(self):
        config = GlobalConfig()
        assert config.output_format == OutputFormat.TEXT
        assert config.verbosity == LogLevel.WARNING

    def test_invalid_color(self):
        with pytest.raises(ValueError):
            GlobalConfig(color="sometimes")


class TestGhdConfig:
    def test_default_profile(self):
        config = get_default_config()
        assert isinstance(config.get_profile(), ProfileConfig)

    def test_global_alias(self):
        config = GhdConfig(**{"global": {"output_format": "json"}})
        assert config.global_settings.output_format == OutputFormat.JSON

    def test_unknown_profile(self):
        with pytest.raises(ConfigError, match="Profile 'missing' not found"):
            GhdConfig().get_profile("missing")

    def test_default_profile_when_only_named_profiles(self):
        config = GhdConfig(profiles={"work": ProfileConfig()})
        assert config.get_profile("default") == ProfileConfig()


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_no_files(self):
        config = ConfigLoader().load()
        assert config.get_profile().github.token is None

    def test_explicit_file(self, temp_config_file):
        config = load_config(temp_config_file)
        assert config.get_profile().github.token == "ghp_from_file"
        assert config.get_profile("staging").resolver.environment == "staging"

    def test_missing_file(self):
        with pytest.raises(ConfigError, match="not found"):
            load_config("/nonexistent/ghd.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("global: [oops\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "bad-values.yaml"
        path.write_text(yaml.dump({"profiles": {"default": {"resolver": {"strategy": "random"}}}}))
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_config(path)

    def test_project_config_discovered_upward(self, tmp_path):
        project = Path.cwd()
        (project / "ghd.yaml").write_text(yaml.dump({"profiles": {"default": {"resolver": {"environment": "qa"}}}}))
        nested = project / "a" / "b"
        nested.mkdir(parents=True)
        os.chdir(nested)

        config = ConfigLoader().load()

        assert config.get_profile().resolver.environment == "qa"

    def test_merge_priority(self, tmp_path):
        user_config = tmp_path / "user.yaml"
        user_config.write_text(
            yaml.dump({"profiles": {"default": {"github": {"token": "user", "timeout": 10}}}})
        )
        (Path.cwd() / "ghd.yaml").write_text(yaml.dump({"profiles": {"default": {"github": {"token": "project"}}}}))
        explicit = tmp_path / "explicit.yaml"
        explicit.write_text(yaml.dump({"profiles": {"default": {"resolver": {"environment": "explicit"}}}}))

        config = ConfigLoader(user_config_path=user_config).load(explicit)

        profile = config.get_profile()
        assert profile.github.token == "project"
        assert profile.github.timeout == 10
        assert profile.resolver.environment == "explicit"

    def test_user_config_from_home(self):
        user_dir = Path.home() / ".ghd"
        user_dir.mkdir()
        (user_dir / "config.yaml").write_text(yaml.dump({"global": {"verbosity": "debug"}}))

        config = ConfigLoader().load()

        assert config.global_settings.verbosity == LogLevel.DEBUG

    def test_deep_merge(self):
        loader = ConfigLoader()
        merged = loader._deep_merge({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}, "d": 4})
        assert merged == {"a": {"b": 1, "c": 3}, "d": 4}

    def test_env_vars_override_config_file(self, monkeypatch, temp_config_file):
        monkeypatch.setenv("GHD_GITHUB_BASE_URL", "https://ghe.example.com/api/v3")
        monkeypatch.setenv("GHD_ENVIRONMENT", "qa")

        config = load_config(temp_config_file)

        for name in ("default", "staging"):
            profile = config.get_profile(name)
            assert profile.github.base_url == "https://ghe.example.com/api/v3"
            assert profile.resolver.environment == "qa"
        assert config.get_profile("staging").github.token == "ghp_staging"

    def test_env_vars_without_config_file(self, monkeypatch):
        monkeypatch.setenv("GHD_ENVIRONMENT", "staging")

        config = ConfigLoader().load()

        assert config.get_profile().resolver.environment == "staging"
        assert config.get_profile().github.base_url == "https://api.github.com"

    def test_empty_env_var_ignored(self, monkeypatch):
        monkeypatch.setenv("GHD_ENVIRONMENT", "")
        assert ConfigLoader().load().get_profile().resolver.environment == "prod"
