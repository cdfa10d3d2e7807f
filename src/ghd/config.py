"""Configuration management for ghd using Pydantic."""

import os
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from ghd.core.exceptions import ConfigError
from ghd.core.output import OutputFormat
from ghd.core.logging import LogLevel

DEFAULT_BASE_URL = "https://api.github.com"
DEFAULT_ENVIRONMENT = "prod"
DEFAULT_TIMEOUT = 5.0


class SelectionStrategy(str, Enum):
    """How the resolver decides a deployment counts as successful."""

    VERIFY = "verify"  # fetch statuses, require a "success" state
    TRUST_ORDER = "trust-order"  # accept the first listed deployment


class StatusErrorPolicy(str, Enum):
    """What the resolver does when a status fetch fails."""

    FAIL = "fail"
    SKIP = "skip"


class GitHubConfig(BaseModel):
    """GitHub API configuration."""

    token: str | None = Field(default=None, repr=False)
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = "ghd"

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be positive")
        return v

    def get_token(self) -> str | None:
        """Get GitHub token from config or environment."""
        token = self.token
        if token == "from_env" or not token:
            token = (
                os.environ.get("GHD_GITHUB_TOKEN")
                or os.environ.get("GITHUB_TOKEN")
                or os.environ.get("GH_TOKEN")
            )
        return token or None


class ResolverConfig(BaseModel):
    """Deployment resolution settings."""

    environment: str = DEFAULT_ENVIRONMENT
    strategy: SelectionStrategy = SelectionStrategy.VERIFY
    on_status_error: StatusErrorPolicy = StatusErrorPolicy.FAIL


class ProfileConfig(BaseModel):
    """Profile configuration grouping all settings."""

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    resolver: ResolverConfig = Field(default_factory=ResolverConfig)


class GlobalConfig(BaseModel):
    """Global settings."""

    output_format: OutputFormat = OutputFormat.TEXT
    color: str = "auto"  # auto, always, never
    verbosity: LogLevel = LogLevel.WARNING

    @field_validator("color")
    @classmethod
    def validate_color(cls, v: str) -> str:
        if v not in ("auto", "always", "never"):
            raise ValueError("color must be 'auto', 'always', or 'never'")
        return v


class GhdConfig(BaseModel):
    """Main configuration model."""

    model_config = {"populate_by_name": True}

    version: str = "1"
    global_settings: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    profiles: dict[str, ProfileConfig] = Field(default_factory=lambda: {"default": ProfileConfig()})

    def get_profile(self, name: str | None = None) -> ProfileConfig:
        """Get a profile by name, defaulting to 'default'."""
        profile_name = name or "default"
        if profile_name not in self.profiles:
            if profile_name == "default":
                return ProfileConfig()
            raise ConfigError(f"Profile '{profile_name}' not found")
        return self.profiles[profile_name]


class ConfigLoader:
    """Loads and merges configuration from multiple sources."""

    CONFIG_FILENAMES = ["ghd.yaml", "ghd.yml", ".ghd.yaml", ".ghd.yml"]
    ENV_OVERRIDES = {
        ("github", "base_url"): "GHD_GITHUB_BASE_URL",
        ("resolver", "environment"): "GHD_ENVIRONMENT",
    }

    def __init__(self, user_config_path: Path | None = None):
        self._user_config_path = user_config_path

    @property
    def user_config_path(self) -> Path:
        return self._user_config_path or Path.home() / ".ghd" / "config.yaml"

    def load(self, config_file: str | Path | None = None) -> GhdConfig:
        """Load configuration from files.

        Priority (highest to lowest):
        1. GHD_GITHUB_BASE_URL / GHD_ENVIRONMENT, applied to every profile
        2. Explicitly specified config file
        3. Project config (./ghd.yaml, searched upward from cwd)
        4. User config (~/.ghd/config.yaml)

        Args:
            config_file: Optional explicit config file path

        Returns:
            Merged configuration
        """
        configs: list[dict[str, Any]] = []

        if self.user_config_path.exists():
            configs.append(self._load_yaml_file(self.user_config_path))

        project_config = self._find_project_config()
        if project_config:
            configs.append(self._load_yaml_file(project_config))

        if config_file:
            config_path = Path(config_file)
            if not config_path.exists():
                raise ConfigError(f"Config file not found: {config_file}")
            configs.append(self._load_yaml_file(config_path))

        merged = self._merge_configs(configs)

        try:
            config = GhdConfig(**merged)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e.error_count()} error(s)", {"errors": _summarize(e)})
        return self._apply_environment(config)

    def _apply_environment(self, config: GhdConfig) -> GhdConfig:
        """Apply environment variable settings on top of every profile.

        Command-line flags are merged later by the CLI, so they still win.
        """
        profiles = {"default": ProfileConfig(), **config.profiles}
        for name, profile in list(profiles.items()):
            updates: dict[str, BaseModel] = {}
            for (section, field), var in self.ENV_OVERRIDES.items():
                value = os.environ.get(var)
                if value:
                    current = updates.get(section, getattr(profile, section))
                    updates[section] = current.model_copy(update={field: value})
            if updates:
                profiles[name] = profile.model_copy(update=updates)
        return config.model_copy(update={"profiles": profiles})

    def _find_project_config(self) -> Path | None:
        """Find project config file in current or parent directories."""
        current = Path.cwd()

        while current != current.parent:
            for filename in self.CONFIG_FILENAMES:
                config_path = current / filename
                if config_path.exists():
                    return config_path
            current = current.parent

        return None

    def _load_yaml_file(self, path: Path) -> dict[str, Any]:
        """Load a YAML config file."""
        try:
            with open(path) as f:
                content = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}")
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}")

        if not isinstance(content, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return content

    def _merge_configs(self, configs: list[dict[str, Any]]) -> dict[str, Any]:
        """Deep merge multiple configuration dictionaries."""
        result: dict[str, Any] = {}
        for config in configs:
            result = self._deep_merge(result, config)
        return result

    def _deep_merge(
        self,
        base: dict[str, Any],
        override: dict[str, Any],
    ) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result


def _summarize(error: ValidationError) -> list[str]:
    return [f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in error.errors()]


def load_config(config_file: str | Path | None = None) -> GhdConfig:
    """Load ghd configuration.

    Args:
        config_file: Optional explicit config file path

    Returns:
        Loaded configuration
    """
    return ConfigLoader().load(config_file)


def get_default_config() -> GhdConfig:
    """Get default configuration without loading from files."""
    return GhdConfig()
