"""Configuration management for agentskills."""

import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from agentskills.prompts.policies import BUILTIN_POLICIES, get_policy
from agentskills.prompts.renderer import PromptRenderOptions


def _substitute_env_vars(value: Any) -> Any:
    """Recursively substitute environment variables in config values.

    Supports ${VAR_NAME} and ${VAR_NAME:-default} syntax.
    """
    if isinstance(value, str):
        pattern = r'\$\{([^}:]+)(?::-([^}]*))?\}'

        def replacer(match: re.Match) -> str:
            var_name = match.group(1)
            default = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default)

        return re.sub(pattern, replacer, value)
    elif isinstance(value, dict):
        return {k: _substitute_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_substitute_env_vars(v) for v in value]
    return value


class LoaderConfig(BaseModel):
    """Skill loading configuration."""
    skill_dirs: list[str] = Field(default_factory=lambda: ["skills"])
    validate_on_load: bool = False
    max_workers: int = Field(default=1, ge=1)


class PromptConfig(BaseModel):
    """Prompt rendering configuration."""
    include_version: bool = True
    include_author: bool = True
    include_tags: bool = True
    include_allowed_tools: bool = True
    include_resources: bool = True
    resource_policy: str = "include_all"

    @field_validator("resource_policy")
    @classmethod
    def _known_policy(cls, value: str) -> str:
        if value not in BUILTIN_POLICIES:
            raise ValueError(
                f"Unknown resource policy: {value}. Available: {list(BUILTIN_POLICIES)}"
            )
        return value

    def to_options(self) -> PromptRenderOptions:
        """Build render options from this configuration."""
        return PromptRenderOptions(
            include_version=self.include_version,
            include_author=self.include_author,
            include_tags=self.include_tags,
            include_allowed_tools=self.include_allowed_tools,
            include_resources=self.include_resources,
            resource_policy=get_policy(self.resource_policy),
        )


class LoggingConfig(BaseModel):
    """Logging configuration, applied by ``agentskills.factory.configure_logging``."""
    level: str = "INFO"
    format: Literal["text", "json"] = "text"


class Config(BaseSettings):
    """Main agentskills configuration.

    Values can also come from ``AGENTSKILLS_`` environment variables, e.g.
    ``AGENTSKILLS_LOADER__VALIDATE_ON_LOAD=true``.
    """
    model_config = SettingsConfigDict(env_prefix="AGENTSKILLS_", env_nested_delimiter="__")

    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    prompts: PromptConfig = Field(default_factory=PromptConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: str | Path = "agentskills.yaml") -> Config:
    """Load configuration from YAML file with environment variable substitution.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Loaded and validated Config object.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        # Return default config if file doesn't exist
        return Config()

    with open(config_path, encoding="utf-8") as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        return Config()

    # Substitute environment variables
    config_data = _substitute_env_vars(raw_config)

    return Config(**config_data)
