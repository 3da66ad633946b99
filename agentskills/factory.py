"""Factory functions for creating loaders and prompts from configuration."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from agentskills.config import load_config
from agentskills.prompts.builder import SkillPromptBuilder
from agentskills.skills.loader import SkillLoader
from agentskills.utils.logging import get_logger, setup_logging

if TYPE_CHECKING:
    from agentskills.config import Config
    from agentskills.skills.models import SkillDiagnostic, SkillMetadata

_log = get_logger(__name__)


def configure_logging(config: "Config") -> None:
    """Apply the ``logging`` section of a configuration."""
    setup_logging(config.logging.level, config.logging.format)


def bootstrap(config_path: str | Path = "agentskills.yaml") -> "Config":
    """Load configuration and set up logging from it.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        The loaded configuration
    """
    config = load_config(config_path)
    configure_logging(config)
    _log.debug("Loaded configuration from %s", config_path)
    return config


def create_skill_loader(config: "Config") -> SkillLoader:
    return SkillLoader.from_config(config.loader)


def discover_configured_skills(
    config: "Config",
) -> tuple[list["SkillMetadata"], list["SkillDiagnostic"]]:
    """Load metadata from every configured skill directory, first one wins."""
    return create_skill_loader(config).discover_skills(config.loader.skill_dirs)


def build_skills_prompt(config: "Config", base_instructions: str = "") -> str:
    """Build base instructions plus the skill index using the configured options."""
    metadata, diagnostics = discover_configured_skills(config)
    if diagnostics:
        _log.info(
            "Skill discovery reported %d diagnostic(s)", len(diagnostics),
            extra={"codes": [d.code for d in diagnostics]},
        )
    return (
        SkillPromptBuilder()
        .with_base_instructions(base_instructions)
        .with_skills(metadata)
        .build(config.prompts.to_options())
    )
