"""agentskills - load, validate and render Agent Skills packages."""

from agentskills.config import Config, load_config
from agentskills.factory import bootstrap, build_skills_prompt, configure_logging
from agentskills.prompts import (
    ExcludeAllResourcePolicy,
    IncludeAllResourcePolicy,
    PromptRenderOptions,
    ResourcePolicy,
    SkillPromptBuilder,
    SkillPromptRenderer,
    render_skill_details,
    render_skill_list,
)
from agentskills.skills import (
    DiagnosticSeverity,
    Skill,
    SkillDiagnostic,
    SkillLoader,
    SkillManifest,
    SkillMetadata,
    SkillResource,
    SkillSet,
    SkillValidator,
    ValidationResult,
    load_metadata,
    load_skill_set,
    parse_skill_md,
    validate,
    validate_metadata,
)

__version__ = "0.1.0"

__all__ = [
    "Config",
    "load_config",
    "bootstrap",
    "build_skills_prompt",
    "configure_logging",
    "ExcludeAllResourcePolicy",
    "IncludeAllResourcePolicy",
    "PromptRenderOptions",
    "ResourcePolicy",
    "SkillPromptBuilder",
    "SkillPromptRenderer",
    "render_skill_details",
    "render_skill_list",
    "DiagnosticSeverity",
    "Skill",
    "SkillDiagnostic",
    "SkillLoader",
    "SkillManifest",
    "SkillMetadata",
    "SkillResource",
    "SkillSet",
    "SkillValidator",
    "ValidationResult",
    "load_metadata",
    "load_skill_set",
    "parse_skill_md",
    "validate",
    "validate_metadata",
]
