"""Agent Skills packages: models, SKILL.md parsing, validation and loading.

Implements the agentskills.io layout with a metadata-first loading pattern.
Each package is a directory holding a SKILL.md file (YAML frontmatter plus
Markdown instructions) and optional scripts/, references/ and assets/.
"""

from agentskills.skills.loader import SkillLoader, load_metadata, load_skill_set
from agentskills.skills.models import (
    DiagnosticSeverity,
    Skill,
    SkillDiagnostic,
    SkillManifest,
    SkillMetadata,
    SkillResource,
    SkillSet,
    ValidationResult,
)
from agentskills.skills.parser import (
    FrontmatterError,
    ParsedSkillMd,
    parse_manifest,
    parse_skill_md,
    split_frontmatter,
)
from agentskills.skills.validator import SkillValidator, validate, validate_metadata

__all__ = [
    "SkillLoader",
    "load_metadata",
    "load_skill_set",
    "DiagnosticSeverity",
    "Skill",
    "SkillDiagnostic",
    "SkillManifest",
    "SkillMetadata",
    "SkillResource",
    "SkillSet",
    "ValidationResult",
    "FrontmatterError",
    "ParsedSkillMd",
    "parse_manifest",
    "parse_skill_md",
    "split_frontmatter",
    "SkillValidator",
    "validate",
    "validate_metadata",
]
