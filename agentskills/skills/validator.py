"""Rule checks for decoded skill manifests (agentskills.io format).

Validation is pure: the same input always yields the same diagnostics, and
nothing is read from disk. The directory-name rule only looks at the path
string carried by the skill or metadata.
"""

from __future__ import annotations

import re
from pathlib import Path

from agentskills.skills.models import (
    DiagnosticSeverity,
    Skill,
    SkillDiagnostic,
    SkillManifest,
    SkillMetadata,
    ValidationResult,
)
from agentskills.utils import directory_name, truncate_string

MAX_NAME_LENGTH = 64
MAX_DESCRIPTION_LENGTH = 1024
MAX_COMPATIBILITY_LENGTH = 500

# lowercase alphanumerics, single hyphens between segments
NAME_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")

NAME_MISSING = "VAL001"
NAME_TOO_LONG = "VAL002"
NAME_INVALID = "VAL003"
DESCRIPTION_INVALID = "VAL005"
VERSION_EMPTY = "VAL007"
COMPATIBILITY_TOO_LONG = "VAL008"
DIRECTORY_UNKNOWN = "VAL009"
DIRECTORY_MISMATCH = "VAL010"


def _diag(
    code: str,
    message: str,
    path: Path | str | None,
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR,
) -> SkillDiagnostic:
    return SkillDiagnostic(
        code=code,
        message=message,
        severity=severity,
        path=str(path) if path is not None else None,
    )


def _name_defects(name: str) -> list[str]:
    reasons = []
    if any(c.isupper() for c in name):
        reasons.append("contains uppercase letters")
    if name.startswith("-") or name.endswith("-"):
        reasons.append("starts or ends with a hyphen")
    if "--" in name:
        reasons.append("contains consecutive hyphens")
    if any(not (c.isascii() and c.isalnum()) and c != "-" for c in name):
        reasons.append("contains invalid characters")
    return reasons


def check_name(name: str, path: Path | str | None) -> list[SkillDiagnostic]:
    if not name or not name.strip():
        return [_diag(NAME_MISSING, "Required field 'name' is missing or empty", path)]

    diagnostics = []
    if len(name) > MAX_NAME_LENGTH:
        diagnostics.append(_diag(
            NAME_TOO_LONG,
            f"Field 'name' must be at most {MAX_NAME_LENGTH} characters "
            f"(found: {len(name)})",
            path,
        ))

    if not NAME_RE.fullmatch(name):
        reasons = _name_defects(name)
        detail = f" ({', '.join(reasons)})" if reasons else ""
        diagnostics.append(_diag(
            NAME_INVALID,
            f"Field 'name' ('{truncate_string(name)}') must contain only lowercase "
            "letters, digits and single hyphens, and cannot start or end with a "
            f"hyphen{detail}",
            path,
        ))
    return diagnostics


def check_description(description: str, path: Path | str | None) -> list[SkillDiagnostic]:
    if not description or not description.strip():
        return [_diag(
            DESCRIPTION_INVALID, "Required field 'description' is missing or empty", path
        )]
    if len(description) > MAX_DESCRIPTION_LENGTH:
        return [_diag(
            DESCRIPTION_INVALID,
            f"Field 'description' must be at most {MAX_DESCRIPTION_LENGTH} characters "
            f"(found: {len(description)})",
            path,
        )]
    return []


def check_version(version: str | None, path: Path | str | None) -> list[SkillDiagnostic]:
    if version is not None and not version.strip():
        return [_diag(
            VERSION_EMPTY,
            "Field 'version' is present but empty; remove it or provide a value",
            path,
            DiagnosticSeverity.WARNING,
        )]
    return []


def check_compatibility(
    compatibility: str | None, path: Path | str | None
) -> list[SkillDiagnostic]:
    if compatibility is not None and len(compatibility) > MAX_COMPATIBILITY_LENGTH:
        return [_diag(
            COMPATIBILITY_TOO_LONG,
            f"Field 'compatibility' must be at most {MAX_COMPATIBILITY_LENGTH} "
            f"characters (found: {len(compatibility)})",
            path,
        )]
    return []


def check_directory_name(name: str, path: Path | str | None) -> list[SkillDiagnostic]:
    # Nothing to compare against; VAL001 already covers it
    if not name or not name.strip():
        return []

    dir_name = directory_name(path)
    if not dir_name:
        return [_diag(
            DIRECTORY_UNKNOWN,
            "Cannot determine the skill directory name to compare with 'name'",
            path,
            DiagnosticSeverity.WARNING,
        )]
    if dir_name != name:
        return [_diag(
            DIRECTORY_MISMATCH,
            f"Directory name '{dir_name}' does not match skill name '{name}'",
            path,
            DiagnosticSeverity.WARNING,
        )]
    return []


class SkillValidator:
    """Validates skills and metadata against the Agent Skills rules.

    Example:
        >>> validator = SkillValidator()
        >>> result = validator.validate(skill)
        >>> result.is_valid
        True
    """

    def validate_manifest(
        self, manifest: SkillManifest, path: Path | str | None = None
    ) -> ValidationResult:
        """Validate a manifest on its own; ``path`` enables the directory check."""
        diagnostics = [
            *check_name(manifest.name, path),
            *check_description(manifest.description, path),
            *check_version(manifest.version, path),
            *check_compatibility(manifest.compatibility, path),
        ]
        if path is not None:
            diagnostics.extend(check_directory_name(manifest.name, path))
        return ValidationResult(diagnostics=tuple(diagnostics))

    def validate(self, skill: Skill) -> ValidationResult:
        """Validate a fully loaded skill."""
        return self.validate_manifest(skill.manifest, skill.path)

    def validate_metadata(self, metadata: SkillMetadata) -> ValidationResult:
        """Validate the listing projection of a skill."""
        diagnostics = [
            *check_name(metadata.name, metadata.path),
            *check_description(metadata.description, metadata.path),
            *check_version(metadata.version, metadata.path),
            *check_directory_name(metadata.name, metadata.path),
        ]
        return ValidationResult(diagnostics=tuple(diagnostics))


_default_validator = SkillValidator()


def validate(skill: Skill) -> ValidationResult:
    return _default_validator.validate(skill)


def validate_metadata(metadata: SkillMetadata) -> ValidationResult:
    return _default_validator.validate_metadata(metadata)
