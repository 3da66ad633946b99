"""Data models for Agent Skills packages.

Every model here is frozen: loaders build them once and renderers and
validators only ever read them.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_serializer,
    field_validator,
)

# Scalars YAML may produce where the manifest expects text, e.g. ``version: 1.0``
_SCALAR_TYPES = (str, bool, int, float, date)


def _scalar_to_str(value: Any, field_name: str) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, _SCALAR_TYPES):
        return str(value)
    raise ValueError(f"'{field_name}' must be a string, got {type(value).__name__}")


def _freeze(value: Any) -> Any:
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


class DiagnosticSeverity(str, Enum):
    """Severity of a diagnostic."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class SkillDiagnostic(BaseModel):
    """A coded report about a skill package.

    ``PARSE*`` and ``LOADER*`` codes mean the package could not be decoded;
    ``VAL*`` codes describe rule violations on a decoded manifest.
    """
    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.ERROR
    path: str | None = None
    line: int | None = None
    column: int | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == DiagnosticSeverity.ERROR

    def __str__(self) -> str:
        location = self.path or "<unknown>"
        if self.line is not None:
            location = f"{location}:{self.line}"
            if self.column is not None:
                location = f"{location}:{self.column}"
        return f"{location}: {self.severity.value} {self.code}: {self.message}"


class SkillManifest(BaseModel):
    """Decoded SKILL.md frontmatter.

    ``name`` and ``description`` default to the empty string so a manifest
    that omits them still decodes; the validator reports the gap.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = ""
    description: str = ""
    version: str | None = None
    author: str | None = None
    compatibility: str | None = None
    tags: tuple[str, ...] = ()
    allowed_tools: tuple[str, ...] = Field(default=(), alias="allowed-tools")
    additional_fields: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("name", "description", mode="before")
    @classmethod
    def _required_text(cls, value: Any, info: ValidationInfo) -> str:
        if value is None:
            return ""
        return _scalar_to_str(value, info.field_name)

    @field_validator("version", "author", "compatibility", mode="before")
    @classmethod
    def _optional_text(cls, value: Any, info: ValidationInfo) -> str | None:
        if value is None:
            return None
        return _scalar_to_str(value, info.field_name)

    @field_validator("tags", mode="before")
    @classmethod
    def _tag_list(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        if isinstance(value, (list, tuple)):
            return [_scalar_to_str(item, "tags") for item in value if item is not None]
        raise ValueError(f"'tags' must be a list of strings, got {type(value).__name__}")

    @field_validator("allowed_tools", mode="before")
    @classmethod
    def _tool_list(cls, value: Any) -> list[str]:
        if value is None:
            return []
        # agentskills.io writes allowed-tools as a space-delimited string
        if isinstance(value, str):
            return value.split()
        if isinstance(value, (list, tuple)):
            return [_scalar_to_str(item, "allowed-tools") for item in value if item is not None]
        raise ValueError(
            f"'allowed-tools' must be a list of strings, got {type(value).__name__}"
        )

    @field_validator("additional_fields")
    @classmethod
    def _read_only_extras(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        # Nested mappings become read-only proxies and lists become tuples
        return _freeze(value)

    @field_serializer("additional_fields")
    def _plain_extras(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return _thaw(value)


class SkillResource(BaseModel):
    """A file shipped inside a skill package (script, reference or asset).

    Resources are listed, never read or executed.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    relative_path: str
    resource_type: str | None = None
    absolute_path: Path | None = None


class SkillMetadata(BaseModel):
    """Lightweight listing data (phase 1 of progressive disclosure).

    Built from the frontmatter alone; never carries the instruction body.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    path: Path
    version: str | None = None
    author: str | None = None
    tags: tuple[str, ...] = ()

    @classmethod
    def from_manifest(cls, manifest: SkillManifest, path: str | Path) -> "SkillMetadata":
        return cls(
            name=manifest.name,
            description=manifest.description,
            path=Path(path),
            version=manifest.version,
            author=manifest.author,
            tags=manifest.tags,
        )


class Skill(BaseModel):
    """Full skill content (phase 2 of progressive disclosure)."""
    model_config = ConfigDict(frozen=True)

    manifest: SkillManifest
    instructions: str
    path: Path
    resources: tuple[SkillResource, ...] = ()

    @property
    def name(self) -> str:
        return self.manifest.name

    @property
    def metadata(self) -> SkillMetadata:
        return SkillMetadata.from_manifest(self.manifest, self.path)


class SkillSet(BaseModel):
    """Skills loaded from one directory scan plus everything reported along the way."""
    model_config = ConfigDict(frozen=True)

    skills: tuple[Skill, ...] = ()
    diagnostics: tuple[SkillDiagnostic, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not any(d.is_error for d in self.diagnostics)

    @property
    def errors(self) -> list[SkillDiagnostic]:
        return [d for d in self.diagnostics if d.severity == DiagnosticSeverity.ERROR]

    @property
    def warnings(self) -> list[SkillDiagnostic]:
        return [d for d in self.diagnostics if d.severity == DiagnosticSeverity.WARNING]

    @property
    def metadata(self) -> list[SkillMetadata]:
        return [skill.metadata for skill in self.skills]

    def get_skill(self, name: str) -> Skill | None:
        """Look up a skill by name, ignoring case."""
        wanted = name.casefold()
        for skill in self.skills:
            if skill.manifest.name.casefold() == wanted:
                return skill
        return None

    def get_skills_by_tag(self, tag: str) -> list[Skill]:
        """Return skills carrying ``tag``, ignoring case."""
        wanted = tag.casefold()
        return [
            skill for skill in self.skills
            if any(t.casefold() == wanted for t in skill.manifest.tags)
        ]


class ValidationResult(BaseModel):
    """Diagnostics produced by validating one skill."""
    model_config = ConfigDict(frozen=True)

    diagnostics: tuple[SkillDiagnostic, ...] = ()

    @property
    def errors(self) -> list[SkillDiagnostic]:
        return [d for d in self.diagnostics if d.severity == DiagnosticSeverity.ERROR]

    @property
    def warnings(self) -> list[SkillDiagnostic]:
        return [d for d in self.diagnostics if d.severity == DiagnosticSeverity.WARNING]

    @property
    def infos(self) -> list[SkillDiagnostic]:
        return [d for d in self.diagnostics if d.severity == DiagnosticSeverity.INFO]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def codes(self) -> list[str]:
        return [d.code for d in self.diagnostics]
