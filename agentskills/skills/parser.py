"""SKILL.md frontmatter splitting and manifest decoding."""

from __future__ import annotations

import io
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

import yaml
from pydantic import ValidationError

from agentskills.skills.models import DiagnosticSeverity, SkillDiagnostic, SkillManifest
from agentskills.utils import get_logger

logger = get_logger(__name__)

FRONTMATTER_DELIMITER = "---"

# Parse-error codes: the package could not be decoded at all
NO_FRONTMATTER = "PARSE001"
UNCLOSED_FRONTMATTER = "PARSE002"
INVALID_YAML = "PARSE003"
NOT_A_MAPPING = "PARSE004"
INVALID_FIELD = "PARSE005"

KNOWN_FIELDS = {
    "name",
    "description",
    "version",
    "author",
    "compatibility",
    "tags",
    "allowed-tools",
    "allowed_tools",
}


class FrontmatterError(ValueError):
    """Raised when SKILL.md text has no usable frontmatter block."""

    def __init__(self, code: str, message: str, line: int | None = None):
        super().__init__(message)
        self.code = code
        self.line = line

    def to_diagnostic(self, path: str | Path | None = None) -> SkillDiagnostic:
        return SkillDiagnostic(
            code=self.code,
            message=str(self),
            severity=DiagnosticSeverity.ERROR,
            path=str(path) if path is not None else None,
            line=self.line,
        )


@dataclass(frozen=True)
class ParsedSkillMd:
    """Result of parsing one SKILL.md text.

    ``manifest`` is None whenever a parse error occurred.
    """

    manifest: SkillManifest | None
    body: str | None
    diagnostics: list[SkillDiagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.manifest is not None


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == FRONTMATTER_DELIMITER


def _header_lines(lines: Iterable[str]) -> list[str]:
    iterator = iter(lines)
    first = next(iterator, None)
    if first is None or not _is_delimiter(first.lstrip("\ufeff")):
        raise FrontmatterError(
            NO_FRONTMATTER,
            "SKILL.md must start with YAML frontmatter ('---')",
            line=1,
        )

    header: list[str] = []
    for line in iterator:
        if _is_delimiter(line):
            return header
        header.append(line)

    raise FrontmatterError(
        UNCLOSED_FRONTMATTER,
        "SKILL.md frontmatter block is not closed ('---')",
        line=1,
    )


def extract_frontmatter(lines: Iterable[str]) -> str:
    """Collect the header block from an iterable of lines.

    Consumption stops at the closing delimiter, so a file handle passed here
    is never read past the header.

    Raises:
        FrontmatterError: No opening delimiter, or no closing one before the end.
    """
    return "".join(_header_lines(lines))


def split_frontmatter(text: str) -> tuple[str, str]:
    """Split SKILL.md text into (header, body).

    The first delimiter line after the opening one closes the header. The body
    is returned verbatim, later ``---`` lines included.
    """
    # Same line breaks as iterating a file opened with newline=""
    lines = list(io.StringIO(text, newline=""))
    header = _header_lines(lines)
    # opening delimiter + header + closing delimiter
    body = "".join(lines[len(header) + 2:])
    return "".join(header), body


def read_frontmatter(skill_md_path: Path) -> str:
    """Read only the header block of a SKILL.md file."""
    with open(skill_md_path, encoding="utf-8", newline="") as f:
        return extract_frontmatter(f)


def parse_manifest(
    header: str, path: str | Path | None = None
) -> tuple[SkillManifest | None, list[SkillDiagnostic]]:
    """Decode a frontmatter block into a SkillManifest.

    Unknown keys are kept in ``additional_fields``. Malformed YAML, a
    non-mapping document or a wrongly shaped known field yields no manifest
    and one error diagnostic.
    """
    location = str(path) if path is not None else None

    try:
        data = yaml.safe_load(header)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        return None, [
            SkillDiagnostic(
                code=INVALID_YAML,
                message=f"Failed to parse YAML frontmatter: {e}",
                path=location,
                # +2: YAML marks are 0-based and the opening delimiter is line 1
                line=mark.line + 2 if mark is not None else None,
                column=mark.column + 1 if mark is not None else None,
            )
        ]

    if data is None:
        data = {}
    if not isinstance(data, dict):
        return None, [
            SkillDiagnostic(
                code=NOT_A_MAPPING,
                message=(
                    "SKILL.md frontmatter must be a YAML mapping, "
                    f"got {type(data).__name__}"
                ),
                path=location,
            )
        ]

    known: dict[str, Any] = {k: v for k, v in data.items() if k in KNOWN_FIELDS}
    extras: dict[str, Any] = {
        str(k): v for k, v in data.items() if k not in KNOWN_FIELDS
    }
    if "allowed_tools" in known and "allowed-tools" not in known:
        known["allowed-tools"] = known.pop("allowed_tools")
    known.pop("allowed_tools", None)

    try:
        manifest = SkillManifest.model_validate({**known, "additional_fields": extras})
    except ValidationError as e:
        problems = "; ".join(err["msg"] for err in e.errors())
        return None, [
            SkillDiagnostic(
                code=INVALID_FIELD,
                message=f"Invalid frontmatter field value: {problems}",
                path=location,
            )
        ]

    return manifest, []


def parse_skill_md(text: str, path: str | Path | None = None) -> ParsedSkillMd:
    """Parse SKILL.md text into manifest, body and diagnostics.

    Never raises for malformed input: every failure becomes a diagnostic.
    """
    try:
        header, body = split_frontmatter(text)
    except FrontmatterError as e:
        logger.debug("No usable frontmatter in %s: %s", path, e)
        return ParsedSkillMd(manifest=None, body=None, diagnostics=[e.to_diagnostic(path)])

    manifest, diagnostics = parse_manifest(header, path)
    if manifest is None:
        return ParsedSkillMd(manifest=None, body=None, diagnostics=diagnostics)
    return ParsedSkillMd(manifest=manifest, body=body, diagnostics=diagnostics)
