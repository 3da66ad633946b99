"""Prompt rendering for progressive disclosure.

Phase 1, ``render_skill_list``: a compact index of name and description
(plus optional metadata) for every available skill.

Phase 2, ``render_skill_details``: the full payload of one activated skill,
ending with its verbatim instructions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from agentskills.prompts.policies import IncludeAllResourcePolicy, ResourcePolicy, SkillField
from agentskills.skills.models import Skill, SkillMetadata

SKILL_LIST_HEADER = "# Available Skills"
SKILL_LIST_HINT = "The following skills are available. To use a skill, activate it by name."
NO_SKILLS = "No skills available."


@dataclass(frozen=True)
class PromptRenderOptions:
    """Independent toggles for optional rendered data.

    A toggle only allows a field; the resource policy must allow it too, and
    a field the skill does not have is simply left out.
    """

    include_version: bool = True
    include_author: bool = True
    include_tags: bool = True
    include_allowed_tools: bool = True
    include_resources: bool = True
    resource_policy: ResourcePolicy = IncludeAllResourcePolicy

    def allows(self, skill_field: SkillField) -> bool:
        toggles = {
            SkillField.VERSION: self.include_version,
            SkillField.AUTHOR: self.include_author,
            SkillField.TAGS: self.include_tags,
            SkillField.ALLOWED_TOOLS: self.include_allowed_tools,
            SkillField.RESOURCES: self.include_resources,
        }
        return toggles[skill_field] and self.resource_policy.includes(skill_field)


def _has_text(value: str | None) -> bool:
    return bool(value and value.strip())


def _metadata_lines(
    version: str | None,
    author: str | None,
    tags: Iterable[str],
    options: PromptRenderOptions,
) -> list[str]:
    lines: list[str] = []
    if _has_text(version) and options.allows(SkillField.VERSION):
        lines.extend([f"**Version:** {version}", ""])
    if _has_text(author) and options.allows(SkillField.AUTHOR):
        lines.extend([f"**Author:** {author}", ""])
    tags = list(tags)
    if tags and options.allows(SkillField.TAGS):
        lines.extend([f"**Tags:** {', '.join(tags)}", ""])
    return lines


class SkillPromptRenderer:
    """Renders skills as Markdown prompt text.

    Subclass and override either method to change the layout; the builder
    accepts any object with the same two methods.
    """

    def render_skill_list(
        self,
        metadata: Iterable[SkillMetadata],
        options: PromptRenderOptions | None = None,
    ) -> str:
        options = options or PromptRenderOptions()
        metadata = list(metadata)

        lines = [SKILL_LIST_HEADER, "", SKILL_LIST_HINT, ""]
        if not metadata:
            lines.extend([NO_SKILLS, ""])
            return "\n".join(lines)

        for meta in metadata:
            lines.extend([f"## {meta.name}", "", f"**Description:** {meta.description}", ""])
            lines.extend(_metadata_lines(meta.version, meta.author, meta.tags, options))
            lines.extend(["---", ""])

        return "\n".join(lines)

    def render_skill_details(
        self,
        skill: Skill,
        options: PromptRenderOptions | None = None,
    ) -> str:
        options = options or PromptRenderOptions()
        manifest = skill.manifest

        lines = [
            f"# Skill: {manifest.name}",
            "",
            f"**Description:** {manifest.description}",
            "",
        ]
        lines.extend(_metadata_lines(manifest.version, manifest.author, manifest.tags, options))

        if manifest.allowed_tools and options.allows(SkillField.ALLOWED_TOOLS):
            lines.extend([f"**Allowed Tools:** {', '.join(manifest.allowed_tools)}", ""])

        if options.allows(SkillField.RESOURCES):
            visible = [
                r for r in skill.resources
                if options.resource_policy.includes_resource(r)
            ]
            if visible:
                lines.extend(["## Resources", ""])
                for resource in visible:
                    kind = f" ({resource.resource_type})" if resource.resource_type else ""
                    lines.append(f"- {resource.relative_path}{kind}")
                lines.append("")

        lines.extend(["## Instructions", "", skill.instructions, ""])
        return "\n".join(lines)


_default_renderer = SkillPromptRenderer()


def render_skill_list(
    metadata: Iterable[SkillMetadata], options: PromptRenderOptions | None = None
) -> str:
    """Render the compact skill index."""
    return _default_renderer.render_skill_list(metadata, options)


def render_skill_details(skill: Skill, options: PromptRenderOptions | None = None) -> str:
    """Render the full detail of one activated skill."""
    return _default_renderer.render_skill_details(skill, options)
