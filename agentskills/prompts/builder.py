"""Builder composing agent instructions with a skill index."""

from __future__ import annotations

from typing import Iterable

from agentskills.prompts.renderer import PromptRenderOptions, SkillPromptRenderer
from agentskills.skills.models import Skill, SkillMetadata, SkillSet


class SkillPromptBuilder:
    """Compose base instructions and a skill listing into one prompt.

    Skills are listed first (phase 1); a selected skill is rendered in full
    with ``build_skill_details`` (phase 2).

    Example:
        >>> prompt = (
        ...     SkillPromptBuilder()
        ...     .with_base_instructions("You are a helpful assistant.")
        ...     .with_skill_set(skill_set)
        ...     .build()
        ... )
    """

    def __init__(self, renderer: SkillPromptRenderer | None = None):
        self._renderer = renderer or SkillPromptRenderer()
        self._base_instructions: str | None = None
        self._skills: list[SkillMetadata] = []

    def with_base_instructions(self, instructions: str) -> "SkillPromptBuilder":
        self._base_instructions = instructions
        return self

    def with_skills(self, metadata: Iterable[SkillMetadata]) -> "SkillPromptBuilder":
        self._skills.extend(metadata)
        return self

    def with_skill_set(self, skill_set: SkillSet) -> "SkillPromptBuilder":
        self._skills.extend(skill.metadata for skill in skill_set.skills)
        return self

    def build(self, options: PromptRenderOptions | None = None) -> str:
        """Return base instructions and the skill list, blank-line separated.

        Either part is omitted when empty; with neither the result is ``""``.
        """
        parts: list[str] = []

        if self._base_instructions and self._base_instructions.strip():
            parts.append(self._base_instructions.strip())

        if self._skills:
            parts.append(self._renderer.render_skill_list(self._skills, options).strip())

        return "\n\n".join(parts)

    def build_skill_details(
        self, skill: Skill, options: PromptRenderOptions | None = None
    ) -> str:
        """Render the full instructions of an activated skill."""
        return self._renderer.render_skill_details(skill, options)
