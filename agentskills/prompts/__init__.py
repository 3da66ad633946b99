"""Prompt rendering with progressive disclosure and resource policies."""

from agentskills.prompts.builder import SkillPromptBuilder
from agentskills.prompts.policies import (
    ExcludeAllResourcePolicy,
    IncludeAllResourcePolicy,
    ResourcePolicy,
    SkillField,
    custom_policy,
    get_policy,
    resource_type_filter_policy,
)
from agentskills.prompts.renderer import (
    PromptRenderOptions,
    SkillPromptRenderer,
    render_skill_details,
    render_skill_list,
)

__all__ = [
    "SkillPromptBuilder",
    "ExcludeAllResourcePolicy",
    "IncludeAllResourcePolicy",
    "ResourcePolicy",
    "SkillField",
    "custom_policy",
    "get_policy",
    "resource_type_filter_policy",
    "PromptRenderOptions",
    "SkillPromptRenderer",
    "render_skill_details",
    "render_skill_list",
]
