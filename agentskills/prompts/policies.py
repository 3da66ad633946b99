"""Resource policies: which optional skill data a rendered prompt may expose.

A policy is a pure function from a field kind to include/exclude, plus an
optional filter over individual resource files. Name and description are
always rendered and are not subject to policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from agentskills.skills.models import SkillResource


class SkillField(str, Enum):
    """Optional skill data a policy can expose or hide."""
    VERSION = "version"
    AUTHOR = "author"
    TAGS = "tags"
    ALLOWED_TOOLS = "allowed-tools"
    RESOURCES = "resources"


FieldPredicate = Callable[[SkillField], bool]
ResourcePredicate = Callable[[SkillResource], bool]


@dataclass(frozen=True)
class ResourcePolicy:
    """Pluggable disclosure policy.

    Args:
        name: Label used in logs and config
        field_predicate: Decides whether a SkillField may be rendered
        resource_predicate: Decides whether one resource file may be listed;
            only consulted when the RESOURCES field is allowed
    """

    name: str
    field_predicate: FieldPredicate
    resource_predicate: ResourcePredicate | None = None

    def includes(self, field: SkillField | str) -> bool:
        return bool(self.field_predicate(SkillField(field)))

    def includes_resource(self, resource: SkillResource) -> bool:
        if not self.includes(SkillField.RESOURCES):
            return False
        if self.resource_predicate is None:
            return True
        return bool(self.resource_predicate(resource))


IncludeAllResourcePolicy = ResourcePolicy(
    name="include_all", field_predicate=lambda field: True
)

ExcludeAllResourcePolicy = ResourcePolicy(
    name="exclude_all",
    field_predicate=lambda field: False,
    resource_predicate=lambda resource: False,
)

BUILTIN_POLICIES = {
    IncludeAllResourcePolicy.name: IncludeAllResourcePolicy,
    ExcludeAllResourcePolicy.name: ExcludeAllResourcePolicy,
}


def custom_policy(
    field_predicate: FieldPredicate,
    resource_predicate: ResourcePredicate | None = None,
    name: str = "custom",
) -> ResourcePolicy:
    """Build a policy from caller predicates.

    Example:
        >>> hide_tools = custom_policy(lambda f: f != SkillField.ALLOWED_TOOLS)
    """
    return ResourcePolicy(
        name=name,
        field_predicate=field_predicate,
        resource_predicate=resource_predicate,
    )


def resource_type_filter_policy(allowed_types: Iterable[str]) -> ResourcePolicy:
    """Expose all metadata but list only resources of the given types.

    Type matching ignores case; resources without a type are hidden.
    """
    allowed = frozenset(t.casefold() for t in allowed_types)

    def _allowed(resource: SkillResource) -> bool:
        if not resource.resource_type:
            return False
        return resource.resource_type.casefold() in allowed

    return ResourcePolicy(
        name="resource_type_filter",
        field_predicate=lambda field: True,
        resource_predicate=_allowed,
    )


def get_policy(name: str) -> ResourcePolicy:
    """Look up a built-in policy by its config name."""
    try:
        return BUILTIN_POLICIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown resource policy: {name}. Available: {list(BUILTIN_POLICIES)}"
        ) from None
