"""agentskills utilities."""

from agentskills.utils.helpers import directory_name, truncate_string
from agentskills.utils.logging import JSONFormatter, SkillTextFormatter, get_logger, setup_logging

__all__ = [
    "directory_name",
    "truncate_string",
    "JSONFormatter",
    "SkillTextFormatter",
    "setup_logging",
    "get_logger",
]
