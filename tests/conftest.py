"""Shared fixtures: skill packages written to a temp directory."""

from __future__ import annotations

from pathlib import Path

import pytest


def write_skill(root: Path, dir_name: str, content: str) -> Path:
    """Create ``root/dir_name/SKILL.md`` with ``content`` and return the package dir."""
    skill = root / dir_name
    skill.mkdir(parents=True, exist_ok=True)
    (skill / "SKILL.md").write_text(content, encoding="utf-8")
    return skill


FULL_SKILL_MD = (
    "---\n"
    "name: my-skill\n"
    "description: A test skill for unit tests.\n"
    "version: 1.2.3\n"
    "author: Jane Doe\n"
    "compatibility: Requires python3\n"
    "tags:\n"
    "  - testing\n"
    "  - Demo\n"
    "allowed-tools:\n"
    "  - bash-runner\n"
    "  - web-fetcher\n"
    "license: MIT\n"
    "---\n"
    "# My Skill\n"
    "\n"
    "These are the full instructions for my-skill.\n"
    "\n"
    "## Usage\n"
    "Do the thing.\n"
)


@pytest.fixture
def skill_dir(tmp_path: Path) -> Path:
    """A root holding one complete skill package with resources."""
    skill = write_skill(tmp_path, "my-skill", FULL_SKILL_MD)

    scripts = skill / "scripts"
    scripts.mkdir()
    (scripts / "helper.py").write_text("print('hello')\n")

    refs = skill / "references"
    refs.mkdir()
    (refs / "guide.md").write_text("# Guide\nSome reference content.\n")

    assets = skill / "assets" / "img"
    assets.mkdir(parents=True)
    (assets / "logo.txt").write_text("logo\n")

    return tmp_path


@pytest.fixture
def mixed_skill_dir(tmp_path: Path) -> Path:
    """A root with good, broken and non-skill entries."""
    write_skill(
        tmp_path,
        "calc",
        "---\nname: calc\ndescription: \"desc\"\n---\nAdd numbers.\n",
    )
    write_skill(tmp_path, "no-frontmatter", "Just plain text, no frontmatter.\n")
    write_skill(
        tmp_path,
        "unclosed",
        "---\nname: unclosed\ndescription: never closed\n",
    )
    write_skill(
        tmp_path,
        "bad-yaml",
        "---\nname: [unterminated\ndescription: x\n---\nBody\n",
    )
    (tmp_path / "notes").mkdir()
    (tmp_path / "notes" / "README.md").write_text("not a skill\n")
    (tmp_path / "loose-file.txt").write_text("ignored\n")
    return tmp_path
