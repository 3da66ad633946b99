"""Tests for the skill package loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from agentskills.config import LoaderConfig
from agentskills.skills.loader import SkillLoader, load_metadata, load_skill_set
from agentskills.skills.models import DiagnosticSeverity

from tests.conftest import write_skill


class TestDiscover:
    def test_only_directories_with_skill_md(self, mixed_skill_dir: Path):
        found = SkillLoader().discover(mixed_skill_dir)
        assert [p.name for p in found] == ["bad-yaml", "calc", "no-frontmatter", "unclosed"]

    def test_missing_root_is_fatal(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            SkillLoader().discover(tmp_path / "nope")

    def test_file_root_is_fatal(self, tmp_path: Path):
        root = tmp_path / "file.txt"
        root.write_text("x")
        with pytest.raises(NotADirectoryError):
            load_skill_set(root)

    def test_skill_md_directory_is_not_a_package(self, tmp_path: Path):
        (tmp_path / "odd" / "SKILL.md").mkdir(parents=True)
        assert SkillLoader().discover(tmp_path) == []


class TestLoadMetadata:
    def test_load_valid(self, skill_dir: Path):
        metadata, diagnostics = load_metadata(skill_dir)
        assert diagnostics == []
        assert len(metadata) == 1
        meta = metadata[0]
        assert meta.name == "my-skill"
        assert meta.description == "A test skill for unit tests."
        assert meta.version == "1.2.3"
        assert meta.author == "Jane Doe"
        assert meta.tags == ("testing", "Demo")
        assert meta.path == skill_dir / "my-skill"

    def test_never_holds_body(self, tmp_path: Path):
        marker = "UNIQUE-BODY-MARKER"
        write_skill(
            tmp_path,
            "big",
            "---\nname: big\ndescription: Large body.\n---\n" + (marker + "\n") * 50_000,
        )
        metadata, _ = load_metadata(tmp_path)
        assert len(metadata) == 1
        assert marker not in metadata[0].model_dump_json()

    def test_broken_packages_become_diagnostics(self, mixed_skill_dir: Path):
        metadata, diagnostics = load_metadata(mixed_skill_dir)
        assert [m.name for m in metadata] == ["calc"]
        assert sorted(d.code for d in diagnostics) == ["PARSE001", "PARSE002", "PARSE003"]
        assert all(d.severity == DiagnosticSeverity.ERROR for d in diagnostics)

    def test_order_is_stable(self, tmp_path: Path):
        for name in ["zeta", "alpha", "mid"]:
            write_skill(tmp_path, name, f"---\nname: {name}\ndescription: d\n---\n")
        first, _ = load_metadata(tmp_path)
        second, _ = load_metadata(tmp_path)
        assert [m.name for m in first] == ["alpha", "mid", "zeta"]
        assert first == second

    def test_eager_validation(self, tmp_path: Path):
        write_skill(tmp_path, "mismatched-directory", "---\nname: other-name\ndescription: d\n---\n")
        metadata, diagnostics = SkillLoader(validate=True).load_metadata(tmp_path)
        assert len(metadata) == 1
        assert [d.code for d in diagnostics] == ["VAL010"]

    def test_block_scalar_name_fails_pattern(self, tmp_path: Path):
        write_skill(tmp_path, "calc", "---\nname: |\n  calc\ndescription: d\n---\n")
        metadata, diagnostics = SkillLoader(validate=True).load_metadata(tmp_path)
        assert metadata[0].name == "calc\n"
        assert [d.code for d in diagnostics] == ["VAL003", "VAL010"]

    def test_undecodable_file(self, tmp_path: Path):
        skill = tmp_path / "binary"
        skill.mkdir()
        (skill / "SKILL.md").write_bytes(b"---\nname: \xff\xfe\n---\n")
        metadata, diagnostics = load_metadata(tmp_path)
        assert metadata == []
        assert [d.code for d in diagnostics] == ["LOADER003"]
        assert diagnostics[0].path == str(skill / "SKILL.md")


class TestLoadSkillSet:
    def test_load_full_content(self, skill_dir: Path):
        skill_set = load_skill_set(skill_dir)
        assert skill_set.is_valid
        assert len(skill_set.skills) == 1
        skill = skill_set.skills[0]
        assert skill.manifest.allowed_tools == ("bash-runner", "web-fetcher")
        assert skill.manifest.additional_fields == {"license": "MIT"}
        assert skill.instructions.startswith("# My Skill\n")
        assert "Do the thing." in skill.instructions
        assert "name: my-skill" not in skill.instructions

    def test_resources_are_listed_not_read(self, skill_dir: Path):
        skill = load_skill_set(skill_dir).skills[0]
        listed = {(r.relative_path, r.resource_type) for r in skill.resources}
        assert listed == {
            ("scripts/helper.py", "script"),
            ("references/guide.md", "reference"),
            ("assets/img/logo.txt", "asset"),
        }
        helper = next(r for r in skill.resources if r.name == "helper.py")
        assert helper.absolute_path == (skill_dir / "my-skill" / "scripts" / "helper.py").absolute()

    def test_one_good_one_without_frontmatter(self, tmp_path: Path):
        write_skill(tmp_path, "calc", "---\nname: calc\ndescription: \"desc\"\n---\nAdd.\n")
        broken = write_skill(tmp_path, "plain", "No frontmatter here.\n")

        skill_set = load_skill_set(tmp_path)

        assert len(skill_set.skills) == 1
        assert skill_set.skills[0].manifest.name == "calc"
        assert len(skill_set.diagnostics) == 1
        diagnostic = skill_set.diagnostics[0]
        assert diagnostic.code == "PARSE001"
        assert str(broken) in diagnostic.path
        assert not skill_set.is_valid

    def test_body_with_delimiter_lines(self, tmp_path: Path):
        write_skill(tmp_path, "ok", "---\nname: ok\ndescription: d\n---\nline1\n---\nline2")
        skill = load_skill_set(tmp_path).skills[0]
        assert skill.instructions == "line1\n---\nline2"

    def test_warning_keeps_set_valid(self, tmp_path: Path):
        write_skill(
            tmp_path,
            "mismatched-directory",
            "---\nname: other-name\ndescription: Works when activated by path.\n---\nBody\n",
        )
        skill_set = SkillLoader(validate=True).load_skill_set(tmp_path)
        assert [d.code for d in skill_set.diagnostics] == ["VAL010"]
        assert skill_set.warnings and not skill_set.errors
        assert skill_set.is_valid

    def test_validation_errors_do_not_drop_skill(self, tmp_path: Path):
        write_skill(tmp_path, "Bad-Name", "---\nname: Bad-Name\ndescription: d\n---\n")
        skill_set = SkillLoader(validate=True).load_skill_set(tmp_path)
        assert len(skill_set.skills) == 1
        assert [d.code for d in skill_set.diagnostics] == ["VAL003"]
        assert not skill_set.is_valid

    def test_without_eager_validation_only_parse_errors(self, tmp_path: Path):
        write_skill(tmp_path, "Bad-Name", "---\nname: Bad-Name\ndescription: d\n---\n")
        skill_set = load_skill_set(tmp_path)
        assert skill_set.diagnostics == ()
        assert skill_set.is_valid

    def test_metadata_and_full_load_agree(self, skill_dir: Path, mixed_skill_dir: Path):
        for root in (skill_dir, mixed_skill_dir):
            metadata, meta_diagnostics = load_metadata(root)
            skill_set = load_skill_set(root)
            assert metadata == skill_set.metadata
            assert [d.code for d in meta_diagnostics] == [d.code for d in skill_set.diagnostics]

    def test_parallel_load_keeps_directory_order(self, tmp_path: Path):
        names = [f"skill-{i:02d}" for i in range(12)]
        for name in reversed(names):
            write_skill(tmp_path, name, f"---\nname: {name}\ndescription: d\n---\n{name}\n")
        write_skill(tmp_path, "skill-05a", "broken\n")

        sequential = SkillLoader().load_skill_set(tmp_path)
        parallel = SkillLoader(max_workers=4).load_skill_set(tmp_path)

        assert [s.name for s in parallel.skills] == names
        assert parallel == sequential


class TestLoadSkill:
    def test_missing_skill_file(self, tmp_path: Path):
        skill, diagnostics = SkillLoader().load_skill(tmp_path)
        assert skill is None
        assert [d.code for d in diagnostics] == ["LOADER002"]

    def test_single_package(self, skill_dir: Path):
        skill, diagnostics = SkillLoader().load_skill(skill_dir / "my-skill")
        assert diagnostics == []
        assert skill.metadata.name == "my-skill"


class TestDiscoverSkills:
    def test_nonexistent_dirs_are_skipped(self, skill_dir: Path):
        metadata, diagnostics = SkillLoader().discover_skills(["/nonexistent/path", skill_dir])
        assert [m.name for m in metadata] == ["my-skill"]
        assert diagnostics == []

    def test_first_directory_wins(self, tmp_path: Path):
        user = tmp_path / "user"
        project = tmp_path / "project"
        write_skill(user, "shared", "---\nname: shared\ndescription: user copy\n---\n")
        write_skill(project, "shared", "---\nname: shared\ndescription: project copy\n---\n")

        metadata, diagnostics = SkillLoader().discover_skills([user, project])

        assert [m.description for m in metadata] == ["user copy"]
        assert [d.code for d in diagnostics] == ["LOADER005"]
        assert diagnostics[0].severity == DiagnosticSeverity.INFO


class TestFromConfig:
    def test_loader_settings(self):
        loader = SkillLoader.from_config(LoaderConfig(validate_on_load=True, max_workers=3))
        assert loader.validate is True
        assert loader.max_workers == 3


class TestUnreadablePackages:
    @pytest.fixture
    def locked_root(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
        write_skill(tmp_path, "calc", "---\nname: calc\ndescription: d\n---\nAdd.\n")
        write_skill(tmp_path, "locked", "---\nname: locked\ndescription: d\n---\n")
        real_is_file = Path.is_file

        def is_file(self, *args, **kwargs):
            if self.name == "SKILL.md" and self.parent.name == "locked":
                raise PermissionError(13, "Permission denied", str(self))
            return real_is_file(self, *args, **kwargs)

        monkeypatch.setattr(Path, "is_file", is_file)
        return tmp_path

    def test_skill_set_keeps_readable_packages(self, locked_root: Path):
        skill_set = load_skill_set(locked_root)
        assert [s.name for s in skill_set.skills] == ["calc"]
        assert [d.code for d in skill_set.diagnostics] == ["LOADER003"]
        assert skill_set.diagnostics[0].path == str(locked_root / "locked" / "SKILL.md")

    def test_metadata_keeps_readable_packages(self, locked_root: Path):
        metadata, diagnostics = SkillLoader(max_workers=2).load_metadata(locked_root)
        assert [m.name for m in metadata] == ["calc"]
        assert [d.code for d in diagnostics] == ["LOADER003"]
        assert "Permission denied" in diagnostics[0].message


class TestUnlistableResources:
    def test_other_resource_dirs_still_listed(
        self, skill_dir: Path, monkeypatch: pytest.MonkeyPatch
    ):
        real_rglob = Path.rglob

        def rglob(self, pattern, *args, **kwargs):
            if self.name == "references":
                raise PermissionError(13, "Permission denied", str(self))
            return real_rglob(self, pattern, *args, **kwargs)

        monkeypatch.setattr(Path, "rglob", rglob)

        skill_set = load_skill_set(skill_dir)

        skill = skill_set.skills[0]
        assert [r.relative_path for r in skill.resources] == [
            "scripts/helper.py",
            "assets/img/logo.txt",
        ]
        assert [d.code for d in skill_set.diagnostics] == ["LOADER004"]
        assert skill_set.diagnostics[0].severity == DiagnosticSeverity.WARNING
        assert skill_set.is_valid
