"""Directory scanner and loader for Agent Skills packages.

Two entry points mirror progressive disclosure:

- ``load_metadata``: reads only the frontmatter of every package (cheap)
- ``load_skill_set``: reads frontmatter, body and resource listing (expensive)

Per-package problems never raise; they come back as diagnostics next to
whatever did load. Only an unusable root directory raises.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING, Callable, TypeVar

from agentskills.skills.models import (
    DiagnosticSeverity,
    Skill,
    SkillDiagnostic,
    SkillMetadata,
    SkillResource,
    SkillSet,
)
from agentskills.skills.parser import (
    FrontmatterError,
    parse_manifest,
    parse_skill_md,
    read_frontmatter,
)
from agentskills.skills.validator import SkillValidator
from agentskills.utils import get_logger

if TYPE_CHECKING:
    from agentskills.config import LoaderConfig

logger = get_logger(__name__)

SKILL_FILE = "SKILL.md"

# Optional package sub-directories and the resource type they hold
RESOURCE_DIRS = {
    "scripts": "script",
    "references": "reference",
    "assets": "asset",
}

SKILL_FILE_MISSING = "LOADER002"
READ_FAILED = "LOADER003"
RESOURCES_UNREADABLE = "LOADER004"
DUPLICATE_SKILL = "LOADER005"

T = TypeVar("T")


def _read_failure(path: Path, error: Exception) -> SkillDiagnostic:
    return SkillDiagnostic(
        code=READ_FAILED,
        message=f"Failed to read skill file: {error}",
        severity=DiagnosticSeverity.ERROR,
        path=str(path),
    )


def _log_failures(skill_dir: Path, diagnostics: list[SkillDiagnostic]) -> None:
    for diagnostic in diagnostics:
        logger.warning(
            "Failed to load skill from %s: %s", skill_dir, diagnostic.message,
            extra={"skill_path": diagnostic.path, "code": diagnostic.code},
        )


class SkillLoader:
    """Load skill packages from a root directory.

    Every immediate sub-directory of the root that holds a ``SKILL.md`` file
    is one package; anything else is skipped silently. Packages are visited
    in sorted name order so repeated scans give identical output.

    Example:
        >>> loader = SkillLoader(validate=True)
        >>> metadata, diagnostics = loader.load_metadata("skills/")
        >>> skill_set = loader.load_skill_set("skills/")
        >>> skill_set.is_valid
        True
    """

    def __init__(
        self,
        validate: bool = False,
        max_workers: int = 1,
        validator: SkillValidator | None = None,
    ):
        """Initialize the loader.

        Args:
            validate: Append VAL diagnostics for every decoded manifest
            max_workers: Load packages in a thread pool when greater than 1
            validator: Validator used when ``validate`` is set
        """
        self.validate = validate
        self.max_workers = max(1, max_workers)
        self.validator = validator or SkillValidator()

    @classmethod
    def from_config(cls, config: "LoaderConfig") -> "SkillLoader":
        return cls(validate=config.validate_on_load, max_workers=config.max_workers)

    def discover(self, root: str | Path) -> list[Path]:
        """Return the package directories directly under ``root``.

        Raises:
            FileNotFoundError: ``root`` does not exist.
            NotADirectoryError: ``root`` is not a directory.
            OSError: ``root`` cannot be listed.
        """
        base = Path(root).expanduser()
        if not base.exists():
            raise FileNotFoundError(f"Skill directory not found: {base}")
        if not base.is_dir():
            raise NotADirectoryError(f"Skill root is not a directory: {base}")

        found = []
        for child in sorted(base.iterdir()):
            try:
                is_package = child.is_dir() and (child / SKILL_FILE).is_file()
            except OSError as e:
                # Kept so the load step reports it as LOADER003 for this package
                logger.warning(
                    "Cannot inspect %s: %s", child, e,
                    extra={"skill_path": str(child), "code": READ_FAILED},
                )
                found.append(child)
                continue
            if is_package:
                found.append(child)
            else:
                logger.debug("Skipping %s: not a skill package", child)
        return found

    def load_metadata(
        self, root: str | Path
    ) -> tuple[list[SkillMetadata], list[SkillDiagnostic]]:
        """Load listing metadata for every package under ``root``.

        Only the frontmatter of each SKILL.md is read.
        """
        results = self._map(self.load_skill_metadata, self.discover(root))

        metadata: list[SkillMetadata] = []
        diagnostics: list[SkillDiagnostic] = []
        for meta, skill_diagnostics in results:
            if meta is not None:
                metadata.append(meta)
            diagnostics.extend(skill_diagnostics)

        logger.info(
            "Loaded metadata for %d skill(s) from %s (%d diagnostic(s))",
            len(metadata), root, len(diagnostics),
        )
        return metadata, diagnostics

    def load_skill_set(self, root: str | Path) -> SkillSet:
        """Load every package under ``root`` with its instructions."""
        results = self._map(self.load_skill, self.discover(root))

        skills: list[Skill] = []
        diagnostics: list[SkillDiagnostic] = []
        for skill, skill_diagnostics in results:
            if skill is not None:
                skills.append(skill)
            diagnostics.extend(skill_diagnostics)

        logger.info(
            "Loaded %d skill(s) from %s (%d diagnostic(s))",
            len(skills), root, len(diagnostics),
        )
        return SkillSet(skills=tuple(skills), diagnostics=tuple(diagnostics))

    def discover_skills(
        self, skill_dirs: list[str | Path]
    ) -> tuple[list[SkillMetadata], list[SkillDiagnostic]]:
        """Load metadata from several roots, e.g. user then project skills.

        Roots that do not exist are skipped. When two roots provide the same
        skill name the first one wins and the later one is reported as info.
        """
        metadata: list[SkillMetadata] = []
        diagnostics: list[SkillDiagnostic] = []
        seen: dict[str, SkillMetadata] = {}

        for dir_path in skill_dirs:
            base = Path(dir_path).expanduser()
            if not base.is_dir():
                logger.debug("Skill directory does not exist: %s", base)
                continue

            found, found_diagnostics = self.load_metadata(base)
            diagnostics.extend(found_diagnostics)
            for meta in found:
                if meta.name in seen:
                    diagnostics.append(SkillDiagnostic(
                        code=DUPLICATE_SKILL,
                        message=(
                            f"Skill '{meta.name}' is shadowed by the one at "
                            f"{seen[meta.name].path}"
                        ),
                        severity=DiagnosticSeverity.INFO,
                        path=str(meta.path),
                    ))
                    logger.info(
                        "Skill '%s' at %s shadowed by %s",
                        meta.name, meta.path, seen[meta.name].path,
                        extra={"skill_path": str(meta.path), "code": DUPLICATE_SKILL},
                    )
                    continue
                seen[meta.name] = meta
                metadata.append(meta)

        return metadata, diagnostics

    def load_skill_metadata(
        self, skill_dir: str | Path
    ) -> tuple[SkillMetadata | None, list[SkillDiagnostic]]:
        """Load listing metadata for one package from its frontmatter."""
        skill_dir = Path(skill_dir)
        skill_md = skill_dir / SKILL_FILE

        try:
            if not skill_md.is_file():
                return None, [self._missing_skill_file(skill_dir)]
            header = read_frontmatter(skill_md)
        except FrontmatterError as e:
            diagnostics = [e.to_diagnostic(skill_md)]
            _log_failures(skill_dir, diagnostics)
            return None, diagnostics
        except (OSError, UnicodeDecodeError) as e:
            diagnostics = [_read_failure(skill_md, e)]
            _log_failures(skill_dir, diagnostics)
            return None, diagnostics

        manifest, diagnostics = parse_manifest(header, skill_md)
        if manifest is None:
            _log_failures(skill_dir, diagnostics)
            return None, diagnostics

        if self.validate:
            result = self.validator.validate_manifest(manifest, skill_dir)
            diagnostics.extend(result.diagnostics)

        return SkillMetadata.from_manifest(manifest, skill_dir), diagnostics

    def load_skill(
        self, skill_dir: str | Path
    ) -> tuple[Skill | None, list[SkillDiagnostic]]:
        """Load one package: manifest, instructions and resource listing."""
        skill_dir = Path(skill_dir)
        skill_md = skill_dir / SKILL_FILE

        try:
            if not skill_md.is_file():
                return None, [self._missing_skill_file(skill_dir)]
            with open(skill_md, encoding="utf-8", newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            diagnostics = [_read_failure(skill_md, e)]
            _log_failures(skill_dir, diagnostics)
            return None, diagnostics

        parsed = parse_skill_md(text, skill_md)
        diagnostics = list(parsed.diagnostics)
        if parsed.manifest is None:
            _log_failures(skill_dir, diagnostics)
            return None, diagnostics

        resources, resource_diagnostics = self._list_resources(skill_dir)
        diagnostics.extend(resource_diagnostics)

        skill = Skill(
            manifest=parsed.manifest,
            instructions=parsed.body or "",
            path=skill_dir,
            resources=resources,
        )
        if self.validate:
            diagnostics.extend(self.validator.validate(skill).diagnostics)

        return skill, diagnostics

    def _list_resources(
        self, skill_dir: Path
    ) -> tuple[tuple[SkillResource, ...], list[SkillDiagnostic]]:
        resources: list[SkillResource] = []
        diagnostics: list[SkillDiagnostic] = []
        for sub_dir, resource_type in RESOURCE_DIRS.items():
            base = skill_dir / sub_dir
            try:
                if not base.is_dir():
                    continue
                files = sorted(p for p in base.rglob("*") if p.is_file())
            except OSError as e:
                logger.warning(
                    "Failed to list resources in %s: %s", base, e,
                    extra={"skill_path": str(base), "code": RESOURCES_UNREADABLE},
                )
                diagnostics.append(SkillDiagnostic(
                    code=RESOURCES_UNREADABLE,
                    message=f"Failed to list skill resources: {e}",
                    severity=DiagnosticSeverity.WARNING,
                    path=str(base),
                ))
                continue
            for f in files:
                resources.append(SkillResource(
                    name=f.name,
                    relative_path=f.relative_to(skill_dir).as_posix(),
                    resource_type=resource_type,
                    absolute_path=f.absolute(),
                ))
        return tuple(resources), diagnostics

    def _missing_skill_file(self, skill_dir: Path) -> SkillDiagnostic:
        return SkillDiagnostic(
            code=SKILL_FILE_MISSING,
            message=f"{SKILL_FILE} not found in directory: {skill_dir}",
            severity=DiagnosticSeverity.ERROR,
            path=str(skill_dir),
        )

    def _map(self, func: Callable[[Path], T], skill_dirs: list[Path]) -> list[T]:
        # Executor.map yields in submission order, keeping output deterministic
        if self.max_workers == 1 or len(skill_dirs) < 2:
            return [func(d) for d in skill_dirs]
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(func, skill_dirs))


def load_metadata(
    root: str | Path, validate: bool = False
) -> tuple[list[SkillMetadata], list[SkillDiagnostic]]:
    """Load listing metadata for every package under ``root``."""
    return SkillLoader(validate=validate).load_metadata(root)


def load_skill_set(root: str | Path, validate: bool = False) -> SkillSet:
    """Load every package under ``root`` into a SkillSet."""
    return SkillLoader(validate=validate).load_skill_set(root)
