"""Validation of a Gradle project directory."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from gvc.constants import Constants
from gvc.errors import ProjectValidationError

logger = logging.getLogger(__name__)


@dataclass
class ProjectInfo:
    """Paths of a validated project."""
    project_path: Path
    toml_path: Path
    has_git: bool
    gradlew_path: Path


def validate_project_path(path: Union[str, Path]) -> Path:
    """Resolve ``path`` and refuse anything that is not a directory or lives under a system directory.

    Raises:
        ProjectValidationError: when the path is unusable.
    """
    raw = Path(path)
    try:
        canonical = raw.resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise ProjectValidationError(f"Invalid path '{raw}': {exc}") from exc

    for forbidden in Constants.FORBIDDEN_DIRS:
        forbidden_path = Path(forbidden)
        candidates = {forbidden_path}
        if forbidden_path.exists():
            candidates.add(forbidden_path.resolve())
        for root in candidates:
            if _is_within(raw, root) or _is_within(canonical, root):
                raise ProjectValidationError(
                    f"Access to system directory '{forbidden}' is not allowed"
                )

    if not canonical.is_dir():
        raise ProjectValidationError(f"Path '{canonical}' is not a directory")
    return canonical


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
        return True
    except ValueError:
        return False


class ProjectScanner:
    """Checks that a directory holds a Gradle wrapper and a version catalog."""

    def __init__(self, project_path: Union[str, Path]):
        self.project_path = Path(project_path)

    def validate(self) -> ProjectInfo:
        """Return the project's paths.

        Raises:
            ProjectValidationError: if the wrapper or the catalog is missing.
        """
        root = validate_project_path(self.project_path)

        if not any((root / name).exists() for name in Constants.GRADLE_WRAPPERS):
            raise ProjectValidationError("Gradle wrapper (gradlew or gradlew.bat) not found")

        toml_path = root / Constants.CATALOG_PATH
        if not toml_path.is_file():
            raise ProjectValidationError(f"{Constants.CATALOG_PATH} not found")

        git_dir = root / ".git"
        wrapper = "gradlew.bat" if os.name == "nt" else "gradlew"
        info = ProjectInfo(
            project_path=root,
            toml_path=toml_path,
            has_git=git_dir.is_dir(),
            gradlew_path=root / wrapper,
        )
        logger.debug("Validated project at %s (git: %s)", root, info.has_git)
        return info
