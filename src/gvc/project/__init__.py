"""Project layout checks and build-script repository discovery."""

from .scanner import ProjectInfo, ProjectScanner, validate_project_path
from .gradle_config import GradleConfig, GradleConfigParser

__all__ = [
    "ProjectInfo",
    "ProjectScanner",
    "validate_project_path",
    "GradleConfig",
    "GradleConfigParser",
]
