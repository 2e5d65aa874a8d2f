"""Shared fixtures: in-memory repository clients and sample projects."""

from typing import Dict, List, Optional

import pytest

from gvc.registry.base import RepositoryClient
from gvc.registry.models import Coordinate
from gvc.versioning.version import latest, sort_descending


class FakeRepositoryClient(RepositoryClient):
    """Answers from a ``{"group:artifact": [versions]}`` map and records lookups."""

    def __init__(self, versions: Optional[Dict[str, List[str]]] = None):
        self.versions = versions or {}
        self.requests: List[Coordinate] = []

    def fetch_available_versions(self, coordinate: Coordinate) -> List[str]:
        self.requests.append(coordinate)
        return sort_descending(self.versions.get(str(coordinate), []))

    def fetch_latest_version(self, coordinate: Coordinate, stable_only: bool) -> Optional[str]:
        self.requests.append(coordinate)
        return latest(self.versions.get(str(coordinate), []), stable_only)


SAMPLE_CATALOG = """\
# Shared versions
[versions]
kotlin = "1.9.0"
okhttp = "4.10.0" # network stack
unused = "0.1"

[libraries]
okhttp-core = { module = "com.squareup.okhttp3:okhttp", version.ref = "okhttp" }
okhttp-logging = { group = "com.squareup.okhttp3", name = "logging-interceptor", version.ref = "okhttp" }
guava = "com.google.guava:guava:31.1"
junit = { module = "junit:junit", version = "4.12" }

[plugins]
kotlin-jvm = { id = "org.jetbrains.kotlin.jvm", version.ref = "kotlin" }
detekt = { id = "io.gitlab.arturbosch.detekt", version = "1.22.0" }
"""


@pytest.fixture
def sample_catalog_text():
    return SAMPLE_CATALOG


@pytest.fixture
def catalog_file(tmp_path):
    """A catalog written to disk on its own."""
    path = tmp_path / "libs.versions.toml"
    path.write_text(SAMPLE_CATALOG, encoding="utf-8")
    return path


@pytest.fixture
def gradle_project(tmp_path):
    """A minimal Gradle project: wrapper, settings script and catalog."""
    root = tmp_path / "project"
    (root / "gradle").mkdir(parents=True)
    (root / "gradlew").write_text("#!/bin/sh\n", encoding="utf-8")
    (root / "settings.gradle.kts").write_text(
        "dependencyResolutionManagement {\n"
        "    repositories {\n"
        "        mavenCentral()\n"
        "    }\n"
        "}\n",
        encoding="utf-8",
    )
    (root / "gradle" / "libs.versions.toml").write_text(SAMPLE_CATALOG, encoding="utf-8")
    return root


@pytest.fixture
def library_client():
    return FakeRepositoryClient({
        "com.squareup.okhttp3:okhttp": ["4.10.0", "4.11.0", "5.0.0-alpha.11"],
        "com.google.guava:guava": ["31.1", "32.1.2"],
        "junit:junit": ["4.12", "4.13.2"],
    })


@pytest.fixture
def plugin_client():
    return FakeRepositoryClient({
        "org.jetbrains.kotlin.jvm:org.jetbrains.kotlin.jvm": ["1.9.0", "1.9.20", "2.0.0-RC1"],
        "io.gitlab.arturbosch.detekt:io.gitlab.arturbosch.detekt": ["1.22.0", "1.23.1"],
    })
