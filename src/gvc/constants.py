"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    VALIDATION_ERROR = 3
    USER_CANCELLED = 4


class CatalogSections(Enum):
    """Top-level sections of a version catalog.

    Args:
        Enum (string): Section table names.
    """

    VERSIONS = "versions"
    LIBRARIES = "libraries"
    PLUGINS = "plugins"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    MAVEN_CENTRAL_URL = "https://repo1.maven.org/maven2"
    GOOGLE_MAVEN_URL = "https://dl.google.com/dl/android/maven2"
    GOOGLE_GROUP_FILTERS = [".*google.*", ".*android.*", ".*androidx.*"]
    PLUGIN_PORTAL_URL = "https://plugins.gradle.org/m2"
    JCENTER_URL = "https://jcenter.bintray.com"
    PLUGIN_MARKER_SUFFIX = ".gradle.plugin"
    METADATA_FILE = "maven-metadata.xml"

    CATALOG_PATH = "gradle/libs.versions.toml"
    GRADLE_WRAPPERS = ["gradlew", "gradlew.bat"]
    BUILD_SCRIPTS = [
        "settings.gradle.kts",
        "settings.gradle",
        "build.gradle.kts",
        "build.gradle",
    ]
    CONFIG_FILES = [".gvc.yml", ".gvc.yaml"]
    FORBIDDEN_DIRS = ["/etc", "/sys", "/proc", "/dev", "/boot"]

    # Markers are matched as substrings of the lower-cased version text.
    UNSTABLE_MARKERS = [
        "alpha", "beta", "rc", "snapshot", "dev", "-dev", "+dev", ".dev",
        "m1", "m2", "m3", "eap", "preview", "canary",
    ]
    SNAPSHOT_SUFFIX = "-SNAPSHOT"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "GVC_LOG_LEVEL"
    USER_AGENT = "gvc/0.1.0"
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 2
    MAX_RESPONSE_BYTES = 5 * 1024 * 1024
    ALLOWED_SCHEMES = ["http", "https"]

    VERSION_PAGE_SIZE = 10
    ALIAS_SKIPPED_PREFIXES = ["org", "com", "net", "io", "dev"]
