"""Tests for the Maven and Plugin Portal repository clients."""

from unittest.mock import patch

import pytest

from gvc.errors import InsecureRepositoryError
from gvc.registry.maven import MavenRepositoryClient, metadata_url, parse_metadata_versions
from gvc.registry.models import Coordinate, Repository
from gvc.registry.plugin_portal import PluginPortalClient
from gvc.registry.validation import validate_repository_url


def metadata(*versions):
    items = "".join(f"<version>{v}</version>" for v in versions)
    return (
        "<?xml version='1.0' encoding='UTF-8'?>"
        "<metadata><groupId>g</groupId><artifactId>a</artifactId>"
        f"<versioning><latest>x</latest><versions>{items}</versions></versioning></metadata>"
    )


class TestMetadataParsing:
    """maven-metadata.xml handling."""

    def test_parses_versions_in_document_order(self):
        assert parse_metadata_versions(metadata("1.0", "1.1", "2.0")) == ["1.0", "1.1", "2.0"]

    def test_ignores_namespaces(self):
        text = (
            '<metadata xmlns="http://maven.apache.org/METADATA/1.1.0">'
            "<versioning><versions><version>3.0</version></versions></versioning></metadata>"
        )
        assert parse_metadata_versions(text) == ["3.0"]

    def test_metadata_url(self):
        url = metadata_url("https://repo1.maven.org/maven2/", Coordinate("com.squareup.okhttp3", "okhttp"))
        assert url == "https://repo1.maven.org/maven2/com/squareup/okhttp3/okhttp/maven-metadata.xml"


class TestRepositoryFallback:
    """Ordered, filtered, first-success resolution."""

    @patch('gvc.registry.maven.robust_get')
    def test_skips_repository_whose_filters_do_not_match(self, mock_get):
        mock_get.return_value = (200, {}, metadata("1.0.0", "1.1.0"))
        client = MavenRepositoryClient([
            Repository("Google", "https://google.example.com/maven", [".*android.*"]),
            Repository("Internal", "https://internal.example.com/maven", ["^com\\.example"]),
        ])

        result = client.fetch_latest_version(Coordinate("com.example", "lib"), stable_only=False)

        assert result == "1.1.0"
        assert mock_get.call_count == 1
        assert mock_get.call_args.args[0].startswith("https://internal.example.com/maven/com/example/lib/")

    @patch('gvc.registry.maven.robust_get')
    def test_first_non_empty_repository_wins(self, mock_get):
        mock_get.side_effect = [
            (404, {}, "not found"),
            (200, {}, metadata("2.0.0")),
            (200, {}, metadata("9.0.0")),
        ]
        client = MavenRepositoryClient([
            Repository("A", "https://a.example.com"),
            Repository("B", "https://b.example.com"),
            Repository("C", "https://c.example.com"),
        ])

        assert client.fetch_latest_version(Coordinate("g", "a"), stable_only=False) == "2.0.0"
        assert mock_get.call_count == 2

    @patch('gvc.registry.maven.robust_get')
    def test_all_sources_failing_returns_none(self, mock_get):
        mock_get.side_effect = [(0, {}, "Request failed"), (200, {}, "<not-xml")]
        client = MavenRepositoryClient([
            Repository("A", "https://a.example.com"),
            Repository("B", "https://b.example.com"),
        ])

        assert client.fetch_latest_version(Coordinate("g", "a"), stable_only=False) is None

    @patch('gvc.registry.maven.robust_get')
    def test_available_versions_descending_and_deduplicated(self, mock_get):
        mock_get.return_value = (200, {}, metadata("1.0", "1.2", "1.1", "1.2"))
        client = MavenRepositoryClient([Repository("A", "https://a.example.com")])

        assert client.fetch_available_versions(Coordinate("g", "a")) == ["1.2", "1.1", "1.0"]

    @patch('gvc.registry.maven.robust_get')
    def test_stable_only_latest(self, mock_get):
        mock_get.return_value = (200, {}, metadata("1.0.0", "1.1.0-alpha", "1.0.1"))
        client = MavenRepositoryClient([Repository("A", "https://a.example.com")])

        assert client.fetch_latest_version(Coordinate("g", "a"), stable_only=True) == "1.0.1"

    @patch('gvc.registry.maven.robust_get')
    def test_invalid_filter_is_ignored(self, mock_get):
        mock_get.return_value = (200, {}, metadata("1.0.0"))
        client = MavenRepositoryClient([Repository("A", "https://a.example.com", ["(unclosed"])])

        assert client.fetch_latest_version(Coordinate("g", "a"), stable_only=False) is None
        mock_get.assert_not_called()

    def test_defaults_when_no_repositories(self):
        client = MavenRepositoryClient([])
        assert [r.name for r in client.repositories] == ["Maven Central", "Google Maven"]


class TestPluginPortal:
    """Plugin id to marker artifact mapping."""

    @patch('gvc.registry.maven.robust_get')
    def test_plugin_marker_coordinate(self, mock_get):
        mock_get.return_value = (200, {}, metadata("1.9.0", "1.9.20"))
        client = PluginPortalClient()

        result = client.fetch_latest_version(Coordinate.plugin("org.jetbrains.kotlin.jvm"), stable_only=True)

        assert result == "1.9.20"
        assert mock_get.call_args.args[0] == (
            "https://plugins.gradle.org/m2/org/jetbrains/kotlin/jvm/"
            "org.jetbrains.kotlin.jvm.gradle.plugin/maven-metadata.xml"
        )


class TestRepositoryUrlValidation:
    """Refusal of unsafe repository URLs."""

    @pytest.mark.parametrize("url", [
        "ftp://repo.example.com/maven",
        "file:///tmp/repo",
        "http://localhost:8081/repository",
        "http://127.0.0.1/maven",
        "https://10.0.0.5/maven",
        "https://192.168.1.10/maven",
        "http://169.254.169.254/latest",
        "http://[::1]/maven",
        "http://[::ffff:127.0.0.1]/maven",
        "https:///no-host",
    ])
    def test_rejected(self, url):
        with pytest.raises(InsecureRepositoryError):
            validate_repository_url(url)

    def test_accepted_and_normalised(self):
        assert validate_repository_url("https://repo1.maven.org/maven2/") == "https://repo1.maven.org/maven2"

    def test_rejected_at_client_construction(self):
        with pytest.raises(InsecureRepositoryError):
            MavenRepositoryClient([Repository("local", "http://127.0.0.1:8080")])
