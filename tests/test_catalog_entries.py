"""Tests for reading and mutating catalog entries in all supported shapes."""

import pytest
import tomlkit

from gvc.catalog import entries
from gvc.catalog.document import dump_catalog, parse_catalog
from gvc.errors import UnsupportedShapeError
from gvc.registry.models import Coordinate


def libraries(text):
    doc = parse_catalog(text)
    return doc, doc["libraries"]


class TestExtraction:
    """Coordinate and version extraction across shapes."""

    def test_string_shape(self):
        _, libs = libraries('[libraries]\nguava = "com.google.guava:guava:32.1.2-jre"\n')
        item = libs["guava"]
        assert entries.extract_coordinate(item) == Coordinate("com.google.guava", "guava")
        assert entries.extract_literal_version(item) == "32.1.2-jre"
        assert entries.extract_version_reference(item) is None

    def test_module_table_with_reference(self):
        _, libs = libraries('[libraries]\nok = { module = "com.squareup.okhttp3:okhttp", version.ref = "okhttp" }\n')
        item = libs["ok"]
        assert entries.extract_coordinate(item) == Coordinate("com.squareup.okhttp3", "okhttp")
        assert entries.extract_literal_version(item) is None
        assert entries.extract_version_reference(item) == "okhttp"
        assert entries.uses_reference(item, "okhttp")
        assert not entries.uses_reference(item, "kotlin")

    def test_group_name_table_with_inline_ref(self):
        _, libs = libraries(
            '[libraries]\nlog = { group = "com.squareup.okhttp3", name = "logging-interceptor", version = { ref = "okhttp" } }\n'
        )
        item = libs["log"]
        assert entries.extract_coordinate(item) == Coordinate("com.squareup.okhttp3", "logging-interceptor")
        assert entries.extract_version_reference(item) == "okhttp"

    def test_full_table_shape(self):
        _, libs = libraries('[libraries.junit]\nmodule = "junit:junit"\nversion = "4.12"\n')
        item = libs["junit"]
        assert entries.extract_coordinate(item) == Coordinate("junit", "junit")
        assert entries.extract_literal_version(item) == "4.12"

    def test_string_without_version(self):
        _, libs = libraries('[libraries]\nbom-managed = "androidx.core:core-ktx"\n')
        library = entries.read_library("bom-managed", libs["bom-managed"])
        assert library.coordinate == Coordinate("androidx.core", "core-ktx")
        assert library.version is None

    @pytest.mark.parametrize("text", ["just-a-name", ":artifact:1.0", "group::1.0", "a:b:c:d"])
    def test_unparseable_coordinates(self, text):
        assert entries.parse_coordinate(text) is None

    def test_plugin_shapes(self):
        doc = parse_catalog(
            '[plugins]\n'
            'detekt = { id = "io.gitlab.arturbosch.detekt", version = "1.22.0" }\n'
            'kotlin = { id = "org.jetbrains.kotlin.jvm", version.ref = "kotlin" }\n'
            'shadow = "com.github.johnrengelman.shadow:8.1.1"\n'
        )
        plugins = doc["plugins"]
        assert entries.extract_plugin_id(plugins["detekt"]) == "io.gitlab.arturbosch.detekt"
        assert entries.extract_plugin_literal_version(plugins["detekt"]) == "1.22.0"
        assert entries.extract_plugin_literal_version(plugins["kotlin"]) is None
        assert entries.read_plugin("kotlin", plugins["kotlin"]).version == entries.VersionReference("kotlin")
        assert entries.read_plugin("shadow", plugins["shadow"]) == entries.PluginEntry(
            "shadow", "com.github.johnrengelman.shadow", entries.LiteralVersion("8.1.1")
        )


class TestMutation:
    """In-place version rewrites."""

    def test_string_shape_rewrites_whole_coordinate(self):
        doc, libs = libraries('[libraries]\nguava = "com.google.guava:guava:31.0-jre" # pinned\n')
        assert entries.mutate_version(libs, "guava", "32.1.2-jre")
        assert dump_catalog(doc) == '[libraries]\nguava = "com.google.guava:guava:32.1.2-jre" # pinned\n'

    def test_inline_table_only_version_changes(self):
        text = '[libraries]\njunit = { module = "junit:junit", version = "4.12" }\nother = "a:b:1.0"\n'
        doc, libs = libraries(text)
        assert entries.mutate_version(libs, "junit", "4.13.2")
        assert dump_catalog(doc) == text.replace('"4.12"', '"4.13.2"')

    def test_group_name_table(self):
        text = '[libraries]\nlib = { group = "g", name = "a", version = "1.0" }\n'
        doc, libs = libraries(text)
        assert entries.mutate_version(libs, "lib", "1.1")
        assert dump_catalog(doc) == text.replace('"1.0"', '"1.1"')

    def test_literal_quote_style_is_kept(self):
        doc, libs = libraries("[libraries]\nlib = 'g:a:1.0'\n")
        entries.mutate_version(libs, "lib", "2.0")
        assert dump_catalog(doc) == "[libraries]\nlib = 'g:a:2.0'\n"

    def test_plugin_string_shape(self):
        doc = parse_catalog('[plugins]\nshadow = "com.github.johnrengelman.shadow:8.1.0"\n')
        assert entries.mutate_version(doc["plugins"], "shadow", "8.1.1", plugin=True)
        assert dump_catalog(doc) == '[plugins]\nshadow = "com.github.johnrengelman.shadow:8.1.1"\n'

    def test_same_version_is_a_no_op(self, sample_catalog_text):
        doc = parse_catalog(sample_catalog_text)
        for name, item in entries.iter_libraries(doc):
            current = entries.extract_literal_version(item)
            if current is not None:
                assert not entries.mutate_version(doc["libraries"], name, current)
        assert dump_catalog(doc) == sample_catalog_text

    def test_mutation_leaves_rest_of_document_untouched(self, sample_catalog_text):
        doc = parse_catalog(sample_catalog_text)
        entries.mutate_version(doc["libraries"], "junit", "4.13.2")
        expected = sample_catalog_text.replace(
            'junit = { module = "junit:junit", version = "4.12" }',
            'junit = { module = "junit:junit", version = "4.13.2" }',
        )
        assert dump_catalog(doc) == expected

    def test_missing_entry_raises(self):
        _, libs = libraries('[libraries]\nlib = "g:a:1.0"\n')
        with pytest.raises(UnsupportedShapeError):
            entries.mutate_version(libs, "absent", "2.0")

    def test_unrecognised_shape_raises(self):
        _, libs = libraries('[libraries]\nweird = { path = "libs/weird.jar" }\nnum = 3\nbad = "nonsense"\n')
        for key in ("weird", "num", "bad"):
            with pytest.raises(UnsupportedShapeError):
                entries.mutate_version(libs, key, "2.0")

    def test_mutate_alias(self, sample_catalog_text):
        doc = parse_catalog(sample_catalog_text)
        assert entries.mutate_alias(doc["versions"], "okhttp", "4.11.0")
        assert 'okhttp = "4.11.0" # network stack' in dump_catalog(doc)
        assert not entries.mutate_alias(doc["versions"], "okhttp", "4.11.0")

    def test_mutate_alias_rejects_non_string(self):
        doc = parse_catalog("[versions]\nweird = { strictly = \"1.0\" }\n")
        with pytest.raises(UnsupportedShapeError):
            entries.mutate_alias(doc["versions"], "weird", "2.0")


class TestTraversal:
    """Section iteration and representative lookup."""

    def test_iteration_follows_declaration_order(self, sample_catalog_text):
        doc = parse_catalog(sample_catalog_text)
        assert [a.name for a in entries.iter_aliases(doc)] == ["kotlin", "okhttp", "unused"]
        assert [n for n, _ in entries.iter_libraries(doc)] == ["okhttp-core", "okhttp-logging", "guava", "junit"]
        assert [n for n, _ in entries.iter_plugins(doc)] == ["kotlin-jvm", "detekt"]

    def test_first_referencing_library_is_representative(self, sample_catalog_text):
        doc = parse_catalog(sample_catalog_text)
        assert entries.find_representative(doc, "okhttp") == Coordinate("com.squareup.okhttp3", "okhttp")

    def test_alias_used_only_by_plugins_has_no_representative(self, sample_catalog_text):
        doc = parse_catalog(sample_catalog_text)
        assert entries.find_representative(doc, "kotlin") is None
        assert entries.find_representative(doc, "unused") is None

    def test_missing_sections_are_empty(self):
        doc = tomlkit.document()
        assert list(entries.iter_aliases(doc)) == []
        assert list(entries.iter_libraries(doc)) == []
        assert entries.section(doc, "plugins") is None
