# tests/test_registry.py

import threading

import pytest
from pydantic import ValidationError

from docmap.enums import DuplicatePolicy
from docmap.errors import ConfigMalformed
from docmap.registry import NamespaceRegistry, NamespaceURLEntry

PAIRS = [
    ["GLib", "https://docs.gtk.org/glib/"],
    ["Gio", "https://docs.gtk.org/gio/"],
]


@pytest.fixture
def registry():
    return NamespaceRegistry.from_pairs(PAIRS)


class TestLookup:
    def test_every_declared_namespace_resolves(self, registry):
        for namespace, base_url in PAIRS:
            assert registry.lookup(namespace) == base_url

    def test_unknown_namespace_is_absent(self, registry):
        assert registry.lookup("Foo") is None
        assert "Foo" not in registry

    def test_lookup_is_case_sensitive(self, registry):
        assert registry.lookup("glib") is None

    def test_getitem_raises_key_error(self, registry):
        assert registry["Gio"] == "https://docs.gtk.org/gio/"
        with pytest.raises(KeyError):
            registry["Foo"]

    def test_resolve_dotted_reference(self, registry):
        assert registry.resolve("GLib.HashTable.insert") == ("GLib", "https://docs.gtk.org/glib/")
        assert registry.resolve("Gio") == ("Gio", "https://docs.gtk.org/gio/")
        assert registry.resolve("Gtk.Widget") is None

    def test_empty_registry(self):
        registry = NamespaceRegistry.from_pairs([])
        assert len(registry) == 0
        assert registry.lookup("GLib") is None
        assert registry.all() == ()


class TestOrder:
    def test_all_preserves_declaration_order(self, registry):
        assert [e.namespace for e in registry.all()] == ["GLib", "Gio"]

    def test_as_pairs_round_trip(self, registry):
        assert registry.as_pairs() == PAIRS

    def test_tuples_are_accepted(self):
        registry = NamespaceRegistry.from_pairs((("Gtk", "https://docs.gtk.org/gtk4/"),))
        assert registry.as_pairs() == [["Gtk", "https://docs.gtk.org/gtk4/"]]

    def test_iteration_and_len(self, registry):
        assert len(registry) == 2
        assert [e.base_url for e in registry] == [url for _, url in PAIRS]
        assert registry.namespaces() == ["GLib", "Gio"]


class TestDuplicates:
    DUPES = [
        ["GLib", "https://docs.gtk.org/glib/"],
        ["Gio", "https://docs.gtk.org/gio/"],
        ["GLib", "https://example.org/glib/"],
    ]

    def test_reject_is_default(self):
        with pytest.raises(ConfigMalformed, match="duplicate namespace 'GLib'") as exc:
            NamespaceRegistry.from_pairs(self.DUPES)
        assert exc.value.index == 2

    def test_last_wins_keeps_first_position(self):
        registry = NamespaceRegistry.from_pairs(self.DUPES, DuplicatePolicy.last_wins)
        assert registry.as_pairs() == [
            ["GLib", "https://example.org/glib/"],
            ["Gio", "https://docs.gtk.org/gio/"],
        ]

    def test_first_wins_ignores_repeats(self):
        registry = NamespaceRegistry.from_pairs(self.DUPES, DuplicatePolicy.first_wins)
        assert registry.as_pairs() == PAIRS

    def test_direct_construction_rejects_duplicates(self):
        entry = NamespaceURLEntry(namespace="GLib", base_url="https://docs.gtk.org/glib/")
        with pytest.raises(ConfigMalformed, match="duplicate"):
            NamespaceRegistry((entry, entry))


class TestMalformed:
    @pytest.mark.parametrize(
        "pair, message",
        [
            ("GLib", "pair"),
            (["GLib"], "1 element"),
            (["GLib", "https://docs.gtk.org/glib/", "extra"], "3 element"),
            ([42, "https://docs.gtk.org/glib/"], "namespace"),
            (["GLib", None], "base_url"),
            (["", "https://docs.gtk.org/glib/"], "namespace"),
            (["GLib", ""], "base_url"),
            (["not a name", "https://docs.gtk.org/glib/"], "not a valid identifier"),
            (["GLib\n", "https://docs.gtk.org/glib/"], "not a valid identifier"),
            (["GLib", "docs/glib/"], "not absolute"),
            ({"GLib": "https://docs.gtk.org/glib/"}, "pair"),
        ],
    )
    def test_bad_entry(self, pair, message):
        with pytest.raises(ConfigMalformed, match=message) as exc:
            NamespaceRegistry.from_pairs([["Gio", "https://docs.gtk.org/gio/"], pair])
        assert exc.value.index == 1
        assert "entry 1" in str(exc.value)

    @pytest.mark.parametrize("table", [None, 5, "GLib"])
    def test_non_iterable_table(self, table):
        with pytest.raises(ConfigMalformed, match="list of pairs"):
            NamespaceRegistry.from_pairs(table)

    def test_mapping_is_not_a_table(self):
        with pytest.raises(ConfigMalformed, match="list of pairs"):
            NamespaceRegistry.from_pairs({"GLib": "https://docs.gtk.org/glib/"})

    def test_malformed_is_value_error(self):
        with pytest.raises(ValueError):
            NamespaceRegistry.from_pairs([["GLib"]])


class TestImmutability:
    def test_entry_is_frozen(self):
        entry = NamespaceURLEntry(namespace="GLib", base_url="https://docs.gtk.org/glib/")
        with pytest.raises(ValidationError):
            entry.base_url = "https://example.org/"

    def test_entry_forbids_extra_fields(self):
        with pytest.raises(ValidationError):
            NamespaceURLEntry(namespace="GLib", base_url="https://docs.gtk.org/glib/", version="2")

    def test_registry_is_frozen(self, registry):
        with pytest.raises(AttributeError):
            registry.entries = ()

    def test_index_is_read_only(self, registry):
        with pytest.raises(TypeError):
            registry._index["Foo"] = None

    def test_registry_is_hashable_and_comparable(self, registry):
        assert registry == NamespaceRegistry.from_pairs(PAIRS)
        assert hash(registry) == hash(NamespaceRegistry.from_pairs(PAIRS))

    def test_concurrent_readers(self, registry):
        results = []

        def read():
            for _ in range(200):
                results.append(registry.lookup("GLib"))

        threads = [threading.Thread(target=read) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == ["https://docs.gtk.org/glib/"] * 1600


class TestLint:
    def test_missing_trailing_separator(self):
        registry = NamespaceRegistry.from_pairs([["GLib", "https://docs.gtk.org/glib"]])
        findings = registry.lint()
        assert len(findings) == 1
        assert findings[0].startswith("GLib:")

    def test_clean_table(self, registry):
        assert registry.lint() == []
