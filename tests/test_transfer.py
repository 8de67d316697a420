"""Tests for JSON import and export."""

from datetime import date
import json

from conftest import MemoryStorage, assert_spouse_symmetry
from store import GraphStore
from transfer import (
    SHAPE_ERROR,
    export_filename,
    export_members,
    import_members,
    parse_members,
    read_import_file,
)


class TestExport:
    def test_pretty_printed_camel_case(self, family):
        store, m = family
        text = export_members(store.members)
        records = json.loads(text)

        assert text.startswith("[\n  {")
        assert len(records) == 4
        carl = next(r for r in records if r["name"] == "Carl")
        assert carl["fatherId"] == m["adam"].id
        assert carl["motherId"] == m["beth"].id
        assert carl["spouseId"] is None
        assert carl["generation"] == 2

    def test_non_ascii_preserved(self, store):
        store.create({"name": "李上凡"})
        assert "李上凡" in export_members(store.members)

    def test_filename(self):
        assert export_filename(date(2024, 5, 7)) == "family-tree-2024-05-07.json"


class TestImport:
    def test_round_trip(self, family):
        store, _ = family
        blob = export_members(store.members).encode("utf-8")

        other = GraphStore()
        result = import_members(other, blob)

        assert result.success
        assert result.count == 4
        key = lambda m: m.id
        assert sorted(other.members, key=key) == sorted(store.members, key=key)

    def test_replaces_and_saves(self):
        storage = MemoryStorage()
        store = GraphStore([], adapter=storage)
        store.create({"name": "Old"})

        result = import_members(store, '[{"id": "n1", "name": "New", "generation": "2"}]')

        assert result.success
        assert [m.name for m in store.members] == ["New"]
        assert store.get("n1").generation == 2
        assert [m.name for m in storage.members] == ["New"]

    def test_not_a_list(self, family):
        store, _ = family
        before = store.members

        result = import_members(store, b'{"id": "1"}')

        assert result.success is False
        assert result.message == SHAPE_ERROR
        assert store.members == before

    def test_list_of_non_objects(self, store):
        result = import_members(store, "[1, 2]")
        assert result.message == SHAPE_ERROR

    def test_parse_error_reports_cause(self, family):
        store, _ = family
        before = store.members

        result = import_members(store, b"[{not json")

        assert result.success is False
        assert result.message.startswith("Import failed: ")
        assert "Expecting" in result.message
        assert store.members == before

    def test_deeply_nested_data(self, family):
        store, _ = family
        before = store.members

        result = import_members(store, b"[" * 200000 + b"]" * 200000)

        assert result.success is False
        assert result.message.startswith("Import failed: ")
        assert store.members == before

    def test_undecodable_bytes(self, store):
        result = import_members(store, b"\xff\xfe\xfa")
        assert result.success is False
        assert result.message.startswith("Import failed: ")

    def test_declined_confirmation_leaves_store(self, family):
        store, _ = family
        before = store.members

        result = import_members(store, b"[]", confirm=lambda: False)

        assert result.success is False
        assert store.members == before

    def test_confirmation_not_asked_on_bad_data(self, store):
        asked = []
        import_members(store, b"{}", confirm=lambda: asked.append(True) or True)
        assert asked == []

    def test_one_sided_spouse_links_repaired(self, store):
        blob = '[{"id": "a", "name": "A", "spouseId": "b"}, {"id": "b", "name": "B", "spouseId": ""}]'
        import_members(store, blob)

        assert store.get("b").spouse_id == "a"
        assert_spouse_symmetry(store)

    def test_parse_members_fills_defaults(self):
        [member] = parse_members('[{"id": 7, "name": "X", "deathDate": ""}]')
        assert member.id == "7"
        assert member.generation == 1
        assert member.death_date is None
        assert member.description == ""


class TestReadImportFile:
    def test_reads_file(self, tmp_path, store):
        path = tmp_path / "export.json"
        path.write_text('[{"id": "a", "name": "A"}]', encoding="utf-8")

        result = read_import_file(store, path)

        assert result.success
        assert store.get("a").name == "A"

    def test_missing_file(self, tmp_path, store):
        result = read_import_file(store, tmp_path / "nope.json")
        assert result.success is False
        assert result.message.startswith("Import failed: ")
