"""Tests for SchemaStore loading, persistence and selection mutation."""

import io
import logging
import threading

import pytest

from formspace import Schema, SchemaStore, SelectionState, StoreSettings

DOCUMENT = {
    "variables": [
        {"name": "Level", "type": "enum", "values": [{"name": "Easy"}, {"name": "Hard"}]},
        {
            "name": "Boss",
            "type": "enum",
            "values": [{"name": "Dragon", "conditions": {"Level": "Hard"}}],
        },
    ]
}


class TestLoadSchema:
    """Test load_schema."""

    def test_empty_store(self):
        """Test a new store has an empty schema."""
        store = SchemaStore()
        assert store.schema.variables == []
        assert store.selections == SelectionState()

    def test_load_returns_schema(self):
        """Test load_schema returns the validated schema."""
        store = SchemaStore()
        schema = store.load_schema(DOCUMENT)
        assert isinstance(schema, Schema)
        assert store.schema is schema
        assert schema.variable_names == ["Level", "Boss"]

    def test_load_resets_selections(self):
        """Test loading clears every selection."""
        store = SchemaStore(DOCUMENT)
        store.set_selection("Level", ["Hard"])
        store.load_schema(DOCUMENT)
        assert store.selections == SelectionState()

    def test_load_schema_instance(self):
        """Test loading a Schema object."""
        schema = Schema.from_document(DOCUMENT)
        store = SchemaStore(schema)
        assert store.schema is schema

    @pytest.mark.parametrize(
        "document",
        [None, [], "text", {"vars": []}, {"variables": [{"type": "enum"}]}],
    )
    def test_malformed_load_is_atomic(self, document):
        """Test a bad document leaves schema and selections untouched."""
        store = SchemaStore(DOCUMENT)
        store.set_selection("Level", ["Hard"])
        previous = store.schema

        with pytest.raises(ValueError, match="Invalid schema document"):
            store.load_schema(document)

        assert store.schema is previous
        assert store.get_selection("Level") == frozenset({"Hard"})

    def test_load_logs_info(self, caplog):
        """Test loads are logged."""
        with caplog.at_level(logging.INFO, logger="formspace.store"):
            SchemaStore(DOCUMENT)
        assert "Loaded schema with 2 variables" in caplog.text

    def test_dangling_references_warned(self, caplog):
        """Test dangling references are reported, not raised."""
        document = {
            "variables": [
                {"name": "A", "conditions": {"Ghost": "Boo"}, "values": []},
            ]
        }
        with caplog.at_level(logging.DEBUG, logger="formspace.store"):
            store = SchemaStore(document)
        assert store.is_visible("A") is True
        records = [r for r in caplog.records if "Dangling" in r.getMessage()]
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING
        assert "unknown variable 'Ghost'" in records[0].getMessage()

    def test_dangling_references_quiet(self, caplog):
        """Test dangling references drop to DEBUG when warnings are off."""
        document = {"variables": [{"name": "A", "conditions": {"Ghost": "Boo"}}]}
        settings = StoreSettings(warn_on_dangling_references=False)
        with caplog.at_level(logging.DEBUG, logger="formspace.store"):
            SchemaStore(document, settings=settings)
        records = [r for r in caplog.records if "Dangling" in r.getMessage()]
        assert [r.levelno for r in records] == [logging.DEBUG]


class TestPersistence:
    """Test load/dump through file-like handles."""

    def test_json_round_trip(self):
        """Test dumping and reloading JSON."""
        store = SchemaStore(DOCUMENT)
        buffer = io.StringIO()
        store.dump(buffer)

        other = SchemaStore()
        other.load(io.StringIO(buffer.getvalue()))
        assert other.schema == store.schema

    def test_json_bytes_handle(self):
        """Test loading from a binary handle."""
        store = SchemaStore()
        store.load(io.BytesIO(b'{"variables": [{"name": "A"}]}'))
        assert store.schema.variable_names == ["A"]

    def test_yaml_round_trip(self):
        """Test dumping and reloading YAML."""
        pytest.importorskip("yaml")
        store = SchemaStore(DOCUMENT)
        buffer = io.StringIO()
        store.dump(buffer, format="yaml")

        other = SchemaStore()
        other.load(io.StringIO(buffer.getvalue()), format="yaml")
        assert other.schema == store.schema

    def test_toml_file(self, tmp_path):
        """Test dumping and reloading TOML through real files."""
        pytest.importorskip("tomli_w")
        path = tmp_path / "schema.toml"
        store = SchemaStore(DOCUMENT)
        with path.open("w", encoding="utf-8") as fp:
            store.dump(fp, format="toml")

        other = SchemaStore()
        with path.open("rb") as fp:
            other.load(fp, format="toml")
        assert other.schema == store.schema

    def test_unknown_format(self):
        """Test unknown formats are rejected."""
        store = SchemaStore(DOCUMENT)
        with pytest.raises(ValueError, match="Unknown document format"):
            store.dump(io.StringIO(), format="xml")
        with pytest.raises(ValueError, match="Unknown document format"):
            store.load(io.StringIO("{}"), format="xml")

    def test_malformed_file_is_atomic(self):
        """Test a bad file leaves the store untouched."""
        store = SchemaStore(DOCUMENT)
        with pytest.raises(ValueError):
            store.load(io.StringIO('{"not": "a schema"}'))
        assert store.schema.variable_names == ["Level", "Boss"]


class TestSelectionMutation:
    """Test selection get/set/toggle."""

    def test_set_and_get(self):
        """Test setting a selection."""
        store = SchemaStore(DOCUMENT)
        store.set_selection("Level", ["Hard"])
        assert store.get_selection("Level") == frozenset({"Hard"})
        assert store.get_selection("Boss") == frozenset()

    def test_set_single_string(self):
        """Test a bare string selects one value."""
        store = SchemaStore(DOCUMENT)
        store.set_selection("Level", "Easy")
        assert store.get_selection("Level") == frozenset({"Easy"})

    def test_set_empty_clears(self):
        """Test an empty selection unconstrains the variable."""
        store = SchemaStore(DOCUMENT)
        store.set_selection("Level", ["Hard"])
        store.set_selection("Level", None)
        assert "Level" not in store.selections

    def test_set_unknown_variable(self):
        """Test selecting on an unknown variable fails."""
        store = SchemaStore(DOCUMENT)
        with pytest.raises(ValueError, match="Unknown variable 'Ghost'"):
            store.set_selection("Ghost", ["Boo"])

    def test_set_undeclared_value_allowed(self):
        """Test undeclared values are stored as given."""
        store = SchemaStore(DOCUMENT)
        store.set_selection("Level", ["Nightmare"])
        assert store.get_selection("Level") == frozenset({"Nightmare"})

    def test_toggle_multi(self):
        """Test toggling in multi-select mode."""
        store = SchemaStore(DOCUMENT)
        store.toggle_selection("Level", "Easy")
        store.toggle_selection("Level", "Hard")
        assert store.get_selection("Level") == frozenset({"Easy", "Hard"})
        store.toggle_selection("Level", "Easy")
        assert store.get_selection("Level") == frozenset({"Hard"})

    def test_single_select_rejects_many(self):
        """Test single-select mode rejects multi-value input."""
        store = SchemaStore(DOCUMENT, settings=StoreSettings(allow_multiple=False))
        with pytest.raises(ValueError, match="accepts a single value"):
            store.set_selection("Level", ["Easy", "Hard"])

    def test_single_select_toggle(self):
        """Test single-select toggle replaces, then clears."""
        store = SchemaStore(DOCUMENT, settings=StoreSettings(allow_multiple=False))
        store.toggle_selection("Level", "Easy")
        store.toggle_selection("Level", "Hard")
        assert store.get_selection("Level") == frozenset({"Hard"})
        store.toggle_selection("Level", "Hard")
        assert store.get_selection("Level") == frozenset()

    def test_clear_selections(self):
        """Test clearing every selection."""
        store = SchemaStore(DOCUMENT)
        store.set_selection("Level", ["Hard"])
        store.set_selection("Boss", ["Dragon"])
        store.clear_selections()
        assert len(store.selections) == 0

    def test_selections_is_a_copy(self):
        """Test the selections property cannot mutate the store."""
        store = SchemaStore(DOCUMENT)
        snapshot = store.selections
        snapshot.set("Level", ["Hard"])
        assert store.get_selection("Level") == frozenset()

    def test_concurrent_toggles(self):
        """Test toggles from several threads are serialized."""
        store = SchemaStore(DOCUMENT)

        def toggle_many():
            for _ in range(200):
                store.toggle_selection("Level", "Easy")

        threads = [threading.Thread(target=toggle_many) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # 800 toggles in total leave the value unselected.
        assert store.get_selection("Level") == frozenset()


class TestSettings:
    """Test StoreSettings."""

    def test_defaults(self):
        settings = StoreSettings()
        assert settings.allow_multiple is True
        assert settings.warn_on_dangling_references is True

    def test_unknown_setting_rejected(self):
        with pytest.raises(ValueError):
            StoreSettings(allow_many=True)

    def test_frozen(self):
        settings = StoreSettings()
        with pytest.raises(ValueError):
            settings.allow_multiple = False


class TestLenientDocuments:
    """Test documents with unusual but loadable variables."""

    def test_unknown_type_and_null_values(self):
        """Test other variable types render as info and null values as none."""
        store = SchemaStore()
        store.load_schema(
            {
                "variables": [
                    {"name": "Level", "values": [{"name": "Easy"}]},
                    {"name": "Note", "type": "text", "description": "hi"},
                    {"name": "Empty", "values": None},
                ]
            }
        )
        assert store.get_variable("Note").is_info is True
        assert store.visible_descriptions("Note") == ["hi"]
        assert store.visible_values("Empty") == []
        assert store.compute_relationships()["Empty"].incompatible == set()
