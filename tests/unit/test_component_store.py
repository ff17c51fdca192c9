"""
Tests for ComponentStore.

Tests CRUD, snapshot isolation, transactional update, queries, cloning and
the portable form.
"""
import json

import pytest

from diagramflow.features.components.domain import ComponentKind, process
from diagramflow.features.components.infrastructure.component_store import (
    ComponentFilter,
    ComponentStore,
    LoadReport,
)
from diagramflow.shared.domain.errors import (
    ComponentNotFoundError,
    DeserializationSkipped,
    DuplicateComponentError,
    InvalidEntityError,
    PortableFormatError,
    PostUpdateInvalidError,
)
from diagramflow.utils.settings import get_settings


@pytest.fixture
def store():
    return ComponentStore()


@pytest.fixture
def factory(store):
    return store.factory


# =============================================================================
# CRUD
# =============================================================================

class TestAdd:
    """Tests for add()/create_and_add()."""

    def test_add_and_get(self, store, factory):
        """Test an added component can be read back."""
        component = factory.create_process("Load")
        store.add(component)
        assert store.has(component.id)
        assert store.get(component.id) == component
        assert store.count() == 1

    def test_invalid_is_rejected(self, store, factory):
        """Test invalid components are not stored."""
        component = factory.create_process(process_name="")
        with pytest.raises(InvalidEntityError) as exc_info:
            store.add(component)
        assert exc_info.value.component_id == component.id
        assert any("process_name" in v for v in exc_info.value.violations)
        assert store.count() == 0

    def test_duplicate_is_rejected(self, store, factory):
        """Test adding the same id twice raises."""
        component = factory.create_process()
        store.add(component)
        with pytest.raises(DuplicateComponentError):
            store.add(component)

    def test_create_and_add(self, store):
        """Test creating and storing in one call."""
        component = store.create_and_add("decision", question="Ready?")
        assert store.require(component.id).payload.question == "Ready?"

    def test_store_keeps_its_own_copy(self, store, factory):
        """Test mutating the caller's instance after add() has no effect."""
        component = factory.create_process("Before")
        store.add(component)
        process.set_process_name(component, "After")
        assert store.get(component.id).payload.process_name == "Before"


class TestAccessors:
    """Tests for get/require/get_all snapshots."""

    def test_get_missing(self, store):
        """Test get() on an unknown id returns None."""
        assert store.get("nope") is None

    def test_require_missing(self, store):
        """Test require() raises ComponentNotFoundError."""
        with pytest.raises(ComponentNotFoundError):
            store.require("nope")

    def test_snapshots_do_not_leak(self, store):
        """Test mutating a returned component does not change the store."""
        component = store.create_and_add("process")
        snapshot = store.get(component.id)
        snapshot.update_position(x=999)
        for listed in store.get_all():
            listed.update_content(text="changed")
        stored = store.get(component.id)
        assert stored.position.x != 999
        assert stored.content.text == ""

    def test_get_all_keeps_insertion_order(self, store):
        """Test components are listed in insertion order."""
        ids = [store.create_and_add("process").id for _ in range(3)]
        assert [c.id for c in store.get_all()] == ids

    def test_remove_and_clear(self, store):
        """Test remove() reports whether something was removed."""
        first = store.create_and_add("process")
        store.create_and_add("process")
        assert store.remove(first.id) is True
        assert store.remove(first.id) is False
        store.clear()
        assert store.count() == 0


class TestRemoveCascade:
    """Tests for remove() with attached connectors."""

    def test_default_leaves_connectors(self, store):
        """Test connectors are kept (and reported dangling) by default."""
        a = store.create_and_add("process")
        b = store.create_and_add("process")
        edge = store.create_and_add("connector", from_id=a.id, to_id=b.id)
        store.remove(a.id)
        assert store.has(edge.id)
        assert [c.id for c in store.dangling_connectors()] == [edge.id]

    def test_cascade_removes_connectors(self, store):
        """Test cascade removes connectors touching the component only."""
        a = store.create_and_add("process")
        b = store.create_and_add("process")
        c = store.create_and_add("process")
        ab = store.create_and_add("connector", from_id=a.id, to_id=b.id)
        ca = store.create_and_add("connector", from_id=c.id, to_id=a.id)
        bc = store.create_and_add("connector", from_id=b.id, to_id=c.id)
        store.remove(a.id, cascade=True)
        assert not store.has(ab.id)
        assert not store.has(ca.id)
        assert store.has(bc.id)
        assert store.dangling_connectors() == []


# =============================================================================
# update()
# =============================================================================

class TestUpdate:
    """Tests for transactional update()."""

    def test_valid_update_commits(self, store):
        """Test a valid mutation is committed."""
        component = store.create_and_add("process")
        updated = store.update(component.id, lambda c: c.update_position(x=42))
        assert updated.position.x == 42
        assert store.get(component.id).position.x == 42
        assert updated.updated_at > component.updated_at

    def test_invalid_update_rolls_back(self, store):
        """Test an update leaving the entity invalid is never visible."""
        component = store.create_and_add("process")
        with pytest.raises(PostUpdateInvalidError) as exc_info:
            store.update(component.id, lambda c: c.update_position(width=-1))
        assert any("position.width" in v for v in exc_info.value.violations)
        assert store.get(component.id) == component
        assert all(c.validate() for c in store.get_all())

    @pytest.mark.parametrize("patch", [{"width": float("nan")}, {"height": float("nan")}, {"width": "10"}])
    def test_nan_or_text_size_rolls_back(self, store, patch):
        """Test sizes that are not finite numbers are never committed."""
        component = store.create_and_add("process")
        with pytest.raises(PostUpdateInvalidError):
            store.update(component.id, lambda c: c.update_position(patch))
        assert store.get(component.id).position == component.position

    def test_id_change_is_rejected(self, store):
        """Test the mutator cannot re-key the entity."""
        component = store.create_and_add("process")

        def rename(c):
            c.id = "other"

        with pytest.raises(PostUpdateInvalidError):
            store.update(component.id, rename)
        assert store.has(component.id)
        assert not store.has("other")

    def test_mutator_exception_propagates(self, store):
        """Test errors raised by the mutator leave the original in place."""
        component = store.create_and_add("process")

        def fail(c):
            c.update_position(x=1)
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            store.update(component.id, fail)
        assert store.get(component.id) == component

    def test_update_missing(self, store):
        """Test updating an unknown id raises."""
        with pytest.raises(ComponentNotFoundError):
            store.update("nope", lambda c: None)


# =============================================================================
# Queries
# =============================================================================

class TestFilter:
    """Tests for filter() and helpers."""

    @pytest.fixture
    def populated(self, store):
        store.create_and_add("process", contexts=["s1"], content={"text": "Load Data"})
        store.create_and_add("process", contexts=["s2"], content={"text": "Save"})
        store.create_and_add("decision", contexts=["s1"], content={"text": "ok?", "equation": "x > DATA"})
        store.create_and_add("data", contexts=["s1", "s2"])
        return store

    def test_by_kind(self, populated):
        """Test filtering by kind tag."""
        assert len(populated.filter(kind="process")) == 2
        assert len(populated.get_by_kind(ComponentKind.DATA)) == 1

    def test_by_context(self, populated):
        """Test filtering by context membership."""
        assert len(populated.get_by_context("s1")) == 3

    def test_search_text_and_equation(self, populated):
        """Test search is case-insensitive over text and equation."""
        results = populated.filter(search="data")
        assert {c.kind for c in results} == {ComponentKind.PROCESS, ComponentKind.DECISION}

    def test_criteria_compose(self, populated):
        """Test criteria combine with AND."""
        criteria = ComponentFilter(kind="process") & ComponentFilter(context_id="s1")
        assert [c.content.text for c in populated.filter(criteria)] == ["Load Data"]
        assert populated.filter(criteria, search="save") == []

    def test_no_criteria_returns_all(self, populated):
        """Test filter() without criteria lists everything."""
        assert len(populated.filter()) == 4

    def test_connectors_in_context(self, store):
        """Test connector listing per context."""
        a = store.create_and_add("process")
        b = store.create_and_add("process")
        store.create_and_add("connector", from_id=a.id, to_id=b.id, contexts=["s1"])
        store.create_and_add("connector", from_id=b.id, to_id=a.id)
        assert len(store.connectors_in_context("s1")) == 1
        assert len(store.connectors_in_context(None)) == 2


class TestStats:
    """Tests for get_stats()."""

    def test_counts_per_kind(self, store):
        """Test stats are computed from current contents."""
        store.create_and_add("process")
        store.create_and_add("process")
        start = store.create_and_add("start-end")
        stats = store.get_stats()
        assert stats["process"] == 2
        assert stats["start-end"] == 1
        assert stats["connector"] == 0
        assert stats["total"] == 3

        store.remove(start.id)
        assert store.get_stats()["total"] == 2


# =============================================================================
# Cloning
# =============================================================================

class TestClone:
    """Tests for clone()."""

    def test_clone_is_stored_with_new_id(self, store):
        """Test the clone is committed under a new id."""
        original = store.create_and_add("decision", question="Ready?")
        clone = store.clone(original.id)
        assert clone.id != original.id
        assert store.require(clone.id).payload == original.payload
        assert store.count() == 2

    def test_clone_missing(self, store):
        """Test cloning an unknown id raises."""
        with pytest.raises(ComponentNotFoundError):
            store.clone("nope")


# =============================================================================
# Portable form
# =============================================================================

class TestPortable:
    """Tests for to_portable/from_portable and text import/export."""

    def test_round_trip(self, store):
        """Test a store survives export and import."""
        a = store.create_and_add("start-end", contexts=["s1"])
        b = store.create_and_add("process", contexts=["s1"])
        store.create_and_add("connector", from_id=a.id, to_id=b.id, contexts=["s1"])
        records = store.to_portable()

        other = ComponentStore()
        report = other.from_portable(records)
        assert report.loaded == 3
        assert report.ok
        assert other.get_all() == store.get_all()

    def test_malformed_record_is_skipped(self, store, factory):
        """Test one malformed record among three is skipped, not fatal."""
        good_a = factory.create_process().to_dict()
        good_b = factory.create_end().to_dict()
        broken = {"kind": "process", "id": "broken", "position": "not a mapping"}

        report = store.from_portable([good_a, broken, good_b])
        assert isinstance(report, LoadReport)
        assert report.loaded == 2
        assert store.count() == 2
        assert len(report.skipped) == 1
        skipped = report.skipped[0]
        assert isinstance(skipped, DeserializationSkipped)
        assert (skipped.index, skipped.component_id) == (1, "broken")

    def test_unknown_kind_and_invalid_records_are_skipped(self, store, factory):
        """Test unknown kinds, invalid entities and duplicates are all reported."""
        good = factory.create_process().to_dict()
        unknown = dict(good, id="x", kind="hexagon")
        invalid = factory.create_connector("a", "a").to_dict()
        not_a_record = 42

        report = store.from_portable([good, unknown, invalid, good, not_a_record])
        assert report.loaded == 1
        assert [s.index for s in report.skipped] == [1, 2, 3, 4]
        assert "duplicate" in report.skipped[2].reason

    def test_import_text_skips_nan_geometry(self, store, factory):
        """Test NaN read from JSON text is rejected per record."""
        good = factory.create_process().to_dict()
        bad = factory.create_process().to_dict()
        bad["position"]["width"] = float("nan")
        bad_label = factory.create_connector("a", "b", label_position=float("nan")).to_dict()

        report = store.import_text(json.dumps([good, bad, bad_label]))
        assert report.loaded == 1
        assert [s.index for s in report.skipped] == [1, 2]
        assert store.get(good["id"]) is not None

    def test_mistyped_records_are_skipped(self, store, factory):
        """Test records that would break search or export are skipped at load."""
        good = factory.create_process(contexts=["s1"], content={"text": "xyz"}).to_dict()
        text_not_str = dict(factory.create_process().to_dict(), content={"text": 5})
        bad_contexts = dict(factory.create_process().to_dict(), contexts=[1, "a"])
        string_flag = dict(factory.create_start().to_dict(), is_start="false")

        report = store.from_portable([good, text_not_str, bad_contexts, string_flag])
        assert report.loaded == 1
        assert [s.index for s in report.skipped] == [1, 2, 3]
        assert [c.id for c in store.filter(search="x")] == [good["id"]]
        assert len(json.loads(store.export_text())) == 1

    def test_load_replaces_contents(self, store, factory):
        """Test from_portable replaces rather than merges."""
        store.create_and_add("process")
        store.from_portable([factory.create_data().to_dict()])
        assert [c.kind for c in store.get_all()] == [ComponentKind.DATA]

    def test_from_portable_requires_list(self, store):
        """Test a non-list payload is a format error."""
        with pytest.raises(PortableFormatError):
            store.from_portable({"kind": "process"})

    def test_export_import_text(self, store):
        """Test JSON text round trip."""
        store.create_and_add("decision", conditions=["A", "B"])
        text = store.export_text()
        other = ComponentStore()
        report = other.import_text(text)
        assert report.loaded == 1
        assert other.get_all() == store.get_all()

    def test_export_indent_from_settings(self, store):
        """Test the default indent comes from settings."""
        store.create_and_add("process")
        get_settings().set("export_indent", None)
        assert "\n" not in store.export_text()
        assert "\n" in store.export_text(indent=2)

    def test_export_is_json_list(self, store):
        """Test exported text parses as a list of records."""
        store.create_and_add("process")
        assert isinstance(json.loads(store.export_text()), list)

    @pytest.mark.parametrize("text", ["{not json", '{"kind": "process"}', ""])
    def test_import_bad_text(self, store, text):
        """Test unparseable or non-list text raises PortableFormatError."""
        with pytest.raises(PortableFormatError):
            store.import_text(text)
