"""Tests for RosterStore (F2)."""

import json

import pytest

from coaching.core import aggregator
from coaching.core.models import Student
from coaching.core.roster import RosterStore
from coaching.core.storage import STORAGE_KEY, MemoryStore, load_roster


@pytest.fixture
def kv():
    return MemoryStore()


@pytest.fixture
def store(kv):
    return RosterStore.open(kv)


def _stored_names(kv):
    return [s["name"] for s in json.loads(kv.items[STORAGE_KEY])]


class TestAddStudent:
    """Tests for add_student."""

    def test_add_to_empty_roster_selects(self, store):
        """Empty roster -> add "Ayşe" -> one student, selected."""
        student = store.add_student("Ayşe")

        assert len(store) == 1
        assert store.selected_id == student.id
        assert store.get_selected().name == "Ayşe"

    def test_add_selects_newest(self, store):
        store.add_student("Ayşe")
        second = store.add_student("Mehmet")
        assert store.selected_id == second.id

    def test_insertion_order(self, store):
        for name in ["Ayşe", "Mehmet", "Zeynep"]:
            store.add_student(name)
        assert [s.name for s in store.list_students()] == ["Ayşe", "Mehmet", "Zeynep"]

    def test_blank_name_is_noop(self, store, kv):
        assert store.add_student("   ") is None
        assert store.add_student("") is None
        assert len(store) == 0
        assert STORAGE_KEY not in kv.items

    def test_name_trimmed(self, store):
        assert store.add_student("  Ayşe  ").name == "Ayşe"

    def test_add_saves(self, store, kv):
        store.add_student("Ayşe")
        assert _stored_names(kv) == ["Ayşe"]


class TestRemoveStudent:
    """Tests for remove_student."""

    def test_remove_exactly_one_with_records(self, store, kv):
        ayse = store.add_student("Ayşe")
        mehmet = store.add_student("Mehmet")
        store.update_student(aggregator.add_exam(ayse, "D1", "2024-01-10", 80, 60))

        assert store.remove_student(ayse.id) is True
        assert len(store) == 1
        assert store.get_student(ayse.id) is None
        assert store.get_student(mehmet.id) is not None
        assert _stored_names(kv) == ["Mehmet"]

    def test_remove_selected_falls_to_first(self, store):
        a = store.add_student("A")
        b = store.add_student("B")
        c = store.add_student("C")
        store.select_student(b.id)

        store.remove_student(b.id)
        assert store.selected_id == a.id

        store.select_student(a.id)
        store.remove_student(a.id)
        assert store.selected_id == c.id

    def test_remove_unselected_keeps_selection(self, store):
        a = store.add_student("A")
        b = store.add_student("B")
        store.remove_student(a.id)
        assert store.selected_id == b.id

    def test_remove_last_clears_selection(self, store):
        a = store.add_student("A")
        store.remove_student(a.id)
        assert store.selected_id is None
        assert store.get_selected() is None

    def test_remove_unknown_is_noop(self, store):
        store.add_student("A")
        assert store.remove_student("student-missing") is False
        assert len(store) == 1


class TestUpdateStudent:
    """Tests for update_student."""

    def test_update_replaces_and_saves(self, store, kv):
        ayse = store.add_student("Ayşe")
        updated = aggregator.add_book(ayse, "Kitap", "Matematik")

        assert store.update_student(updated) is True
        assert len(store.get_student(ayse.id).books) == 1
        assert len(load_roster(kv)[0].books) == 1

    def test_update_unknown_is_noop(self, store, kv):
        store.add_student("Ayşe")
        before = kv.items[STORAGE_KEY]

        assert store.update_student(Student.create("Ghost")) is False
        assert len(store) == 1
        assert kv.items[STORAGE_KEY] == before


class TestSelection:
    """Tests for select_student / get_selected."""

    def test_select_unknown_id_yields_none(self, store):
        store.add_student("A")
        store.select_student("student-missing")
        assert store.selected_id == "student-missing"
        assert store.get_selected() is None

    def test_open_selects_first(self, kv):
        first = RosterStore.open(kv)
        a = first.add_student("A")
        first.add_student("B")

        reopened = RosterStore.open(kv)
        assert reopened.selected_id == a.id


class TestIsolation:
    """The store is only changed through its own API."""

    def test_returned_records_are_copies(self, store):
        ayse = store.add_student("Ayşe")
        ayse.name = "Changed"
        store.get_selected().books.append("junk")

        current = store.get_student(ayse.id)
        assert current.name == "Ayşe"
        assert current.books == []


class TestLifecycle:
    """Tests for open/close."""

    def test_open_loads_persisted(self, kv):
        RosterStore.open(kv).add_student("Ayşe")
        assert [s.name for s in RosterStore.open(kv).list_students()] == ["Ayşe"]

    def test_close_saves(self, kv):
        store = RosterStore(kv, students=[Student.create("Ayşe")])
        store.close()
        assert _stored_names(kv) == ["Ayşe"]

    def test_context_manager_closes(self, kv):
        with RosterStore(kv, students=[Student.create("Ayşe")]):
            pass
        assert _stored_names(kv) == ["Ayşe"]

    def test_write_failure_keeps_memory_state(self, tmp_path):
        from coaching.core.storage import JsonFileStore

        blocker = tmp_path / "blocked"
        blocker.write_text("x", encoding="utf-8")
        store = RosterStore.open(JsonFileStore(blocker / "state"))

        student = store.add_student("Ayşe")
        assert student is not None
        assert store.get_selected().name == "Ayşe"
