"""Tests for student endpoints (F5)."""

import json

import pytest
from fastapi.testclient import TestClient

from coaching.core.roster import RosterStore
from coaching.core.storage import MemoryStore
from coaching.web.api import create_app


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Create test client with isolated state."""
    state_dir = tmp_path / "data" / "state"
    state_dir.mkdir(parents=True)
    (state_dir / "yks-students.json").write_text("[]", encoding="utf-8")

    monkeypatch.chdir(tmp_path)

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def _create(client, name):
    return client.post("/api/students", json={"name": name}).json()


class TestListStudents:
    """Tests for GET /api/students."""

    def test_list_students_empty(self, client):
        response = client.get("/api/students")
        assert response.status_code == 200
        data = response.json()
        assert data["students"] == []
        assert data["count"] == 0
        assert data["selected_id"] is None

    def test_list_students_after_create(self, client):
        _create(client, "Ayşe")
        _create(client, "Mehmet")

        data = client.get("/api/students").json()
        assert data["count"] == 2
        assert [s["name"] for s in data["students"]] == ["Ayşe", "Mehmet"]


class TestCreateStudent:
    """Tests for POST /api/students."""

    def test_create_selects(self, client):
        response = client.post("/api/students", json={"name": "Ayşe"})
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Ayşe"
        assert data["id"].startswith("student-")
        assert data["selected"] is True

    def test_create_empty_name(self, client):
        response = client.post("/api/students", json={"name": ""})
        assert response.status_code == 422

    def test_create_blank_name(self, client):
        response = client.post("/api/students", json={"name": "   "})
        assert response.status_code == 400

    def test_create_persists(self, client, tmp_path):
        _create(client, "Ayşe")
        stored = json.loads(
            (tmp_path / "data" / "state" / "yks-students.json").read_text(encoding="utf-8")
        )
        assert [s["name"] for s in stored] == ["Ayşe"]


class TestSelection:
    """Tests for the selection endpoints."""

    def test_no_selection(self, client):
        assert client.get("/api/students/selected").status_code == 404

    def test_select_and_get(self, client):
        ayse = _create(client, "Ayşe")
        _create(client, "Mehmet")

        response = client.put(f"/api/students/selected/{ayse['id']}")
        assert response.json()["selected_id"] == ayse["id"]
        assert client.get("/api/students/selected").json()["name"] == "Ayşe"

    def test_select_unknown(self, client):
        _create(client, "Ayşe")
        client.put("/api/students/selected/student-missing")
        assert client.get("/api/students/selected").status_code == 404


class TestGetStudent:
    """Tests for GET /api/students/{id}."""

    def test_get_student_exists(self, client):
        ayse = _create(client, "Ayşe")
        response = client.get(f"/api/students/{ayse['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Ayşe"

    def test_get_student_not_found(self, client):
        assert client.get("/api/students/student-missing").status_code == 404


class TestDeleteStudent:
    """Two-phase delete over HTTP."""

    def test_request_then_confirm(self, client):
        ayse = _create(client, "Ayşe")
        mehmet = _create(client, "Mehmet")
        client.put(f"/api/students/selected/{ayse['id']}")

        response = client.post(f"/api/students/{ayse['id']}/delete-request")
        assert response.status_code == 200
        assert response.json()["status"] == "pending"
        assert "Ayşe" in response.json()["message"]
        assert client.get(f"/api/students/{ayse['id']}").status_code == 200

        response = client.post("/api/students/delete/confirm")
        assert response.json()["deleted"] is True
        assert client.get(f"/api/students/{ayse['id']}").status_code == 404
        assert client.get("/api/students").json()["selected_id"] == mehmet["id"]

    def test_request_then_cancel(self, client):
        ayse = _create(client, "Ayşe")
        client.post(f"/api/students/{ayse['id']}/delete-request")

        assert client.post("/api/students/delete/cancel").json()["deleted"] is False
        assert client.post("/api/students/delete/confirm").json()["deleted"] is False
        assert client.get("/api/students").json()["count"] == 1

    def test_request_unknown(self, client):
        response = client.post("/api/students/student-missing/delete-request")
        assert response.status_code == 404


class TestLifespan:
    """The store is opened at startup and saved at shutdown."""

    def test_injected_store_saved_on_shutdown(self):
        kv = MemoryStore()
        store = RosterStore(kv)

        with TestClient(create_app(store=store)) as test_client:
            test_client.post("/api/students", json={"name": "Ayşe"})

        assert [s.name for s in RosterStore.open(kv).list_students()] == ["Ayşe"]

    def test_without_lifespan_opens_lazily(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        test_client = TestClient(create_app())

        response = test_client.post("/api/students", json={"name": "Ayşe"})
        assert response.status_code == 201
        assert (tmp_path / "data" / "state" / "yks-students.json").exists()
