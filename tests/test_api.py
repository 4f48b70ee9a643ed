"""
Tests for the HTTP layer: requester resolution and outcome-to-status mapping.
"""
import pytest
from fastapi.testclient import TestClient

from database import get_db
from main import app


@pytest.fixture
def client(session_factory, people):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def ids(people):
    return {name: getattr(people, name).id for name in ("t1", "t2", "s1", "s2")}


def _create_class(client, teacher_id, name="Math 101"):
    response = client.post(
        "/api/classes", params={"requester_id": teacher_id}, json={"name": name, "description": "Algebra"}
    )
    assert response.status_code == 201
    return response.json()


class TestHealth:
    def test_root(self, client):
        assert client.get("/").json()["status"] == "online"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestRequester:
    def test_unknown_requester_is_401(self, client):
        assert client.get("/api/classes", params={"requester_id": 9999}).status_code == 401

    def test_missing_requester_is_422(self, client):
        assert client.get("/api/classes").status_code == 422


class TestClassEndpoints:
    def test_create_and_list(self, client, ids):
        created = _create_class(client, ids["t1"])
        assert created["teacher_name"] == "Teacher One"

        teacher_rows = client.get("/api/classes", params={"requester_id": ids["t1"]}).json()
        assert teacher_rows[0]["enrollment_count"] == 0
        assert "enrolled" not in teacher_rows[0]

        student_rows = client.get("/api/classes", params={"requester_id": ids["s1"]}).json()
        assert student_rows[0]["enrolled"] is False

    def test_student_create_is_403(self, client, ids):
        response = client.post("/api/classes", params={"requester_id": ids["s1"]}, json={"name": "X"})
        assert response.status_code == 403

    def test_blank_name_is_400(self, client, ids):
        response = client.post("/api/classes", params={"requester_id": ids["t1"]}, json={"name": "  "})
        assert response.status_code == 400

    def test_patch_by_non_owner_is_403(self, client, ids):
        created = _create_class(client, ids["t1"])
        response = client.patch(
            f"/api/classes/{created['id']}", params={"requester_id": ids["t2"]}, json={"name": "Mine"}
        )
        assert response.status_code == 403

    def test_patch_keeps_absent_fields(self, client, ids):
        created = _create_class(client, ids["t1"])
        response = client.patch(
            f"/api/classes/{created['id']}", params={"requester_id": ids["t1"]}, json={"name": "Math 102"}
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Math 102"
        assert response.json()["description"] == "Algebra"

    def test_patch_null_clears_description(self, client, ids):
        created = _create_class(client, ids["t1"])
        response = client.patch(
            f"/api/classes/{created['id']}", params={"requester_id": ids["t1"]}, json={"description": None}
        )
        assert response.status_code == 200
        assert "description" not in response.json()

    def test_get_missing_class_is_404(self, client, ids):
        assert client.get("/api/classes/9999", params={"requester_id": ids["s1"]}).status_code == 404

    def test_delete_class(self, client, ids):
        created = _create_class(client, ids["t1"])
        path = f"/api/classes/{created['id']}"

        assert client.delete(path, params={"requester_id": ids["t2"]}).status_code == 403
        assert client.delete(path, params={"requester_id": ids["t1"]}).status_code == 204
        assert client.get(path, params={"requester_id": ids["t1"]}).status_code == 404


class TestEnrollmentEndpoints:
    def test_enroll_unenroll_flow(self, client, ids):
        created = _create_class(client, ids["t1"])
        path = f"/api/classes/{created['id']}/enroll"
        student = {"requester_id": ids["s1"]}

        assert client.post(path, params=student).status_code == 200
        assert client.post(path, params=student).status_code == 200

        roster = client.get(f"/api/classes/{created['id']}/enrollments", params={"requester_id": ids["t1"]})
        assert [s["id"] for s in roster.json()] == [ids["s1"]]

        assert client.delete(path, params=student).status_code == 204
        assert client.delete(path, params=student).status_code == 404

    def test_teacher_enroll_is_403(self, client, ids):
        created = _create_class(client, ids["t1"])
        response = client.post(f"/api/classes/{created['id']}/enroll", params={"requester_id": ids["t1"]})
        assert response.status_code == 403

    def test_teacher_removes_student(self, client, ids):
        created = _create_class(client, ids["t1"])
        client.post(f"/api/classes/{created['id']}/enroll", params={"requester_id": ids["s2"]})
        path = f"/api/classes/{created['id']}/enrollments/{ids['s2']}"

        assert client.delete(path, params={"requester_id": ids["t2"]}).status_code == 403
        assert client.delete(path, params={"requester_id": ids["t1"]}).status_code == 204
        assert client.delete(path, params={"requester_id": ids["t1"]}).status_code == 404


class TestStudentEndpoints:
    def test_student_lists_only_self(self, client, ids):
        rows = client.get("/api/students", params={"requester_id": ids["s1"]}).json()
        assert [r["id"] for r in rows] == [ids["s1"]]

    def test_student_cannot_read_other_profile(self, client, ids):
        response = client.get(f"/api/students/{ids['s2']}", params={"requester_id": ids["s1"]})
        assert response.status_code == 403

    def test_me(self, client, ids):
        assert client.get("/api/students/me", params={"requester_id": ids["s2"]}).json()["id"] == ids["s2"]
        assert client.get("/api/students/me", params={"requester_id": ids["t1"]}).status_code == 404

    def test_create_update_delete_student(self, client, ids):
        teacher = {"requester_id": ids["t1"]}

        created = client.post("/api/students", params=teacher, json={"username": "sofia", "grade": "C"})
        assert created.status_code == 201
        student_id = created.json()["id"]

        duplicate = client.post("/api/students", params=teacher, json={"username": "sofia"})
        assert duplicate.status_code == 400

        updated = client.patch(f"/api/students/{student_id}", params=teacher, json={"email": "sofia@school.com"})
        assert updated.json()["email"] == "sofia@school.com"
        assert updated.json()["grade"] == "C"

        assert client.delete(f"/api/students/{student_id}", params=teacher).status_code == 204
        assert client.get(f"/api/students/{student_id}", params=teacher).status_code == 404

    def test_student_cannot_create_student(self, client, ids):
        response = client.post("/api/students", params={"requester_id": ids["s1"]}, json={"username": "x"})
        assert response.status_code == 403


class TestTeacherEndpoints:
    def test_teacher_with_classes_is_400_under_forbid(self, client, ids):
        _create_class(client, ids["t1"])
        response = client.delete(f"/api/teachers/{ids['t1']}", params={"requester_id": ids["t1"]})
        assert response.status_code == 400

    def test_teacher_deletes_self(self, client, ids):
        response = client.delete(f"/api/teachers/{ids['t2']}", params={"requester_id": ids["t2"]})
        assert response.status_code == 204


class TestPrincipalEndpoints:
    def test_teacher_registers_teacher_who_can_delete_self(self, client, ids):
        created = client.post(
            "/api/principals", params={"requester_id": ids["t1"]}, json={"username": "t3", "role": "teacher"}
        )
        assert created.status_code == 201
        assert created.json()["role"] == "teacher"

        new_id = created.json()["id"]
        _create_class(client, new_id, name="Chemistry")
        response = client.delete(f"/api/teachers/{new_id}", params={"requester_id": new_id})
        assert response.status_code == 400

    def test_student_cannot_register(self, client, ids):
        response = client.post(
            "/api/principals", params={"requester_id": ids["s1"]}, json={"username": "t9", "role": "teacher"}
        )
        assert response.status_code == 403

    def test_unknown_role_is_400(self, client, ids):
        response = client.post(
            "/api/principals", params={"requester_id": ids["t1"]}, json={"username": "zoe", "role": "admin"}
        )
        assert response.status_code == 400
