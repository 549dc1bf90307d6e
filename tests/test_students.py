from academy.models.user import User

from conftest import PASSWORD


def login(client, email: str, password: str = PASSWORD) -> str:
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["access_token"]


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def acting_as(client, token: str, role: str) -> str:
    r = client.patch("/auth/session", headers=auth_header(token), json={"current_role": role})
    assert r.status_code == 200, r.text
    return r.json()["access_token"]


def test_listing_students_needs_teacher_persona(client):
    token = login(client, "multi@example.com")

    # teacher flag is set, but the session is acting as admin
    assert client.get("/students", headers=auth_header(token)).status_code == 403

    token = acting_as(client, token, "teacher")
    r = client.get("/students", headers=auth_header(token))
    assert r.status_code == 200
    emails = {s["email"] for s in r.json()}
    assert "student1@example.com" in emails
    assert "teacher1@example.com" not in emails


def test_flag_based_routes_ignore_persona(client, seed):
    token = acting_as(client, login(client, "multi@example.com"), "student")

    # /students/{id} is gated on the teacher flag
    r = client.get(f"/students/{seed['student1']}", headers=auth_header(token))
    assert r.status_code == 200
    assert r.json()["classes"][0]["id"] == seed["owned_class"]


def test_teacher_creates_student_with_generated_password(client, db):
    teacher = login(client, "teacher1@example.com")
    r = client.post(
        "/students",
        headers=auth_header(teacher),
        json={"email": "newstudent@example.com", "name": "New Student"},
    )
    assert r.status_code == 201, r.text
    body = r.json()
    generated = body["generated_password"]
    assert generated

    user = db.query(User).filter(User.email == "newstudent@example.com").one()
    assert (user.is_student, user.is_teacher, user.is_admin) == (True, False, False)

    r = client.post(
        "/auth/login", json={"email": "newstudent@example.com", "password": generated}
    )
    assert r.status_code == 200
    assert r.json()["current_role"] == "student"


def test_explicit_password_is_not_echoed(client):
    teacher = login(client, "teacher1@example.com")
    r = client.post(
        "/students",
        headers=auth_header(teacher),
        json={"email": "s3@example.com", "name": "S3", "password": "chosen-pass"},
    )
    assert r.status_code == 201
    assert r.json()["generated_password"] is None


def test_students_cannot_manage_students(client, seed):
    student = login(client, "student1@example.com")
    assert client.get("/students", headers=auth_header(student)).status_code == 403
    r = client.delete(f"/students/{seed['student2']}", headers=auth_header(student))
    assert r.status_code == 403


def test_teacher_cannot_delete_self(client, seed):
    token = login(client, "multi@example.com")
    r = client.delete(f"/students/{seed['multi']}", headers=auth_header(token))
    assert r.status_code == 400


def test_non_student_target_is_not_found(client, seed):
    teacher = login(client, "teacher1@example.com")
    r = client.get(f"/students/{seed['teacher2']}", headers=auth_header(teacher))
    assert r.status_code == 404
    assert r.json()["detail"] == "Student not found"


def test_update_and_delete_student(client, db, seed):
    teacher = login(client, "teacher1@example.com")

    r = client.put(
        f"/students/{seed['student2']}",
        headers=auth_header(teacher),
        json={"email": "student2@example.com", "name": "Renamed", "timezone": "Europe/Vienna"},
    )
    assert r.status_code == 200, r.text
    assert r.json()["timezone"] == "Europe/Vienna"

    r = client.delete(f"/students/{seed['student2']}", headers=auth_header(teacher))
    assert r.status_code == 200
    assert db.query(User).filter(User.id == seed["student2"]).first() is None


def test_student_dashboard_needs_student_persona(client, seed):
    student = login(client, "student1@example.com")
    r = client.get("/student/enrollments", headers=auth_header(student))
    assert r.status_code == 200
    assert [e["class_id"] for e in r.json()] == [seed["owned_class"]]

    multi = login(client, "multi@example.com")
    assert client.get("/student/enrollments", headers=auth_header(multi)).status_code == 403
    multi = acting_as(client, multi, "student")
    assert client.get("/student/enrollments", headers=auth_header(multi)).status_code == 200


def test_partial_update_with_password_reset(client, db, seed):
    teacher = login(client, "teacher1@example.com")
    r = client.put(
        f"/students/{seed['student2']}",
        headers=auth_header(teacher),
        json={"name": "Renamed Only", "password": "reset-pass-1"},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["name"] == "Renamed Only"
    assert body["email"] == "student2@example.com"
    assert "password" not in body

    r = client.post(
        "/auth/login", json={"email": "student2@example.com", "password": PASSWORD}
    )
    assert r.status_code == 401
    login(client, "student2@example.com", "reset-pass-1")


def test_student_passwords_over_72_bytes_are_rejected(client, db, seed):
    teacher = login(client, "teacher1@example.com")
    wide = "é" * 40

    r = client.post(
        "/students",
        headers=auth_header(teacher),
        json={"email": "wide@example.com", "name": "Wide", "password": wide},
    )
    assert r.status_code == 422
    assert db.query(User).filter(User.email == "wide@example.com").first() is None

    r = client.put(
        f"/students/{seed['student2']}",
        headers=auth_header(teacher),
        json={"password": wide},
    )
    assert r.status_code == 422
