from academy.models.audit_log import AuditLog

from conftest import PASSWORD

PROGRAM = {
    "title": "Certified Coach",
    "teacher_name": "Dr. Example",
    "start_date": "2026-09-01T00:00:00Z",
    "end_date": "2027-06-30T00:00:00Z",
    "price": 2400,
}


def login(client, email: str, password: str = PASSWORD) -> str:
    r = client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["access_token"]


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def class_payload(*teachers, **overrides) -> dict:
    payload = {
        "name": "Spring Cohort",
        "start_date": "2026-03-01T09:00:00Z",
        "end_date": "2026-06-01T09:00:00Z",
        "teachers": [{"id": t, "is_primary": i == 0} for i, t in enumerate(teachers)],
    }
    payload.update(overrides)
    return payload


def test_create_class_with_teachers(client, db, seed):
    admin = login(client, "admin@example.com")
    r = client.post(
        "/admin/classes",
        headers=auth_header(admin),
        json=class_payload(seed["teacher2"], seed["teacher1"]),
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert [t["id"] for t in body["teachers"]] == [seed["teacher2"], seed["teacher1"]]
    assert body["teachers"][0]["is_primary"] is True
    assert db.query(AuditLog).filter(AuditLog.action == "CREATE_CLASS").count() == 1

    # the new assignment grants ownership
    teacher = login(client, "teacher1@example.com")
    r = client.get(f"/classes/{body['id']}", headers=auth_header(teacher))
    assert r.status_code == 200


def test_create_class_rejects_non_teachers(client, seed):
    admin = login(client, "admin@example.com")
    r = client.post(
        "/admin/classes",
        headers=auth_header(admin),
        json=class_payload(seed["student1"]),
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "One or more selected teachers are invalid"


def test_create_class_rejects_two_primaries(client, seed):
    admin = login(client, "admin@example.com")
    payload = class_payload(seed["teacher1"], seed["teacher2"])
    payload["teachers"][1]["is_primary"] = True
    r = client.post("/admin/classes", headers=auth_header(admin), json=payload)
    assert r.status_code == 400


def test_update_class_replaces_teachers(client, seed):
    admin = login(client, "admin@example.com")
    r = client.put(
        f"/admin/classes/{seed['owned_class']}",
        headers=auth_header(admin),
        json=class_payload(seed["teacher2"], name="Coaching Foundations"),
    )
    assert r.status_code == 200, r.text
    assert [t["id"] for t in r.json()["teachers"]] == [seed["teacher2"]]

    # teacher1 lost ownership
    teacher = login(client, "teacher1@example.com")
    r = client.get(f"/classes/{seed['owned_class']}", headers=auth_header(teacher))
    assert r.status_code == 403


def test_class_status_toggle(client, db, seed):
    admin = login(client, "admin@example.com")
    r = client.put(
        f"/admin/classes/{seed['other_class']}/status",
        headers=auth_header(admin),
        json={"is_active": False},
    )
    assert r.status_code == 200
    assert r.json()["is_active"] is False
    assert db.query(AuditLog).filter(AuditLog.action == "DEACTIVATE_CLASS").count() == 1


def test_admin_delete_missing_class(client):
    admin = login(client, "admin@example.com")
    assert client.delete("/admin/classes/999999", headers=auth_header(admin)).status_code == 404


def test_admin_classes_forbidden_for_teachers(client):
    teacher = login(client, "teacher1@example.com")
    assert client.get("/admin/classes", headers=auth_header(teacher)).status_code == 403


def test_program_crud_and_public_listing(client, db):
    admin = login(client, "admin@example.com")

    r = client.post("/admin/programs", headers=auth_header(admin), json=PROGRAM)
    assert r.status_code == 201, r.text
    program_id = r.json()["id"]

    r = client.post(
        "/admin/programs",
        headers=auth_header(admin),
        json={**PROGRAM, "title": "Hidden", "is_active": False},
    )
    assert r.status_code == 201

    # public, no session needed
    client.cookies.clear()
    r = client.get("/programs")
    assert r.status_code == 200
    assert [p["title"] for p in r.json()] == ["Certified Coach"]

    r = client.put(
        f"/admin/programs/{program_id}",
        headers=auth_header(admin),
        json={**PROGRAM, "price": 2600},
    )
    assert r.status_code == 200
    assert r.json()["price"] == 2600

    r = client.delete(f"/admin/programs/{program_id}", headers=auth_header(admin))
    assert r.status_code == 200
    assert client.get(f"/admin/programs/{program_id}", headers=auth_header(admin)).status_code == 404

    actions = {a for (a,) in db.query(AuditLog.action)}
    assert {"CREATE_PROGRAM", "UPDATE_PROGRAM", "DELETE_PROGRAM"} <= actions


def test_program_date_range(client):
    admin = login(client, "admin@example.com")
    r = client.post(
        "/admin/programs",
        headers=auth_header(admin),
        json={**PROGRAM, "end_date": PROGRAM["start_date"]},
    )
    assert r.status_code == 400
