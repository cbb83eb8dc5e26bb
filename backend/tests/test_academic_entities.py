from helpers import admin_headers, auth_headers, lesson_body, login_user, register_user, seed_school


def test_reference_data_permissions(client):
    headers = admin_headers(client)
    register_user(
        client, {"name": "Office", "email": "office@example.com", "password": "password123", "role": "staff"}
    )
    staff_headers = auth_headers(login_user(client, "office@example.com", "password123", "staff"))

    denied = client.post("/api/subjects/", json={"name": "History", "code": "HIS"}, headers=staff_headers)
    assert denied.status_code == 403

    created = client.post("/api/subjects/", json={"name": "History", "code": " his "}, headers=headers)
    assert created.status_code == 201
    assert created.json()["code"] == "HIS"

    duplicate = client.post("/api/subjects/", json={"name": "Hist", "code": "HIS"}, headers=headers)
    assert duplicate.status_code == 409

    listing = client.get("/api/subjects/", headers=staff_headers)
    assert listing.status_code == 200
    assert [item["code"] for item in listing.json()] == ["HIS"]


def test_teacher_subjects_and_links(client):
    headers = admin_headers(client)
    school = seed_school(client, headers)

    assert [subject["code"] for subject in school["kamau"]["subjects"]] == ["MAT"]
    assert school["kamau"]["full_name"] == "Jane Kamau"

    updated = client.put(
        f"/api/teachers/{school['kamau']['id']}",
        json={"subject_ids": [school["english"]["id"], school["maths"]["id"]]},
        headers=headers,
    )
    assert updated.status_code == 200
    assert [subject["code"] for subject in updated.json()["subjects"]] == ["ENG", "MAT"]

    unknown_subject = client.post(
        "/api/teachers/",
        json={"first_name": "A", "last_name": "B", "email": "ab@example.com", "subject_ids": ["missing"]},
        headers=headers,
    )
    assert unknown_subject.status_code == 404

    staff = register_user(
        client, {"name": "Office", "email": "office@example.com", "password": "password123", "role": "staff"}
    )
    wrong_role = client.put(f"/api/teachers/{school['mwangi']['id']}", json={"user_id": staff["id"]}, headers=headers)
    assert wrong_role.status_code == 422


def test_referenced_records_cannot_be_deleted(client):
    headers = admin_headers(client)
    school = seed_school(client, headers)
    lesson = client.post("/api/lessons/", json=lesson_body(school), headers=headers).json()

    for path in (
        f"/api/subjects/{school['maths']['id']}",
        f"/api/streams/{school['east']['id']}",
        f"/api/teachers/{school['kamau']['id']}",
        f"/api/grades/{school['grade']['id']}",
    ):
        response = client.delete(path, headers=headers)
        assert response.status_code == 409, path
        assert response.json()["code"] == "has_dependents"

    assert client.delete(f"/api/lessons/{lesson['id']}", headers=headers).status_code == 200
    assert client.delete(f"/api/streams/{school['east']['id']}", headers=headers).status_code == 200
    assert client.delete(f"/api/subjects/{school['english']['id']}", headers=headers).status_code == 200

    still_used = client.delete(f"/api/grades/{school['grade']['id']}", headers=headers)
    assert still_used.status_code == 409
    assert still_used.json()["details"]["dependent_count"] == 1


def test_stream_read_is_scoped_for_students(client):
    headers = admin_headers(client)
    school = seed_school(client, headers)
    register_user(
        client,
        {
            "name": "Pupil",
            "email": "pupil@example.com",
            "password": "password123",
            "role": "student",
            "stream_id": school["west"]["id"],
        },
    )
    student_headers = auth_headers(login_user(client, "pupil@example.com", "password123", "student"))

    own = client.get(f"/api/streams/{school['west']['id']}", headers=student_headers)
    assert own.status_code == 200
    assert own.json()["grade"]["name"] == "Grade 8"
    assert client.get(f"/api/streams/{school['east']['id']}", headers=student_headers).status_code == 403
    assert client.get("/api/streams/", headers=student_headers).status_code == 403
