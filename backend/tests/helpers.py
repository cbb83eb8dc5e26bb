def register_user(client, payload):
    response = client.post("/api/auth/register", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def login_user(client, email, password, role=None):
    body = {"email": email, "password": password}
    if role is not None:
        body["role"] = role
    response = client.post("/api/auth/login", json=body)
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def admin_headers(client, email="admin@example.com"):
    payload = {"name": "Admin User", "email": email, "password": "password123", "role": "admin"}
    register_user(client, payload)
    return auth_headers(login_user(client, payload["email"], payload["password"], "admin"))


def seed_school(client, headers):
    """Create a grade with two streams, subjects, two teachers and three periods over HTTP."""

    def post(path, body):
        response = client.post(path, json=body, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()

    grade = post("/api/grades/", {"name": "Grade 8", "level": 8})
    east = post("/api/streams/", {"name": "East", "grade_id": grade["id"]})
    west = post("/api/streams/", {"name": "West", "grade_id": grade["id"]})
    maths = post("/api/subjects/", {"name": "Mathematics", "code": "mat"})
    english = post("/api/subjects/", {"name": "English", "code": "ENG"})
    kamau = post(
        "/api/teachers/",
        {"first_name": "Jane", "last_name": "Kamau", "email": "jane@example.com", "subject_ids": [maths["id"]]},
    )
    mwangi = post(
        "/api/teachers/",
        {"first_name": "Tom", "last_name": "Mwangi", "email": "tom@example.com", "subject_ids": [english["id"]]},
    )
    period_1 = post("/api/time-slots/", {"name": "Period 1", "start_time": "08:00", "end_time": "08:40"})
    period_2 = post("/api/time-slots/", {"name": "Period 2", "start_time": "08:40", "end_time": "09:20"})
    period_3 = post("/api/time-slots/", {"name": "Period 3", "start_time": "09:30", "end_time": "10:10"})
    return {
        "grade": grade,
        "east": east,
        "west": west,
        "maths": maths,
        "english": english,
        "kamau": kamau,
        "mwangi": mwangi,
        "period_1": period_1,
        "period_2": period_2,
        "period_3": period_3,
    }


def lesson_body(school, *, teacher="kamau", subject="maths", stream="east", slot="period_1", day="Monday", name="Lesson"):
    return {
        "name": name,
        "day": day,
        "teacher_id": school[teacher]["id"],
        "subject_id": school[subject]["id"],
        "stream_id": school[stream]["id"],
        "time_slot_id": school[slot]["id"],
    }
