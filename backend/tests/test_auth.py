from helpers import auth_headers, login_user, register_user


def test_register_login_me(client):
    register_payload = {
        "name": "Admin User",
        "email": "Admin@Example.com",
        "password": "password123",
        "role": "admin",
    }

    data = register_user(client, register_payload)
    assert data["email"] == "admin@example.com"
    assert data["role"] == "admin"
    assert data["stream_id"] is None

    login_response = client.post(
        "/api/auth/login",
        json={"email": "admin@example.com", "password": "password123", "role": "admin"},
    )
    assert login_response.status_code == 200
    login_data = login_response.json()
    assert "access_token" in login_data
    assert login_data["token_type"] == "bearer"
    assert login_data["user"]["email"] == "admin@example.com"

    me_response = client.get("/api/auth/me", headers=auth_headers(login_data["access_token"]))
    assert me_response.status_code == 200
    assert me_response.json()["email"] == "admin@example.com"


def test_duplicate_registration_is_rejected(client):
    payload = {"name": "Staff", "email": "staff@example.com", "password": "password123", "role": "staff"}
    register_user(client, payload)
    duplicate = client.post("/api/auth/register", json=payload)
    assert duplicate.status_code == 409


def test_student_registration_requires_stream(client):
    response = client.post(
        "/api/auth/register",
        json={"name": "Student", "email": "student@example.com", "password": "password123", "role": "student"},
    )
    assert response.status_code == 422

    unknown = client.post(
        "/api/auth/register",
        json={
            "name": "Student",
            "email": "student@example.com",
            "password": "password123",
            "role": "student",
            "stream_id": "missing-stream",
        },
    )
    assert unknown.status_code == 404


def test_login_failures(client):
    register_user(
        client, {"name": "Teacher", "email": "teacher@example.com", "password": "password123", "role": "teacher"}
    )

    wrong_password = client.post("/api/auth/login", json={"email": "teacher@example.com", "password": "wrongpass1"})
    assert wrong_password.status_code == 401

    wrong_role = client.post(
        "/api/auth/login", json={"email": "teacher@example.com", "password": "password123", "role": "admin"}
    )
    assert wrong_role.status_code == 403

    token = login_user(client, "teacher@example.com", "password123", "teacher")
    assert client.get("/api/auth/me", headers=auth_headers(token)).status_code == 200


def test_protected_routes_require_valid_token(client):
    missing = client.get("/api/lessons/")
    assert missing.status_code in {401, 403}

    invalid = client.get("/api/lessons/", headers=auth_headers("not-a-token"))
    assert invalid.status_code == 401
