import re

from course_registration.infrastructure.models import UserORM


def signup_body(**overrides):
    body = {
        "firstName": "Alice",
        "lastName": "Liddell",
        "email": "alice@example.com",
        "phone": "403-555-0101",
        "birthday": "2001-05-04",
        "program": "Diploma",
        "username": "alice",
        "password": "wonderland",
        "role": "student",
    }
    body.update(overrides)
    return body


def signup(client, **overrides):
    return client.post("/api/signup", json=signup_body(**overrides))


def login(client, username="alice", password="wonderland"):
    return client.post("/api/login", json={"username": username, "password": password})


def test_signup_student(client, db_session):
    response = signup(client)
    assert response.status_code == 201
    user = response.json()["user"]
    assert user["username"] == "alice"
    assert user["role"] == "student"
    assert user["program"] == "Diploma"
    assert re.fullmatch(r"SD\d{1,4}", user["userID"])
    assert "password" not in user
    assert "passwordHash" not in user

    stored = db_session.query(UserORM).filter(UserORM.username == "alice").one()
    assert stored.password_hash != "wonderland"


def test_signup_admin_drops_program(client):
    response = signup(client, username="root", email="root@example.com", role="admin")
    assert response.status_code == 201
    user = response.json()["user"]
    assert re.fullmatch(r"AD\d{1,4}", user["userID"])
    assert user["program"] is None


def test_signup_two_students_get_distinct_ids(client):
    first = signup(client).json()["user"]
    second = signup(client, username="bob", email="bob@example.com").json()["user"]
    assert first["userID"] != second["userID"]


def test_signup_duplicate_username(client):
    assert signup(client).status_code == 201
    response = signup(client, email="other@example.com")
    assert response.status_code == 400
    assert response.json()["message"] == "Username already taken."


def test_signup_duplicate_email(client):
    assert signup(client).status_code == 201
    response = signup(client, username="alice2")
    assert response.status_code == 400
    assert response.json()["message"] == "Email already registered."


def test_signup_invalid_role(client):
    assert signup(client, role="teacher").status_code == 400


def test_signup_invalid_email(client):
    assert signup(client, email="not-an-email").status_code == 400


def test_signup_short_password(client):
    assert signup(client, password="123").status_code == 400


def test_login_success(client):
    signup(client)
    response = login(client)
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Login successful"
    assert data["tokenType"] == "bearer"
    assert data["accessToken"]
    assert data["user"]["username"] == "alice"
    assert "password" not in data["user"]


def test_login_wrong_password(client):
    signup(client)
    response = login(client, password="looking-glass")
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid username or password."


def test_login_unknown_user_looks_like_wrong_password(client):
    response = login(client, username="nobody")
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid username or password."


def test_token_from_login_opens_profile(client):
    signup(client)
    token = login(client).json()["accessToken"]
    response = client.get("/api/user/alice", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    profile = response.json()
    assert profile["email"] == "alice@example.com"
    assert "password" not in profile
    assert "passwordHash" not in profile


def test_me(client):
    signup(client)
    token = login(client).json()["accessToken"]
    response = client.get("/api/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["username"] == "alice"


def test_profile_of_other_student_is_forbidden(client, make_headers):
    signup(client)
    response = client.get("/api/user/alice", headers=make_headers(99, "mallory"))
    assert response.status_code == 403


def test_admin_reads_any_profile(client, admin_headers):
    signup(client)
    response = client.get("/api/user/alice", headers=admin_headers)
    assert response.status_code == 200


def test_profile_not_found(client, admin_headers):
    response = client.get("/api/user/ghost", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "User not found."


def test_profile_requires_token(client):
    assert client.get("/api/user/alice").status_code == 401


def test_invalid_token(client):
    response = client.get("/api/me", headers={"Authorization": "Bearer invalid_token"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token."


def test_students_lists_only_students(client, admin_headers):
    signup(client)
    signup(client, username="bob", email="bob@example.com")
    signup(client, username="root", email="root@example.com", role="admin")
    response = client.get("/api/students", headers=admin_headers)
    assert response.status_code == 200
    assert [s["username"] for s in response.json()] == ["alice", "bob"]


def test_students_is_admin_only(client, alice_headers):
    assert client.get("/api/students", headers=alice_headers).status_code == 403
