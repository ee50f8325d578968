from models import db
from models.user import User


LOGIN = "/api/authentication/login"


def _login(client, email="alice@example.com", password="Secret#123"):
    return client.post(LOGIN, json={"email": email, "password": password})


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


def test_login_success(client, make_user):
    user = make_user()
    resp = _login(client)

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["user_id"] == user.id
    assert body["email"] == "alice@example.com"
    assert body["name"] == "Alice"
    assert body["token"]


def test_login_wrong_password(client, make_user):
    make_user()
    resp = _login(client, password="wrong")

    assert resp.status_code == 403
    assert resp.get_json()["error"] == "INVALID_CREDENTIALS_ERROR"


def test_login_unknown_email_matches_wrong_password_response(client, make_user):
    make_user()
    unknown = _login(client, email="ghost@example.com")
    wrong = _login(client, password="wrong")

    assert unknown.status_code == wrong.status_code
    assert unknown.get_json() == wrong.get_json()


def test_login_requires_fields(client):
    resp = client.post(LOGIN, json={"email": "alice@example.com"})
    assert resp.status_code == 400
    assert resp.get_json()["fields"] == ["password"]


def test_login_locks_after_repeated_failures(client, make_user):
    make_user()
    for _ in range(6):
        assert _login(client, password="wrong").status_code == 403

    resp = _login(client)
    body = resp.get_json()
    assert resp.status_code == 403
    assert body["error"] == "LOCKED_OUT_ERROR"
    assert body["message"] == "Too many failed login attempts, wait 10 seconds before trying again"
    assert 1 <= body["retry_after_seconds"] <= 10


def test_logout_revokes_token(client, auth_headers):
    assert client.post("/api/authentication/logout", headers=auth_headers).status_code == 200
    assert client.get("/api/users", headers=auth_headers).status_code == 401


def test_users_require_token(client):
    resp = client.get("/api/users")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "UNAUTHORIZED_ERROR"

    resp = client.get("/api/users", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_list_users_with_query(client, auth_headers, make_user):
    for name in ["Erin", "Bob", "Dave", "Alice"]:
        make_user(name=name, email=f"{name.lower()}@example.com")

    resp = client.get(
        "/api/users?page_number=2&page_size=2&sort=name:asc",
        headers=auth_headers,
    )

    assert resp.status_code == 200
    body = resp.get_json()
    # Admin, Alice | Bob, Dave | Erin
    assert [u["name"] for u in body["users"]] == ["Bob", "Dave"]
    assert body["count"] == 5
    assert body["total_pages"] == 3
    assert body["has_previous_page"] is True
    assert body["has_next_page"] is True


def test_list_users_ignores_bad_paging_values(client, auth_headers):
    resp = client.get("/api/users?page_number=abc&page_size=-3", headers=auth_headers)
    body = resp.get_json()
    assert resp.status_code == 200
    assert body["page_number"] is None
    assert body["page_size"] is None
    assert body["count"] == 1


def test_user_crud(client, auth_headers):
    resp = client.post("/api/users", headers=auth_headers, json={
        "name": "Zed", "email": "zed@example.com", "password": "Pw#1", "password_confirm": "Pw#1",
    })
    assert resp.status_code == 200
    assert resp.get_json() == {"name": "Zed", "email": "zed@example.com"}

    user_id = User.query.filter_by(email="zed@example.com").one().id

    resp = client.get(f"/api/users/{user_id}", headers=auth_headers)
    assert resp.get_json() == {"id": user_id, "name": "Zed", "email": "zed@example.com"}

    resp = client.put(f"/api/users/{user_id}", headers=auth_headers, json={"name": "Zee", "email": "zee@example.com"})
    assert resp.status_code == 200
    assert resp.get_json() == {"id": user_id}

    resp = client.delete(f"/api/users/{user_id}", headers=auth_headers)
    assert resp.status_code == 200

    resp = client.get(f"/api/users/{user_id}", headers=auth_headers)
    assert resp.status_code == 422
    assert resp.get_json()["message"] == "Unknown user"


def test_create_user_errors(client, auth_headers):
    resp = client.post("/api/users", headers=auth_headers, json={
        "name": "Zed", "email": "zed@example.com", "password": "Pw#1", "password_confirm": "Pw#2",
    })
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "INVALID_PASSWORD_ERROR"

    resp = client.post("/api/users", headers=auth_headers, json={
        "name": "Dup", "email": "admin@example.com", "password": "Pw#1", "password_confirm": "Pw#1",
    })
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "EMAIL_ALREADY_TAKEN_ERROR"

    resp = client.post("/api/users", headers=auth_headers, json={
        "name": "Zed", "email": "not-an-email", "password": "Pw#1", "password_confirm": "Pw#1",
    })
    assert resp.status_code == 400


def test_change_password_flow(client, make_user):
    user = make_user()
    headers = {"Authorization": f"Bearer {_login(client).get_json()['token']}"}
    url = f"/api/users/{user.id}/change-password"

    resp = client.patch(url, headers=headers, json={
        "password_old": "wrong", "password_new": "Fresh#456", "password_confirm": "Fresh#456",
    })
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "INVALID_CREDENTIALS_ERROR"

    resp = client.patch(url, headers=headers, json={
        "password_old": "Secret#123", "password_new": "Fresh#456", "password_confirm": "Fresh#456",
    })
    assert resp.status_code == 200

    # existing tokens are revoked once the password changes
    assert client.get("/api/users", headers=headers).status_code == 401
    assert _login(client, password="Secret#123").status_code == 403
    assert _login(client, password="Fresh#456").status_code == 200


def test_successful_login_clears_failures(client, make_user):
    user = make_user()
    for _ in range(3):
        _login(client, password="wrong")
    assert _login(client).status_code == 200

    db.session.expire_all()
    assert db.session.get(User, user.id).attempt == 0


def test_long_passwords_are_rejected_as_validation_errors(client, auth_headers, make_user):
    long_password = "p" * 80
    resp = client.post("/api/users", headers=auth_headers, json={
        "name": "Zed", "email": "zed@example.com", "password": long_password, "password_confirm": long_password,
    })
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "VALIDATION_ERROR"

    user = make_user()
    resp = client.patch(f"/api/users/{user.id}/change-password", headers=auth_headers, json={
        "password_old": "Secret#123", "password_new": long_password, "password_confirm": long_password,
    })
    assert resp.status_code == 400

    # an over-long login attempt is an ordinary failure, not a crash
    assert _login(client, password=long_password).status_code == 403
