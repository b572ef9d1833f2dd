from conftest import create_verified, sign_up


def test_sign_in_with_username_or_email(client, mailbox):
    create_verified(client, mailbox, "alice", "a@x.com")

    by_name = client.post("/api/sign-in", json={"identifier": "alice", "password": "secret1"})
    by_email = client.post("/api/sign-in", json={"identifier": "a@x.com", "password": "secret1"})

    assert by_name.status_code == 200
    assert by_email.status_code == 200
    body = by_name.json()
    assert body["user"]["username"] == "alice"
    assert body["user"]["isVerified"] is True
    assert "passwordHash" not in body["user"]
    assert "verifyCode" not in body["user"]
    assert client.cookies.get("access_token")


def test_sign_in_failures(client, mailbox):
    sign_up(client, "bob", "b@x.com")
    create_verified(client, mailbox, "alice", "a@x.com")

    unknown = client.post("/api/sign-in", json={"identifier": "ghost", "password": "secret1"})
    unverified = client.post("/api/sign-in", json={"identifier": "bob", "password": "secret1"})
    wrong = client.post("/api/sign-in", json={"identifier": "alice", "password": "wrong-one"})

    assert unknown.status_code == 401
    assert unknown.json()["message"] == "No user found with this email or username"
    assert unverified.status_code == 401
    assert unverified.json()["message"] == "Please verify your account before logging in"
    assert wrong.status_code == 401
    assert wrong.json()["message"] == "Incorrect password"


def test_session_cookie_authenticates(client, mailbox):
    create_verified(client, mailbox, "alice", "a@x.com")
    client.post("/api/sign-in", json={"identifier": "alice", "password": "secret1"})

    response = client.get("/api/me")

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "a@x.com"


def test_sign_out_clears_session(client, mailbox):
    create_verified(client, mailbox, "alice", "a@x.com")
    client.post("/api/sign-in", json={"identifier": "alice", "password": "secret1"})

    client.post("/api/sign-out")

    assert client.get("/api/me").status_code == 401


def test_signed_in_user_is_sent_to_dashboard(client, mailbox):
    create_verified(client, mailbox, "alice", "a@x.com")
    client.post("/api/sign-in", json={"identifier": "alice", "password": "secret1"})

    response = client.get("/sign-in", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/dashboard"


def test_protected_routes_need_a_session(client):
    for method, path in [
        ("get", "/api/me"),
        ("get", "/api/accept-messages"),
        ("get", "/api/get-messages"),
        ("delete", "/api/delete-message/1"),
    ]:
        response = getattr(client, method)(path)
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Not authenticated"}

    response = client.post("/api/accept-messages", json={"acceptMessages": False},
                           headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid or expired session"


def test_sign_in_email_domain_is_case_insensitive(client, mailbox):
    create_verified(client, mailbox, "alice", "a@x.com")

    response = client.post("/api/sign-in", json={"identifier": "a@X.COM", "password": "secret1"})

    assert response.status_code == 200
    assert response.json()["user"]["email"] == "a@x.com"
