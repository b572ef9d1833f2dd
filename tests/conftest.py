"""
Pytest configuration file.

Required settings are provided through the environment before any
whisperbox module is imported. Each test gets its own SQLite database file,
and outgoing email is captured instead of sent.
"""
import os
import sqlite3

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RESEND_API_KEY", "re_test_key")
os.environ.setdefault("FROM_EMAIL", "noreply@example.com")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./whisperbox-test.db")
# Lowest bcrypt work factor keeps the suite fast
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from whisperbox.config import settings
from whisperbox.main import app
from whisperbox.services import accounts


class Mailbox:
    """Stands in for the email sender and records every code sent."""

    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, to_email, username, code):
        if self.fail:
            return False
        self.sent.append({"to": to_email, "username": username, "code": code})
        return True

    def last_code(self, to_email=None):
        for mail in reversed(self.sent):
            if to_email is None or mail["to"] == to_email:
                return mail["code"]
        raise AssertionError(f"no email sent to {to_email}")


class Store:
    """Read-only synchronous view of the test database."""

    def __init__(self, path):
        self.path = path

    def query(self, sql, params=()):
        with sqlite3.connect(self.path) as conn:
            conn.row_factory = sqlite3.Row
            return [dict(row) for row in conn.execute(sql, params).fetchall()]

    def account(self, email):
        rows = self.query("SELECT * FROM users WHERE email = ?", (email,))
        return rows[0] if rows else None

    def count(self, table):
        return self.query(f"SELECT COUNT(*) AS n FROM {table}")[0]["n"]


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    path = tmp_path / "whisperbox.db"
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{path}")
    return path


@pytest.fixture
def mailbox(monkeypatch):
    box = Mailbox()
    monkeypatch.setattr(accounts, "send_verification_email", box.send)
    return box


@pytest.fixture
def store(db_path):
    return Store(db_path)


@pytest.fixture
def client(db_path, mailbox):
    # Entering the context runs the lifespan: tables are created, and the
    # engine is disposed again on exit
    with TestClient(app) as test_client:
        yield test_client


def sign_up(client, username, email, password="secret1"):
    return client.post("/api/sign-up", json={"username": username, "email": email, "password": password})


def verify(client, username, code):
    return client.post("/api/verify-code", json={"username": username, "code": code})


def create_verified(client, mailbox, username, email, password="secret1"):
    assert sign_up(client, username, email, password).status_code == 201
    assert verify(client, username, mailbox.last_code(email)).status_code == 200


def sign_in(client, identifier, password="secret1"):
    """Sign in and return auth headers; the client's cookie jar is left empty."""
    response = client.post("/api/sign-in", json={"identifier": identifier, "password": password})
    assert response.status_code == 200, response.json()
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['accessToken']}"}
