import pytest

from app.auth import safe_next, session_user
from app.config import config
from app.middleware import is_public_path, token_expired


@pytest.fixture
def with_auth(monkeypatch):
    monkeypatch.setattr(config, "WITH_AUTH", True)


def test_gate_is_off_by_default(client):
    sid = client.post("/sessions", json={"participants": [{"name": "A"}]}).json()["id"]
    assert client.get(f"/split/{sid}").status_code == 200


def test_anonymous_visitor_is_sent_to_login(client, with_auth):
    resp = client.get("/split/abc?x=1", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login?next=%2Fsplit%2Fabc%3Fx%3D1"


def test_public_paths_stay_open(client, with_auth):
    assert client.get("/", follow_redirects=False).status_code == 200
    resp = client.post("/sessions", json={"participants": [{"name": "A"}]})
    assert resp.status_code == 200
    assert client.get("/static/style.css").status_code == 200


def test_is_public_path():
    assert is_public_path("/")
    assert is_public_path("/sessions/abc")
    assert is_public_path("/logout")
    assert not is_public_path("/split/abc")
    assert not is_public_path("/sessionsx")


def test_token_expired():
    assert token_expired({"expires_at": 100}, now=100)
    assert not token_expired({"expires_at": 100}, now=99)
    assert not token_expired({}, now=10 ** 10)


def test_safe_next():
    assert safe_next("/split/abc") == "/split/abc"
    assert safe_next("https://evil.example/") == "/"
    assert safe_next("//evil.example") == "/"
    assert safe_next(None) == "/"


def test_session_user_from_token():
    user = session_user({"expires_at": 123}, {"sub": "g1", "email": "a@b.c"})
    assert user == {"id": "g1", "name": "a@b.c", "email": "a@b.c", "expires_at": 123}
