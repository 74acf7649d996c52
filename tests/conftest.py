# tests/conftest.py
import re
import pytest

from config import Config

HOST = "https://gitlab.test.local"
TOKEN = "glpat-test-token"
USERS_URL = f"{HOST}/api/v4/users"
MEMBERSHIPS_URL_RE = re.compile(re.escape(HOST) + r"/api/v4/users/(\d+)/memberships")


@pytest.fixture(autouse=True)
def gitlab_env(monkeypatch, tmp_path):
    monkeypatch.setenv("HOST", HOST)
    monkeypatch.setenv("TOKEN", TOKEN)
    monkeypatch.delenv("PAGE_SIZE", raising=False)
    monkeypatch.delenv("REQUEST_TIMEOUT", raising=False)
    monkeypatch.delenv("BUCKET_NAME", raising=False)
    # output-filerne skrives i cwd
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def config():
    return Config.from_env()


def gitlab_user(user_id: int, username: str | None = None, state: str = "active",
                name: str | None = None, email: str | None = None) -> dict:
    username = username or f"user{user_id}"
    return {
        "id": user_id,
        "username": username,
        "name": name if name is not None else username.title(),
        "email": email if email is not None else f"{username}@example.com",
        "state": state,
    }


def memberships(*source_types: str) -> list[dict]:
    return [
        {"source_id": i, "source_name": f"src{i}", "source_type": t, "access_level": 30}
        for i, t in enumerate(source_types, start=1)
    ]


def read_lines(path) -> list[str]:
    with open(path, encoding="utf-8") as f:
        return f.read().splitlines()
