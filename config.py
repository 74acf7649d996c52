# config.py
import os
from dataclasses import dataclass

DEFAULT_HOST = "https://gitlab.example.com"
DEFAULT_TOKEN = "your_access_token_here"
ACTIVE_USERS_FILE = "active_users.csv"
INACTIVE_USERS_FILE = "inactive_users.csv"
API_PAGE_SIZE = 100
REQUEST_TIMEOUT = 30


def _int_from_env(environ, name: str, default: int) -> int:
    raw = (environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Config:
    host: str = DEFAULT_HOST
    token: str = DEFAULT_TOKEN
    active_users_file: str = ACTIVE_USERS_FILE
    inactive_users_file: str = INACTIVE_USERS_FILE
    page_size: int = API_PAGE_SIZE
    timeout: int = REQUEST_TIMEOUT
    bucket_name: str | None = None

    @property
    def api_base(self) -> str:
        return f"{self.host}/api/v4"

    @property
    def output_files(self) -> list[str]:
        return [self.active_users_file, self.inactive_users_file]

    @classmethod
    def from_env(cls, environ=None) -> "Config":
        """Læs HOST/TOKEN m.m. fra miljøet. Tomme værdier giver defaults."""
        env = os.environ if environ is None else environ
        return cls(
            host=(env.get("HOST") or DEFAULT_HOST).rstrip("/"),
            token=env.get("TOKEN") or DEFAULT_TOKEN,
            page_size=_int_from_env(env, "PAGE_SIZE", API_PAGE_SIZE),
            timeout=_int_from_env(env, "REQUEST_TIMEOUT", REQUEST_TIMEOUT),
            bucket_name=env.get("BUCKET_NAME") or None,
        )
