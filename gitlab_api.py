# gitlab_api.py
import json

import certifi
import requests

from config import Config


def auth_headers(config: Config) -> dict[str, str]:
    return {"PRIVATE-TOKEN": config.token, "Accept": "application/json"}


def get_json(config: Config, path: str, params: dict | None = None):
    """
    GET {host}/api/v4/{path} og returnér (payload, rå tekst).

    - HTTP-fejlstatus kastes IKKE; GitLab svarer med et JSON-objekt
      ({"message": ...}) som kalderen selv skal tolke.
    - payload er None hvis body ikke er gyldig JSON (eller er 'null').
    - requests.RequestException ved netværksfejl bobler op til kalderen.
    """
    url = f"{config.api_base}/{path.lstrip('/')}"
    r = requests.get(
        url,
        headers=auth_headers(config),
        params=params,
        timeout=config.timeout,
        verify=certifi.where(),
    )
    raw = r.text or ""
    try:
        payload = r.json()
    except ValueError:
        payload = None
    return payload, raw


def extract_api_error_message(payload, raw: str = "") -> str:
    # .message // .error // .
    if isinstance(payload, dict):
        for key in ("message", "error"):
            value = payload.get(key)
            if value not in (None, False, ""):
                return value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)
        return json.dumps(payload, ensure_ascii=False)
    if payload is not None:
        return json.dumps(payload, ensure_ascii=False)
    return raw.strip() or "empty response"
