# find_users.py
import sys
from dataclasses import dataclass, field

import requests

from config import Config
from gitlab_api import get_json, extract_api_error_message

PAGE_DATA = "data"
PAGE_EMPTY = "empty"
PAGE_ERROR = "error"


@dataclass
class UsersPage:
    page: int
    users: list[dict] = field(default_factory=list)
    error: str | None = None

    @property
    def status(self) -> str:
        if self.error is not None:
            return PAGE_ERROR
        return PAGE_DATA if self.users else PAGE_EMPTY

    @property
    def user_count(self) -> int:
        return len(self.users)


def fetch_users_page(config: Config, page_number: int) -> UsersPage:
    """
    Hent én side fra /users.
    - JSON-array  -> data/empty
    - alt andet (fejl-objekt, ikke-JSON, netværksfejl) -> error med 0 brugere
    """
    params = {"per_page": config.page_size, "page": page_number}
    try:
        payload, raw = get_json(config, "users", params=params)
    except requests.RequestException as e:
        return UsersPage(page_number, error=str(e))

    if isinstance(payload, list):
        return UsersPage(page_number, users=payload)
    return UsersPage(page_number, error=extract_api_error_message(payload, raw))


class UserPaginator:
    """
    Itererer over alle brugere, side for side fra side 1.

    Stopper første gang en side giver 0 brugere. En API-fejl midt i kørslen
    stopper også (samme adfærd som før), men stopped_on_error bliver sat så
    kalderen kan advare om at resultatet måske er afkortet.
    """

    def __init__(self, config: Config):
        self.config = config
        self.pages_fetched = 0
        self.users_seen = 0
        self.stopped_on_error = False
        self.last_error: str | None = None

    def __iter__(self):
        page_number = 1
        while True:
            print(f"Fetching users page {page_number}...")
            page = fetch_users_page(self.config, page_number)
            self.pages_fetched += 1

            if page.status == PAGE_ERROR:
                print(f"API error on page {page_number}: {page.error}", file=sys.stderr)
                self.stopped_on_error = True
                self.last_error = page.error

            print(f"Found {page.user_count} users on page {page_number}")
            if page.user_count == 0:
                print("No more users to process.")
                return

            for user in page.users:
                self.users_seen += 1
                yield user

            page_number += 1
