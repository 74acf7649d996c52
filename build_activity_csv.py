# build_activity_csv.py
import sys
from dataclasses import dataclass

from config import Config
from find_users import UserPaginator
from user_memberships import summarize_user_memberships

CSV_HEADER = "id,username,name,email"
ACTIVE_STATE = "active"


def _field(user_json: dict, key: str) -> str:
    value = user_json.get(key)
    return "" if value is None else str(value)


@dataclass(frozen=True)
class UserRecord:
    id: str
    username: str
    name: str
    email: str
    state: str

    @classmethod
    def from_json(cls, user_json: dict) -> "UserRecord":
        return cls(
            id=_field(user_json, "id"),
            username=_field(user_json, "username"),
            name=_field(user_json, "name"),
            email=_field(user_json, "email"),
            state=_field(user_json, "state"),
        )


@dataclass
class RunSummary:
    pages_fetched: int = 0
    processed: int = 0
    active: int = 0
    inactive: int = 0
    skipped: int = 0
    membership_failures: int = 0
    stopped_on_error: bool = False


def is_user_active(state: str) -> bool:
    return state == ACTIVE_STATE


def initialize_csv_files(config: Config) -> None:
    # trunkér begge filer - hver kørsel starter forfra
    for path in config.output_files:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(CSV_HEADER + "\n")


def format_csv_line(user: UserRecord) -> str:
    name = user.name.replace('"', '""')
    return f'{user.id},{user.username},"{name}",{user.email}'


def append_csv_line(path: str, csv_line: str) -> None:
    with open(path, "a", encoding="utf-8", newline="") as f:
        f.write(csv_line + "\n")


def process_user(config: Config, user_json: dict, summary: RunSummary) -> str | None:
    """
    Klassificér én bruger og skriv præcis én linje i active- ELLER inactive-filen.
    Returnerer den fil der blev skrevet til, eller None hvis brugeren blev sprunget over.
    """
    user = UserRecord.from_json(user_json)

    if not is_user_active(user.state):
        print(f"Skipping blocked or non-active user {user.username}")
        summary.skipped += 1
        return None

    memberships = summarize_user_memberships(config, user.id, user.username)
    if memberships.fetch_failed:
        summary.membership_failures += 1

    print(
        f"User {user.username} (ID: {user.id}): "
        f"Groups={memberships.group_count}, Projects={memberships.project_count}"
    )

    if memberships.is_active_member:
        target = config.active_users_file
        summary.active += 1
    else:
        target = config.inactive_users_file
        summary.inactive += 1

    append_csv_line(target, format_csv_line(user))
    summary.processed += 1
    return target


def process_all_users(config: Config) -> RunSummary:
    summary = RunSummary()
    paginator = UserPaginator(config)
    for user_json in paginator:
        if not isinstance(user_json, dict):
            print(f"Skipping malformed user entry: {user_json!r}", file=sys.stderr)
            summary.skipped += 1
            continue
        process_user(config, user_json, summary)

    summary.pages_fetched = paginator.pages_fetched
    summary.stopped_on_error = paginator.stopped_on_error
    return summary
