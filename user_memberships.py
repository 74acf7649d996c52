# user_memberships.py
import sys
from dataclasses import dataclass

import requests

from config import Config
from gitlab_api import get_json

GROUP_SOURCE_TYPE = "Namespace"
PROJECT_SOURCE_TYPE = "Project"


@dataclass(frozen=True)
class MembershipSummary:
    group_count: int = 0
    project_count: int = 0
    fetch_failed: bool = False

    @property
    def is_active_member(self) -> bool:
        return has_any_membership(self.group_count, self.project_count)


def fetch_user_memberships(config: Config, user_id):
    """None betyder ugyldigt svar: tomt, 'null', ikke-JSON eller netværksfejl."""
    try:
        payload, raw = get_json(config, f"users/{user_id}/memberships")
    except requests.RequestException:
        return None
    if not raw.strip() or payload is None:
        return None
    return payload


def count_memberships_by_type(memberships, membership_type: str) -> int:
    # fejl-objekter o.l. tæller som 0
    if not isinstance(memberships, list):
        return 0
    return sum(
        1 for m in memberships
        if isinstance(m, dict) and m.get("source_type") == membership_type
    )


def has_any_membership(group_count: int, project_count: int) -> bool:
    return group_count > 0 or project_count > 0


def summarize_user_memberships(config: Config, user_id, username: str) -> MembershipSummary:
    memberships = fetch_user_memberships(config, user_id)
    if memberships is None:
        print(f"Failed to fetch memberships for user {username} (ID: {user_id})", file=sys.stderr)
        return MembershipSummary(fetch_failed=True)

    return MembershipSummary(
        group_count=count_memberships_by_type(memberships, GROUP_SOURCE_TYPE),
        project_count=count_memberships_by_type(memberships, PROJECT_SOURCE_TYPE),
    )
