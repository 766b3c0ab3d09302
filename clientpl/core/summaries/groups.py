from __future__ import annotations

from typing import Iterable

from clientpl.core.summaries.models import Client, Group


def resolve_client_groups(client: Client, groups: Iterable[Group]) -> list[Group]:
    """Return the groups the client belongs to, in the order `groups` lists them."""
    if not client.group_ids:
        return []
    member_ids = set(client.group_ids)
    return [group for group in groups if group.group_id in member_ids]
