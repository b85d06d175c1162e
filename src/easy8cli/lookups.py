"""Reference lists used to turn names into IDs.

Trackers, statuses and priorities come back in one response. Users and
projects are paginated: we ask for pages of 100 and advance by the limit the
server reports, stopping at ``total_count`` or when the reported limit is 0
(a server that never advances would otherwise loop forever). Nothing is
cached; every call re-fetches.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, Protocol, TypeVar

from .logging import get_logger
from .models import LookupItem, User

PAGE_SIZE = 100

T = TypeVar("T")


class _Getter(Protocol):
    def get(self, path: str, params: dict[str, str] | None = None) -> Any: ...


def _items(data: Any, key: str) -> list[dict[str, Any]]:
    if not isinstance(data, dict):
        return []
    return [entry for entry in data.get(key) or [] if isinstance(entry, dict)]


def _int_field(data: Any, key: str) -> int:
    if not isinstance(data, dict):
        return 0
    try:
        return int(data.get(key) or 0)
    except (TypeError, ValueError):
        return 0


def _simple(client: _Getter, path: str, key: str) -> list[LookupItem]:
    return [LookupItem.from_dict(e) for e in _items(client.get(path), key)]


def paginate(
    client: _Getter,
    path: str,
    key: str,
    convert: Callable[[dict[str, Any]], T],
    *,
    page_size: int = PAGE_SIZE,
) -> list[T]:
    """Fetch every page of ``path`` and return the items in request order.

    A failing page propagates its exception; pages already fetched are
    dropped.
    """
    offset = 0
    results: list[T] = []
    pages = 0
    with get_logger().timed_operation("paginate", path=path):
        while True:
            data = client.get(path, {"limit": str(page_size), "offset": str(offset)})
            pages += 1
            results.extend(convert(e) for e in _items(data, key))
            limit = _int_field(data, "limit")
            offset += limit
            if offset >= _int_field(data, "total_count") or limit == 0:
                break
    get_logger().debug(f"fetched {len(results)} {key} in {pages} page(s)", operation="paginate")
    return results


def list_trackers(client: _Getter) -> list[LookupItem]:
    return _simple(client, "/trackers.json", "trackers")


def list_issue_statuses(client: _Getter) -> list[LookupItem]:
    return _simple(client, "/issue_statuses.json", "issue_statuses")


def list_issue_priorities(client: _Getter) -> list[LookupItem]:
    return _simple(client, "/enumerations/issue_priorities.json", "issue_priorities")


def list_users(client: _Getter) -> list[User]:
    return paginate(client, "/users.json", "users", User.from_dict)


def list_projects(client: _Getter) -> list[LookupItem]:
    return paginate(client, "/projects.json", "projects", LookupItem.from_dict)


class LookupStore:
    """Lookup endpoints bound to one client."""

    def __init__(self, client: _Getter):
        self.client = client

    def trackers(self) -> list[LookupItem]:
        return list_trackers(self.client)

    def statuses(self) -> list[LookupItem]:
        return list_issue_statuses(self.client)

    def priorities(self) -> list[LookupItem]:
        return list_issue_priorities(self.client)

    def users(self) -> list[User]:
        return list_users(self.client)

    def projects(self) -> list[LookupItem]:
        return list_projects(self.client)

    def fetcher(self, kind: str) -> Callable[[], Sequence[LookupItem | User]]:
        fetchers: dict[str, Callable[[], Sequence[LookupItem | User]]] = {
            "trackers": self.trackers,
            "statuses": self.statuses,
            "priorities": self.priorities,
            "users": self.users,
            "projects": self.projects,
        }
        try:
            return fetchers[kind]
        except KeyError:
            raise ValueError(f"unknown lookup: {kind}") from None


LOOKUP_KINDS = ("trackers", "statuses", "priorities", "users", "projects")

__all__ = [
    "PAGE_SIZE",
    "LOOKUP_KINDS",
    "LookupStore",
    "paginate",
    "list_trackers",
    "list_issue_statuses",
    "list_issue_priorities",
    "list_users",
    "list_projects",
]
