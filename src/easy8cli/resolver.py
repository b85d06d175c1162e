"""Resolve human-readable names to the numeric IDs the API filters on.

Each filter dimension may be given as an ID, a name, or both. A name is
looked up in the matching reference list (exact match after trimming and
case-folding); zero matches, several matches, or a match that disagrees
with an explicitly supplied ID are errors.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from .errors import AmbiguousError, ConflictError, NotFoundError
from .filters import IssueFilter
from .logging import get_logger
from .lookups import LookupStore
from .models import LookupItem, User

T = TypeVar("T", LookupItem, User)

ASSIGNEE = "assignee"
STATUS = "status"
PRIORITY = "priority"
TASK_TYPE = "task-type"
PROJECT = "project"


@dataclass(frozen=True)
class Resolution:
    dimension: str
    id: int
    name: str | None = None


def normalize_name(value: str) -> str:
    return value.strip().casefold()


def plain_names(item: LookupItem) -> Iterable[str]:
    return (item.name,)


def user_names(user: User) -> Iterable[str]:
    """A user matches on login or on "firstname lastname"."""
    return (user.login, user.full_name)


def resolve_id(
    dimension: str,
    explicit_id: int | None,
    name: str | None,
    fetch: Callable[[], Sequence[T]],
    names_of: Callable[[T], Iterable[str]],
) -> Resolution:
    if not name or not name.strip():
        return Resolution(dimension, explicit_id or 0)

    needle = normalize_name(name)
    matches = [
        item for item in fetch() if any(normalize_name(n) == needle for n in names_of(item))
    ]
    if not matches:
        raise NotFoundError(dimension, name)
    if len(matches) > 1:
        raise AmbiguousError(dimension, name)
    match = matches[0]
    if explicit_id is not None and explicit_id != match.id:
        raise ConflictError(dimension, name)
    get_logger().debug(
        f"resolved {dimension} {name!r} to {match.id}", operation="resolve", dimension=dimension
    )
    return Resolution(dimension, match.id, name)


def resolve_assignee_id(store: LookupStore, explicit_id: int | None, name: str | None) -> int:
    return resolve_id(ASSIGNEE, explicit_id, name, store.users, user_names).id


def resolve_status_id(store: LookupStore, explicit_id: int | None, name: str | None) -> int:
    return resolve_id(STATUS, explicit_id, name, store.statuses, plain_names).id


def resolve_priority_id(store: LookupStore, explicit_id: int | None, name: str | None) -> int:
    return resolve_id(PRIORITY, explicit_id, name, store.priorities, plain_names).id


def resolve_task_type_id(store: LookupStore, explicit_id: int | None, name: str | None) -> int:
    return resolve_id(TASK_TYPE, explicit_id, name, store.trackers, plain_names).id


def resolve_project_id(store: LookupStore, explicit_id: int | None, name: str | None) -> int:
    return resolve_id(PROJECT, explicit_id, name, store.projects, plain_names).id


@dataclass(frozen=True)
class NamedFilters:
    """Name and/or ID per dimension as typed by the user.

    ``None`` IDs mean "not supplied", so an explicit 0 still takes part in
    the conflict check.
    """

    assignee: str = ""
    assignee_id: int | None = None
    status: str = ""
    status_id: int | None = None
    priority: str = ""
    priority_id: int | None = None
    task_type: str = ""
    task_type_id: int | None = None
    project: str = ""
    project_id: int | None = None


def resolve_filters(store: LookupStore, named: NamedFilters, base: IssueFilter) -> IssueFilter:
    """Resolve every dimension in order and merge the IDs into ``base``.

    Resolution is sequential; the first failure propagates and later
    dimensions are not looked up.
    """
    return base.with_ids(
        assignee_id=resolve_assignee_id(store, named.assignee_id, named.assignee),
        status_id=resolve_status_id(store, named.status_id, named.status),
        priority_id=resolve_priority_id(store, named.priority_id, named.priority),
        task_type_id=resolve_task_type_id(store, named.task_type_id, named.task_type),
        project_id=resolve_project_id(store, named.project_id, named.project),
    )


__all__ = [
    "Resolution",
    "NamedFilters",
    "normalize_name",
    "resolve_id",
    "resolve_assignee_id",
    "resolve_status_id",
    "resolve_priority_id",
    "resolve_task_type_id",
    "resolve_project_id",
    "resolve_filters",
]
