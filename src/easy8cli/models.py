from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any


class _Unset:
    """Marker for a field the caller never assigned."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def _int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class LookupItem:
    """An (id, name) pair from a reference list."""

    id: int
    name: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> LookupItem:
        return cls(id=_int(raw.get("id")), name=_str(raw.get("name")))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True)
class User:
    id: int
    login: str = ""
    firstname: str = ""
    lastname: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}".strip()

    @property
    def name(self) -> str:
        return self.full_name or self.login

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> User:
        return cls(
            id=_int(raw.get("id")),
            login=_str(raw.get("login")),
            firstname=_str(raw.get("firstname")),
            lastname=_str(raw.get("lastname")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "login": self.login,
            "firstname": self.firstname,
            "lastname": self.lastname,
        }


NamedRef = LookupItem


def _ref(raw: Any) -> NamedRef | None:
    if isinstance(raw, dict):
        return NamedRef.from_dict(raw)
    return None


@dataclass
class Issue:
    id: int
    subject: str = ""
    description: str = ""
    done_ratio: int = 0
    start_date: str = ""
    due_date: str = ""
    updated_on: str = ""
    created_on: str = ""
    project: NamedRef | None = None
    tracker: NamedRef | None = None
    status: NamedRef | None = None
    priority: NamedRef | None = None
    author: NamedRef | None = None
    assigned_to: NamedRef | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Issue:
        return cls(
            id=_int(raw.get("id")),
            subject=_str(raw.get("subject")),
            description=_str(raw.get("description")),
            done_ratio=_int(raw.get("done_ratio")),
            start_date=_str(raw.get("start_date")),
            due_date=_str(raw.get("due_date")),
            updated_on=_str(raw.get("updated_on")),
            created_on=_str(raw.get("created_on")),
            project=_ref(raw.get("project")),
            tracker=_ref(raw.get("tracker")),
            status=_ref(raw.get("status")),
            priority=_ref(raw.get("priority")),
            author=_ref(raw.get("author")),
            assigned_to=_ref(raw.get("assigned_to")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "subject": self.subject}
        for name in ("description", "done_ratio", "start_date", "due_date", "updated_on", "created_on"):
            value = getattr(self, name)
            if value:
                out[name] = value
        for name in ("project", "tracker", "status", "priority", "author", "assigned_to"):
            ref = getattr(self, name)
            if ref is not None:
                out[name] = ref.to_dict()
        return out


@dataclass
class IssueInput:
    """Sparse issue payload for create/update.

    Fields left at ``UNSET`` are omitted from the request body entirely so
    the server keeps its current value. ``None`` or ``""`` assigned
    explicitly are sent as given.
    """

    subject: str | None = UNSET
    project_id: int | None = UNSET
    tracker_id: int | None = UNSET
    status_id: int | None = UNSET
    priority_id: int | None = UNSET
    author_id: int | None = UNSET
    assigned_to_id: int | None = UNSET
    description: str | None = UNSET
    start_date: str | None = UNSET
    due_date: str | None = UNSET
    done_ratio: int | None = UNSET
    notes: str | None = UNSET

    def to_payload(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }


@dataclass
class IssueResponse:
    issue: Issue | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> IssueResponse:
        if isinstance(raw, dict) and isinstance(raw.get("issue"), dict):
            return cls(issue=Issue.from_dict(raw["issue"]))
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return {"issue": self.issue.to_dict() if self.issue else None}


@dataclass
class IssueListResponse:
    issues: list[Issue] = field(default_factory=list)
    total_count: int = 0
    offset: int = 0
    limit: int = 0

    @classmethod
    def from_dict(cls, raw: Any) -> IssueListResponse:
        if not isinstance(raw, dict):
            return cls()
        return cls(
            issues=[Issue.from_dict(e) for e in raw.get("issues") or [] if isinstance(e, dict)],
            total_count=_int(raw.get("total_count")),
            offset=_int(raw.get("offset")),
            limit=_int(raw.get("limit")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "issues": [i.to_dict() for i in self.issues],
            "total_count": self.total_count,
            "offset": self.offset,
            "limit": self.limit,
        }


@dataclass
class SearchResult:
    id: int
    type: str = ""
    title: str = ""
    url: str = ""
    description: str = ""
    datetime: str = ""

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> SearchResult:
        return cls(
            id=_int(raw.get("id")),
            type=_str(raw.get("type")),
            title=_str(raw.get("title")),
            url=_str(raw.get("url")),
            description=_str(raw.get("description")),
            datetime=_str(raw.get("datetime")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "url": self.url,
            "description": self.description,
            "datetime": self.datetime,
        }


@dataclass
class SearchResponse:
    results: list[SearchResult] = field(default_factory=list)
    total_count: int = 0
    offset: int = 0
    limit: int = 0

    @classmethod
    def from_dict(cls, raw: Any) -> SearchResponse:
        if not isinstance(raw, dict):
            return cls()
        return cls(
            results=[
                SearchResult.from_dict(e) for e in raw.get("results") or [] if isinstance(e, dict)
            ],
            total_count=_int(raw.get("total_count")),
            offset=_int(raw.get("offset")),
            limit=_int(raw.get("limit")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "total_count": self.total_count,
            "offset": self.offset,
            "limit": self.limit,
        }


__all__ = [
    "UNSET",
    "LookupItem",
    "NamedRef",
    "User",
    "Issue",
    "IssueInput",
    "IssueResponse",
    "IssueListResponse",
    "SearchResult",
    "SearchResponse",
]
