"""Query-parameter builders for issue listing and full-text search.

``build_issue_query`` turns a sparse :class:`IssueFilter` into the exact
parameter set ``GET /issues.json`` accepts. Every semantic filter (free text,
IDs, due date, subject) also switches on ``set_filter=1``; without it the
server returns an unfiltered listing.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

SET_FILTER = "set_filter"


def split_comma(value: str | None) -> tuple[str, ...]:
    """Split ``a, b,,c`` into ``("a", "b", "c")``."""
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class IssueFilter:
    limit: int = 0
    offset: int = 0
    sort: str = ""
    query: str = ""
    assignee_id: int = 0
    due_date: str = ""
    status_id: int = 0
    priority_id: int = 0
    subject: str = ""
    task_type_id: int = 0
    project_id: int = 0
    include: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # accept any iterable for include but store a tuple
        if not isinstance(self.include, tuple):
            object.__setattr__(self, "include", tuple(self.include))

    def has_filter(self) -> bool:
        return bool(
            self.query.strip()
            or self.assignee_id > 0
            or self.due_date.strip()
            or self.status_id > 0
            or self.priority_id > 0
            or self.subject.strip()
            or self.task_type_id > 0
            or self.project_id > 0
        )

    def with_ids(self, **ids: int) -> IssueFilter:
        """Return a copy with resolved IDs filled in."""
        return replace(self, **ids)


def _set_positive(params: dict[str, str], key: str, value: int) -> bool:
    if value > 0:
        params[key] = str(value)
        return True
    return False


def _set_text(params: dict[str, str], key: str, value: str) -> bool:
    if value.strip():
        params[key] = value
        return True
    return False


def build_issue_query(spec: IssueFilter) -> dict[str, str]:
    params: dict[str, str] = {}
    has_filter = False

    _set_positive(params, "limit", spec.limit)
    _set_positive(params, "offset", spec.offset)
    if spec.sort.strip():
        params["sort"] = spec.sort.strip()
    if spec.query.strip():
        params[SET_FILTER] = "1"
        params["easy_query_q"] = spec.query
        has_filter = True

    for key, value in (
        ("assigned_to_id", spec.assignee_id),
        ("due_date", spec.due_date),
        ("status_id", spec.status_id),
        ("priority_id", spec.priority_id),
        ("subject", spec.subject),
        ("tracker_id", spec.task_type_id),
        ("project_id", spec.project_id),
    ):
        if isinstance(value, str):
            has_filter = _set_text(params, key, value) or has_filter
        else:
            has_filter = _set_positive(params, key, value) or has_filter

    if has_filter:
        params[SET_FILTER] = "1"
    if spec.include:
        params["include"] = ",".join(spec.include)
    return params


@dataclass(frozen=True)
class SearchParams:
    query: str
    open_issues: bool = False
    scope: int = 0
    issues_only: bool = False
    limit: int = 0
    offset: int = 0


def build_search_query(params: SearchParams) -> dict[str, str]:
    out: dict[str, str] = {"q": params.query}
    if params.open_issues:
        out["open_issues"] = "1"
    _set_positive(out, "scope", params.scope)
    if params.issues_only:
        out["issues"] = "1"
    _set_positive(out, "limit", params.limit)
    _set_positive(out, "offset", params.offset)
    return out


__all__ = [
    "IssueFilter",
    "SearchParams",
    "build_issue_query",
    "build_search_query",
    "split_comma",
]
