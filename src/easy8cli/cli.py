"""easy8 command-line interface.

Commands:
  issue list      -> list issues (paging, sort, free text)
  issue search    -> list issues filtered by names and/or IDs
  issue fulltext  -> full-text search across the tracker
  issue create    -> create an issue (IDs default from config)
  issue update    -> update an issue by ID
  lookup <kind>   -> trackers, statuses, priorities, users, projects
"""

from __future__ import annotations

import argparse
import os
from typing import Any

from .client import Easy8Client
from .config import Easy8Config
from .errors import ConfigError
from .filters import IssueFilter, SearchParams, split_comma
from .logging import configure_logging, get_logger
from .lookups import LOOKUP_KINDS, LookupStore
from .models import IssueInput
from .output import print_error, render_issues, render_json, render_lookups, render_search
from .resolver import NamedFilters, resolve_filters
from .runtime import EXIT_ERROR, EXIT_OK, UsageError, execute_command, prepare_config

DEFAULT_LIMIT = 25
JSON_HELP = "JSON output"

_MAX_HELP_WIDTH = 100


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


def _add_paging(p: argparse.ArgumentParser) -> None:
    p.add_argument("--limit", type=int, default=DEFAULT_LIMIT, help="Limit (max 100)")
    p.add_argument("--offset", type=int, default=0)
    p.add_argument("--sort", default="", help="Sort expression, e.g. priority:desc")
    p.add_argument("--include", default="", help="Include fields (comma-separated)")


def _build_parser() -> argparse.ArgumentParser:
    """Construct top-level CLI parser with subcommands.

    Keep ordering stable for help output readability.
    """
    p = _FormatterArgumentParser(prog="easy8", description="Easy Redmine issue client")
    p.add_argument("--config", help="Config file (default ~/.config/easy8/config.json)")
    p.add_argument("--base-url", help="Override the API base URL")
    p.add_argument("--log-json", action="store_true", help="Emit logs as JSON lines")
    p.add_argument(
        "--log-level",
        default=os.environ.get("EASY8_LOG_LEVEL", "WARNING"),
        help="Log level (env: EASY8_LOG_LEVEL)",
    )
    sub = p.add_subparsers(
        dest="cmd", required=True, parser_class=_FormatterArgumentParser, metavar="<command>"
    )

    issue = sub.add_parser("issue", help="Create, list, search and update issues")
    actions = issue.add_subparsers(
        dest="action", required=True, parser_class=_FormatterArgumentParser, metavar="<action>"
    )

    pl = actions.add_parser("list", help="List issues")
    _add_paging(pl)
    pl.add_argument("--q", dest="query", default="", help="Free-text query (easy_query_q)")
    pl.add_argument("--json", action="store_true", help=JSON_HELP)

    ps = actions.add_parser("search", help="List issues matching filters")
    _add_paging(ps)
    ps.add_argument("--q", dest="query", default="", help="Free-text query")
    ps.add_argument("--assignee", default="", help="Assignee login or full name")
    ps.add_argument("--assignee-id", type=int, help="Assignee user ID")
    ps.add_argument("--status", default="", help="Status name")
    ps.add_argument("--status-id", type=int, help="Status ID")
    ps.add_argument("--priority", default="", help="Priority name")
    ps.add_argument("--priority-id", type=int, help="Priority ID")
    ps.add_argument("--task-type", default="", help="Task type (tracker) name")
    ps.add_argument("--task-type-id", type=int, help="Task type (tracker) ID")
    ps.add_argument("--project", default="", help="Project name")
    ps.add_argument("--project-id", type=int, help="Project ID")
    ps.add_argument("--due-date", default="", help="Due date (YYYY-MM-DD)")
    ps.add_argument("--subject", default="", help="Subject filter")
    ps.add_argument("--json", action="store_true", help=JSON_HELP)

    pf = actions.add_parser("fulltext", help="Full-text search")
    pf.add_argument("--q", dest="query", default="", help="Search query (required)")
    pf.add_argument("--open-issues", action="store_true", help="Only open issues")
    pf.add_argument("--scope", type=int, default=0, help="Project scope ID")
    pf.add_argument("--issues-only", action="store_true", help="Only return issues")
    pf.add_argument("--limit", type=int, default=DEFAULT_LIMIT)
    pf.add_argument("--offset", type=int, default=0)
    pf.add_argument("--json", action="store_true", help=JSON_HELP)

    pc = actions.add_parser("create", help="Create a new issue")
    pc.add_argument("--subject", default="", help="Issue subject (required)")
    pc.add_argument("--description", default="")
    for name in ("project", "tracker", "status", "priority", "author", "assigned-to"):
        pc.add_argument(f"--{name}-id", type=int, help="Defaults to the configured value")
    pc.add_argument("--start-date", default="", help="Start date (YYYY-MM-DD)")
    pc.add_argument("--due-date", default="", help="Due date (YYYY-MM-DD)")
    pc.add_argument("--done-ratio", type=int, help="Done ratio (0-100)")
    pc.add_argument("--json", action="store_true", help=JSON_HELP)

    pu = actions.add_parser("update", help="Update an issue")
    pu.add_argument("--id", type=int, default=0, help="Issue ID (required)")
    pu.add_argument("--subject", default="")
    pu.add_argument("--description", default="")
    pu.add_argument("--status-id", type=int)
    pu.add_argument("--priority-id", type=int)
    pu.add_argument("--assigned-to-id", type=int)
    pu.add_argument("--done-ratio", type=int)
    pu.add_argument("--notes", default="", help="Notes (journal entry)")
    pu.add_argument("--json", action="store_true", help=JSON_HELP)

    lk = sub.add_parser("lookup", help="List reference data used by filters")
    lk.add_argument("kind", choices=LOOKUP_KINDS)
    lk.add_argument("--json", action="store_true", help=JSON_HELP)
    return p


def _issue_filter(args: argparse.Namespace, **extra: Any) -> IssueFilter:
    return IssueFilter(
        limit=args.limit,
        offset=args.offset,
        sort=args.sort.strip(),
        query=args.query.strip(),
        include=split_comma(args.include),
        **extra,
    )


def _cmd_issue_list(client: Easy8Client, args: argparse.Namespace) -> int:
    resp = client.list_issues(_issue_filter(args))
    if args.json:
        render_json(resp)
    else:
        render_issues(resp.issues)
    return EXIT_OK


def _cmd_issue_search(client: Easy8Client, args: argparse.Namespace) -> int:
    named = NamedFilters(
        assignee=args.assignee,
        assignee_id=args.assignee_id,
        status=args.status,
        status_id=args.status_id,
        priority=args.priority,
        priority_id=args.priority_id,
        task_type=args.task_type,
        task_type_id=args.task_type_id,
        project=args.project,
        project_id=args.project_id,
    )
    base = _issue_filter(args, due_date=args.due_date.strip(), subject=args.subject.strip())
    spec = resolve_filters(LookupStore(client), named, base)
    if not spec.has_filter():
        raise UsageError("at least one filter is required (e.g. --q, --status, --assignee)")
    resp = client.list_issues(spec)
    if args.json:
        render_json(resp)
    else:
        render_issues(resp.issues)
    return EXIT_OK


def _cmd_issue_fulltext(client: Easy8Client, args: argparse.Namespace) -> int:
    query = args.query.strip()
    if not query:
        raise UsageError("--q is required")
    resp = client.search(
        SearchParams(
            query=query,
            open_issues=args.open_issues,
            scope=args.scope,
            issues_only=args.issues_only,
            limit=args.limit,
            offset=args.offset,
        )
    )
    if args.json:
        render_json(resp)
    else:
        render_search(resp.results)
    return EXIT_OK


def _require_id(name: str, value: int | None) -> int:
    if not value:
        raise UsageError(f"--{name} is required")
    return value


def _cmd_issue_create(cfg: Easy8Config, client: Easy8Client, args: argparse.Namespace) -> int:
    if not args.subject.strip():
        raise UsageError("--subject is required")
    defaults = cfg.defaults

    def pick(flag: str, explicit: int | None, default: int) -> int:
        return _require_id(flag, explicit if explicit is not None else default)

    issue = IssueInput(
        subject=args.subject,
        project_id=pick("project-id", args.project_id, defaults.project_id),
        tracker_id=pick("tracker-id", args.tracker_id, defaults.tracker_id),
        status_id=pick("status-id", args.status_id, defaults.status_id),
        priority_id=pick("priority-id", args.priority_id, defaults.priority_id),
        author_id=pick("author-id", args.author_id, defaults.author_id),
        assigned_to_id=pick("assigned-to-id", args.assigned_to_id, defaults.assigned_to_id),
    )
    if args.description.strip():
        issue.description = args.description
    if args.start_date.strip():
        issue.start_date = args.start_date.strip()
    if args.due_date.strip():
        issue.due_date = args.due_date.strip()
    if args.done_ratio is not None:
        issue.done_ratio = args.done_ratio

    resp = client.create_issue(issue)
    get_logger().log_operation("issue_create", issue_id=resp.issue.id if resp.issue else None)
    if args.json:
        render_json(resp)
    else:
        render_issues([resp.issue] if resp.issue else [])
    return EXIT_OK


def _cmd_issue_update(client: Easy8Client, args: argparse.Namespace) -> int:
    issue_id = _require_id("id", args.id)
    issue = IssueInput()
    if args.subject.strip():
        issue.subject = args.subject
    if args.description.strip():
        issue.description = args.description
    if args.status_id is not None:
        issue.status_id = args.status_id
    if args.priority_id is not None:
        issue.priority_id = args.priority_id
    if args.assigned_to_id is not None:
        issue.assigned_to_id = args.assigned_to_id
    if args.done_ratio is not None:
        issue.done_ratio = args.done_ratio
    if args.notes.strip():
        issue.notes = args.notes

    resp = client.update_issue(issue_id, issue)
    get_logger().log_operation("issue_update", issue_id=issue_id)
    if args.json:
        render_json(resp)
    else:
        render_issues([resp.issue] if resp.issue else [])
    return EXIT_OK


def _cmd_lookup(client: Easy8Client, args: argparse.Namespace) -> int:
    items = LookupStore(client).fetcher(args.kind)()
    if args.json:
        render_json(list(items))
    else:
        render_lookups(items)
    return EXIT_OK


def _build_handlers(
    args: argparse.Namespace, cfg: Easy8Config, client: Easy8Client
) -> dict[str, Any]:
    return {
        "issue list": lambda: _cmd_issue_list(client, args),
        "issue search": lambda: _cmd_issue_search(client, args),
        "issue fulltext": lambda: _cmd_issue_fulltext(client, args),
        "issue create": lambda: _cmd_issue_create(cfg, client, args),
        "issue update": lambda: _cmd_issue_update(client, args),
        "lookup": lambda: _cmd_lookup(client, args),
    }


def _command_name(args: argparse.Namespace) -> str:
    action = getattr(args, "action", None)
    return f"{args.cmd} {action}" if action else args.cmd


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(json_logging=args.log_json, level=args.log_level)
    try:
        cfg = prepare_config(args)
    except ConfigError as exc:
        print_error(f"config error: {exc}")
        return EXIT_ERROR
    client = Easy8Client.from_config(cfg)
    command = _command_name(args)
    handler = _build_handlers(args, cfg, client).get(command)
    if handler is None:  # pragma: no cover - argparse enforces valid choices
        parser.print_help()
        return EXIT_ERROR
    return execute_command(handler, command, secret=cfg.api_key)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
