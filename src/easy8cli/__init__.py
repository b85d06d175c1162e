"""easy8cli - command-line client for the Easy Redmine issue API.

High-level public API:

from easy8cli import Easy8Client, IssueFilter, LookupStore, load_config

cfg = load_config()
client = Easy8Client.from_config(cfg)
store = LookupStore(client)
print(client.list_issues(IssueFilter(status_id=2, limit=10)).issues)

The ``easy8`` CLI delegates to this library.
"""

from __future__ import annotations

from .client import Easy8Client
from .config import Easy8Config, load_config
from .filters import IssueFilter, SearchParams, build_issue_query, build_search_query
from .lookups import LookupStore
from .models import UNSET, IssueInput
from .resolver import NamedFilters, resolve_filters, resolve_id

# Version constant (keep in sync with pyproject.toml)
__version__ = "0.1.0"

__all__ = [
    "Easy8Client",
    "Easy8Config",
    "load_config",
    "IssueFilter",
    "SearchParams",
    "build_issue_query",
    "build_search_query",
    "LookupStore",
    "IssueInput",
    "UNSET",
    "NamedFilters",
    "resolve_filters",
    "resolve_id",
    "__version__",
]
