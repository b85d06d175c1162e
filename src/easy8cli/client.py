from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

import requests

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, Easy8Config
from .errors import APIError, DecodeError, MissingCredentialError, MissingIDError, TransportError
from .filters import IssueFilter, SearchParams, build_issue_query, build_search_query
from .logging import get_logger
from .models import IssueInput, IssueListResponse, IssueResponse, SearchResponse

API_KEY_HEADER = "X-Redmine-API-Key"
USER_AGENT = "easy8cli/0.1.0"
HTTP_OK = 200
HTTP_MULTIPLE_CHOICES = 300


@dataclass
class Easy8Client:
    """Request dispatcher for the Easy Redmine REST API.

    Every call is a single blocking round trip bounded by ``timeout``.
    Failures are raised, never retried.
    """

    base_url: str = DEFAULT_BASE_URL
    api_key: str = ""
    timeout: float = DEFAULT_TIMEOUT
    session: requests.Session | None = None
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        self._session = self.session or requests.Session()
        self._session.headers.setdefault("Accept", "application/json")
        self._session.headers.setdefault("User-Agent", USER_AGENT)

    @classmethod
    def from_config(cls, cfg: Easy8Config, session: requests.Session | None = None) -> Easy8Client:
        return cls(base_url=cfg.base_url, api_key=cfg.api_key, timeout=cfg.timeout, session=session)

    # ---- dispatch ------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json_body: Any | None = None,
    ) -> Any:
        if not self.api_key:
            raise MissingCredentialError()
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = dict(self._session.headers)
        headers[API_KEY_HEADER] = self.api_key
        if json_body is not None:
            headers["Content-Type"] = "application/json"

        logger = get_logger()
        start = time.perf_counter()
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.log_request(method, path, None, (time.perf_counter() - start) * 1000)
            raise TransportError(f"{method} {url} failed: {exc}") from exc
        logger.log_request(method, path, response.status_code, (time.perf_counter() - start) * 1000)

        if not HTTP_OK <= response.status_code < HTTP_MULTIPLE_CHOICES:
            raise APIError(response.status_code, response.text.strip(), url)
        if not response.text:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise DecodeError(f"invalid JSON from {method} {path}: {exc}") from exc

    def get(self, path: str, params: dict[str, str] | None = None) -> Any:
        return self._request("GET", path, params=params)

    # ---- issue operations ----------------------------------------------
    def list_issues(self, spec: IssueFilter | None = None) -> IssueListResponse:
        params = build_issue_query(spec or IssueFilter())
        return IssueListResponse.from_dict(self.get("/issues.json", params))

    def search(self, params: SearchParams) -> SearchResponse:
        return SearchResponse.from_dict(self.get("/search.json", build_search_query(params)))

    def create_issue(self, issue: IssueInput) -> IssueResponse:
        data = self._request("POST", "/issues.json", json_body={"issue": issue.to_payload()})
        return IssueResponse.from_dict(data)

    def update_issue(self, issue_id: int, issue: IssueInput) -> IssueResponse:
        if issue_id <= 0:
            raise MissingIDError("issue")
        data = self._request(
            "PUT", f"/issues/{issue_id}.json", json_body={"issue": issue.to_payload()}
        )
        return IssueResponse.from_dict(data)


__all__ = ["Easy8Client", "API_KEY_HEADER"]
