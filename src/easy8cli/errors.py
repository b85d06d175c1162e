"""Error taxonomy & redaction.

Every failure raised by easy8cli derives from :class:`Easy8Error` so callers
(the CLI above all) can catch one type and still branch on the category.

Public API:
- the exception hierarchy below
- classify_error(exc) -> ErrorInfo
- redact(text) -> str

Nothing in this package retries. Errors from lower layers propagate unchanged
and abort the whole operation.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any


class Easy8Error(RuntimeError):
    """Base class for all easy8cli errors."""


class ConfigError(Easy8Error):
    pass


class PreconditionError(Easy8Error):
    """Raised locally, before any network activity."""


class MissingCredentialError(PreconditionError):
    def __init__(self, message: str = "missing API key") -> None:
        super().__init__(message)


class MissingIDError(PreconditionError):
    def __init__(self, resource: str = "issue") -> None:
        super().__init__(f"missing {resource} id")
        self.resource = resource


class TransportError(Easy8Error):
    """Network level failure (connection refused, timeout, ...)."""


class DecodeError(Easy8Error):
    """Response body could not be decoded as JSON."""


class APIError(Easy8Error):
    """Raised when the tracker API answers with a non-2xx status."""

    def __init__(self, status: int, body: str = "", url: str | None = None) -> None:
        message = f"api error {status}: {body}" if body else f"api error {status}"
        super().__init__(message)
        self.status = status
        self.body = body
        self.url = url


ServiceError = APIError


class ResolutionError(Easy8Error):
    """A name-based filter could not be turned into a single ID."""

    def __init__(self, message: str, *, dimension: str, name: str | None = None) -> None:
        super().__init__(message)
        self.dimension = dimension
        self.name = name


class NotFoundError(ResolutionError):
    def __init__(self, dimension: str, name: str) -> None:
        super().__init__(f"{dimension} not found: {name}", dimension=dimension, name=name)


class AmbiguousError(ResolutionError):
    def __init__(self, dimension: str, name: str) -> None:
        super().__init__(
            f"{dimension} matches multiple entries: {name}", dimension=dimension, name=name
        )


class ConflictError(ResolutionError):
    def __init__(self, dimension: str, name: str | None = None) -> None:
        super().__init__(
            f"{dimension}-id does not match {dimension} name", dimension=dimension, name=name
        )


# API keys are 40 hex chars on Redmine; also catch the header when echoed back.
_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"(X-Redmine-API-Key[\"']?\s*[:=]\s*[\"']?)[^\s\"',}]+", re.IGNORECASE),
    re.compile(r"(key=)[A-Za-z0-9]{20,}"),
    re.compile(r"\b[a-f0-9]{40}\b"),
]

_REDACTION_PLACEHOLDER = "<redacted>"


@dataclass
class ErrorInfo:
    category: str
    message: str
    original_type: str
    transient: bool = False
    details: dict[str, Any] | None = None


def redact(text: str, *secrets: str | None) -> str:
    """Redact API keys in arbitrary text.

    Known secrets passed explicitly are masked verbatim first, then the
    generic key patterns are applied.
    """
    if not text:
        return text
    redacted = text
    for secret in secrets:
        if secret:
            redacted = redacted.replace(secret, _REDACTION_PLACEHOLDER)
    for pat in _SENSITIVE_PATTERNS:
        if pat.groups:
            redacted = pat.sub(lambda m: m.group(1) + _REDACTION_PLACEHOLDER, redacted)
        else:
            redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def classify_error(exc: BaseException) -> ErrorInfo:
    """Map an exception onto a coarse category for reporting.

    Only network failures are flagged transient; the flag is informational,
    easy8cli itself never retries.
    """
    msg = redact(str(exc) if exc else "")
    name = exc.__class__.__name__

    if isinstance(exc, PreconditionError):
        return ErrorInfo("precondition", msg, name)
    if isinstance(exc, ResolutionError):
        details: dict[str, Any] = {"dimension": exc.dimension}
        if exc.name is not None:
            details["name"] = exc.name
        return ErrorInfo("resolution", msg, name, details=details)
    if isinstance(exc, APIError):
        return ErrorInfo("api", msg, name, transient=exc.status >= 500, details={"status": exc.status})
    if isinstance(exc, TransportError):
        return ErrorInfo("network", msg, name, transient=True)
    if isinstance(exc, DecodeError):
        return ErrorInfo("decode", msg, name)
    if isinstance(exc, ConfigError):
        return ErrorInfo("config", msg, name)
    return ErrorInfo("generic", msg, name)


__all__ = [
    "Easy8Error",
    "ConfigError",
    "PreconditionError",
    "MissingCredentialError",
    "MissingIDError",
    "TransportError",
    "DecodeError",
    "APIError",
    "ServiceError",
    "ResolutionError",
    "NotFoundError",
    "AmbiguousError",
    "ConflictError",
    "ErrorInfo",
    "classify_error",
    "redact",
]
