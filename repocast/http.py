"""Small JSON-over-HTTP helper shared by the service clients."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

DEFAULT_TIMEOUT = 30.0


class HttpError(RuntimeError):
    """Raised when a request fails; ``status`` is ``None`` for transport errors."""

    def __init__(self, message: str, *, status: Optional[int] = None, detail: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.detail = detail


@dataclass
class HttpResponse:
    """Status and raw body of a successful response."""

    status: int
    body: bytes

    def json(self) -> Any:
        try:
            return json.loads(self.body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise HttpError("Response body is not valid JSON", status=self.status) from exc

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


def send_request(
    method: str,
    url: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    payload: Optional[Any] = None,
    timeout: Optional[float] = None,
) -> HttpResponse:
    """Issue an HTTP request, encoding ``payload`` as JSON when given."""
    request_headers = dict(headers or {})
    data = None
    if payload is not None:
        data = json.dumps(payload).encode("utf-8")
        request_headers.setdefault("Content-Type", "application/json")

    http_request = Request(url, data=data, headers=request_headers, method=method)
    try:
        with urlopen(http_request, timeout=timeout or DEFAULT_TIMEOUT) as response:  # type: ignore[arg-type]
            status = getattr(response, "status", 200)
            body = response.read()
    except HTTPError as exc:
        detail = ""
        try:
            detail = exc.read().decode("utf-8", errors="ignore").strip()
        except (AttributeError, OSError):
            detail = ""
        message = detail or str(exc.reason)
        raise HttpError(
            f"{method} {url} failed with status {exc.code}: {message}",
            status=exc.code,
            detail=detail,
        ) from exc
    except URLError as exc:
        raise HttpError(f"{method} {url} failed: {exc.reason}") from exc
    except TimeoutError as exc:
        raise HttpError(f"{method} {url} timed out") from exc
    return HttpResponse(status=status, body=body or b"")


__all__ = ["DEFAULT_TIMEOUT", "HttpError", "HttpResponse", "send_request"]
