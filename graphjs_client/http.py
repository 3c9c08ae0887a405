from __future__ import annotations

import logging
import time
from typing import Any, Mapping, Optional
from urllib.parse import quote, urlsplit, urlunsplit

import requests

from graphjs_client.config import AppSettings

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)

# characters legal in a query component besides the always-safe unreserved ones
QUERY_SAFE = "!'()*;/?:@&=+$,"


class ApiHttpError(RuntimeError):
    def __init__(self, status_code: int, message: str, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def ensure_trailing_slash(url: str) -> str:
    parsed = urlsplit(url)
    if parsed.path.endswith("/"):
        return url
    return urlunsplit(parsed._replace(path=parsed.path + "/"))


def compose_uri(base_url: str, params: Mapping[str, Optional[str]], method: str) -> str:
    """Build ``<base path><method>?<base query>&k=v...`` for the non-null params.

    Characters illegal in a query (including ``#`` and ``%``) are quoted.
    ``&`` and ``=`` inside values are sent as-is.
    """
    parsed = urlsplit(base_url)
    base_query = parsed.query or ""

    query = base_query
    for name, value in params.items():
        if value is None:
            continue
        query += f"&{name}={quote(str(value), safe=QUERY_SAFE)}"

    if not base_query and query.startswith("&"):
        query = query[1:]

    path = parsed.path if parsed.path.endswith("/") else parsed.path + "/"
    return urlunsplit((parsed.scheme, parsed.netloc, path + method, query, parsed.fragment))


class HttpClient:
    def __init__(self, settings: AppSettings, session: requests.Session | None = None):
        self._settings = settings
        self._base_url = ensure_trailing_slash(settings.base_url)
        self._session = session if session is not None else requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def cookies(self) -> requests.cookies.RequestsCookieJar:
        return self._session.cookies

    def build_url(self, method: str, params: Mapping[str, Optional[str]]) -> str:
        return compose_uri(self._base_url, params, method)

    def get_json(self, method: str, params: Mapping[str, Optional[str]]) -> dict[str, Any]:
        return self.get_absolute_json(self.build_url(method, params))

    def get_absolute_json(self, url: str) -> dict[str, Any]:
        attempts = self._settings.retry_attempts + 1
        for attempt in range(1, attempts + 1):
            try:
                response = self._session.get(url, timeout=self._settings.timeout_seconds)
            except (requests.Timeout, requests.ConnectionError) as exc:
                if attempt < attempts:
                    logger.debug("GET %s failed (%s), retrying", url, exc)
                    self._sleep_before_retry(attempt)
                    continue
                raise

            if response.ok:
                if not response.content:
                    return {}
                parsed = response.json()
                if not isinstance(parsed, dict):
                    raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")
                return parsed

            if response.status_code in RETRYABLE_STATUS_CODES and attempt < attempts:
                logger.debug("GET %s returned HTTP %s, retrying", url, response.status_code)
                self._sleep_before_retry(attempt)
                continue

            body = response.text
            raise ApiHttpError(
                status_code=response.status_code,
                message=f"HTTP {response.status_code}: {body[:500]}",
                body=body,
            )

        raise ApiHttpError(status_code=0, message="Request failed")

    def _sleep_before_retry(self, attempt: int) -> None:
        delay = self._settings.backoff_seconds * attempt
        if delay > 0:
            time.sleep(delay)

    def close(self) -> None:
        self._session.close()
