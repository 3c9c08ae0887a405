from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import json
import logging
import os
import threading
from typing import Optional
from urllib.parse import urlsplit

from msal_extensions import FilePersistence, FilePersistenceWithDataProtection
from requests.cookies import RequestsCookieJar, create_cookie

from graphjs_client.config import AppSettings
from graphjs_client.models import Envelope

logger = logging.getLogger(__name__)

EXPIRES_FORMAT = "%A, %d-%b-%y %H:%M:%S GMT"
EPOCH_EXPIRES = "Thu, 01 Jan 1970 00:00:01 GMT"
EPOCH_EXPIRES_TIMESTAMP = 1


@dataclass(frozen=True)
class CookieDirective:
    """One Set-Cookie instruction written against the base endpoint."""

    name: str
    value: str
    expires: Optional[datetime] = None
    path: Optional[str] = "/"
    expired: bool = False

    def header(self) -> str:
        parts = [f"{self.name}={self.value}"]
        if self.path:
            parts.append(f"path={self.path}")
        if self.expired:
            parts.append(f"expires={EPOCH_EXPIRES}")
        elif self.expires is not None:
            parts.append(f"expires={self.expires.astimezone(timezone.utc).strftime(EXPIRES_FORMAT)}")
        return "; ".join(parts) + ";"


@dataclass(frozen=True)
class SessionState:
    user_id: Optional[str] = None
    session_cookie: Optional[str] = None
    session_off: Optional[str] = None
    expires_at: Optional[datetime] = None

    @property
    def is_logged_in(self) -> bool:
        return self.user_id is not None


class SessionManager:
    """Owns the current user id and the session cookies in the transport's jar.

    Every mutation goes through one lock, so the pair of directives written by
    a login or a logout is never interleaved with another hook's pair.
    """

    def __init__(self, settings: AppSettings, jar: RequestsCookieJar, base_url: Optional[str] = None):
        self._settings = settings
        self._jar = jar
        self._domain = urlsplit(base_url or settings.base_url).hostname or ""
        self._lock = threading.Lock()
        self._user_id: Optional[str] = None
        self._expires_at: Optional[datetime] = None
        self._persistence = (
            self._build_persistence(settings.cookie_cache_path) if settings.cookie_cache_path else None
        )
        self._load_cookies()

    @staticmethod
    def _build_persistence(path: str):
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        try:
            return FilePersistenceWithDataProtection(path)
        except Exception:
            return FilePersistence(path)

    @property
    def session_cookie_name(self) -> str:
        return f"graphjs_{self._settings.cookie_key}_id"

    @property
    def session_off_cookie_name(self) -> str:
        return f"graphjs_{self._settings.cookie_key}_session_off"

    @property
    def user_id(self) -> Optional[str]:
        with self._lock:
            return self._user_id

    def snapshot(self) -> SessionState:
        with self._lock:
            return SessionState(
                user_id=self._user_id,
                session_cookie=self._cookie_value(self.session_cookie_name),
                session_off=self._cookie_value(self.session_off_cookie_name),
                expires_at=self._expires_at,
            )

    def on_login_success(self, user_id: Optional[str], now: Optional[datetime] = None) -> list[CookieDirective]:
        moment = now or datetime.now(timezone.utc)
        expires = moment + timedelta(minutes=self._settings.session_ttl_minutes)
        directives = [
            CookieDirective(self.session_cookie_name, user_id or "", expires=expires),
            CookieDirective(self.session_off_cookie_name, "", path=None, expired=True),
        ]
        with self._lock:
            self._apply(directives)
            self._user_id = user_id
            self._expires_at = expires
            self._save_cookies()
        logger.debug("Session started for user %s, expires %s", user_id, expires.isoformat())
        return directives

    def on_logout_success(self) -> list[CookieDirective]:
        directives = [
            CookieDirective(self.session_cookie_name, "", path=None, expired=True),
            CookieDirective(self.session_off_cookie_name, "true", path=None),
        ]
        with self._lock:
            self._apply(directives)
            self._user_id = None
            self._expires_at = None
            self._save_cookies()
        logger.debug("Session closed")
        return directives

    def on_whoami_result(self, envelope: Envelope, user_id: Optional[str]) -> None:
        if envelope.success:
            with self._lock:
                self._user_id = user_id
            return
        if not envelope.is_local:
            with self._lock:
                self._user_id = None

    def expire(self) -> list[CookieDirective]:
        """Drop the local session without asking the backend."""
        return self.on_logout_success()

    def _apply(self, directives: list[CookieDirective]) -> None:
        for directive in directives:
            self._discard(directive.name)
            if directive.expired:
                continue
            self._jar.set_cookie(
                create_cookie(
                    directive.name,
                    directive.value,
                    domain=self._domain,
                    path="/",
                    expires=int(directive.expires.timestamp()) if directive.expires else None,
                )
            )
            if self._settings.debug_logs:
                logger.debug("Set-Cookie %s", directive.header())

    def _discard(self, name: str) -> None:
        for cookie in list(self._jar):
            if cookie.name == name:
                self._jar.clear(cookie.domain, cookie.path, cookie.name)

    def _cookie_value(self, name: str) -> Optional[str]:
        for cookie in self._jar:
            if cookie.name == name:
                return cookie.value
        return None

    def _save_cookies(self) -> None:
        if self._persistence is None:
            return
        entries = [
            {
                "name": cookie.name,
                "value": cookie.value,
                "domain": cookie.domain,
                "path": cookie.path,
                "expires": cookie.expires,
            }
            for cookie in self._jar
            if cookie.name in (self.session_cookie_name, self.session_off_cookie_name)
        ]
        try:
            self._persistence.save(json.dumps(entries))
        except OSError as exc:
            logger.warning("Couldn't write cookie cache at %s: %s", self._settings.cookie_cache_path, exc)

    def _load_cookies(self) -> None:
        if self._persistence is None:
            return
        try:
            raw = self._persistence.load()
        except OSError:
            return
        if not raw:
            return
        try:
            entries = json.loads(raw)
        except ValueError:
            entries = None
        if not isinstance(entries, list):
            logger.warning("Ignoring unreadable cookie cache at %s", self._settings.cookie_cache_path)
            return

        now = datetime.now(timezone.utc).timestamp()
        for entry in entries:
            if not isinstance(entry, dict) or "name" not in entry or "value" not in entry:
                continue
            expires = entry.get("expires")
            if expires is not None and expires <= now:
                continue
            self._jar.set_cookie(
                create_cookie(
                    entry["name"],
                    entry["value"],
                    domain=entry.get("domain", self._domain),
                    path=entry.get("path", "/"),
                    expires=expires,
                )
            )
            if entry["name"] == self.session_cookie_name and entry["value"]:
                # the backend still has to confirm it through whoami
                self._expires_at = datetime.fromtimestamp(expires, tz=timezone.utc) if expires else None
