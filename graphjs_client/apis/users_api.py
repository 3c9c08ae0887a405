from __future__ import annotations

from concurrent.futures import Future
from typing import Callable, Optional

from graphjs_client.core import ApiClientCore
from graphjs_client.models import CallResult, Envelope, LoginResult, RegisterResult


class UsersApi:
    """Account endpoints. Login, logout and whoami also drive the local session."""

    def __init__(self, core: ApiClientCore):
        self._core = core

    def signup(
        self,
        username: str,
        email: str,
        password: str,
        callback: Optional[Callable[[RegisterResult], None]] = None,
    ) -> "Future[RegisterResult]":
        params = {"username": username, "email": email, "password": password}

        def handle(envelope: Envelope) -> RegisterResult:
            return RegisterResult(envelope.success, envelope.reason, envelope.get_str("id"))

        return self._core.submit("signup", params, handle, callback)

    def login(
        self,
        username: str,
        password: str,
        callback: Optional[Callable[[LoginResult], None]] = None,
    ) -> "Future[LoginResult]":
        params = {"username": username, "password": password}

        def handle(envelope: Envelope) -> LoginResult:
            user_id = envelope.get_str("id")
            if envelope.success:
                self._core.session.on_login_success(user_id)
            return LoginResult(envelope.success, envelope.reason, user_id)

        return self._core.submit("login", params, handle, callback)

    def whoami(self, callback: Optional[Callable[[LoginResult], None]] = None) -> "Future[LoginResult]":
        def handle(envelope: Envelope) -> LoginResult:
            user_id = envelope.get_str("id")
            self._core.session.on_whoami_result(envelope, user_id)
            return LoginResult(envelope.success, envelope.reason, user_id)

        return self._core.submit("whoami", None, handle, callback)

    def logout(self, callback: Optional[Callable[[CallResult], None]] = None) -> "Future[CallResult]":
        def handle(envelope: Envelope) -> CallResult:
            if envelope.success:
                self._core.session.on_logout_success()
            return CallResult(envelope.success, envelope.reason)

        return self._core.submit("logout", None, handle, callback)

    def reset_password(
        self,
        email: str,
        callback: Optional[Callable[[CallResult], None]] = None,
    ) -> "Future[CallResult]":
        return self._core.submit("resetPassword", {"email": email}, CallResult.from_envelope, callback)

    def verify_password_reset(
        self,
        email: str,
        code: str,
        callback: Optional[Callable[[CallResult], None]] = None,
    ) -> "Future[CallResult]":
        params = {"email": email, "code": code}
        return self._core.submit("verifyReset", params, CallResult.from_envelope, callback)
