from __future__ import annotations

from concurrent.futures import Future
from datetime import datetime
from typing import Callable, Optional

from graphjs_client.codec import format_birthday, parse_safe
from graphjs_client.core import ApiClientCore
from graphjs_client.models import CallResult, Envelope, FeedTokenResult, FeedType, ProfileResult, UserProfile


class ProfileApi:
    def __init__(self, core: ApiClientCore):
        self._core = core

    def profile(
        self,
        user_id: Optional[str] = None,
        callback: Optional[Callable[[ProfileResult], None]] = None,
    ) -> "Future[ProfileResult]":
        """Fetch a profile; without ``user_id`` the logged in user's."""
        params = {"id": user_id or self._core.session.user_id}

        def handle(envelope: Envelope) -> ProfileResult:
            profile = parse_safe(UserProfile, envelope.get("profile"))
            return ProfileResult(envelope.success, envelope.reason, profile)

        return self._core.submit("getProfile", params, handle, callback)

    def set_profile(
        self,
        email: Optional[str] = None,
        about: Optional[str] = None,
        avatar: Optional[str] = None,
        birthday: Optional[datetime] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        callback: Optional[Callable[[CallResult], None]] = None,
    ) -> "Future[CallResult]":
        params = {
            "email": email,
            "about": about,
            "avatar": avatar,
            "username": username,
            "password": password,
            "birthday": format_birthday(birthday) if birthday is not None else None,
        }
        return self._core.submit("setProfile", params, CallResult.from_envelope, callback)

    def generate_feed_token(
        self,
        feed_type: FeedType,
        user_id: Optional[str] = None,
        callback: Optional[Callable[[FeedTokenResult], None]] = None,
    ) -> "Future[FeedTokenResult]":
        params = {"type": feed_type.value, "id": user_id or self._core.session.user_id}

        def handle(envelope: Envelope) -> FeedTokenResult:
            return FeedTokenResult(envelope.success, envelope.reason, envelope.get_str("token"))

        return self._core.submit("generateFeedToken", params, handle, callback)
