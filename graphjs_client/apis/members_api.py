from __future__ import annotations

from concurrent.futures import Future
from typing import Callable, Optional

from graphjs_client.codec import parse_map_safe
from graphjs_client.core import ApiClientCore
from graphjs_client.models import (
    CallResult,
    Envelope,
    FollowersResult,
    FollowingResult,
    Member,
    MembersResult,
)


class MembersApi:
    def __init__(self, core: ApiClientCore):
        self._core = core

    def members(self, callback: Optional[Callable[[MembersResult], None]] = None) -> "Future[MembersResult]":
        def handle(envelope: Envelope) -> MembersResult:
            members = parse_map_safe(Member, envelope.get("members"))
            return MembersResult(envelope.success, envelope.reason, members)

        return self._core.submit("getMembers", None, handle, callback)

    def followers(
        self,
        user_id: Optional[str] = None,
        callback: Optional[Callable[[FollowersResult], None]] = None,
    ) -> "Future[FollowersResult]":
        params = {"id": user_id or self._core.session.user_id}

        def handle(envelope: Envelope) -> FollowersResult:
            followers = parse_map_safe(Member, envelope.get("followers"))
            return FollowersResult(envelope.success, envelope.reason, followers)

        return self._core.submit("getFollowers", params, handle, callback)

    def following(
        self,
        user_id: Optional[str] = None,
        callback: Optional[Callable[[FollowingResult], None]] = None,
    ) -> "Future[FollowingResult]":
        params = {"id": user_id or self._core.session.user_id}

        def handle(envelope: Envelope) -> FollowingResult:
            following = parse_map_safe(Member, envelope.get("following"))
            return FollowingResult(envelope.success, envelope.reason, following)

        return self._core.submit("getFollowing", params, handle, callback)

    def follow(
        self,
        user_id: str,
        callback: Optional[Callable[[CallResult], None]] = None,
    ) -> "Future[CallResult]":
        return self._core.submit("follow", {"id": user_id}, CallResult.from_envelope, callback)

    def unfollow(
        self,
        user_id: str,
        callback: Optional[Callable[[CallResult], None]] = None,
    ) -> "Future[CallResult]":
        return self._core.submit("unfollow", {"id": user_id}, CallResult.from_envelope, callback)
