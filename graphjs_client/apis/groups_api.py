from __future__ import annotations

from concurrent.futures import Future
from typing import Callable, Optional

from graphjs_client.codec import parse_array_safe, parse_safe, parse_string_list
from graphjs_client.core import ApiClientCore
from graphjs_client.models import (
    CallResult,
    CreateResult,
    Envelope,
    Group,
    GroupMembersResult,
    GroupResult,
    GroupsResult,
)


def _group_list(envelope: Envelope) -> GroupsResult:
    groups = parse_array_safe(Group, envelope.get("groups"))
    return GroupsResult(envelope.success, envelope.reason, groups)


class GroupsApi:
    def __init__(self, core: ApiClientCore):
        self._core = core

    def create_group(
        self,
        title: str,
        description: str,
        callback: Optional[Callable[[CreateResult], None]] = None,
    ) -> "Future[CreateResult]":
        params = {"title": title, "description": description}

        def handle(envelope: Envelope) -> CreateResult:
            return CreateResult(envelope.success, envelope.reason, envelope.get_str("id"))

        return self._core.submit("createGroup", params, handle, callback)

    def set_group(
        self,
        group_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        cover: Optional[str] = None,
        callback: Optional[Callable[[CallResult], None]] = None,
    ) -> "Future[CallResult]":
        params = {"id": group_id, "title": title, "description": description, "cover": cover}
        return self._core.submit("setGroup", params, CallResult.from_envelope, callback)

    def join_group(
        self,
        group_id: str,
        callback: Optional[Callable[[CallResult], None]] = None,
    ) -> "Future[CallResult]":
        return self._core.submit("join", {"id": group_id}, CallResult.from_envelope, callback)

    def leave_group(
        self,
        group_id: str,
        callback: Optional[Callable[[CallResult], None]] = None,
    ) -> "Future[CallResult]":
        return self._core.submit("leave", {"id": group_id}, CallResult.from_envelope, callback)

    def memberships(
        self,
        user_id: Optional[str] = None,
        callback: Optional[Callable[[GroupsResult], None]] = None,
    ) -> "Future[GroupsResult]":
        params = {"id": user_id or self._core.session.user_id}
        return self._core.submit("listMemberships", params, _group_list, callback)

    def groups(self, callback: Optional[Callable[[GroupsResult], None]] = None) -> "Future[GroupsResult]":
        return self._core.submit("listGroups", None, _group_list, callback)

    def group(
        self,
        group_id: str,
        callback: Optional[Callable[[GroupResult], None]] = None,
    ) -> "Future[GroupResult]":
        def handle(envelope: Envelope) -> GroupResult:
            return GroupResult(envelope.success, envelope.reason, parse_safe(Group, envelope.get("group")))

        return self._core.submit("getGroup", {"id": group_id}, handle, callback)

    def group_members(
        self,
        group_id: str,
        callback: Optional[Callable[[GroupMembersResult], None]] = None,
    ) -> "Future[GroupMembersResult]":
        def handle(envelope: Envelope) -> GroupMembersResult:
            member_ids = parse_string_list(envelope.get("members"))
            return GroupMembersResult(envelope.success, envelope.reason, member_ids)

        return self._core.submit("listMembers", {"id": group_id}, handle, callback)
