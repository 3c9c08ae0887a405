from __future__ import annotations

from concurrent.futures import Future
from typing import Callable, Optional

from graphjs_client.codec import parse_keyed_entries, parse_map_safe
from graphjs_client.core import ApiClientCore
from graphjs_client.models import (
    CallResult,
    CommentsResult,
    ContentComment,
    CountResult,
    CreateResult,
    Envelope,
    IsStarredResult,
    StarsStatEntry,
    StarsStatResult,
)


def _stars_stat(envelope: Envelope) -> StarsStatResult:
    pages = parse_map_safe(StarsStatEntry, envelope.get("pages"))
    return StarsStatResult(envelope.success, envelope.reason, pages)


class ContentApi:
    """Stars and comments attached to arbitrary content URLs."""

    def __init__(self, core: ApiClientCore):
        self._core = core

    def star(self, url: str, callback: Optional[Callable[[CountResult], None]] = None) -> "Future[CountResult]":
        def handle(envelope: Envelope) -> CountResult:
            return CountResult(envelope.success, envelope.reason, envelope.get_int("count"))

        return self._core.submit("star", {"url": url}, handle, callback)

    def unstar(self, url: str, callback: Optional[Callable[[CallResult], None]] = None) -> "Future[CallResult]":
        return self._core.submit("unstar", {"url": url}, CallResult.from_envelope, callback)

    def is_starred(
        self,
        url: str,
        callback: Optional[Callable[[IsStarredResult], None]] = None,
    ) -> "Future[IsStarredResult]":
        def handle(envelope: Envelope) -> IsStarredResult:
            return IsStarredResult(
                envelope.success,
                envelope.reason,
                envelope.get_int("count"),
                envelope.get_bool("starred"),
            )

        return self._core.submit("isStarred", {"url": url}, handle, callback)

    def starred_content(
        self,
        callback: Optional[Callable[[StarsStatResult], None]] = None,
    ) -> "Future[StarsStatResult]":
        return self._core.submit("getStarredContent", None, _stars_stat, callback)

    def my_stars(self, callback: Optional[Callable[[StarsStatResult], None]] = None) -> "Future[StarsStatResult]":
        return self._core.submit("getMyStarredContent", None, _stars_stat, callback)

    def add_comment(
        self,
        url: str,
        content: str,
        callback: Optional[Callable[[CreateResult], None]] = None,
    ) -> "Future[CreateResult]":
        params = {"url": url, "content": content}

        def handle(envelope: Envelope) -> CreateResult:
            return CreateResult(envelope.success, envelope.reason, envelope.get_str("comment_id"))

        return self._core.submit("addComment", params, handle, callback)

    def edit_comment(
        self,
        comment_id: str,
        content: str,
        callback: Optional[Callable[[CallResult], None]] = None,
    ) -> "Future[CallResult]":
        params = {"id": comment_id, "content": content}
        return self._core.submit("editComment", params, CallResult.from_envelope, callback)

    def comments(
        self,
        url: str,
        callback: Optional[Callable[[CommentsResult], None]] = None,
    ) -> "Future[CommentsResult]":
        def handle(envelope: Envelope) -> CommentsResult:
            comments = parse_keyed_entries(ContentComment, envelope.get("comments"))
            return CommentsResult(envelope.success, envelope.reason, comments)

        return self._core.submit("getComments", {"url": url}, handle, callback)

    def remove_comment(
        self,
        comment_id: str,
        callback: Optional[Callable[[CallResult], None]] = None,
    ) -> "Future[CallResult]":
        return self._core.submit("removeComment", {"comment_id": comment_id}, CallResult.from_envelope, callback)
