from __future__ import annotations

from concurrent.futures import Future
from typing import Callable, Optional

from graphjs_client.codec import parse_array_safe
from graphjs_client.core import ApiClientCore
from graphjs_client.models import (
    CallResult,
    CreateResult,
    Envelope,
    ForumThread,
    ThreadMessage,
    ThreadResult,
    ThreadsResult,
)


def _created(envelope: Envelope) -> CreateResult:
    return CreateResult(envelope.success, envelope.reason, envelope.get_str("id"))


class ThreadsApi:
    def __init__(self, core: ApiClientCore):
        self._core = core

    def start_thread(
        self,
        title: str,
        message: str,
        callback: Optional[Callable[[CreateResult], None]] = None,
    ) -> "Future[CreateResult]":
        params = {"title": title, "message": message}
        return self._core.submit("startThread", params, _created, callback)

    def reply_thread(
        self,
        thread_id: str,
        message: str,
        callback: Optional[Callable[[CreateResult], None]] = None,
    ) -> "Future[CreateResult]":
        params = {"id": thread_id, "message": message}
        return self._core.submit("reply", params, _created, callback)

    def get_thread(
        self,
        thread_id: str,
        callback: Optional[Callable[[ThreadResult], None]] = None,
    ) -> "Future[ThreadResult]":
        def handle(envelope: Envelope) -> ThreadResult:
            messages = parse_array_safe(ThreadMessage, envelope.get("messages"))
            return ThreadResult(envelope.success, envelope.reason, envelope.get_str("title"), messages)

        return self._core.submit("getThread", {"id": thread_id}, handle, callback)

    def threads(self, callback: Optional[Callable[[ThreadsResult], None]] = None) -> "Future[ThreadsResult]":
        def handle(envelope: Envelope) -> ThreadsResult:
            threads = parse_array_safe(ForumThread, envelope.get("threads"))
            return ThreadsResult(envelope.success, envelope.reason, threads)

        return self._core.submit("getThreads", None, handle, callback)

    def delete_forum_post(
        self,
        post_id: str,
        callback: Optional[Callable[[CallResult], None]] = None,
    ) -> "Future[CallResult]":
        return self._core.submit("deleteForumPost", {"id": post_id}, CallResult.from_envelope, callback)

    def edit_forum_post(
        self,
        post_id: str,
        content: str,
        callback: Optional[Callable[[CallResult], None]] = None,
    ) -> "Future[CallResult]":
        """Only the opening post of a thread can be edited, not replies."""
        params = {"id": post_id, "content": content}
        return self._core.submit("editForumPost", params, CallResult.from_envelope, callback)
