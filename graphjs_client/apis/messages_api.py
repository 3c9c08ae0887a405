from __future__ import annotations

from concurrent.futures import Future
from typing import Callable, Optional

from graphjs_client.codec import parse_map_safe, parse_safe
from graphjs_client.core import ApiClientCore
from graphjs_client.models import (
    CountResult,
    CreateResult,
    DirectMessage,
    DirectMessageResult,
    DirectMessagesResult,
    Envelope,
)


def _sent(envelope: Envelope) -> CreateResult:
    return CreateResult(envelope.success, envelope.reason, envelope.get_str("id"))


def _message_box(envelope: Envelope) -> DirectMessagesResult:
    messages = parse_map_safe(DirectMessage, envelope.get("messages"))
    return DirectMessagesResult(envelope.success, envelope.reason, messages)


class MessagesApi:
    def __init__(self, core: ApiClientCore):
        self._core = core

    def send_message(
        self,
        to_user_id: str,
        message: str,
        callback: Optional[Callable[[CreateResult], None]] = None,
    ) -> "Future[CreateResult]":
        params = {"to": to_user_id, "message": message}
        return self._core.submit("sendMessage", params, _sent, callback)

    def send_anonymous_message(
        self,
        sender: str,
        to_user_id: str,
        message: str,
        callback: Optional[Callable[[CreateResult], None]] = None,
    ) -> "Future[CreateResult]":
        params = {"sender": sender, "to": to_user_id, "message": message}
        return self._core.submit("sendAnonymousMessage", params, _sent, callback)

    def count_unread_messages(
        self,
        callback: Optional[Callable[[CountResult], None]] = None,
    ) -> "Future[CountResult]":
        def handle(envelope: Envelope) -> CountResult:
            return CountResult(envelope.success, envelope.reason, envelope.get_int("count"))

        return self._core.submit("countUnreadMessages", None, handle, callback)

    def inbox(self, callback: Optional[Callable[[DirectMessagesResult], None]] = None) -> "Future[DirectMessagesResult]":
        return self._core.submit("getInbox", None, _message_box, callback)

    def outbox(self, callback: Optional[Callable[[DirectMessagesResult], None]] = None) -> "Future[DirectMessagesResult]":
        return self._core.submit("getOutbox", None, _message_box, callback)

    def conversation(
        self,
        with_user_id: str,
        callback: Optional[Callable[[DirectMessagesResult], None]] = None,
    ) -> "Future[DirectMessagesResult]":
        return self._core.submit("getConversation", {"with": with_user_id}, _message_box, callback)

    def conversations(
        self,
        callback: Optional[Callable[[DirectMessagesResult], None]] = None,
    ) -> "Future[DirectMessagesResult]":
        return self._core.submit("getConversations", None, _message_box, callback)

    def message(
        self,
        message_id: str,
        callback: Optional[Callable[[DirectMessageResult], None]] = None,
    ) -> "Future[DirectMessageResult]":
        def handle(envelope: Envelope) -> DirectMessageResult:
            message = parse_safe(DirectMessage, envelope.get("message"))
            return DirectMessageResult(envelope.success, envelope.reason, message)

        return self._core.submit("getMessage", {"msgid": message_id}, handle, callback)
