from __future__ import annotations

from concurrent.futures import Future
from typing import Callable, Optional

from graphjs_client.apis import (
    ContentApi,
    GroupsApi,
    MembersApi,
    MessagesApi,
    ProfileApi,
    ThreadsApi,
    UsersApi,
)
from graphjs_client.config import AppSettings
from graphjs_client.core import ApiClientCore
from graphjs_client.http import HttpClient
from graphjs_client.logging_utils import configure_logging
from graphjs_client.models import CallResult, LoginResult
from graphjs_client.session import SessionState


class GraphJsService:
    def __init__(
        self,
        core: ApiClientCore,
        users: UsersApi,
        profiles: ProfileApi,
        threads: ThreadsApi,
        members: MembersApi,
        messages: MessagesApi,
        groups: GroupsApi,
        content: ContentApi,
    ):
        self._core = core
        self.users = users
        self.profiles = profiles
        self.threads = threads
        self.members = members
        self.messages = messages
        self.groups = groups
        self.content = content

    @property
    def core(self) -> ApiClientCore:
        return self._core

    @property
    def request_timeout_millis(self) -> int:
        return self._core.settings.timeout_millis

    def session_state(self) -> SessionState:
        return self._core.session.snapshot()

    def login(
        self,
        username: str,
        password: str,
        callback: Optional[Callable[[LoginResult], None]] = None,
    ) -> "Future[LoginResult]":
        return self.users.login(username, password, callback)

    def whoami(self, callback: Optional[Callable[[LoginResult], None]] = None) -> "Future[LoginResult]":
        return self.users.whoami(callback)

    def logout(self, callback: Optional[Callable[[CallResult], None]] = None) -> "Future[CallResult]":
        return self.users.logout(callback)

    def close(self) -> None:
        self._core.close()

    def __enter__(self) -> "GraphJsService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def build_service(settings: AppSettings | None = None, http_client: HttpClient | None = None) -> GraphJsService:
    settings = settings or AppSettings.from_env()
    if settings.debug_logs:
        configure_logging(verbose=True)
    core = ApiClientCore(settings, http_client=http_client)
    return GraphJsService(
        core=core,
        users=UsersApi(core),
        profiles=ProfileApi(core),
        threads=ThreadsApi(core),
        members=MembersApi(core),
        messages=MessagesApi(core),
        groups=GroupsApi(core),
        content=ContentApi(core),
    )
