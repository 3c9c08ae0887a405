from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
import logging
from typing import Callable, Mapping, Optional, TypeVar

import requests

from graphjs_client.config import AppSettings
from graphjs_client.http import ApiHttpError, HttpClient
from graphjs_client.models import Envelope
from graphjs_client.session import SessionManager

logger = logging.getLogger(__name__)

INVALID_EMAIL_REASON = "Valid email required."
STOPPED_REASON = "Client is stopped."

T = TypeVar("T")
Params = Mapping[str, Optional[str]]


def shallow_email_validation(email: str) -> bool:
    # client-side fast fail only, the backend does the real check
    return "@" in email


class ApiClientCore:
    """The one request primitive shared by every endpoint wrapper.

    Calls never raise: validation, transport and decode failures all come back
    as an :class:`Envelope` with ``success`` set to ``False``.
    """

    def __init__(
        self,
        settings: AppSettings,
        http_client: HttpClient | None = None,
        session_manager: SessionManager | None = None,
    ):
        self._settings = settings
        self._http_client = http_client or HttpClient(settings)
        self._session = session_manager or SessionManager(
            settings, self._http_client.cookies, self._http_client.base_url
        )
        self._executor: ThreadPoolExecutor | None = None
        self.start()

    @property
    def settings(self) -> AppSettings:
        return self._settings

    @property
    def session(self) -> SessionManager:
        return self._session

    @property
    def http_client(self) -> HttpClient:
        return self._http_client

    def start(self) -> None:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._settings.max_workers,
                thread_name_prefix="graphjs",
            )

    def stop(self, wait: bool = True) -> None:
        executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)

    def close(self) -> None:
        self.stop()
        self._http_client.close()

    def __enter__(self) -> "ApiClientCore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def call(
        self,
        method: str,
        params: Params | None = None,
        callback: Callable[[Envelope], None] | None = None,
    ) -> "Future[Envelope]":
        return self.submit(method, params, lambda envelope: envelope, callback)

    def submit(
        self,
        method: str,
        params: Params | None,
        handler: Callable[[Envelope], T],
        callback: Callable[[T], None] | None = None,
    ) -> "Future[T]":
        """Run ``method`` on the worker pool and map its envelope through ``handler``.

        ``callback`` receives the handler's result on whichever thread
        completes the future.
        """
        executor = self._executor
        future: Future
        if executor is None:
            future = Future()
            future.set_result(self._handle(handler, Envelope.local_failure(STOPPED_REASON)))
        else:
            try:
                future = executor.submit(self._run, method, dict(params or {}), handler)
            except RuntimeError:
                future = Future()
                future.set_result(self._handle(handler, Envelope.local_failure(STOPPED_REASON)))

        if callback is not None:
            future.add_done_callback(lambda done: callback(done.result()))
        return future

    def _run(self, method: str, params: dict[str, Optional[str]], handler: Callable[[Envelope], T]) -> T:
        return self._handle(handler, self.execute(method, params))

    @staticmethod
    def _handle(handler: Callable[[Envelope], T], envelope: Envelope) -> T:
        try:
            return handler(envelope)
        except Exception as exc:
            reason = str(exc) or f"{type(exc).__name__}={exc!r}"
            logger.exception("Handling the reply failed: %s", reason)
        return handler(Envelope.local_failure(reason))

    def execute(self, method: str, params: Params | None = None) -> Envelope:
        """Blocking form of :meth:`call`."""
        params = dict(params or {})

        email = params.get("email")
        if email is not None and not shallow_email_validation(email):
            return Envelope.local_failure(INVALID_EMAIL_REASON)

        params["public_id"] = self._settings.public_id
        url = self._http_client.build_url(method, params)
        self._trace("-> HTTP GET %s", url)

        try:
            data = self._http_client.get_absolute_json(url)
        except ApiHttpError as exc:
            reason = exc.body or str(exc) or f"{type(exc).__name__}={exc!r}"
            logger.debug("<- HTTP %s %s", exc.status_code, reason)
            return Envelope.local_failure(reason)
        except (requests.RequestException, ValueError) as exc:
            reason = str(exc) or f"{type(exc).__name__}={exc!r}"
            logger.debug("<- HTTP GET %s failed: %s", method, reason)
            return Envelope.local_failure(reason)

        self._trace("<- HTTP GET %s", data)
        return Envelope.from_json(data)

    def _trace(self, message: str, *args) -> None:
        if self._settings.debug_logs:
            logger.debug(message, *args)
