import threading

import requests

from conftest import TEST_PUBLIC_ID, make_response
from graphjs_client.core import INVALID_EMAIL_REASON, STOPPED_REASON, ApiClientCore


def test_invalid_email_short_circuits_without_network(core, recording_session):
    envelope = core.call("signup", {"username": "u", "email": "jdoe.example.org"}).result(timeout=5)

    assert envelope.success is False
    assert envelope.reason == INVALID_EMAIL_REASON
    assert envelope.is_local
    assert recording_session.call_count == 0


def test_null_email_is_not_validated(core, recording_session):
    recording_session.queue({"success": True})

    envelope = core.call("setProfile", {"email": None, "about": "hi"}).result(timeout=5)

    assert envelope.success is True
    assert "email" not in recording_session.last_params()


def test_public_id_is_appended_last(core, recording_session):
    recording_session.queue({"success": True})

    core.call("login", {"username": "johndoe", "password": "qwerty"}).result(timeout=5)

    url = recording_session.urls[0]
    assert url.startswith("http://api.graphjs.test:1338/login?")
    assert url.endswith(f"username=johndoe&password=qwerty&public_id={TEST_PUBLIC_ID}")


def test_missing_success_defaults_to_false(core, recording_session):
    recording_session.queue({"id": "42"})

    envelope = core.call("whoami").result(timeout=5)

    assert envelope.success is False
    assert envelope.payload["success"] is False
    assert envelope.get_str("id") == "42"
    assert not envelope.is_local


def test_backend_reason_is_passed_through(core, recording_session):
    reason = "Given field (Username) is not unique with the value (johndoe)"
    recording_session.queue({"success": False, "reason": reason})

    envelope = core.call("signup", {"username": "johndoe", "email": "jdoe@example.org"}).result(timeout=5)

    assert envelope.success is False
    assert envelope.reason == reason
    assert envelope.origin == "server"


def test_http_error_reason_is_the_response_body(core, recording_session):
    recording_session.queue(make_response(500, "Internal explosion"))

    envelope = core.call("getThreads").result(timeout=5)

    assert envelope.success is False
    assert envelope.reason == "Internal explosion"
    assert envelope.is_local


def test_http_error_without_body_uses_error_message(core, recording_session):
    recording_session.queue(make_response(404, None))

    envelope = core.call("getThreads").result(timeout=5)

    assert envelope.reason.startswith("HTTP 404")


def test_connection_error_reason_is_the_exception_message(core, recording_session):
    recording_session.queue(requests.ConnectionError("connection refused"))

    envelope = core.call("getThreads").result(timeout=5)

    assert envelope.success is False
    assert envelope.reason == "connection refused"


def test_exception_without_message_is_stringified(core, recording_session):
    recording_session.queue(requests.ConnectionError())

    envelope = core.call("getThreads").result(timeout=5)

    assert envelope.reason.startswith("ConnectionError=")


def test_malformed_json_becomes_failure_envelope(core, recording_session):
    recording_session.queue(make_response(200, "<html>not json</html>"))

    envelope = core.call("getThreads").result(timeout=5)

    assert envelope.success is False
    assert envelope.reason


def test_callback_receives_the_envelope(core, recording_session):
    recording_session.queue({"success": True, "count": 3})
    received = []
    done = threading.Event()

    def on_result(envelope):
        received.append(envelope)
        done.set()

    core.call("countUnreadMessages", callback=on_result)

    assert done.wait(timeout=5)
    assert received[0].get_int("count") == 3


def test_calls_after_stop_resolve_locally(settings, http_client, recording_session):
    client = ApiClientCore(settings, http_client=http_client)
    client.stop()

    envelope = client.call("whoami").result(timeout=5)

    assert envelope.success is False
    assert envelope.reason == STOPPED_REASON
    assert recording_session.call_count == 0


def test_restart_after_stop(settings, http_client, recording_session):
    client = ApiClientCore(settings, http_client=http_client)
    client.stop()
    client.start()
    recording_session.queue({"success": True})

    assert client.call("whoami").result(timeout=5).success is True
    client.close()


def test_calls_are_not_ordered(core, recording_session):
    slow_release = threading.Event()

    def slow(url):
        slow_release.wait(timeout=5)
        return {"success": True, "which": "slow"}

    recording_session.route("getThread", slow)
    recording_session.route("getThreads", {"success": True, "which": "fast"})

    slow_future = core.call("getThread", {"id": "1"})
    fast_future = core.call("getThreads")

    assert fast_future.result(timeout=5).get("which") == "fast"
    assert not slow_future.done()
    slow_release.set()
    assert slow_future.result(timeout=5).get("which") == "slow"
    assert recording_session.params_for("getThread")["id"] == "1"


def test_failing_handler_still_completes_with_a_local_failure(core, recording_session):
    recording_session.queue({"success": True})
    received = []
    done = threading.Event()

    def handler(envelope):
        if envelope.success:
            raise OSError("disk full")
        return envelope

    def on_result(envelope):
        received.append(envelope)
        done.set()

    future = core.submit("login", {"username": "u", "password": "p"}, handler, on_result)

    assert done.wait(timeout=5)
    assert future.result(timeout=5) is received[0]
    assert received[0].success is False
    assert received[0].is_local
    assert received[0].reason == "disk full"
