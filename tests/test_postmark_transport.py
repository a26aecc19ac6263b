from unittest.mock import MagicMock

import pytest
import requests

from postmark_mail.config import Settings
from postmark_mail.postmark import MESSAGE_ID_HEADER, PostmarkTransport
from postmark_mail.transport import Transport


def test_send_posts_payload_and_stamps_message_id(session, message):
    transport = PostmarkTransport(session, "secret")

    count = transport.send(message)

    assert count == 1
    assert message.get_header(MESSAGE_ID_HEADER) == "abc-123"
    session.post.assert_called_once()
    args, kwargs = session.post.call_args
    assert args == ("https://api.postmarkapp.com/email",)
    assert kwargs["headers"]["X-Postmark-Server-Token"] == "secret"
    assert kwargs["json"]["To"] == '"Bob, Jr." <bob@example.com>'
    assert kwargs["timeout"] is None


def test_send_counts_to_cc_and_bcc(session, message):
    message.to["carol@example.com"] = None
    message.cc = {"dave@example.com": "Dave"}
    message.bcc = {"erin@example.com": None, "frank@example.com": None}

    assert PostmarkTransport(session, "secret").send(message) == 5


def test_send_uses_configured_url_and_timeout(session, message):
    transport = PostmarkTransport(session, "secret", url="https://postmark.test/email", timeout=5)

    transport.send(message)

    args, kwargs = session.post.call_args
    assert args == ("https://postmark.test/email",)
    assert kwargs["timeout"] == 5


def test_http_error_propagates_without_stamping(session, message, make_response):
    response = make_response(status_code=422, json_body={"ErrorCode": 300}, text="Invalid email")
    response.raise_for_status.side_effect = requests.HTTPError("422 Client Error")
    session.post.return_value = response
    plugin = MagicMock()
    transport = PostmarkTransport(session, "secret")
    transport.register_plugin(plugin)

    with pytest.raises(requests.HTTPError):
        transport.send(message)

    assert message.get_header(MESSAGE_ID_HEADER) is None
    plugin.before_send_performed.assert_called_once_with(message)
    plugin.send_performed.assert_not_called()
    assert session.post.call_count == 1


def test_connection_error_propagates(session, message):
    session.post.side_effect = requests.ConnectionError("boom")

    with pytest.raises(requests.ConnectionError):
        PostmarkTransport(session, "secret").send(message)


def test_missing_message_id_degrades_to_empty(session, message, make_response):
    session.post.return_value = make_response(json_body={"ErrorCode": 0})

    assert PostmarkTransport(session, "secret").send(message) == 1
    assert message.get_header(MESSAGE_ID_HEADER) == ""


def test_non_json_response_degrades_to_empty(make_response):
    transport = PostmarkTransport(MagicMock(), "secret")

    assert transport.get_message_id(make_response(text="<html>oops</html>")) == ""


def test_plugins_run_around_the_request(session, message):
    calls = []

    class Recorder:
        def before_send_performed(self, msg):
            calls.append(("before", msg.get_header(MESSAGE_ID_HEADER)))

        def send_performed(self, msg):
            calls.append(("after", msg.get_header(MESSAGE_ID_HEADER)))

    class BeforeOnly:
        def before_send_performed(self, msg):
            msg.subject = "Changed"

    transport = PostmarkTransport(session, "secret")
    transport.register_plugin(Recorder())
    transport.register_plugin(BeforeOnly())

    transport.send(message)

    assert calls == [("before", None), ("after", "abc-123")]
    assert session.post.call_args.kwargs["json"]["Subject"] == "Changed"


def test_base_transport_send_is_abstract(message):
    with pytest.raises(NotImplementedError):
        Transport().send(message)


def test_from_settings(monkeypatch):
    monkeypatch.setenv("POSTMARK_SERVER_TOKEN", "token-123")
    monkeypatch.setenv("POSTMARK_API_URL", "https://postmark.test/email")
    monkeypatch.setenv("POSTMARK_TIMEOUT", "12.5")

    transport = PostmarkTransport.from_settings(Settings(_env_file=None))

    assert transport.key == "token-123"
    assert transport.url == "https://postmark.test/email"
    assert transport.timeout == 12.5
    assert isinstance(transport.session, requests.Session)
