from __future__ import annotations

import pytest
import requests

from save2read.transport.telegram import TelegramApiError, TelegramTransport


class _Response:
    def __init__(self, status_code: int, payload=None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class _Session:
    def __init__(self, response=None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[dict] = []

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


def test_get_updates_sends_offset_and_long_poll_timeout():
    session = _Session(_Response(200, {"ok": True, "result": [{"update_id": 5}, "junk"]}))
    transport = TelegramTransport("123:abc", timeout_seconds=5, session=session)

    updates = transport.get_updates(offset=8, timeout=30)

    assert updates == [{"update_id": 5}]
    call = session.calls[0]
    assert call["url"] == "https://api.telegram.org/bot123:abc/getUpdates"
    assert call["json"]["offset"] == 8
    assert call["json"]["timeout"] == 30
    assert call["timeout"] == 35


def test_send_message_payload_and_message_id():
    session = _Session(_Response(200, {"ok": True, "result": {"message_id": 77}}))
    transport = TelegramTransport("t", session=session)

    message_id = transport.send_message(chat_id=42, text="hi", parse_mode="Markdown")

    assert message_id == 77
    assert session.calls[0]["json"] == {"chat_id": 42, "text": "hi", "parse_mode": "Markdown"}


def test_send_message_without_parse_mode_sends_plain_text():
    session = _Session(_Response(200, {"ok": True, "result": {"message_id": 78}}))
    transport = TelegramTransport("t", session=session)

    transport.send_message(chat_id=42, text="Saved: Example")

    assert session.calls[0]["json"] == {"chat_id": 42, "text": "Saved: Example"}

    with pytest.raises(TypeError):
        transport.send_message(chat_id=42, text="x", reply_to_message_id=1)


def test_set_my_commands_strips_slash():
    session = _Session(_Response(200, {"ok": True, "result": True}))
    transport = TelegramTransport("t", session=session)

    transport.set_my_commands([("/auth", "get auth link for new devices")])

    assert session.calls[0]["url"].endswith("/setMyCommands")
    assert session.calls[0]["json"] == {
        "commands": [{"command": "auth", "description": "get auth link for new devices"}]
    }


def test_network_error_is_wrapped_without_leaking_token():
    session = _Session(error=requests.ConnectionError("https://api.telegram.org/botSECRET/getUpdates"))
    transport = TelegramTransport("SECRET", session=session)

    with pytest.raises(TelegramApiError) as excinfo:
        transport.get_updates(offset=0)

    assert "SECRET" not in str(excinfo.value)


def test_api_error_body_raises():
    session = _Session(_Response(409, {"ok": False, "description": "Conflict: terminated by other getUpdates"}))
    transport = TelegramTransport("t", session=session)

    with pytest.raises(TelegramApiError, match="Conflict"):
        transport.get_updates(offset=0)


def test_non_json_body_raises():
    session = _Session(_Response(502, None, text="<html>bad gateway</html>"))
    transport = TelegramTransport("t", session=session)

    with pytest.raises(TelegramApiError, match="non-JSON"):
        transport.send_message(chat_id=1, text="x")
