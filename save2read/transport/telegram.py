import logging
from typing import Any, Dict, Iterable, Optional

import requests

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"


class TelegramApiError(RuntimeError):
    pass


class TelegramTransport:
    def __init__(
        self,
        token: str,
        base_url: str = TELEGRAM_API_URL,
        timeout_seconds: int = 5,
        session: requests.Session | None = None,
    ):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout_seconds
        self.session = session or requests.Session()

    def _method_url(self, method: str) -> str:
        return f"{self.base_url}/bot{self.token}/{method}"

    def _call(
        self,
        method: str,
        *,
        payload: Dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> Any:
        try:
            resp = self.session.post(
                self._method_url(method),
                json=payload or {},
                timeout=timeout or self.timeout,
            )
        except requests.RequestException as e:
            # the exception text embeds the request URL, bot token included
            raise TelegramApiError(
                f"Failed to reach Telegram for {method}: {type(e).__name__}"
            ) from e

        try:
            data = resp.json()
        except ValueError as e:
            raise TelegramApiError(
                f"Telegram {method} returned non-JSON body (status {resp.status_code})"
            ) from e

        if resp.status_code != 200 or not data.get("ok"):
            raise TelegramApiError(
                f"Telegram {method} failed {resp.status_code}: {data.get('description')}"
            )
        return data.get("result")

    # ---------- Inbound ----------

    def get_updates(self, *, offset: int, timeout: int = 0) -> list[dict[str, Any]]:
        result = self._call(
            "getUpdates",
            payload={"offset": offset, "timeout": timeout, "allowed_updates": ["message"]},
            timeout=timeout + self.timeout,
        )
        if not isinstance(result, list):
            raise TelegramApiError(f"getUpdates returned {type(result).__name__}, expected list")
        return [u for u in result if isinstance(u, dict)]

    # ---------- Outbound ----------

    def send_message(
        self,
        *,
        chat_id: int,
        text: str,
        parse_mode: Optional[str] = None,
    ) -> Optional[int]:
        payload: Dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode:
            payload["parse_mode"] = parse_mode

        result = self._call("sendMessage", payload=payload)
        message_id = result.get("message_id") if isinstance(result, dict) else None
        return int(message_id) if message_id is not None else None

    def set_my_commands(self, commands: Iterable[tuple[str, str]]) -> None:
        self._call(
            "setMyCommands",
            payload={
                "commands": [
                    {"command": command.lstrip("/"), "description": description}
                    for command, description in commands
                ]
            },
        )
