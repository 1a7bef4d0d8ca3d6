import os
import secrets
from datetime import timedelta
from typing import Any, Dict

from shared.runtime_config import JsonFileConfig, env_bool, env_int


DEFAULT_SAVE2READ_CONFIG_PATH = os.getenv(
    "SAVE2READ_CONFIG_PATH", "config/save2read_runtime.json"
)


class Save2ReadRuntimeConfig(JsonFileConfig):
    def __init__(self, path: str = DEFAULT_SAVE2READ_CONFIG_PATH) -> None:
        super().__init__(path, debug_label="save2read_config")

    def _debug_message(self) -> str:
        has_secret = bool(self._data.get("session_secret"))
        return f"base_url={self.base_url()!r} session_secret_set={has_secret}"

    def bot_token(self) -> str:
        token = os.getenv("BOT_TOKEN", "").strip()
        if not token:
            raise RuntimeError("BOT_TOKEN is required to talk to the Telegram Bot API")
        return token

    def base_url(self) -> str:
        override = os.getenv("SAVE2READ_BASE_URL", "").strip()
        if override:
            return override.rstrip("/")
        host = os.getenv("SERVER_HOST", "localhost").strip() or "localhost"
        return f"http://{host}:{self.server_port()}"

    def server_port(self) -> int:
        return env_int("SERVER_PORT", 8080, minimum=1)

    def auth_token_ttl(self) -> timedelta:
        return timedelta(seconds=env_int("AUTH_TOKEN_TTL_SECONDS", 300))

    def poll_timeout_seconds(self) -> int:
        return env_int("TELEGRAM_POLL_TIMEOUT_SECONDS", 30)

    def poller_enabled(self) -> bool:
        return env_bool("SAVE2READ_ENABLE_POLLER", True)

    def session_secret(self) -> str:
        env_secret = os.getenv("SESSION_SECRET", "").strip()
        if env_secret:
            return env_secret
        self._refresh_if_changed()
        secret = str(self._data.get("session_secret") or "")
        if secret:
            return secret
        with self._lock:
            data = self._load_from_disk()
            secret = str(data.get("session_secret") or "")
            if not secret:
                secret = secrets.token_hex(32)
                data["session_secret"] = secret
                self._write_to_disk(data)
            self._data = data
        return secret

    def _default_data(self) -> Dict[str, Any]:
        return {"session_secret": ""}


runtime_config = Save2ReadRuntimeConfig()
