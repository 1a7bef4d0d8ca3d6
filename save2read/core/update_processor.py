from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional
from urllib.parse import urlparse

from shared.auth import TokenStorage, generate_token

from .models import ArticleData, TelegramUpdate
from .repository import ArticleRepository

if TYPE_CHECKING:
    from ..extractors.base_extractor import TitleExtractor
    from ..transport.telegram import TelegramTransport

logger = logging.getLogger(__name__)

AUTH_COMMAND = "/auth"
AUTH_COMMAND_DESCRIPTION = "get auth link for new devices"
BOT_COMMANDS = [(AUTH_COMMAND, AUTH_COMMAND_DESCRIPTION)]


def parse_absolute_url(text: str) -> Optional[str]:
    candidate = text.strip()
    if not candidate or any(ch.isspace() for ch in candidate):
        return None
    try:
        parsed = urlparse(candidate)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None
    return candidate


def build_auth_link(base_url: str, token: str) -> str:
    return f"{base_url.rstrip('/')}/auth/{token}"


def format_saved_reply(url: str, title: Optional[str]) -> str:
    return f"Saved: {title or url}"


class UpdateProcessor:
    """
    Handles one inbound chat message.

    - "/auth": issue a one-time login token and reply with the login link
    - an absolute URL: look up the page title, store the link, acknowledge
    - anything else: ignored

    The reply is only sent after the token or link has been stored. Errors
    propagate to the caller, which owns logging and the update offset.
    """

    def __init__(
        self,
        *,
        token_storage: TokenStorage,
        repository: ArticleRepository,
        extractor: TitleExtractor,
        transport: TelegramTransport,
        base_url: str,
        token_factory: Callable[[], str] | None = None,
    ) -> None:
        self.token_storage = token_storage
        self.repository = repository
        self.extractor = extractor
        self.transport = transport
        self.base_url = base_url
        self.token_factory = token_factory or generate_token

    def process(self, update: TelegramUpdate) -> None:
        message = update.message
        if message is None or message.text is None:
            return

        chat_id = message.chat.id
        text = message.text

        if text == AUTH_COMMAND:
            self._handle_auth(chat_id)
            return

        url = parse_absolute_url(text)
        if url:
            self._handle_link(chat_id, url)
            return

        logger.debug("Ignoring update %s: not a command or link", update.update_id)

    def _handle_auth(self, chat_id: int) -> None:
        token = self.token_factory()
        self.token_storage.issue(chat_id, token)
        logger.info("Issued login token for user %s", chat_id)
        self.transport.send_message(
            chat_id=chat_id,
            text=build_auth_link(self.base_url, token),
            parse_mode="Markdown",
        )

    def _handle_link(self, chat_id: int, url: str) -> None:
        title = self.extractor.extract_title(url)
        link_id = self.repository.add(ArticleData(user_id=chat_id, url=url, title=title))
        logger.info("Saved link %s for user %s: %s", link_id, chat_id, url)
        self.transport.send_message(
            chat_id=chat_id,
            text=format_saved_reply(url, title),
        )
