from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

import pytest

from save2read.core.models import Article, ArticleData


@dataclass
class FakeRepo:
    pending: dict[int, Article] = field(default_factory=dict)
    archived: dict[int, Article] = field(default_factory=dict)
    fail_on_add: Optional[Exception] = None
    _next_id: int = 1

    def _new_id(self) -> int:
        link_id = self._next_id
        self._next_id += 1
        return link_id

    def add(self, article: ArticleData) -> int:
        if self.fail_on_add:
            raise self.fail_on_add
        link_id = self._new_id()
        self.pending[link_id] = Article(id=link_id, **article.model_dump())
        return link_id

    def get_pending(self, link_id: int) -> Optional[Article]:
        return self.pending.get(link_id)

    def pending_list(self, user_id: int) -> list[Article]:
        return [a for a in self.pending.values() if a.user_id == user_id]

    def archived_list(self, user_id: int) -> list[Article]:
        return [a for a in self.archived.values() if a.user_id == user_id]

    def archive(self, user_id: int, link_id: int) -> Optional[int]:
        article = self.pending.get(link_id)
        if not article or article.user_id != user_id:
            return None
        del self.pending[link_id]
        archived_id = self._new_id()
        self.archived[archived_id] = article.model_copy(update={"id": archived_id})
        return archived_id

    def delete_pending(self, user_id: int, link_id: int) -> None:
        article = self.pending.get(link_id)
        if article and article.user_id == user_id:
            del self.pending[link_id]

    def delete_archived(self, user_id: int, link_id: int) -> None:
        article = self.archived.get(link_id)
        if article and article.user_id == user_id:
            del self.archived[link_id]


@dataclass
class FakeTelegram:
    batches: list[Any] = field(default_factory=list)
    sent: list[dict[str, Any]] = field(default_factory=list)
    offsets: list[int] = field(default_factory=list)
    commands: list[list[tuple[str, str]]] = field(default_factory=list)

    def get_updates(self, *, offset: int, timeout: int = 0) -> list[dict[str, Any]]:
        self.offsets.append(offset)
        if not self.batches:
            return []
        batch = self.batches.pop(0)
        if isinstance(batch, Exception):
            raise batch
        return batch

    def send_message(
        self,
        *,
        chat_id: int,
        text: str,
        parse_mode: Optional[str] = None,
    ) -> int:
        self.sent.append({"chat_id": chat_id, "text": text, "parse_mode": parse_mode})
        return len(self.sent)

    def set_my_commands(self, commands) -> None:
        self.commands.append(list(commands))


@dataclass
class FakeExtractor:
    titles: dict[str, Optional[str]] = field(default_factory=dict)
    error: Optional[Exception] = None
    calls: list[str] = field(default_factory=list)

    def extract_title(self, url: str) -> Optional[str]:
        self.calls.append(url)
        if self.error:
            raise self.error
        return self.titles.get(url)


def _make_update(update_id: int, chat_id: int = 42, text: Optional[str] = None) -> dict[str, Any]:
    message: dict[str, Any] = {
        "message_id": update_id * 10,
        "date": 1704110400,
        "chat": {"id": chat_id, "type": "private"},
        "from": {"id": chat_id, "is_bot": False, "first_name": "Reader"},
    }
    if text is not None:
        message["text"] = text
    return {"update_id": update_id, "message": message}


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fake_repo() -> FakeRepo:
    return FakeRepo()


@pytest.fixture
def fake_telegram() -> FakeTelegram:
    return FakeTelegram()


@pytest.fixture
def fake_extractor() -> FakeExtractor:
    return FakeExtractor()


@pytest.fixture
def make_update():
    return _make_update
