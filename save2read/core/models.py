from __future__ import annotations

from typing import Optional

from pydantic import BaseModel
from sqlalchemy import BigInteger, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from save2read.db import Base


# ---------- Links ----------

class ArticleData(BaseModel):
    user_id: int
    url: str
    title: Optional[str] = None


class Article(ArticleData):
    id: int

    def display_title(self) -> str:
        return self.title or self.url


class PendingLinkRecord(Base):
    __tablename__ = "pending_links"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (Index("ix_pending_links_user_id", "user_id"),)


class ArchivedLinkRecord(Base):
    __tablename__ = "archived_links"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (Index("ix_archived_links_user_id", "user_id"),)


# ---------- Telegram updates ----------

class TelegramChat(BaseModel):
    id: int


class TelegramMessage(BaseModel):
    message_id: int
    chat: TelegramChat
    text: Optional[str] = None


class TelegramUpdate(BaseModel):
    update_id: int
    message: Optional[TelegramMessage] = None
