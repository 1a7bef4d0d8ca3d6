from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import secrets
import string
from threading import Lock
from typing import Callable, Optional, Protocol


TOKEN_LENGTH = 30
TOKEN_ALPHABET = string.ascii_letters + string.digits


class TokenCollisionError(RuntimeError):
    pass


class TokenGenerator(Protocol):
    def generate(self) -> str:
        ...


class AlphanumericTokenGenerator:
    def __init__(self, length: int = TOKEN_LENGTH) -> None:
        self._length = length

    def generate(self) -> str:
        return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(self._length))


_default_generator: TokenGenerator = AlphanumericTokenGenerator()


def generate_token() -> str:
    return _default_generator.generate()


@dataclass(frozen=True)
class IssuedToken:
    user_id: int
    issued_at: datetime


class TokenStorage(Protocol):
    def issue(self, user_id: int, token: str) -> None:
        ...

    def redeem(self, token: str) -> Optional[int]:
        ...


class InMemoryTokenStorage:
    """
    One-time login tokens handed out by the bot and redeemed by the web app.

    Every operation sweeps expired tokens first, under the same lock
    acquisition as the mutation that follows it.
    """

    def __init__(
        self,
        ttl: timedelta,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._ttl = ttl
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = Lock()
        self._tokens: dict[str, IssuedToken] = {}

    def issue(self, user_id: int, token: str) -> None:
        with self._lock:
            now = self._clock()
            self._sweep(now)
            if token in self._tokens:
                raise TokenCollisionError(f"Token clash for user {user_id}")
            self._tokens[token] = IssuedToken(user_id=user_id, issued_at=now)

    def redeem(self, token: str) -> Optional[int]:
        with self._lock:
            self._sweep(self._clock())
            entry = self._tokens.pop(token, None)
        return entry.user_id if entry else None

    def pending_count(self) -> int:
        with self._lock:
            return len(self._tokens)

    def _sweep(self, now: datetime) -> None:
        expired = [
            token
            for token, entry in self._tokens.items()
            if now - entry.issued_at >= self._ttl
        ]
        for token in expired:
            self._tokens.pop(token, None)
